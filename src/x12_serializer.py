import logging
from typing import List, Optional, Sequence

from x12_delimiters import Delimiters

logger = logging.getLogger(__name__)

# Mandated widths of ISA01 through ISA15. ISA16 is the sub-element delimiter itself.
ISA_FIELD_WIDTHS = (2, 10, 2, 10, 2, 15, 2, 15, 6, 4, 1, 5, 9, 1, 1)


def build_segment(segment_id: str, elements: Sequence[str], delimiters: Delimiters) -> str:
    """Joins a tag and its elements and terminates the result with the segment delimiter."""
    return delimiters.element.join([segment_id, *elements]) + delimiters.segment


def pad_isa_fields(values: Sequence[str]) -> List[str]:
    if len(values) != len(ISA_FIELD_WIDTHS):
        raise ValueError(f"ISA requires {len(ISA_FIELD_WIDTHS)} fields, got {len(values)}")
    for index, (value, width) in enumerate(zip(values, ISA_FIELD_WIDTHS), start=1):
        if len(value) > width:
            raise ValueError(f"ISA{index:02d} '{value}' is longer than its fixed width of {width}")
    return [value.ljust(width) for value, width in zip(values, ISA_FIELD_WIDTHS)]


def to_x12_string(node, delimiters: Optional[Delimiters] = None) -> str:
    """
    Renders a Document, Interchange, FunctionalGroup, Transaction or Segment as X12 text.

    Trailer counts and control numbers are recomputed from the tree. When no
    delimiters are given a Document uses its own and any other node uses the
    defaults.
    """
    text = node.to_x12_string(delimiters)
    logger.debug(f"Serialized {type(node).__name__} to {len(text)} characters.")
    return text
