import logging
from typing import List, Optional

from x12_delimiters import Delimiters, extract_delimiters

logger = logging.getLogger(__name__)

SegmentTokens = List[str]


def tokenize(edi_string: str, delimiters: Optional[Delimiters] = None) -> List[SegmentTokens]:
    """
    Splits an X12 document into segments, and each segment into its elements.

    The first token of every segment is its tag. Whitespace around segments
    (line breaks some senders add after the terminator) is dropped along with
    any segment left empty. Sub-elements are not split out.
    """
    if delimiters is None:
        delimiters = extract_delimiters(edi_string)

    segments: List[SegmentTokens] = []
    for raw_segment in edi_string.split(delimiters.segment):
        clean_seg = raw_segment.strip()
        if not clean_seg:
            continue
        segments.append(clean_seg.split(delimiters.element))

    logger.debug(f"Tokenized {len(segments)} segments.")
    return segments
