import logging
from typing import Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from x12_errors import DelimiterCollision, OutOfOrderSegment, TruncatedInput

logger = logging.getLogger(__name__)

# The ISA segment is fixed width, so the delimiters always sit at the same offsets.
ISA_HEADER_LENGTH = 106
ELEMENT_DELIMITER_OFFSET = 103
SUB_ELEMENT_DELIMITER_OFFSET = 104
SEGMENT_DELIMITER_OFFSET = 105


class Delimiters(BaseModel):
    """The three characters that define an X12 document's wire format."""
    element: str = Field('*', min_length=1, max_length=1)
    sub_element: str = Field(':', min_length=1, max_length=1)
    segment: str = Field('~', min_length=1, max_length=1)

    @model_validator(mode='after')
    def _check_distinct(self) -> 'Delimiters':
        if len({self.element, self.sub_element, self.segment}) != 3:
            raise ValueError("element, sub-element and segment delimiters must be pairwise distinct")
        return self

    def as_tuple(self) -> Tuple[str, str, str]:
        return self.element, self.sub_element, self.segment


def _find_header_start(edi_string: str) -> Optional[int]:
    start = len(edi_string) - len(edi_string.lstrip())
    if edi_string.startswith('ISA', start):
        return start
    isa_idx = edi_string.find('ISA')
    return isa_idx if isa_idx != -1 else None


def extract_delimiters(edi_string: str) -> Delimiters:
    """
    Reads the element, sub-element and segment delimiters from the ISA header.

    Raises TruncatedInput if the text is too short to reach the delimiter
    offsets and DelimiterCollision if any two of the three are equal. Text
    long enough to hold a header but with no ISA anywhere raises
    OutOfOrderSegment, since its first segment cannot open an interchange.
    """
    anchor = _find_header_start(edi_string)
    start = anchor if anchor is not None else len(edi_string) - len(edi_string.lstrip())
    if len(edi_string) - start < ISA_HEADER_LENGTH:
        raise TruncatedInput(
            f"Input document is not long enough to be an EDI document "
            f"(need {ISA_HEADER_LENGTH} header characters, got {max(len(edi_string) - start, 0)})"
        )
    if anchor is None:
        raise OutOfOrderSegment("document does not contain an ISA segment to open an interchange", position=1)

    element = edi_string[start + ELEMENT_DELIMITER_OFFSET]
    sub_element = edi_string[start + SUB_ELEMENT_DELIMITER_OFFSET]
    segment = edi_string[start + SEGMENT_DELIMITER_OFFSET]

    if len({element, sub_element, segment}) != 3:
        raise DelimiterCollision("delimiters in the ISA header are not pairwise distinct", (element, sub_element, segment))

    logger.debug(f"Delimiters detected: Element='{element}', Component='{sub_element}', Segment={segment!r}")
    return Delimiters(element=element, sub_element=sub_element, segment=segment)
