from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from x12_delimiters import Delimiters
from x12_serializer import build_segment, pad_isa_fields

# Canonical tree for a parsed X12 document:
# Document -> Interchange (ISA/IEA) -> FunctionalGroup (GS/GE) -> Transaction (ST/SE) -> Segment.
# Each level owns the next one down; trailers are not stored, they are derived from the children.

UNIDENTIFIED_TRANSACTION = "unidentified"


class Segment(BaseModel):
    """A single non-envelope segment: its tag plus its elements, sub-elements left intact."""
    segment_id: str
    elements: List[str] = Field(default_factory=list)

    def get_element(self, position: int) -> Optional[str]:
        """Retrieves the value of an element by its position (1-based index)."""
        if 1 <= position <= len(self.elements):
            return self.elements[position - 1]
        return None

    def to_x12_string(self, delimiters: Optional[Delimiters] = None) -> str:
        return build_segment(self.segment_id, self.elements, delimiters or Delimiters())


class Transaction(BaseModel):
    """A transaction set, opened by ST and closed by SE."""
    transaction_code: str
    transaction_name: str = UNIDENTIFIED_TRANSACTION
    transaction_set_control_number: str
    # None when the ST carried no third element at all.
    implementation_convention_reference: Optional[str] = None
    segments: List[Segment] = Field(default_factory=list)

    def get_segment(self, segment_id: str) -> Optional[Segment]:
        return next((segment for segment in self.segments if segment.segment_id == segment_id), None)

    def get_segments(self, segment_id: str) -> List[Segment]:
        return [segment for segment in self.segments if segment.segment_id == segment_id]

    def to_x12_string(self, delimiters: Optional[Delimiters] = None) -> str:
        delimiters = delimiters or Delimiters()
        header = [self.transaction_code, self.transaction_set_control_number]
        if self.implementation_convention_reference is not None:
            header.append(self.implementation_convention_reference)

        parts = [build_segment('ST', header, delimiters)]
        parts.extend(segment.to_x12_string(delimiters) for segment in self.segments)
        # SE01 counts the ST and SE segments themselves.
        parts.append(build_segment('SE', [str(len(self.segments) + 2), self.transaction_set_control_number], delimiters))
        return ''.join(parts)


class FunctionalGroup(BaseModel):
    """A functional group, opened by GS and closed by GE."""
    functional_identifier_code: str
    application_sender_code: str
    application_receiver_code: str
    date: str
    time: str
    group_control_number: str
    responsible_agency_code: str
    version: str
    transactions: List[Transaction] = Field(default_factory=list)

    def to_x12_string(self, delimiters: Optional[Delimiters] = None) -> str:
        delimiters = delimiters or Delimiters()
        header = [
            self.functional_identifier_code,
            self.application_sender_code,
            self.application_receiver_code,
            self.date,
            self.time,
            self.group_control_number,
            self.responsible_agency_code,
            self.version,
        ]
        parts = [build_segment('GS', header, delimiters)]
        parts.extend(transaction.to_x12_string(delimiters) for transaction in self.transactions)
        parts.append(build_segment('GE', [str(len(self.transactions)), self.group_control_number], delimiters))
        return ''.join(parts)


class Interchange(BaseModel):
    """The ISA/IEA envelope identifying sender, receiver and control number."""
    # ISA fields are fixed width; a longer value would shift the delimiter offsets.
    model_config = ConfigDict(validate_assignment=True)

    authorization_qualifier: str = Field(max_length=2)
    authorization_information: str = Field(max_length=10)
    security_qualifier: str = Field(max_length=2)
    security_information: str = Field(max_length=10)
    sender_qualifier: str = Field(max_length=2)
    sender_id: str = Field(max_length=15)
    receiver_qualifier: str = Field(max_length=2)
    receiver_id: str = Field(max_length=15)
    date: str = Field(max_length=6)
    time: str = Field(max_length=4)
    standards_id: str = Field(max_length=1)
    version: str = Field(max_length=5)
    interchange_control_number: str = Field(max_length=9)
    acknowledgement_requested: str = Field(max_length=1)
    test_indicator: str = Field(max_length=1)
    functional_groups: List[FunctionalGroup] = Field(default_factory=list)

    def header_fields(self) -> List[str]:
        """ISA01 through ISA15 in positional order, unpadded."""
        return [
            self.authorization_qualifier,
            self.authorization_information,
            self.security_qualifier,
            self.security_information,
            self.sender_qualifier,
            self.sender_id,
            self.receiver_qualifier,
            self.receiver_id,
            self.date,
            self.time,
            self.standards_id,
            self.version,
            self.interchange_control_number,
            self.acknowledgement_requested,
            self.test_indicator,
        ]

    def to_x12_string(self, delimiters: Optional[Delimiters] = None) -> str:
        delimiters = delimiters or Delimiters()
        header = pad_isa_fields(self.header_fields()) + [delimiters.sub_element]
        parts = [build_segment('ISA', header, delimiters)]
        parts.extend(group.to_x12_string(delimiters) for group in self.functional_groups)
        parts.append(build_segment('IEA', [str(len(self.functional_groups)), self.interchange_control_number], delimiters))
        return ''.join(parts)


class Document(BaseModel):
    """An entire X12 document: its interchanges plus the delimiters used to write it."""
    interchanges: List[Interchange] = Field(default_factory=list)
    delimiters: Delimiters = Field(default_factory=Delimiters)

    def to_x12_string(self, delimiters: Optional[Delimiters] = None) -> str:
        delimiters = delimiters or self.delimiters
        return ''.join(interchange.to_x12_string(delimiters) for interchange in self.interchanges)
