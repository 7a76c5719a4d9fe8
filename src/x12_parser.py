import logging
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from transaction_sets import TransactionSetLookup
from x12_delimiters import Delimiters, extract_delimiters
from x12_envelope import validate_functional_group, validate_interchange, validate_transaction
from x12_errors import MalformedSegment, OutOfOrderSegment
from x12_models import Document, FunctionalGroup, Interchange, Segment, Transaction
from x12_serializer import to_x12_string
from x12_tokenizer import SegmentTokens, tokenize

logger = logging.getLogger(__name__)

__all__ = ["DocumentAssembler", "EdiParser", "parse", "loose_parse", "to_x12_string"]

ISA_MIN_TOKENS = 16
GS_MIN_TOKENS = 9
ST_MIN_TOKENS = 3
TRAILER_MIN_TOKENS = 3


class DocumentAssembler:
    """
    Folds a flat token stream into Interchange -> FunctionalGroup -> Transaction -> Segment.

    Segments always go to the innermost scope that is still open. An opener
    only needs its enclosing level to be open: it closes any scope at its own
    level or deeper and appends to the latest open container. A closer
    (IEA/GE/SE) closes its scope together with anything still nested in it
    and, when `strict` is set, is checked against its opener. With `strict`
    off the trailer values are never inspected; every other rule applies in
    both modes.
    """

    def __init__(self, strict: bool = True, lookup: Optional[Callable[[str], str]] = None):
        self.strict = strict
        self.lookup = lookup if lookup is not None else TransactionSetLookup.default()
        self._handlers: Dict[str, Callable[[SegmentTokens, int], None]] = {
            'ISA': self._open_interchange,
            'GS': self._open_functional_group,
            'ST': self._open_transaction,
            'SE': self._close_transaction,
            'GE': self._close_functional_group,
            'IEA': self._close_interchange,
        }
        self._reset()

    def _reset(self):
        self.interchanges: List[Interchange] = []
        self._interchange: Optional[Interchange] = None
        self._group: Optional[FunctionalGroup] = None
        self._transaction: Optional[Transaction] = None

    def assemble(self, segments: List[SegmentTokens]) -> List[Interchange]:
        self._reset()
        for position, tokens in enumerate(segments, start=1):
            segment_id = tokens[0].strip()
            logger.debug(f"[SEGMENT {position}/{len(segments)}] Routing '{segment_id}'")
            handler = self._handlers.get(segment_id, self._add_segment)
            handler(tokens, position)

        self._close_scopes_from('interchange', None)
        return self.interchanges

    def _close_scopes_from(self, level: str, position: Optional[int]):
        """Closes `level` and every scope nested in it, logging any that never saw their trailer."""
        scopes = [
            ('transaction', 'SE', self._transaction, lambda node: node.transaction_set_control_number),
            ('group', 'GE', self._group, lambda node: node.group_control_number),
            ('interchange', 'IEA', self._interchange, lambda node: node.interchange_control_number),
        ]
        where = f"at segment {position}" if position is not None else "at end of document"
        for name, trailer, node, control_number in scopes:
            if node is not None:
                logger.warning(f"{name} {control_number(node)} closed {where} without its {trailer}; not validated.")
            if name == level:
                break
        self._transaction = None
        if level in ('group', 'interchange'):
            self._group = None
        if level == 'interchange':
            self._interchange = None

    # --- openers ---

    def _open_interchange(self, tokens: SegmentTokens, position: int):
        if len(tokens) < ISA_MIN_TOKENS:
            raise MalformedSegment(
                f"ISA segment does not contain enough elements. At least {ISA_MIN_TOKENS} required", tokens, position
            )
        fields = [token.strip() for token in tokens[1:ISA_MIN_TOKENS]]
        try:
            interchange = Interchange(
                authorization_qualifier=fields[0],
                authorization_information=fields[1],
                security_qualifier=fields[2],
                security_information=fields[3],
                sender_qualifier=fields[4],
                sender_id=fields[5],
                receiver_qualifier=fields[6],
                receiver_id=fields[7],
                date=fields[8],
                time=fields[9],
                standards_id=fields[10],
                version=fields[11],
                interchange_control_number=fields[12],
                acknowledgement_requested=fields[13],
                test_indicator=fields[14],
            )
        except ValidationError as e:
            raise MalformedSegment(
                f"ISA field '{e.errors()[0]['loc'][0]}' is longer than its fixed width", tokens, position
            ) from e
        self._close_scopes_from('interchange', position)
        self.interchanges.append(interchange)
        self._interchange = interchange

    def _open_functional_group(self, tokens: SegmentTokens, position: int):
        if self._interchange is None:
            raise OutOfOrderSegment("unable to enqueue functional group when no interchange is open", tokens, position)
        if len(tokens) < GS_MIN_TOKENS:
            raise MalformedSegment(
                f"GS segment does not contain enough elements. At least {GS_MIN_TOKENS} required", tokens, position
            )
        fields = [token.strip() for token in tokens[1:GS_MIN_TOKENS]]
        group = FunctionalGroup(
            functional_identifier_code=fields[0],
            application_sender_code=fields[1],
            application_receiver_code=fields[2],
            date=fields[3],
            time=fields[4],
            group_control_number=fields[5],
            responsible_agency_code=fields[6],
            version=fields[7],
        )
        self._close_scopes_from('group', position)
        self._interchange.functional_groups.append(group)
        self._group = group

    def _open_transaction(self, tokens: SegmentTokens, position: int):
        if self._group is None:
            raise OutOfOrderSegment("unable to enqueue transaction when no functional group is open", tokens, position)
        if len(tokens) < ST_MIN_TOKENS:
            raise MalformedSegment(
                f"ST segment does not contain enough elements. At least {ST_MIN_TOKENS} required", tokens, position
            )
        transaction_code = tokens[1].strip()
        transaction = Transaction(
            transaction_code=transaction_code,
            transaction_name=self.lookup(transaction_code),
            transaction_set_control_number=tokens[2].strip(),
            implementation_convention_reference=tokens[3].strip() if len(tokens) > ST_MIN_TOKENS else None,
        )
        self._close_scopes_from('transaction', position)
        self._group.transactions.append(transaction)
        self._transaction = transaction

    def _add_segment(self, tokens: SegmentTokens, position: int):
        if self._transaction is None:
            raise OutOfOrderSegment(
                "unable to enqueue generic segment when no transaction set is open", tokens, position
            )
        self._transaction.segments.append(Segment(segment_id=tokens[0].strip(), elements=tokens[1:]))

    # --- closers ---

    def _check_trailer_shape(self, tokens: SegmentTokens, position: int):
        if len(tokens) < TRAILER_MIN_TOKENS:
            raise MalformedSegment(
                f"{tokens[0]} segment does not contain enough elements. At least {TRAILER_MIN_TOKENS} required",
                tokens,
                position,
            )

    def _close_transaction(self, tokens: SegmentTokens, position: int):
        if self._transaction is None:
            raise OutOfOrderSegment("unable to validate nonexistent transaction", tokens, position)
        self._check_trailer_shape(tokens, position)
        if self.strict:
            validate_transaction(self._transaction, tokens, position)
        else:
            logger.debug(f"Loose mode: skipping SE cross-check for transaction {self._transaction.transaction_set_control_number}")
        self._transaction = None

    def _close_functional_group(self, tokens: SegmentTokens, position: int):
        if self._group is None:
            raise OutOfOrderSegment("unable to validate nonexistent functional group", tokens, position)
        self._check_trailer_shape(tokens, position)
        if self.strict:
            validate_functional_group(self._group, tokens, position)
        else:
            logger.debug(f"Loose mode: skipping GE cross-check for group {self._group.group_control_number}")
        self._close_scopes_from('transaction', position)
        self._group = None

    def _close_interchange(self, tokens: SegmentTokens, position: int):
        if self._interchange is None:
            raise OutOfOrderSegment("unable to validate nonexistent interchange", tokens, position)
        self._check_trailer_shape(tokens, position)
        if self.strict:
            validate_interchange(self._interchange, tokens, position)
        else:
            logger.debug(
                f"Loose mode: skipping IEA cross-check for interchange {self._interchange.interchange_control_number}"
            )
        self._close_scopes_from('group', position)
        self._interchange = None


class EdiParser:
    def __init__(self, edi_string: str, strict: bool = True, lookup: Optional[Callable[[str], str]] = None):
        self.strict = strict
        self.delimiters: Delimiters = extract_delimiters(edi_string)
        self.all_segments: List[SegmentTokens] = tokenize(edi_string, self.delimiters)
        self.assembler = DocumentAssembler(strict=strict, lookup=lookup)
        logger.debug(f"Parser initialized with {len(self.all_segments)} segments.")

    @property
    def element_delimiter(self) -> str:
        return self.delimiters.element

    @property
    def component_separator(self) -> str:
        return self.delimiters.sub_element

    @property
    def segment_terminator(self) -> str:
        return self.delimiters.segment

    def parse(self) -> Document:
        interchanges = self.assembler.assemble(self.all_segments)
        document = Document(interchanges=interchanges, delimiters=self.delimiters)

        groups = [group for interchange in interchanges for group in interchange.functional_groups]
        transactions = sum(len(group.transactions) for group in groups)
        logger.info(
            f"Parsed {len(interchanges)} interchange(s), {len(groups)} functional group(s) and "
            f"{transactions} transaction set(s) ({'strict' if self.strict else 'loose'} mode)."
        )
        return document


def parse(edi_string: str, lookup: Optional[Callable[[str], str]] = None) -> Document:
    """Parse X12 text, cross-checking every IEA/GE/SE against its opener."""
    return EdiParser(edi_string, strict=True, lookup=lookup).parse()


def loose_parse(edi_string: str, lookup: Optional[Callable[[str], str]] = None) -> Document:
    """Parse X12 text without checking trailer counts and control numbers."""
    return EdiParser(edi_string, strict=False, lookup=lookup).parse()
