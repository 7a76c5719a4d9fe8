import logging
from typing import Optional

from x12_errors import ControlNumberMismatch, EnvelopeCountMismatch, MalformedSegment
from x12_models import FunctionalGroup, Interchange, Transaction
from x12_tokenizer import SegmentTokens

logger = logging.getLogger(__name__)

# Trailers are checked against what was recorded for their opener and what was
# actually appended under it. For every mismatch `expected` is the value the
# parsed tree implies and `actual` is the value the trailer declares.


def _declared_count(tokens: SegmentTokens, position: Optional[int]) -> int:
    raw_count = tokens[1].strip()
    # int() alone would also take signs, underscores and non-ASCII digits.
    if not (raw_count.isascii() and raw_count.isdigit()):
        raise MalformedSegment(f"{tokens[0]} count '{raw_count}' is not an unsigned integer", tokens, position)
    return int(raw_count)


def validate_interchange(interchange: Interchange, tokens: SegmentTokens, position: Optional[int] = None) -> None:
    """Checks an IEA against its ISA: functional group count and interchange control number."""
    declared = _declared_count(tokens, position)
    if declared != len(interchange.functional_groups):
        raise EnvelopeCountMismatch(
            "interchange validation failed: incorrect number of functional groups",
            expected=len(interchange.functional_groups),
            actual=declared,
            level="interchange",
            segment=tokens,
            position=position,
        )
    control_number = tokens[2].strip()
    if control_number != interchange.interchange_control_number:
        raise ControlNumberMismatch(
            "interchange validation failed: mismatched ID",
            expected=interchange.interchange_control_number,
            actual=control_number,
            level="interchange",
            segment=tokens,
            position=position,
        )
    logger.debug(f"IEA validated for interchange {interchange.interchange_control_number} ({declared} groups).")


def validate_functional_group(group: FunctionalGroup, tokens: SegmentTokens, position: Optional[int] = None) -> None:
    """Checks a GE against its GS: transaction count and group control number."""
    declared = _declared_count(tokens, position)
    if declared != len(group.transactions):
        raise EnvelopeCountMismatch(
            "functional group validation failed: incorrect number of transactions",
            expected=len(group.transactions),
            actual=declared,
            level="functional group",
            segment=tokens,
            position=position,
        )
    control_number = tokens[2].strip()
    if control_number != group.group_control_number:
        raise ControlNumberMismatch(
            "functional group validation failed: mismatched ID",
            expected=group.group_control_number,
            actual=control_number,
            level="functional group",
            segment=tokens,
            position=position,
        )
    logger.debug(f"GE validated for group {group.group_control_number} ({declared} transactions).")


def validate_transaction(transaction: Transaction, tokens: SegmentTokens, position: Optional[int] = None) -> None:
    """Checks an SE against its ST: segment count (including ST and SE) and control number."""
    declared = _declared_count(tokens, position)
    # SE01 counts the ST and SE segments as well as the body.
    expected_count = len(transaction.segments) + 2
    if declared != expected_count:
        raise EnvelopeCountMismatch(
            "transaction validation failed: incorrect number of segments",
            expected=expected_count,
            actual=declared,
            level="transaction",
            segment=tokens,
            position=position,
        )
    control_number = tokens[2].strip()
    if control_number != transaction.transaction_set_control_number:
        raise ControlNumberMismatch(
            "transaction validation failed: incorrect transaction ID",
            expected=transaction.transaction_set_control_number,
            actual=control_number,
            level="transaction",
            segment=tokens,
            position=position,
        )
    logger.debug(f"SE validated for transaction {transaction.transaction_set_control_number} ({declared} segments).")
