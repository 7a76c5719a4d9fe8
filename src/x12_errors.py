from typing import Any, List, Optional, Sequence


class EdiParseError(Exception):
    """
    Base class for every failure raised while turning X12 text into a Document.

    Carries the human-readable reason, the raw tokens of the segment being
    processed when the failure occurred (if any), and that segment's 1-based
    position among the document's non-empty segments.
    """

    def __init__(self, reason: str, segment: Optional[Sequence[str]] = None, position: Optional[int] = None):
        self.reason = reason
        self.segment: Optional[List[str]] = list(segment) if segment is not None else None
        self.position = position
        super().__init__(self._render())

    def _details(self) -> str:
        return ""

    def _render(self) -> str:
        message = f"Error parsing input into EDI document: {self.reason}{self._details()}"
        if self.segment is not None:
            location = f" at segment {self.position}" if self.position is not None else ""
            message += f"{location} {self.segment}"
        return message


class TruncatedInput(EdiParseError):
    """The document is too short to reach the delimiters in its ISA header."""


class DelimiterCollision(EdiParseError):
    """Two or more of the element, sub-element and segment delimiters are the same character."""

    def __init__(self, reason: str, delimiters: Sequence[str]):
        self.delimiters = tuple(delimiters)
        super().__init__(reason)

    def _details(self) -> str:
        return f"  --  delimiters: {self.delimiters!r}"


class MalformedSegment(EdiParseError):
    """An envelope segment is missing elements it is required to carry."""


class OutOfOrderSegment(EdiParseError):
    """A segment arrived when the nesting level it belongs to is not open."""


class EnvelopeMismatch(EdiParseError):
    """A trailer disagrees with what was recorded for its opener."""

    def __init__(
        self,
        reason: str,
        expected: Any,
        actual: Any,
        level: str,
        segment: Optional[Sequence[str]] = None,
        position: Optional[int] = None,
    ):
        self.expected = expected
        self.actual = actual
        self.level = level
        super().__init__(reason, segment, position)

    def _details(self) -> str:
        return f"  --  expected: {self.expected}  received: {self.actual}"


class EnvelopeCountMismatch(EnvelopeMismatch):
    """The trailer's declared child count differs from the number actually parsed."""


class ControlNumberMismatch(EnvelopeMismatch):
    """The trailer's control number differs from the one on its opener."""
