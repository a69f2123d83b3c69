"""Character scanner shared by the transform and path-data parsers."""
from __future__ import annotations

from typing import Optional


class StringScanner:
    """Cursor over a string; scan methods consume input only on success."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.position = 0

    @property
    def at_end(self) -> bool:
        return self.position >= len(self.source)

    def peek(self, offset: int = 0) -> Optional[str]:
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return None
        return self.source[index]

    def advance(self, count: int = 1) -> None:
        self.position = min(self.position + count, len(self.source))

    def skip_whitespace(self) -> None:
        while not self.at_end and self.source[self.position].isspace():
            self.position += 1

    def skip_separator(self) -> bool:
        """Skip whitespace with at most one comma in it; True if a comma was consumed."""
        self.skip_whitespace()
        found = self.accept(",")
        self.skip_whitespace()
        return found

    def accept(self, text: str) -> bool:
        if text and self.source.startswith(text, self.position):
            self.position += len(text)
            return True
        return False

    def scan_identifier(self) -> Optional[str]:
        first = self.peek()
        if first is None or not (first.isalpha() or first == "_"):
            return None
        start = self.position
        self.position += 1
        while not self.at_end:
            char = self.source[self.position]
            if not (char.isalnum() or char == "_"):
                break
            self.position += 1
        return self.source[start:self.position]

    def _accept_digits(self) -> bool:
        start = self.position
        while not self.at_end and self.source[self.position] in "0123456789":
            self.position += 1
        return self.position > start

    def scan_number(self) -> Optional[float]:
        """Scan ``[+-]digits[.digits][(e|E)[+-]digits]`` (or ``[+-].digits...``)."""
        start = self.position
        if self.peek() in ("+", "-"):
            self.position += 1
        has_int = self._accept_digits()
        has_frac = False
        if self.peek() == ".":
            dot = self.position
            self.position += 1
            has_frac = self._accept_digits()
            if not has_frac:
                # "1." without fraction digits: leave the dot unconsumed.
                self.position = dot
        if not has_int and not has_frac:
            self.position = start
            return None
        if self.peek() in ("e", "E"):
            mark = self.position
            self.position += 1
            if self.peek() in ("+", "-"):
                self.position += 1
            if not self._accept_digits():
                self.position = mark
        try:
            return float(self.source[start:self.position])
        except ValueError:
            self.position = start
            return None
