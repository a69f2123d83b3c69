"""Exception types raised by diagramgeom."""
from __future__ import annotations


class DiagramGeomError(ValueError):
    """Structured error with a stable code for CLI mapping."""

    code = "E_GEOMETRY"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.message = message

    def __str__(self) -> str:
        return self.message


class ContractViolationError(DiagramGeomError):
    """Raised when a caller breaks an operation's preconditions."""

    code = "E_CONTRACT"


class UnsupportedElementKindError(DiagramGeomError):
    """Raised when an element kind has no path conversion."""

    code = "E_UNSUPPORTED_ELEMENT"

    def __init__(self, kind: str) -> None:
        super().__init__(f"rendering of <{kind}> to a bezier path is not supported")
        self.kind = kind


class ElementNotFoundError(DiagramGeomError):
    """Raised when a requested element id does not exist in a document."""

    code = "E_ID_NOT_FOUND"
