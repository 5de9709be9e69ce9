"""OperationResult dataclass returned by vehicle and garage operations."""

from dataclasses import dataclass
from typing import Optional

from .reason import Reason


@dataclass
class OperationResult:
    """Outcome of a single operation, plus the cue to play if it succeeded."""

    ok: bool
    reason: Optional[Reason] = None
    message: str = ""
    cue: Optional[str] = None

    @classmethod
    def success(cls, message: str = "", cue: Optional[str] = None) -> "OperationResult":
        return cls(ok=True, message=message, cue=cue)

    @classmethod
    def failure(cls, reason: Reason, message: str) -> "OperationResult":
        return cls(ok=False, reason=reason, message=message)

    def __bool__(self) -> bool:
        return self.ok
