from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Severity(enum.IntEnum):
    VERY_LOW = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    VERY_HIGH = 4

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def xcode_description(self) -> str:
        return "warning" if self <= Severity.MEDIUM else "error"

    @classmethod
    def from_identifier(cls, value: str) -> Severity:
        """Parse "very_low", "Very Low" or "VERY_LOW"."""
        key = value.strip().upper().replace(" ", "_").replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown severity '{value}'") from None


class ViolationKind(enum.Enum):
    NAME_FORMAT = "Name Format"
    LENGTH = "Length"
    TRAILING_NEWLINE = "Trailing Newline"
    LEADING_WHITESPACE = "Leading Whitespace"
    TRAILING_WHITESPACE = "Trailing Whitespace"
    FORCE_CAST = "Force Cast"
    TODO = "TODO or FIXME"
    COLON = "Colon"
    NESTING = "Nesting"

    @property
    def identifier(self) -> str:
        return self.name.lower()

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Location:
    file: str | None = None
    line: int | None = None
    character: int | None = None

    def __post_init__(self) -> None:
        if self.line is None and self.character is not None:
            raise ValueError("Location cannot have a character without a line")

    def __str__(self) -> str:
        # Xcode format: {path}{:line}{:character}
        out = self.file if self.file is not None else "<nopath>"
        if self.line is not None:
            out += f":{self.line}"
        if self.character is not None:
            out += f":{self.character}"
        return out


@dataclass(frozen=True)
class Violation:
    kind: ViolationKind
    location: Location
    reason: str | None = None
    severity: Severity = field(default=Severity.LOW, compare=False)

    def __str__(self) -> str:
        return (
            f"{self.location}: {self.severity.xcode_description}: "
            f"{self.kind} Violation ({self.severity.label} Severity): {self.reason or ''}"
        )
