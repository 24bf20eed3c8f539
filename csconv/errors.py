"""Structured conversion errors and results shared by every stage."""

from __future__ import annotations

from dataclasses import dataclass, field

STAGE_INPUT = "input"
STAGE_SCOPE = "scope"
STAGE_TOKENIZE = "tokenization"
STAGE_PARSE = "parse"

STAGES: list[str] = [STAGE_INPUT, STAGE_SCOPE, STAGE_TOKENIZE, STAGE_PARSE]


@dataclass(frozen=True)
class ConvertError:
    """A conversion failure with 1-based position in the original source."""

    stage: str
    message: str
    line: int = 1
    column: int = 1

    def __post_init__(self) -> None:
        if self.stage not in STAGES:
            raise ValueError("unknown stage: " + self.stage)

    def to_dict(self) -> dict[str, object]:
        return {
            "stage": self.stage,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }

    def __str__(self) -> str:
        return (
            self.stage
            + ":"
            + str(self.line)
            + ":"
            + str(self.column)
            + ": "
            + self.message
        )


@dataclass(frozen=True)
class ConvertResult:
    """Either pseudocode text or the error that stopped the pipeline."""

    pseudocode: str | None = None
    errors: list[ConvertError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> dict[str, object]:
        if not self.ok:
            return {"errors": [e.to_dict() for e in self.errors]}
        return {"pseudocode": self.pseudocode}
