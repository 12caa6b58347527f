"""Vim-style editor modes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

OPERATORS: frozenset[str] = frozenset({"y", "d", "c"})


class VimMode(Enum):
    """Editor sub-state that governs how keys are interpreted."""

    NORMAL = "NORMAL"
    INSERT = "INSERT"
    VISUAL = "VISUAL"
    OPERATOR = "OPERATOR"


@dataclass(frozen=True)
class EditorMode:
    """Active editor mode; OPERATOR carries the pending operator char."""

    mode: VimMode = VimMode.NORMAL
    operator: str | None = None

    def __post_init__(self) -> None:
        if self.mode is VimMode.OPERATOR and self.operator not in OPERATORS:
            raise ValueError(f"Invalid operator: {self.operator!r}")
        if self.mode is not VimMode.OPERATOR and self.operator is not None:
            raise ValueError("Only OPERATOR mode carries an operator")

    @classmethod
    def normal(cls) -> EditorMode:
        return cls(VimMode.NORMAL)

    @classmethod
    def insert(cls) -> EditorMode:
        return cls(VimMode.INSERT)

    @classmethod
    def visual(cls) -> EditorMode:
        return cls(VimMode.VISUAL)

    @classmethod
    def pending(cls, operator: str) -> EditorMode:
        return cls(VimMode.OPERATOR, operator)

    @property
    def label(self) -> str:
        if self.mode is VimMode.OPERATOR:
            return f"OPERATOR({self.operator})"
        return self.mode.value
