"""Vim-style editing model for the query editor."""

from .buffer import EditorBuffer, Register
from .motions import MOTIONS, MotionResult, Position

__all__ = ["MOTIONS", "EditorBuffer", "MotionResult", "Position", "Register"]
