"""csconv - convert a Java teaching subset into exam-style pseudocode."""

from __future__ import annotations

from .backend.styles import DEFAULT_STYLE, STYLE_IDS
from .errors import ConvertError, ConvertResult
from .pipeline import convert

__all__ = ["convert", "ConvertError", "ConvertResult", "DEFAULT_STYLE", "STYLE_IDS"]
