"""Backend package - AST to styled pseudocode."""

from .pseudo import generate
from .styles import DEFAULT_STYLE, STYLE_IDS, StyleConfig, UnknownStyleError, get_style
