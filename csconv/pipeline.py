"""Conversion pipeline: normalize, scope guard, tokenize, parse, generate.

convert() is the only place the stages meet. The first failure stops the
run and comes back as a ConvertError; no later stage is invoked and no
partial pseudocode is returned.
"""

from __future__ import annotations

import logging

from .backend.pseudo import generate
from .backend.styles import UnknownStyleError, get_style
from .errors import (
    STAGE_INPUT,
    STAGE_PARSE,
    STAGE_TOKENIZE,
    ConvertError,
    ConvertResult,
)
from .frontend.normalize import normalize, source_column
from .frontend.parse import ParseError, parse
from .frontend.scope import scope_guard
from .frontend.tokens import TokenizeError, tokenize

logger = logging.getLogger(__name__)


def _located(source: str, stage: str, msg: str, line: int, col: int) -> ConvertError:
    """Error at a normalized position, reported against the original text."""
    return ConvertError(stage, msg, line, source_column(source, line, col))


def _fail(error: ConvertError) -> ConvertResult:
    logger.info("rejected at %s", error)
    return ConvertResult(errors=[error])


def convert(source: str, style: str | None = None) -> ConvertResult:
    """Convert Java subset source to pseudocode in the given style."""
    if source.strip() == "":
        return _fail(ConvertError(STAGE_INPUT, "Empty input"))
    try:
        style_config = get_style(style)
    except UnknownStyleError as e:
        return _fail(ConvertError(STAGE_INPUT, str(e)))

    normalized = normalize(source)
    logger.debug("normalized %d characters", len(normalized))

    scope_error = scope_guard(normalized)
    if scope_error is not None:
        return _fail(
            _located(
                source,
                scope_error.stage,
                scope_error.message,
                scope_error.line,
                scope_error.column,
            )
        )
    logger.debug("scope guard passed")

    try:
        tokens = tokenize(normalized)
    except TokenizeError as e:
        return _fail(_located(source, STAGE_TOKENIZE, e.msg, e.line, e.col))
    logger.debug("tokenized %d tokens", len(tokens))

    try:
        program = parse(tokens)
    except ParseError as e:
        return _fail(_located(source, STAGE_PARSE, e.msg, e.line, e.col))
    logger.debug("parsed %d top-level statements", len(program.body))

    pseudocode = generate(program, style_config)
    return ConvertResult(pseudocode=pseudocode)
