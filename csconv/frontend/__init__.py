"""Frontend package - Java subset source to AST."""

from .normalize import mask_strings, normalize, source_column
from .parse import ParseError as ParseError, Parser, parse
from .scope import scope_guard
from .tokens import TokenizeError as TokenizeError, tokenize
