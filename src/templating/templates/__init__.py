"""Template rendering and delimiter handling for templating."""

from .delimiters import (
    ABSENT,
    DEFAULT_DELIMITERS,
    AbsentDelimiter,
    DelimiterPair,
    DelimiterSpec,
    PairDelimiter,
    TokenDelimiter,
    parse_delimiter_spec,
    resolve_delimiters,
)
from .jinja_utils import evaluate_expression, nest_properties
from .renderer import Renderer, RenderingError, RenderRequest, TokenRenderer, interpolate

__all__ = [
    "ABSENT",
    "DEFAULT_DELIMITERS",
    "AbsentDelimiter",
    "DelimiterPair",
    "DelimiterSpec",
    "PairDelimiter",
    "TokenDelimiter",
    "parse_delimiter_spec",
    "resolve_delimiters",
    "evaluate_expression",
    "nest_properties",
    "Renderer",
    "RenderingError",
    "RenderRequest",
    "TokenRenderer",
    "interpolate",
]
