"""Delimiter specifications and resolution of the effective delimiter set.

A delimiter is written `begin*end`. Without a `*` the same token opens and
closes an expression, so `@` and `@*@` are equivalent.

Configured lists may contain a null entry. It does not mean "no delimiter":
for compatibility with existing configurations it stands for the standard
`${*}` pair, whatever the defaults are.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

from ..errors import ConfigurationError

SPLIT_CHAR = "*"


@dataclass(frozen=True)
class DelimiterPair:
    """An ordered (begin, end) token pair marking a substitutable expression."""

    begin: str
    end: str

    @classmethod
    def parse(cls, spec: str) -> "DelimiterPair":
        if not spec:
            raise ConfigurationError("Delimiter specification can't be empty.")
        begin, sep, end = spec.partition(SPLIT_CHAR)
        if not sep:
            return cls(spec, spec)
        if not begin or not end:
            raise ConfigurationError(f"Invalid delimiter specification: {spec!r}")
        return cls(begin, end)

    def __str__(self) -> str:
        return f"{self.begin}{SPLIT_CHAR}{self.end}"


@dataclass(frozen=True)
class AbsentDelimiter:
    """A null entry in a configured delimiter list."""


@dataclass(frozen=True)
class TokenDelimiter:
    """A single token used as both begin and end."""

    token: str


@dataclass(frozen=True)
class PairDelimiter:
    begin: str
    end: str


DelimiterSpec = Union[AbsentDelimiter, TokenDelimiter, PairDelimiter]

ABSENT = AbsentDelimiter()
STANDARD_PAIR = DelimiterPair("${", "}")
DEFAULT_DELIMITERS: Tuple[DelimiterPair, ...] = (STANDARD_PAIR, DelimiterPair("@", "@"))


def parse_delimiter_spec(value: Optional[str]) -> DelimiterSpec:
    """Classify one configured entry."""
    if value is None:
        return ABSENT
    if not isinstance(value, str):
        raise ConfigurationError(f"Delimiter must be a string, got {value!r}")
    pair = DelimiterPair.parse(value)
    if SPLIT_CHAR not in value:
        return TokenDelimiter(pair.begin)
    return PairDelimiter(pair.begin, pair.end)


def spec_to_pair(spec: DelimiterSpec) -> DelimiterPair:
    if isinstance(spec, AbsentDelimiter):
        return STANDARD_PAIR
    if isinstance(spec, TokenDelimiter):
        return DelimiterPair(spec.token, spec.token)
    return DelimiterPair(spec.begin, spec.end)


def resolve_delimiters(
    use_defaults: bool,
    specs: Optional[Sequence[Union[DelimiterSpec, str, None]]],
    defaults: Iterable[DelimiterPair] = DEFAULT_DELIMITERS,
) -> Tuple[DelimiterPair, ...]:
    """Compute the delimiter set handed to the renderer.

    With no configured entries the renderer's defaults are used unchanged and
    `use_defaults` is ignored. Otherwise the defaults (when requested) come
    first, followed by the configured entries in order, duplicates dropped.
    """
    if not specs:
        return tuple(defaults)

    delims: dict[DelimiterPair, None] = {}
    if use_defaults:
        delims.update(dict.fromkeys(defaults))

    for entry in specs:
        if entry is None or isinstance(entry, str):
            entry = parse_delimiter_spec(entry)
        delims.setdefault(spec_to_pair(entry), None)

    return tuple(delims)
