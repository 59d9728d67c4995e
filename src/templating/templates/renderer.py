"""Rendering of a template source tree into a staging tree."""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import (
    Any,
    Dict,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
)

from .delimiters import DEFAULT_DELIMITERS, DelimiterPair
from .jinja_utils import evaluate_expression, nest_properties

DEFAULT_ENCODING = "utf-8"

# Copied byte for byte instead of being interpolated
DEFAULT_NON_FILTERED_EXTENSIONS: FrozenSet[str] = frozenset(
    {"jpg", "jpeg", "gif", "bmp", "png"}
)


class RenderingError(Exception):
    """Raised by a renderer when a source tree can't be rendered."""


@dataclass
class RenderRequest:
    """Everything a renderer needs for one invocation."""

    source_dir: Path
    staging_dir: Path
    delimiters: Tuple[DelimiterPair, ...]
    escape_string: Optional[str] = None
    overwrite: bool = False
    encoding: Optional[str] = None
    # directories under source_dir whose files are not rendered
    excluded_dirs: Tuple[Path, ...] = ()
    non_filtered_extensions: FrozenSet[str] = DEFAULT_NON_FILTERED_EXTENSIONS


class Renderer(Protocol):
    default_delimiters: Tuple[DelimiterPair, ...]

    def render(self, request: RenderRequest) -> None: ...


def _build_pattern(
    delimiters: Sequence[DelimiterPair], escape_string: Optional[str]
) -> "re.Pattern[str]":
    alternatives: List[str] = []
    for i, pair in enumerate(delimiters):
        alternatives.append(
            (f"(?P<esc{i}>{re.escape(escape_string)})?" if escape_string else "")
            + f"(?P<begin{i}>{re.escape(pair.begin)})"
            + rf"(?P<expr{i}>[^\s]+?)"
            + re.escape(pair.end)
        )
    return re.compile("|".join(alternatives))


def interpolate(
    text: str,
    delimiters: Sequence[DelimiterPair],
    properties: Mapping[str, Any],
    escape_string: Optional[str] = None,
    context: Optional[Mapping[str, Any]] = None,
) -> str:
    """Replace every resolvable `begin expr end` occurrence in `text`.

    The leftmost occurrence wins; ties go to the earlier delimiter. Unresolved
    expressions are kept verbatim and scanning resumes right after their first
    character, so a shorter expression nested inside can still match.
    """
    if not delimiters:
        return text
    if context is None:
        context = nest_properties(properties)
    pattern = _build_pattern(delimiters, escape_string)

    out: List[str] = []
    pos = 0
    while True:
        match = pattern.search(text, pos)
        if match is None:
            out.append(text[pos:])
            break
        out.append(text[pos : match.start()])

        i = int(match.lastgroup[len("expr") :])
        if escape_string and match.group(f"esc{i}"):
            # escaped: drop the escape string, keep the expression literally
            out.append(text[match.start(f"begin{i}") : match.end()])
            pos = match.end()
            continue

        value = evaluate_expression(match.group(f"expr{i}"), properties, context)
        if value is None:
            out.append(text[match.start()])
            pos = match.start() + 1
            continue
        out.append(value)
        pos = match.end()

    return "".join(out)


@dataclass
class TokenRenderer:
    """Default renderer: token interpolation over configurable delimiters."""

    properties: Dict[str, Any] = field(default_factory=dict)
    default_delimiters: Tuple[DelimiterPair, ...] = DEFAULT_DELIMITERS

    def render(self, request: RenderRequest) -> None:
        encoding = request.encoding or DEFAULT_ENCODING
        context = nest_properties(self.properties)
        source_dir = request.source_dir
        if not source_dir.is_dir():
            raise RenderingError(f"Source directory {source_dir} is not a directory")
        try:
            request.staging_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RenderingError(f"Failed to create {request.staging_dir}: {e}") from e

        source_files = sorted(
            p
            for p in source_dir.rglob("*")
            if p.is_file() and not _is_excluded(p, request.excluded_dirs)
        )
        for source_file in source_files:
            relative = source_file.relative_to(source_dir)
            target_file = request.staging_dir / relative

            if not request.overwrite and _is_up_to_date(source_file, target_file):
                continue

            if source_file.suffix[1:].lower() in request.non_filtered_extensions:
                try:
                    target_file.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(source_file, target_file)
                except OSError as e:
                    raise RenderingError(
                        f"Failed to copy {source_file} to {target_file}: {e}"
                    ) from e
                continue

            try:
                with open(source_file, "r", encoding=encoding, newline="") as f:
                    text = f.read()
            except UnicodeDecodeError as e:
                raise RenderingError(
                    f"Failed to decode {source_file} as {encoding}: {e.reason}"
                ) from e
            except (OSError, LookupError) as e:
                raise RenderingError(f"Failed to read {source_file}: {e}") from e

            rendered = interpolate(
                text,
                request.delimiters,
                self.properties,
                escape_string=request.escape_string,
                context=context,
            )

            try:
                target_file.parent.mkdir(parents=True, exist_ok=True)
                with open(target_file, "w", encoding=encoding, newline="") as f:
                    f.write(rendered)
            except OSError as e:
                raise RenderingError(f"Failed to write {target_file}: {e}") from e


def _is_excluded(path: Path, excluded_dirs: Sequence[Path]) -> bool:
    return any(path.is_relative_to(d) for d in excluded_dirs)


def _is_up_to_date(source_file: Path, target_file: Path) -> bool:
    try:
        return target_file.stat().st_mtime >= source_file.stat().st_mtime
    except FileNotFoundError:
        return False
