"""Path expressions and their resolution to canonical object-store keys.

Callers address objects with three kinds of expressions:

- absolute paths (``/alice/stor/a.csv``)
- home-relative paths, whose first segment is the ``~~`` alias
  (``~~/stor/a.csv``)
- paths relative to the current working directory (``stor/a.csv``)

Resolution is pure: the working directory and home directory are passed in
explicitly, so it can be exercised in isolation.

Example:
    >>> resolve("~~/reports", cwd="/bob/stor", home="/bob")
    '/bob/reports'
    >>> resolve("../public", cwd="/bob/stor", home="/bob")
    '/bob/public'
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from mantafs.exceptions import InvalidPathError

HOME_ALIAS = "~~"
ROOT_KEY = "/"

_SCHEME_RE = re.compile(r"^manta:", re.IGNORECASE)


class PathKind(str, Enum):
    """How a path expression is anchored."""
    ABSOLUTE = "absolute"
    HOME = "home"
    RELATIVE = "relative"


def strip_scheme(text: str) -> str:
    """Remove a leading ``manta:`` label and an empty or named authority.

    ``manta:///a/b`` and ``manta:/a/b`` both become ``/a/b``. Any other
    ``word:`` prefix is part of an object name and is left alone.
    """
    match = _SCHEME_RE.match(text)
    if not match:
        return text
    rest = text[match.end():]
    if rest.startswith("//"):
        # Drop the authority section, keep the path
        slash = rest.find("/", 2)
        rest = rest[slash:] if slash != -1 else "/"
    return rest


@dataclass(frozen=True)
class PathExpression:
    """A parsed, immutable path expression.

    Attributes:
        kind: Anchor of the expression
        segments: Path segments after the anchor; ``.`` and empty segments are
            dropped, ``..`` is kept for resolution
    """

    kind: PathKind
    segments: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: Union[str, "PathExpression"]) -> "PathExpression":
        """Parse a path string.

        Raises:
            InvalidPathError: If the string is empty
        """
        if isinstance(text, PathExpression):
            return text
        if text is None or str(text).strip() == "":
            raise InvalidPathError("Path must not be empty", path=text)

        raw = strip_scheme(str(text))
        parts = [part for part in raw.split("/") if part not in ("", ".")]

        if raw.startswith("/"):
            return cls(PathKind.ABSOLUTE, tuple(parts))
        if parts and parts[0] == HOME_ALIAS:
            return cls(PathKind.HOME, tuple(parts[1:]))
        return cls(PathKind.RELATIVE, tuple(parts))

    @property
    def is_root(self) -> bool:
        return self.kind == PathKind.ABSOLUTE and not self.segments

    @property
    def name(self) -> str:
        """Last segment, or the anchor for bare expressions."""
        if self.segments:
            return self.segments[-1]
        return HOME_ALIAS if self.kind == PathKind.HOME else ""

    def child(self, name: str) -> "PathExpression":
        return PathExpression(self.kind, self.segments + (name,))

    def __str__(self) -> str:
        body = "/".join(self.segments)
        if self.kind == PathKind.ABSOLUTE:
            return "/" + body
        if self.kind == PathKind.HOME:
            return f"{HOME_ALIAS}/{body}" if body else HOME_ALIAS
        return body or "."


def _normalize(segments: Sequence[str], original: object) -> str:
    normalized: List[str] = []
    for part in segments:
        if part in ("", "."):
            continue
        if part == "..":
            if not normalized:
                raise InvalidPathError(f"Path escapes the root: {original}", path=str(original))
            normalized.pop()
            continue
        normalized.append(part)
    return ROOT_KEY + "/".join(normalized)


def _key_segments(key: str) -> List[str]:
    return strip_scheme(key).split("/")


def resolve(
    expr: Union[str, PathExpression],
    cwd: Optional[str],
    home: Optional[str],
) -> str:
    """Resolve a path expression to a canonical key.

    Args:
        expr: Path string or parsed expression
        cwd: Current working directory key, or None when unset
        home: Home directory key, or None when unset

    Returns:
        Canonical key: leading slash, no trailing slash, no scheme,
        no ``.``/``..`` segments

    Raises:
        InvalidPathError: If the expression is empty, climbs above the root,
            or needs a working/home directory that is not set
    """
    parsed = PathExpression.parse(expr)

    if parsed.is_root:
        return ROOT_KEY

    if parsed.kind == PathKind.HOME:
        if not home:
            raise InvalidPathError(
                f"Invalid path: {expr} (no home directory configured)", path=str(expr)
            )
        return _normalize(_key_segments(home) + list(parsed.segments), expr)

    if parsed.kind == PathKind.ABSOLUTE:
        return _normalize(parsed.segments, expr)

    if not cwd:
        raise InvalidPathError(
            f"Invalid path: {expr} (no working directory set)", path=str(expr)
        )
    return _normalize(_key_segments(cwd) + list(parsed.segments), expr)


def child_path(parent: Union[str, PathExpression], name: str) -> str:
    """Join a listed entry name onto the path a caller asked to list."""
    parent_text = str(parent)
    if parent_text == ".":
        return name
    return posixpath.join(parent_text, name)
