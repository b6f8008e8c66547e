"""Path template compilation.

Turns a route template such as ``/users/:id`` into an anchored regex plus
the ordered list of parameter names it declares. The router only relies
on the ``Matcher`` protocol, so any compiler producing ``keys`` and
``match()`` can be swapped in.

Template grammar (one rule per ``/``-separated segment)::

    /users          literal segment (matched case-insensitively)
    /:id            one required segment, captured as "id"
    /:id?           one optional segment
    /:file.json     captured segment followed by a literal suffix
    /*              the rest of the path, captured as "*"
    /*?             the rest of the path, optional

Every compiled pattern tolerates a single trailing slash.
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Protocol

from waypoint.errors import PatternError

WILDCARD_KEY = "*"

_SEGMENT = r"([^/]+?)"
_OPTIONAL_SEGMENT = r"(?:/([^/]+?))?"
_REST = r"/(.*)"
_OPTIONAL_REST = r"(?:/(.*))?"


class Matcher(Protocol):
    """What the router needs from a compiled template."""

    @property
    def keys(self) -> tuple[str, ...]: ...

    def match(self, path: str) -> Sequence[str | None] | None: ...


type PatternCompiler = Callable[[str], Matcher]


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A compiled route template.

    ``keys`` holds the parameter names in declaration order; ``match``
    returns the captured values in that same order.
    """

    template: str
    keys: tuple[str, ...]
    regex: re.Pattern[str]

    def match(self, path: str) -> tuple[str | None, ...] | None:
        """Match *path*, returning positional captures or ``None``.

        Optional segments that did not participate come back as ``None``.
        """
        m = self.regex.match(path)
        if m is None:
            return None
        return m.groups()


def _compile_param(segment: str, keys: list[str], template: str) -> str:
    optional_at = segment.find("?", 1)
    suffix_at = segment.find(".", 1)

    if optional_at != -1:
        name_end = optional_at
    elif suffix_at != -1:
        name_end = suffix_at
    else:
        name_end = len(segment)

    name = segment[1:name_end]
    if not name:
        msg = f"Route template {template!r} has a parameter with no name: {segment!r}"
        raise PatternError(msg)
    keys.append(name)

    if suffix_at == -1:
        return _OPTIONAL_SEGMENT if optional_at != -1 else "/" + _SEGMENT

    # "/:name.ext" and "/:name?.ext": the suffix stays literal
    quantifier = "?" if optional_at != -1 else ""
    return "/" + _SEGMENT + quantifier + re.escape(segment[suffix_at:])


@lru_cache(maxsize=2048)
def compile_pattern(template: str) -> CompiledPattern:
    """Compile a route template into a ``CompiledPattern``.

    Results are cached, so the router can call this on every match
    attempt without recompiling.

    Raises ``PatternError`` if a parameter segment has no name.
    """
    keys: list[str] = []
    parts: list[str] = []

    for segment in template.split("/"):
        if not segment:
            continue
        head = segment[0]
        if head == "*":
            keys.append(WILDCARD_KEY)
            parts.append(_OPTIONAL_REST if segment[1:2] == "?" else _REST)
        elif head == ":":
            parts.append(_compile_param(segment, keys, template))
        else:
            parts.append("/" + re.escape(segment))

    regex = re.compile("^" + "".join(parts) + "/?$", re.IGNORECASE)
    return CompiledPattern(template=template, keys=tuple(keys), regex=regex)
