"""
Placeholder scanning and parsing.

Grammar::

    %<path>[/<directives>]%
    %"<literal>"%

``<directives>`` is a ``;``-separated list of ``key:value`` pairs.  Two keys
are recognised:

* ``border`` - four ``0``/``1`` characters in top-right-bottom-left order;
  every ``0`` strips that side of the cell border, ``1`` leaves it alone.
* ``fit`` - ``auto`` autosizes the column after writing; any other value
  is a no-op.

A quoted path is a constant.  It is never looked up, the token is simply
replaced by the literal text, including in every row or column the
surrounding cell gets copied into.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"%[^%]+%")

_BORDER_MASK = re.compile(r"^[01]{4}$")


@dataclass(frozen=True)
class Directive:
    """Styling options attached to a placeholder."""
    raw: str
    border: Optional[str] = None
    fit: Optional[str] = None

    @property
    def autosize(self) -> bool:
        return self.fit == "auto"


@dataclass(frozen=True)
class Placeholder:
    """A single ``%...%`` token found in a string."""
    token: str
    path: str
    directive: Optional[Directive] = None

    @property
    def is_constant(self) -> bool:
        return len(self.path) >= 2 and self.path.startswith('"') and self.path.endswith('"')

    @property
    def literal(self) -> str:
        """Bare text of a constant (the path without its quotes)."""
        return self.path[1:-1]

    def references(self, root: str) -> bool:
        """Return True if this placeholder points inside *root*."""
        return not self.is_constant and self.path.startswith(root + ".")


def parse_directive(raw: str) -> Directive:
    """Parse a ``key:value;key:value`` directive string."""
    options = {}
    for part in raw.split(";"):
        if not part.strip():
            continue
        key, _, value = part.partition(":")
        options[key.strip()] = value.strip()

    border = options.pop("border", None)
    if border is not None and not _BORDER_MASK.match(border):
        logger.warning("Ignoring invalid border mask '%s' (expected 4 chars of 0/1)", border)
        border = None
    fit = options.pop("fit", None)
    for key in options:
        logger.debug("Ignoring unknown directive '%s'", key)
    return Directive(raw=raw, border=border, fit=fit)


def parse_placeholder(token: str) -> Placeholder:
    """Parse a ``%path[/directives]%`` token."""
    body = token[1:-1]
    if body.startswith('"') and body.find('"', 1) > 0:
        # a constant may contain "/" itself
        end = body.find('"', 1) + 1
        path, rest = body[:end], body[end:]
        sep, raw = rest[:1] == "/", rest[1:]
        if rest and not sep:
            path, sep, raw = body.partition("/")
    else:
        path, sep, raw = body.partition("/")
    directive = parse_directive(raw) if sep else None
    return Placeholder(token=token, path=path, directive=directive)


def find_placeholders(text) -> list:
    """Return every placeholder in *text*, in order of appearance."""
    if not isinstance(text, str):
        return []
    return [parse_placeholder(m.group(0)) for m in PLACEHOLDER_PATTERN.finditer(text)]


def has_constant(text) -> bool:
    return any(p.is_constant for p in find_placeholders(text))


def references_root(text, root: str) -> bool:
    """Return True if *text* holds a placeholder of the form ``%root.x%``."""
    return any(p.references(root) for p in find_placeholders(text))


def _rewrite(text: str, func) -> str:
    return PLACEHOLDER_PATTERN.sub(lambda m: func(parse_placeholder(m.group(0))), text)


def strip_constants(text):
    """Replace every ``%"literal"%`` in *text* by ``literal``."""
    if not isinstance(text, str):
        return text
    return _rewrite(text, lambda p: p.literal if p.is_constant else p.token)


def prefix_root(text, root: str, index: int):
    """Rewrite ``%root.x%`` tokens into ``%<index>.root.x%``."""
    if not isinstance(text, str):
        return text
    return _rewrite(text, lambda p: f"%{index}.{p.token[1:]}" if p.references(root) else p.token)


def _without_fit_auto(p: Placeholder) -> str:
    if p.directive is None or not p.directive.autosize:
        return p.token
    parts = [part for part in p.directive.raw.split(";")
             if part.replace(" ", "") != "fit:auto"]
    if not any(part.strip() for part in parts):
        return f"%{p.path}%"
    return f"%{p.path}/{';'.join(parts)}%"


def drop_fit_auto(text):
    """Remove ``fit:auto`` from the directives of every token in *text*."""
    if not isinstance(text, str):
        return text
    return _rewrite(text, _without_fit_auto)
