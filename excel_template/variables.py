"""
Variable store and name resolution.

The store maps dotted, case-sensitive names to values.  It wraps the
caller's dict by reference: record-arrays exploded during a run add
``"<index>.<root>.<field>"`` entries to that same dict and nothing is ever
removed, so a record-array can be exploded again wherever else it is used.
"""

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Iterator, Optional

logger = logging.getLogger(__name__)


class VariableStore(MutableMapping):
    """Mutable mapping of dotted variable names to values."""

    def __init__(self, variables: Optional[MutableMapping] = None):
        self._data = variables if variables is not None else {}

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self):
        return f"VariableStore({len(self._data)} entries)"

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_exact(self, path: str) -> bool:
        """Return True if *path* is a literal key in the store."""
        return path in self._data

    def resolve_path(self, path: str) -> Optional[tuple]:
        """Find the store key that *path* starts with.

        Walks the dot-separated segments of *path*, growing a prefix one
        segment at a time and never consuming the final segment.  The first
        prefix that is a store key is returned as ``(root_key, remainder)``,
        for example ``"records.date"`` resolves to ``("records", "date")``
        when ``records`` is bound.

        Returns ``None`` when no prefix matches.
        """
        segments = path.split(".")
        key = ""
        for segment in segments[:-1]:
            key = f"{key}.{segment}" if key else segment
            if key in self._data:
                return key, path[len(key) + 1:]
        return None

    # ------------------------------------------------------------------
    # Explosion
    # ------------------------------------------------------------------

    def explode_one_level(self, root_key: str, records) -> None:
        """Store each record field as ``"<i>.<root_key>.<field>"``.

        Nested mappings are stored as-is (one level only).
        """
        for i, record in enumerate(records):
            logger.debug("Exploding record %d for '%s'", i, root_key)
            for field, value in record.items():
                name = f"{i}.{root_key}.{field}"
                logger.debug("\t%s: %r", name, value)
                self._data[name] = value

    def explode_deep(self, prefix: str, mapping: Mapping) -> None:
        """Recursively flatten *mapping* into dotted keys under *prefix*."""
        for field, value in mapping.items():
            name = f"{prefix}.{field}"
            if isinstance(value, Mapping):
                self.explode_deep(name, value)
            else:
                logger.debug("\t%s: %r", name, value)
                self._data[name] = value
