"""Fragment binder: merges the named fragments of one table into a document string.

Each renderer creates the same set of named fragments (table start, heading,
columns, body, footnotes, source notes, table end) and declares the order in which
they are stitched. DocumentComposer enforces that every fragment in that order was
produced, even when it is empty, and concatenates them without separators."""

from __future__ import annotations

from typing import Dict, List, Sequence

from loguru import logger

from ..ir.schema import FRAGMENT_NAMES


class DocumentComposer:
    """A simple binder that splices named fragments into one document.

    Function:
        - Record fragments by name as a renderer creates them;
        - Refuse unknown names, duplicates and missing fragments;
        - Concatenate in the order the renderer declares."""

    def __init__(self, order: Sequence[str]):
        """Remember the stitching order; it must be a permutation of FRAGMENT_NAMES."""
        unknown = [name for name in order if name not in FRAGMENT_NAMES]
        if unknown or sorted(order) != sorted(FRAGMENT_NAMES):
            raise ValueError(
                f"Fragment order must list each of {', '.join(FRAGMENT_NAMES)} exactly once, got {list(order)}"
            )
        self.order: List[str] = list(order)
        self._fragments: Dict[str, str] = {}

    def add(self, name: str, fragment: str) -> "DocumentComposer":
        """Record one fragment; empty strings are kept to preserve the structure."""
        if name not in FRAGMENT_NAMES:
            raise ValueError(f"Unknown fragment `{name}`")
        if name in self._fragments:
            raise ValueError(f"Fragment `{name}` was already added")
        self._fragments[name] = fragment or ""
        return self

    def add_all(self, fragments: Dict[str, str]) -> "DocumentComposer":
        for name, fragment in fragments.items():
            self.add(name, fragment)
        return self

    @property
    def fragments(self) -> Dict[str, str]:
        return dict(self._fragments)

    def compose(self) -> str:
        """Concatenate every fragment in order."""
        missing = [name for name in self.order if name not in self._fragments]
        if missing:
            raise ValueError(f"Missing fragments: {', '.join(missing)}")
        empty = [name for name in self.order if not self._fragments[name]]
        if empty:
            logger.debug(f"Empty fragments kept in place: {', '.join(empty)}")
        return "".join(self._fragments[name] for name in self.order)


def compose_fragments(order: Sequence[str], fragments: Dict[str, str]) -> str:
    """One-shot helper: bind `fragments` in `order`."""
    return DocumentComposer(order).add_all(fragments).compose()


__all__ = ["DocumentComposer", "compose_fragments"]
