"""Base renderer and the per-format contract.

Each output format is one BaseRenderer subclass:

    render(table, **options) -> str      in-memory document
    save(table, target, **options) -> Path   write the document to `target`

The save dispatcher looks renderers up by ExportFormat. To add a text format:
1. Subclass BaseRenderer and implement build_fragments()
2. Add an ExportFormat member and register the class in RENDERERS

Image export has no fragments of its own; ImageRenderer screenshots the
HTMLRenderer document and only shares the save() signature."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Sequence

from loguru import logger

from ..core import compose_fragments
from ..ir import Table, build_data
from ..ir.builder import BuiltTable
from ..utils import config
from ..utils.paths import write_text_atomic


class BaseRenderer(ABC):
    """Abstract base for format renderers.

    Subclasses set `context` (the build context) and `fragment_order`, and
    turn a BuiltTable into the seven named fragments."""

    context: str = ""
    fragment_order: Sequence[str] = ()

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Short name for this format (e.g., 'html', 'latex')."""

    def build(self, table: Table) -> BuiltTable:
        """Build a fresh model for this renderer's context."""
        return build_data(table, self.context)

    @abstractmethod
    def build_fragments(self, built: BuiltTable) -> Dict[str, str]:
        """Create every named fragment for `built`; empty sections map to ""."""

    def compose(self, built: BuiltTable) -> str:
        return compose_fragments(self.fragment_order, self.build_fragments(built))

    def render(self, table: Table, **options: Any) -> str:
        return self.compose(self.build(table))

    def save(self, table: Table, target: Path, **options: Any) -> Path:
        """Write the rendered document to `target` verbatim."""
        content = self.render(table, **options)
        write_text_atomic(
            target,
            content,
            encoding=config.settings.OUTPUT_ENCODING,
            atomic=config.settings.ATOMIC_WRITES,
        )
        logger.info(f"✓ {self.format_name} file written: {target}")
        return target


__all__ = ["BaseRenderer"]
