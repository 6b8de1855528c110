"""Table Engine core tools.

The fragment binder is shared by every renderer so that the ordering contract of
each output format lives in exactly one place."""

from .stitcher import DocumentComposer, compose_fragments

__all__ = [
    "DocumentComposer",
    "compose_fragments",
]
