"""Table Engine exception hierarchy.

Every error raised by the export layer derives from TableEngineError, which carries
an optional hint telling the caller how to recover."""

from __future__ import annotations

from typing import Optional


class TableEngineError(Exception):
    """Base class for all Table Engine errors."""

    default_hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None):
        self.message = message
        self.hint = hint or self.default_hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\n{self.hint}"
        return self.message


class InvalidTableObject(TableEngineError, TypeError):
    """The object handed to an export function is not a Table."""

    default_hint = "Create the table with `TableEngine.Table(data, ...)` before exporting it."


class ExtensionError(TableEngineError, ValueError):
    """The output filename cannot be mapped to a saving function."""


class MissingExtension(ExtensionError):
    """The output filename has no extension."""


class UnsupportedExtension(ExtensionError):
    """The output filename has an extension without an associated saving function."""

    def __init__(self, extension: str, message: str, hint: Optional[str] = None):
        self.extension = extension
        super().__init__(message, hint)


class NoSummaryDefined(TableEngineError):
    """Summary extraction was requested but no summary directive exists."""

    default_hint = "Use `Table.summary_rows()` or `Table.grand_summary_rows()` to generate summaries."


class MissingOptionalDependency(TableEngineError):
    """An optional rendering backend is not installed."""

    def __init__(self, package: str, purpose: str, install_name: Optional[str] = None):
        self.package = package
        self.purpose = purpose
        install_name = install_name or package
        super().__init__(
            f"The `{package}` package is required for {purpose}.",
            hint=f"Install it with: pip install {install_name}",
        )


class TableBuildError(TableEngineError):
    """The table configuration could not be built into a renderable model."""


class RenderError(TableEngineError):
    """A rendering backend cannot produce the requested output."""


__all__ = [
    "TableEngineError",
    "InvalidTableObject",
    "ExtensionError",
    "MissingExtension",
    "UnsupportedExtension",
    "NoSummaryDefined",
    "MissingOptionalDependency",
    "TableBuildError",
    "RenderError",
]
