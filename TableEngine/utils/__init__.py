"""Table Engine utilities: configuration, filename helpers and optional dependency probes."""

from .config import Settings, settings, reload_settings, print_config
from .paths import file_extension, resolve_filename, write_text_atomic
from .dependency_check import (
    check_playwright_available,
    check_weasyprint_available,
    log_dependency_status,
    require_package,
)

__all__ = [
    "Settings",
    "settings",
    "reload_settings",
    "print_config",
    "file_extension",
    "resolve_filename",
    "write_text_atomic",
    "check_playwright_available",
    "check_weasyprint_available",
    "log_dependency_status",
    "require_package",
]
