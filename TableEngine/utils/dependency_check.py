"""Detect optional rendering dependencies.

Image export needs either playwright (PNG/PDF through a headless browser) or
WeasyPrint (PDF only). Both are probed when an export asks for them, never at
import time, so the HTML/LaTeX/RTF exports work without them."""
import importlib
import importlib.util
import platform
import sys
from ctypes import util as ctypes_util

from loguru import logger

from ..errors import MissingOptionalDependency

BOX_CONTENT_WIDTH = 62


def _box_line(text: str = "") -> str:
    """Render a single line inside the 66-char help box."""
    return f"║  {text:<{BOX_CONTENT_WIDTH}}║\n"


def _box(lines) -> str:
    box_top = "╔" + "═" * 64 + "╗\n"
    box_bottom = "╚" + "═" * 64 + "╝"
    return box_top + "".join(_box_line(line) for line in lines) + box_bottom


def is_package_installed(module_name: str) -> bool:
    """Whether `module_name` can be imported, without importing it."""
    try:
        return importlib.util.find_spec(module_name) is not None
    except (ImportError, ValueError):
        return False


def require_package(module_name: str, purpose: str, install_name: str | None = None):
    """Import and return `module_name`, or raise MissingOptionalDependency naming it."""
    if not is_package_installed(module_name):
        raise MissingOptionalDependency(module_name, purpose, install_name)
    return importlib.import_module(module_name)


def _probe_native_libs():
    """Use ctypes to find the native libraries WeasyPrint loads.

    Returns:
        list[str]: library identifier not found"""
    if platform.system() == "Windows":
        targets = [
            ("pango", ["pango-1.0-0"]),
            ("gobject", ["gobject-2.0-0"]),
            ("cairo", ["cairo-2"]),
        ]
    else:
        targets = [
            ("pango", ["pango-1.0"]),
            ("gobject", ["gobject-2.0"]),
            ("cairo", ["cairo", "cairo-2"]),
        ]

    missing = []
    for key, variants in targets:
        if not any(ctypes_util.find_library(v) for v in variants):
            missing.append(key)
    return missing


def check_playwright_available():
    """Check whether the playwright screenshot backend can be used

    Returns:
        tuple: (is_available: bool, message: str)"""
    if not is_package_installed("playwright"):
        return False, _box(
            [
                "⚠️ Image export dependency missing",
                "",
                "PNG/PDF export through a headless browser needs playwright:",
                "  pip install playwright",
                "  playwright install chromium",
            ]
        )
    return True, "✓ playwright detected, PNG/PDF export available"


def check_weasyprint_available():
    """Check whether the WeasyPrint PDF backend can be used

    Returns:
        tuple: (is_available: bool, message: str)"""
    if not is_package_installed("weasyprint"):
        return False, "⚠ WeasyPrint is not installed\nSolution: pip install weasyprint"
    try:
        importlib.import_module("weasyprint")
    except OSError as e:
        missing_native = _probe_native_libs()
        missing = ", ".join(missing_native) if missing_native else "unknown"
        return False, _box(
            [
                "⚠️ WeasyPrint native libraries missing",
                "",
                f"Unrecognized dependency: {missing}",
                "Ubuntu/Debian:",
                "  sudo apt-get install -y libpango-1.0-0 libpangoft2-1.0-0",
                "macOS:",
                "  brew install pango",
                "",
                f"Loader error: {str(e)[:BOX_CONTENT_WIDTH - 14]}",
            ]
        )
    return True, "✓ WeasyPrint detected, PDF export available"


def log_dependency_status():
    """Record optional dependency status to log"""
    results = {
        "playwright": check_playwright_available(),
        "weasyprint": check_weasyprint_available(),
    }
    for name, (is_available, message) in results.items():
        if is_available:
            logger.success(message)
        else:
            logger.warning(message)
    if not any(available for available, _ in results.values()):
        logger.info("💡 Tip: HTML, LaTeX and RTF export do not need any of these backends")
    return {name: available for name, (available, _) in results.items()}


if __name__ == "__main__":
    status = log_dependency_status()
    sys.exit(0 if any(status.values()) else 1)
