"""Image export (PNG/PDF) through a screenshot backend.

The table is first written as a standalone HTML document to a temporary file,
then a screenshotter captures the `<table>` element from its file:// URL:

    capture(url, output_path, selector="table", zoom=2, expand=5, **options)

Screenshotters are injected; without one the backend named by
settings.SCREENSHOT_BACKEND is constructed. Backends import their library when
`check` or `capture` runs, so a missing backend only fails image exports."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol, Sequence, Tuple, Union

from loguru import logger

from ..errors import RenderError
from ..ir import Table
from ..utils import config
from ..utils.dependency_check import require_package
from .html_renderer import HTMLRenderer

Expand = Union[int, Sequence[int]]


class Screenshotter(Protocol):
    """Capture strategy. An optional `check(output_path)` method is called
    before the temporary document is written."""

    def capture(
        self,
        url: str,
        output_path: Path,
        selector: str = "table",
        zoom: float = 2,
        expand: Expand = 5,
        **options: Any,
    ) -> Any:
        ...


def normalize_expand(expand: Expand) -> Tuple[int, int, int, int]:
    """One value or (top, right, bottom, left) -> (top, right, bottom, left)."""
    if isinstance(expand, (int, float)):
        value = int(expand)
        return value, value, value, value
    values = [int(v) for v in expand]
    if len(values) == 1:
        return values[0], values[0], values[0], values[0]
    if len(values) != 4:
        raise ValueError(f"expand takes one value or four (top, right, bottom, left), got {len(values)}")
    return values[0], values[1], values[2], values[3]


class PlaywrightScreenshotter:
    """Headless-browser capture of one element, as PNG or PDF.

    The page is rendered at `zoom` device pixels per CSS pixel; the element's
    bounding box grown by `expand` pixels is clipped (PNG) or used as the page
    size (PDF). Extra options go to `page.screenshot` / `page.pdf`."""

    def __init__(
        self,
        browser: Optional[str] = None,
        viewport_width: Optional[int] = None,
        viewport_height: Optional[int] = None,
    ):
        self.browser = browser or config.settings.SCREENSHOT_BROWSER
        self.viewport = {
            "width": viewport_width or config.settings.VIEWPORT_WIDTH,
            "height": viewport_height or config.settings.VIEWPORT_HEIGHT,
        }

    def check(self, output_path: Path) -> None:
        """Fail with MissingOptionalDependency when playwright is not installed."""
        require_package("playwright", "saving tables as PNG or PDF images")

    def capture(
        self,
        url: str,
        output_path: Path,
        selector: str = "table",
        zoom: float = 2,
        expand: Expand = 5,
        **options: Any,
    ) -> Path:
        self.check(output_path)
        from playwright.sync_api import sync_playwright

        output_path = Path(output_path)
        top, right, bottom, left = normalize_expand(expand)
        is_pdf = output_path.suffix.lower() == ".pdf"

        with sync_playwright() as playwright:
            launcher = getattr(playwright, self.browser)
            browser = launcher.launch()
            try:
                page = browser.new_page(viewport=self.viewport, device_scale_factor=zoom)
                page.goto(url)
                if is_pdf:
                    # Page boxes are sized to the element, no extra margins
                    page.add_style_tag(content="@page { margin: 0; } body { margin: 0; }")
                element = page.wait_for_selector(selector)
                box = element.bounding_box() if element is not None else None
                if box is None:
                    raise RenderError(f"Selector `{selector}` did not match a visible element in {url}")

                clip = {
                    "x": max(box["x"] - left, 0),
                    "y": max(box["y"] - top, 0),
                    "width": box["width"] + left + right,
                    "height": box["height"] + top + bottom,
                }
                if is_pdf:
                    pdf_options = {"print_background": True, **options}
                    page.pdf(
                        path=str(output_path),
                        width=f"{clip['x'] + clip['width']}px",
                        height=f"{clip['y'] + clip['height']}px",
                        **pdf_options,
                    )
                else:
                    page.screenshot(path=str(output_path), clip=clip, **options)
            finally:
                browser.close()

        logger.debug(f"Captured `{selector}` from {url} with {self.browser} (zoom={zoom})")
        return output_path


class WeasyPrintScreenshotter:
    """PDF-only backend: lays the HTML document out with WeasyPrint.

    `zoom` scales the rendering and `expand` becomes the page margin."""

    def check(self, output_path: Path) -> None:
        """Only PDF output, and only with weasyprint installed."""
        output_path = Path(output_path)
        if output_path.suffix.lower() != ".pdf":
            raise RenderError(
                f"The weasyprint backend can only write PDF files, not `{output_path.suffix}`.",
                hint="Set TABLE_ENGINE_SCREENSHOT_BACKEND=playwright for PNG export.",
            )
        require_package("weasyprint", "saving tables as PDF documents")

    def capture(
        self,
        url: str,
        output_path: Path,
        selector: str = "table",
        zoom: float = 2,
        expand: Expand = 5,
        **options: Any,
    ) -> Path:
        output_path = Path(output_path)
        self.check(output_path)
        import weasyprint

        top, right, bottom, left = normalize_expand(expand)
        page_css = weasyprint.CSS(
            string=f"@page {{ size: auto; margin: {top}px {right}px {bottom}px {left}px; }}"
        )
        document = weasyprint.HTML(url=url)
        document.write_pdf(
            str(output_path),
            stylesheets=[page_css],
            zoom=zoom,
            presentational_hints=True,
            **options,
        )
        logger.debug(f"Rendered {url} with WeasyPrint (zoom={zoom})")
        return output_path


SCREENSHOT_BACKENDS = {
    "playwright": PlaywrightScreenshotter,
    "weasyprint": WeasyPrintScreenshotter,
}


def default_screenshotter() -> Screenshotter:
    backend = config.settings.SCREENSHOT_BACKEND.lower()
    if backend not in SCREENSHOT_BACKENDS:
        raise RenderError(
            f"Unknown screenshot backend `{backend}`; expected one of {', '.join(SCREENSHOT_BACKENDS)}."
        )
    return SCREENSHOT_BACKENDS[backend]()


class ImageRenderer:
    """Table -> PNG/PDF via an intermediate HTML document."""

    def __init__(self, html_renderer: Optional[HTMLRenderer] = None):
        self.html_renderer = html_renderer or HTMLRenderer()

    @property
    def format_name(self) -> str:
        return "image"

    def save(
        self,
        table: Table,
        target: Path,
        zoom: Optional[float] = None,
        expand: Optional[Expand] = None,
        screenshotter: Optional[Screenshotter] = None,
        **options: Any,
    ) -> Path:
        """Screenshot the table into `target` (format taken from its extension).

        Parameters:
            zoom: pixel density factor (settings.IMAGE_ZOOM by default).
            expand: whitespace around the table, one value or four.
            screenshotter: capture strategy; the configured backend when None.
            options: forwarded to `screenshotter.capture` unchanged."""
        target = Path(target)
        zoom = config.settings.IMAGE_ZOOM if zoom is None else zoom
        expand = config.settings.IMAGE_EXPAND if expand is None else expand
        screenshotter = screenshotter or default_screenshotter()
        # Backends with a `check` fail here, before anything is written
        check = getattr(screenshotter, "check", None)
        if check is not None:
            check(target)

        document = self.html_renderer.render_document(table, inline_css=False)
        fd, tmp_name = tempfile.mkstemp(suffix=".html")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(document)
            url = Path(tmp_name).resolve().as_uri()

            target.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Start capturing table image: {target}")
            screenshotter.capture(
                url,
                target,
                selector="table",
                zoom=zoom,
                expand=expand,
                **options,
            )
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info(f"✓ image file written: {target}")
        return target


__all__ = [
    "ImageRenderer",
    "Screenshotter",
    "PlaywrightScreenshotter",
    "WeasyPrintScreenshotter",
    "SCREENSHOT_BACKENDS",
    "default_screenshotter",
    "normalize_expand",
]
