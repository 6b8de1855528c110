"""HTML renderer: BuiltTable -> `<table>` markup, CSS rule set and full documents.

Three shapes of output are produced from the same fragments:

- inline-CSS fragment: a bare `<table>` whose elements carry their styles in
  `style` attributes (for e-mail bodies and other hosts that drop `<style>`);
- linked fragment: `<div id="{table_id}">` holding an id-scoped `<style>` block
  and the table;
- document: the linked (or inline) fragment wrapped in a full HTML5 page, which
  is what `save` writes and what image export screenshots."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from ..ir import Table
from ..ir.builder import BuiltRow, BuiltTable
from ..utils import config
from ..utils.paths import write_text_atomic
from .base import BaseRenderer
from .css_inliner import CssRule, inline_styles


class HTMLRenderer(BaseRenderer):
    """BuiltTable -> HTML.

    - build_fragments creates the seven named fragments with gt_* classes;
    - css_rules derives the single-class rule set from the table options;
    - render/render_document/save choose between inline and linked CSS."""

    context = "html"
    # Source notes come before footnotes in the table footer
    fragment_order = (
        "table_start",
        "heading",
        "columns",
        "body",
        "source_notes",
        "footnotes",
        "table_end",
    )

    @property
    def format_name(self) -> str:
        return "html"

    # ====== Fragments ======

    def build_fragments(self, built: BuiltTable) -> Dict[str, str]:
        return {
            "table_start": '<table class="gt_table">\n',
            "heading": self._render_heading(built),
            "columns": self._render_columns(built),
            "body": self._render_body(built),
            "footnotes": self._render_footnotes(built),
            "source_notes": self._render_source_notes(built),
            "table_end": "</table>\n",
        }

    def _render_heading(self, built: BuiltTable) -> str:
        if not built.has_heading:
            return ""
        colspan = built.n_columns
        rows = [
            f'<tr>\n<th colspan="{colspan}" class="gt_heading gt_title">{built.title}</th>\n</tr>\n'
        ]
        if built.subtitle:
            rows.append(
                f'<tr>\n<th colspan="{colspan}" class="gt_heading gt_subtitle">{built.subtitle}</th>\n</tr>\n'
            )
        return '<thead class="gt_header">\n' + "".join(rows) + "</thead>\n"

    def _render_columns(self, built: BuiltTable) -> str:
        cells: List[str] = []
        if built.has_stub:
            cells.append(f'<th class="gt_col_heading gt_left" scope="col">{built.stubhead_label}</th>\n')
        for column in built.columns:
            cells.append(
                f'<th class="gt_col_heading gt_{column.align}" scope="col">{column.label}</th>\n'
            )
        return '<thead class="gt_col_headings">\n<tr>\n' + "".join(cells) + "</tr>\n</thead>\n"

    def _render_body(self, built: BuiltTable) -> str:
        aligns = [column.align for column in built.columns]
        parts: List[str] = ['<tbody class="gt_table_body">\n']
        for group in built.groups:
            if group.label is not None:
                parts.append(
                    f'<tr class="gt_group_heading_row">\n'
                    f'<td colspan="{built.n_columns}" class="gt_group_heading">{group.label}</td>\n'
                    f"</tr>\n"
                )
            for row in group.rows:
                parts.append(self._render_row(built, row, aligns, "gt_row"))
            for row in group.summary_rows:
                parts.append(self._render_row(built, row, aligns, "gt_row gt_summary_row"))
        for row in built.grand_summary_rows:
            parts.append(self._render_row(built, row, aligns, "gt_row gt_grand_summary_row"))
        parts.append("</tbody>\n")
        return "".join(parts)

    @staticmethod
    def _render_row(built: BuiltTable, row: BuiltRow, aligns: Sequence[str], classes: str) -> str:
        cells: List[str] = []
        if built.has_stub:
            cells.append(f'<td class="{classes} gt_left gt_stub">{row.stub}</td>\n')
        for align, cell in zip(aligns, row.cells):
            cells.append(f'<td class="{classes} gt_{align}">{cell}</td>\n')
        return "<tr>\n" + "".join(cells) + "</tr>\n"

    def _render_footnotes(self, built: BuiltTable) -> str:
        if not built.footnotes:
            return ""
        rows = "".join(
            f'<tr>\n<td colspan="{built.n_columns}" class="gt_footnote">'
            f"{built.footnote_mark([note.mark])} {note.text}</td>\n</tr>\n"
            for note in built.footnotes
        )
        return f'<tfoot class="gt_footnotes">\n{rows}</tfoot>\n'

    def _render_source_notes(self, built: BuiltTable) -> str:
        if not built.source_notes:
            return ""
        rows = "".join(
            f'<tr>\n<td colspan="{built.n_columns}" class="gt_sourcenote">{note}</td>\n</tr>\n'
            for note in built.source_notes
        )
        return f'<tfoot class="gt_sourcenotes">\n{rows}</tfoot>\n'

    # ====== CSS ======

    @staticmethod
    def css_rules(built: BuiltTable) -> List[CssRule]:
        """Single-class CSS rules for the table, in cascade order."""
        opts = built.options
        return [
            ("gt_table", {
                "display": "table",
                "border-collapse": "collapse",
                "margin-left": "auto",
                "margin-right": "auto",
                "color": opts["table_font_color"],
                "font-size": opts["table_font_size"],
                "font-family": opts["table_font_names"],
                "background-color": opts["table_background_color"],
                "width": opts["table_width"],
                "border-top-style": "solid",
                "border-top-width": "2px",
                "border-top-color": opts["table_border_top_color"],
                "border-bottom-style": "solid",
                "border-bottom-width": "2px",
                "border-bottom-color": opts["table_border_bottom_color"],
            }),
            ("gt_heading", {
                "background-color": opts["table_background_color"],
                "text-align": opts["heading_align"],
                "border-bottom-color": opts["table_background_color"],
            }),
            ("gt_title", {
                "color": opts["table_font_color"],
                "font-size": opts["heading_title_font_size"],
                "font-weight": "initial",
                "padding-top": "4px",
                "padding-bottom": "4px",
            }),
            ("gt_subtitle", {
                "color": opts["table_font_color"],
                "font-size": opts["heading_subtitle_font_size"],
                "font-weight": "initial",
                "padding-top": "0",
                "padding-bottom": "4px",
                "border-bottom-style": "solid",
                "border-bottom-width": "2px",
                "border-bottom-color": opts["heading_border_bottom_color"],
            }),
            ("gt_col_heading", {
                "color": opts["table_font_color"],
                "background-color": opts["table_background_color"],
                "font-weight": opts["column_labels_font_weight"],
                "vertical-align": "bottom",
                "padding": "5px",
                "overflow-x": "hidden",
                "border-bottom-style": "solid",
                "border-bottom-width": "2px",
                "border-bottom-color": opts["column_labels_border_bottom_color"],
            }),
            ("gt_group_heading", {
                "padding": opts["data_row_padding"],
                "color": opts["table_font_color"],
                "background-color": opts["row_group_background_color"],
                "font-weight": opts["row_group_font_weight"],
                "vertical-align": "middle",
                "border-top-style": "solid",
                "border-top-width": "2px",
                "border-top-color": "#D3D3D3",
                "border-bottom-style": "solid",
                "border-bottom-width": "2px",
                "border-bottom-color": "#D3D3D3",
            }),
            ("gt_row", {
                "padding": opts["data_row_padding"],
                "margin": "10px",
                "vertical-align": "middle",
                "border-top-style": "solid",
                "border-top-width": "1px",
                "border-top-color": "#D3D3D3",
            }),
            ("gt_stub", {
                "border-right-style": "solid",
                "border-right-width": "2px",
                "border-right-color": "#D3D3D3",
                "padding-left": "12px",
            }),
            ("gt_summary_row", {
                "color": opts["table_font_color"],
                "background-color": opts["summary_row_background_color"],
                "text-transform": "inherit",
            }),
            ("gt_grand_summary_row", {
                "color": opts["table_font_color"],
                "background-color": opts["grand_summary_row_background_color"],
                "text-transform": "inherit",
                "border-top-style": "double",
                "border-top-width": "6px",
            }),
            ("gt_sourcenote", {
                "font-size": opts["source_notes_font_size"],
                "padding": "4px",
            }),
            ("gt_footnote", {
                "font-size": opts["footnotes_font_size"],
                "padding": "4px",
            }),
            ("gt_footnote_marks", {
                "font-style": "italic",
                "font-size": "65%",
            }),
            ("gt_left", {"text-align": "left"}),
            ("gt_center", {"text-align": "center"}),
            ("gt_right", {
                "text-align": "right",
                "font-variant-numeric": "tabular-nums",
            }),
        ]

    @classmethod
    def scoped_css(cls, built: BuiltTable) -> str:
        """The rule set with every selector scoped to `#{table_id}`."""
        blocks = []
        for class_name, declarations in cls.css_rules(built):
            body = "".join(f"  {prop}: {value};\n" for prop, value in declarations.items())
            blocks.append(f"#{built.table_id} .{class_name} {{\n{body}}}\n")
        return "\n".join(blocks)

    # ====== Output shapes ======

    def render(self, table: Table, inline_css: bool = True, **options: Any) -> str:
        """In-memory HTML: inline-CSS `<table>` or linked `<div>` fragment."""
        built = self.build(table)
        return self._render_fragment(built, inline_css=inline_css)

    def _render_fragment(self, built: BuiltTable, inline_css: bool, embed_style: bool = True) -> str:
        table_html = self.compose(built)
        if inline_css:
            return inline_styles(table_html, self.css_rules(built))
        style = f"<style>\n{self.scoped_css(built)}</style>\n" if embed_style else ""
        return (
            f'<div id="{built.table_id}" style="overflow-x:auto;overflow-y:auto;width:auto;height:auto;">\n'
            f"{style}{table_html}</div>"
        )

    def render_document(
        self,
        table: Table,
        inline_css: bool = False,
        background: Optional[str] = None,
        stylesheet_href: Optional[str] = None,
    ) -> str:
        """Full HTML5 document around the table fragment.

        With `stylesheet_href` (linked mode only) the rules are not embedded;
        the document links the stylesheet instead."""
        built = self.build(table)
        return self._wrap_document(built, inline_css, background, stylesheet_href)

    def _wrap_document(
        self,
        built: BuiltTable,
        inline_css: bool,
        background: Optional[str],
        stylesheet_href: Optional[str],
    ) -> str:
        background = background or config.settings.HTML_BACKGROUND
        linked = stylesheet_href is not None and not inline_css
        fragment = self._render_fragment(built, inline_css=inline_css, embed_style=not linked)
        link = f'<link href="{stylesheet_href}" rel="stylesheet" />\n' if linked else ""
        return (
            "<!DOCTYPE html>\n"
            "<html>\n"
            "<head>\n"
            '<meta charset="utf-8"/>\n'
            f"{link}"
            "</head>\n"
            f'<body style="background-color:{background};">\n'
            f"{fragment}\n"
            "</body>\n"
            "</html>\n"
        )

    def save(
        self,
        table: Table,
        target: Path,
        inline_css: bool = False,
        background: Optional[str] = None,
        libdir: Optional[str] = None,
    ) -> Path:
        """Write a full HTML document to `target`.

        Parameters:
            inline_css: inline the rule set instead of a scoped `<style>` block.
            background: body background colour (settings.HTML_BACKGROUND by default).
            libdir: directory, relative to `target`, that receives the stylesheet
                as `{table_id}.css`; the document then links it."""
        target = Path(target)
        built = self.build(table)
        encoding = config.settings.OUTPUT_ENCODING
        atomic = config.settings.ATOMIC_WRITES

        stylesheet_href = None
        if libdir is not None:
            if inline_css:
                logger.debug("libdir is ignored when CSS is inlined")
            else:
                css_path = target.parent / libdir / f"{built.table_id}.css"
                write_text_atomic(css_path, self.scoped_css(built), encoding=encoding, atomic=atomic)
                stylesheet_href = f"{Path(libdir).as_posix()}/{built.table_id}.css"
                logger.info(f"✓ Stylesheet written: {css_path}")

        document = self._wrap_document(built, inline_css, background, stylesheet_href)
        write_text_atomic(target, document, encoding=encoding, atomic=atomic)
        logger.info(f"✓ html file written: {target}")
        return target


__all__ = ["HTMLRenderer"]
