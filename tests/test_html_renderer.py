"""Test HTML export in TableEngine/renderers/html_renderer.py and css_inliner.py

Covers:
1. Inline-CSS fragments (no <style> block, rules copied to style attributes)
2. Linked-CSS fragments and full documents (background, libdir)
3. Re-parsing the output with lxml"""

import sys
from pathlib import Path

from lxml import html as lxml_html

# Add project root directory to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from TableEngine import render_html, save
from TableEngine.ir import build_data
from TableEngine.renderers import HTMLRenderer
from TableEngine.renderers.css_inliner import inline_styles, parse_style
from tests import table_test_data as test_data


class TestInlineCss:
    """Test render_html(inline_css=True)"""

    def setup_method(self):
        self.table = test_data.sales_table()
        self.output = render_html(self.table)
        self.root = lxml_html.fragment_fromstring(self.output)
        self.rules = HTMLRenderer.css_rules(build_data(self.table, "html"))

    def test_bare_table_without_style_block(self):
        assert self.root.tag == "table"
        assert "<style" not in self.output
        assert self.output.startswith("<table")

    def test_styled_elements_carry_their_rules(self):
        for class_name, declarations in self.rules:
            elements = self.root.find_class(class_name)
            for element in elements:
                style = parse_style(element.get("style"))
                assert style, f"{class_name} element has no style"
                for prop in declarations:
                    assert prop in style

    def test_alignment_rule_applied(self):
        cell = self.root.find_class("gt_right")[0]
        assert parse_style(cell.get("style"))["text-align"] == "right"

    def test_options_flow_into_styles(self):
        table = test_data.sales_table().tab_options(table_font_color="#112233")
        root = lxml_html.fragment_fromstring(render_html(table))
        assert parse_style(root.get("style"))["color"] == "#112233"

    def test_existing_inline_style_wins(self):
        markup = '<table class="gt_table"><tr><td class="gt_row" style="padding: 1px">a</td></tr></table>'
        result = inline_styles(markup, [("gt_row", {"padding": "8px", "margin": "10px"})])
        cell = lxml_html.fragment_fromstring(result).find_class("gt_row")[0]
        assert parse_style(cell.get("style")) == {"padding": "1px", "margin": "10px"}


class TestLinkedCss:
    """Test render_html(inline_css=False) and the document writer"""

    def test_linked_fragment_scopes_rules(self):
        output = render_html(test_data.sales_table(), inline_css=False)
        assert output.startswith('<div id="sales"')
        assert output.index("<style>") < output.index("<table")
        assert "#sales .gt_table {" in output
        root = lxml_html.fragment_fromstring(output)
        assert root.find(".//table") is not None

    def test_fragment_order(self):
        output = render_html(test_data.sentinel_table(), inline_css=False)
        positions = [
            output.index("<table"),
            output.index(test_data.SENTINEL_TITLE),
            output.index(test_data.SENTINEL_LABEL),
            output.index(test_data.SENTINEL_CELL),
            output.index(test_data.SENTINEL_SOURCE),
            output.index(test_data.SENTINEL_FOOTNOTE),
            output.index("</table>"),
        ]
        assert positions == sorted(positions)

    def test_round_trip_single_cell(self, tmp_path):
        target = save(test_data.single_cell_table(), "t.html", path=str(tmp_path))
        tree = lxml_html.parse(str(target))
        cells = [td for td in tree.iter("td") if td.text_content() == "x"]
        assert len(cells) == 1

    def test_document_background(self, tmp_path):
        target = save(test_data.single_cell_table(), "t.html", path=str(tmp_path), background="#fafafa")
        text = target.read_text(encoding="utf-8")
        assert text.startswith("<!DOCTYPE html>")
        assert '<body style="background-color:#fafafa;">' in text
        assert "<style>" in text

    def test_document_with_inline_css(self, tmp_path):
        target = save(test_data.single_cell_table(), "t.htm", path=str(tmp_path), inline_css=True)
        text = target.read_text(encoding="utf-8")
        assert "<style>" not in text
        assert 'class="gt_table" style="' in text

    def test_libdir_writes_linked_stylesheet(self, tmp_path):
        target = save(test_data.single_cell_table(), "t.html", path=str(tmp_path), libdir="lib")
        css_file = tmp_path / "lib" / "single.css"
        assert css_file.exists()
        assert "#single .gt_table" in css_file.read_text(encoding="utf-8")
        text = target.read_text(encoding="utf-8")
        assert '<link href="lib/single.css" rel="stylesheet" />' in text
        assert "<style>" not in text

    def test_escaped_text_survives_parsing(self):
        root = lxml_html.fragment_fromstring(render_html(test_data.special_char_table()))
        texts = [td.text_content() for td in root.iter("td")]
        assert "R&D <lab>" in texts
