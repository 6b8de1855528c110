"""Test LaTeX and RTF export

Covers:
1. Fragment order with sentinel markers in every section
2. LaTeX dependency tracking (injected, failing, absent)
3. RTF brace balance, closing brace and render modes
4. Writers produce the in-memory output verbatim"""

import sys
from pathlib import Path

# Add project root directory to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from TableEngine import LatexDependencyTracker, RenderMode, render_latex, render_rtf, save
from TableEngine.ir import LATEX_PACKAGES
from TableEngine.renderers import LatexOutput, RawOutput
from tests import table_test_data as test_data


def _positions(text, markers):
    return [text.index(marker) for marker in markers]


class TestLatexRenderer:
    """Test render_latex"""

    def setup_method(self):
        self.latex = render_latex(test_data.sentinel_table())

    def test_fragment_order(self):
        positions = _positions(
            self.latex,
            [
                "\\begin{longtable}",
                test_data.SENTINEL_TITLE,
                test_data.SENTINEL_LABEL,
                test_data.SENTINEL_CELL,
                "\\end{longtable}",
                test_data.SENTINEL_FOOTNOTE,
                test_data.SENTINEL_SOURCE,
            ],
        )
        assert positions == sorted(positions)

    def test_notes_follow_the_longtable(self):
        end = self.latex.index("\\end{longtable}")
        assert self.latex.index("\\begin{minipage}") > end
        assert self.latex.count("\\begin{minipage}") == 2

    def test_structure(self):
        assert self.latex.startswith("\\captionsetup[table]{labelformat=empty,skip=1pt}\n\\begin{longtable}{l}\n")
        assert "\\caption*{" in self.latex
        assert "\\toprule\n" in self.latex
        assert self.latex.endswith("\\end{minipage}\n")

    def test_stub_and_groups(self):
        latex = render_latex(test_data.sales_table())
        assert "\\begin{longtable}{l|rr}" in latex
        assert "Region & Units & Revenue\\textsuperscript{1} \\\\ " in latex
        assert "\\multicolumn{3}{l}{Q1} \\\\ " in latex
        assert "North & 120 & 1,534.5 \\\\ " in latex

    def test_empty_sections_still_compose(self):
        latex = render_latex(test_data.single_cell_table())
        assert "\\caption*" not in latex
        assert "minipage" not in latex
        assert latex.endswith("\\bottomrule\n\\end{longtable}\n")

    def test_dependencies_without_tracker(self):
        assert isinstance(self.latex, LatexOutput)
        assert self.latex.latex_dependencies == []

    def test_dependencies_with_tracker(self):
        tracker = LatexDependencyTracker({"caption": ["font=small"]})
        latex = render_latex(test_data.single_cell_table(), dependency_tracker=tracker)
        assert [dep.name for dep in latex.latex_dependencies] == list(LATEX_PACKAGES)
        caption = latex.latex_dependencies[2]
        assert caption.to_usepackage() == "\\usepackage[font=small]{caption}"

    def test_failing_tracker_is_skipped(self):
        class BrokenTracker:
            def dependency(self, package):
                raise RuntimeError("no tex distribution")

        latex = render_latex(test_data.single_cell_table(), dependency_tracker=BrokenTracker())
        assert latex.latex_dependencies == []
        assert "\\end{longtable}" in latex

    def test_escaping(self):
        latex = render_latex(test_data.special_char_table())
        assert "Costs \\& \\{margins\\}" in latex
        assert "50\\%" in latex

    def test_writer_is_verbatim(self, tmp_path):
        table = test_data.sales_table()
        target = save(table, "t.tex", path=str(tmp_path))
        assert target.read_text(encoding="utf-8") == str(render_latex(table))


class TestRtfRenderer:
    """Test render_rtf"""

    def setup_method(self):
        self.rtf = render_rtf(test_data.sentinel_table())

    def test_fragment_order(self):
        positions = _positions(
            self.rtf,
            [
                "{\\rtf1",
                test_data.SENTINEL_TITLE,
                test_data.SENTINEL_LABEL,
                test_data.SENTINEL_CELL,
                test_data.SENTINEL_FOOTNOTE,
                test_data.SENTINEL_SOURCE,
            ],
        )
        assert positions == sorted(positions)
        assert self.rtf.rindex("}") > positions[-1]

    def test_single_closing_brace(self):
        assert self.rtf.endswith("}\n")
        assert not self.rtf.rstrip().endswith("}}")

    def test_braces_balance(self):
        for table in (test_data.sales_table(), test_data.special_char_table(), test_data.summary_table()):
            rtf = render_rtf(table).replace("\\\\", "").replace("\\{", "").replace("\\}", "")
            assert rtf.count("{") == rtf.count("}")

    def test_non_ascii_is_unicode_escaped(self):
        rtf = render_rtf(test_data.special_char_table())
        assert "Caf\\u233?" in rtf
        assert rtf.isascii()

    def test_render_modes(self):
        standalone = render_rtf(test_data.single_cell_table())
        embedded = render_rtf(test_data.single_cell_table(), mode=RenderMode.EMBEDDED)
        assert not isinstance(standalone, RawOutput)
        assert isinstance(embedded, RawOutput)
        assert str(embedded) == standalone

    def test_writer_is_verbatim(self, tmp_path):
        table = test_data.summary_table()
        target = save(table, "t.RTF", path=str(tmp_path))
        assert target.read_text(encoding="utf-8") == render_rtf(table)
