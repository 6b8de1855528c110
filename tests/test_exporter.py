"""Test the public entry points in TableEngine/exporter.py

Covers:
1. save() dispatch, return value and failure without side effects
2. Atomic writes
3. extract_summaries()
4. Table.from_dict() and the export script"""

import json
import os
import stat
import sys
from pathlib import Path

import pytest

# Add project root directory to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from TableEngine import (
    InvalidTableObject,
    MissingExtension,
    NoSummaryDefined,
    Table,
    UnsupportedExtension,
    extract_summaries,
    render_html,
    render_latex,
    render_rtf,
    save,
)
from TableEngine.exporter import RENDERERS, ExportFormat
from TableEngine.ir import GRAND_SUMMARY_ID
from TableEngine.scripts import export_table
from TableEngine.utils import config
from tests import table_test_data as test_data


class TestSave:
    """Test save()"""

    def test_every_format_has_one_renderer(self):
        assert set(RENDERERS) == set(ExportFormat)

    @pytest.mark.parametrize("filename", ["t.html", "t.htm", "t.tex", "t.ltx", "t.rnw", "t.rtf"])
    def test_text_formats_are_written(self, tmp_path, filename):
        target = save(test_data.sales_table(), filename, path=str(tmp_path))
        assert target == tmp_path / filename
        assert target.read_text(encoding="utf-8")

    def test_parent_directories_are_created(self, tmp_path):
        target = save(test_data.sales_table(), "t.tex", path=str(tmp_path / "a" / "b"))
        assert target.exists()

    @pytest.mark.parametrize("filename", ["table", "table.docx", "table.csv"])
    def test_bad_extension_touches_nothing(self, tmp_path, filename):
        with pytest.raises((MissingExtension, UnsupportedExtension)):
            save(test_data.sales_table(), filename, path=str(tmp_path / "out"))
        assert not (tmp_path / "out").exists()

    def test_invalid_table_is_rejected_first(self, tmp_path):
        with pytest.raises(InvalidTableObject):
            save({"col": "x"}, "table.docx", path=str(tmp_path))
        for fn in (render_html, render_latex, render_rtf, extract_summaries):
            with pytest.raises(InvalidTableObject):
                fn([{"col": "x"}])

    def test_atomic_write_leaves_no_temp_files(self, tmp_path):
        save(test_data.sales_table(), "t.rtf", path=str(tmp_path))
        save(test_data.sales_table(), "t.rtf", path=str(tmp_path))
        assert [p.name for p in tmp_path.iterdir()] == ["t.rtf"]

    def test_atomic_write_uses_umask_mode(self, tmp_path):
        old_umask = os.umask(0o022)
        try:
            target = save(test_data.single_cell_table(), "t.html", path=str(tmp_path))
        finally:
            os.umask(old_umask)
        assert stat.S_IMODE(target.stat().st_mode) == 0o644

    def test_atomic_write_keeps_existing_mode(self, tmp_path):
        target = tmp_path / "t.tex"
        target.write_text("old", encoding="utf-8")
        target.chmod(0o640)
        save(test_data.single_cell_table(), "t.tex", path=str(tmp_path))
        assert stat.S_IMODE(target.stat().st_mode) == 0o640
        assert target.read_text(encoding="utf-8") != "old"

    def test_plain_write_when_atomic_disabled(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config.settings, "ATOMIC_WRITES", False)
        target = save(test_data.single_cell_table(), "t.tex", path=str(tmp_path))
        assert target.read_text(encoding="utf-8") == str(render_latex(test_data.single_cell_table()))

    def test_unknown_writer_option(self, tmp_path):
        with pytest.raises(TypeError):
            save(test_data.single_cell_table(), "t.html", path=str(tmp_path), zoom=2)


class TestExtractSummaries:
    """Test extract_summaries()"""

    def test_no_summary_defined(self):
        with pytest.raises(NoSummaryDefined) as excinfo:
            extract_summaries(test_data.sales_table())
        assert "summary_rows()" in str(excinfo.value)

    def test_group_summaries(self):
        summaries = extract_summaries(test_data.summary_table())
        assert list(summaries) == ["Q1", "Q2"]
        for group_id, records in summaries.items():
            assert {record["groupname"] for record in records} == {group_id}
            assert [record["rowname"] for record in records] == ["sum", "mean"]
        assert summaries["Q1"][0]["revenue"] == pytest.approx(2744.5)

    def test_grand_summary(self):
        summaries = extract_summaries(test_data.grand_summary_table())
        assert summaries[GRAND_SUMMARY_ID][0]["units"] == 365

    def test_values_are_unformatted_copies(self):
        table = test_data.summary_table()
        first = extract_summaries(table)
        first["Q1"][0]["units"] = -1
        second = extract_summaries(table)
        assert second["Q1"][0]["units"] == 215
        assert isinstance(second["Q1"][1]["units"], float)

    def test_default_summary_with_text_column(self):
        table = test_data.mixed_summary_table()
        summaries = extract_summaries(table)
        assert summaries["g"][0]["name"] is None
        assert summaries["g"][0]["v"] == pytest.approx(2.0)
        assert "---" in render_html(table)
        assert render_latex(table)
        assert render_rtf(table)


class TestFromDict:
    """Test Table.from_dict()"""

    def setup_method(self):
        self.table = Table.from_dict(test_data.SALES_PAYLOAD)

    def test_configuration(self):
        assert self.table.table_id == "payload"
        assert self.table.heading == {"title": "Regional sales", "subtitle": "First half"}
        assert self.table.column_labels == {"units": "Units"}
        assert len(self.table.footnotes) == 1
        assert self.table.source_notes == ["Source: internal ledger"]

    def test_summary_formatter(self):
        summaries = extract_summaries(self.table)
        assert summaries["Q1"][0]["units"] == 215
        assert "<td" in render_html(self.table)
        assert "215" in render_latex(self.table)
        assert "215.00" not in render_latex(self.table)


class TestExportScript:
    """Test TableEngine/scripts/export_table.py"""

    def setup_method(self):
        self.payload = test_data.SALES_PAYLOAD

    def _write_payload(self, tmp_path):
        json_path = tmp_path / "table.json"
        json_path.write_text(json.dumps(self.payload), encoding="utf-8")
        return json_path

    def test_exports_html(self, tmp_path):
        json_path = self._write_payload(tmp_path)
        code = export_table.main([str(json_path), "out.html", "--path", str(tmp_path), "--inline-css"])
        assert code == 0
        text = (tmp_path / "out.html").read_text(encoding="utf-8")
        assert "<style>" not in text

    def test_bad_extension_fails(self, tmp_path):
        json_path = self._write_payload(tmp_path)
        assert export_table.main([str(json_path), "out.docx", "--path", str(tmp_path)]) == 1
        assert not (tmp_path / "out.docx").exists()

    def test_missing_input_fails(self, tmp_path):
        assert export_table.main([str(tmp_path / "nope.json"), "out.tex"]) == 1
