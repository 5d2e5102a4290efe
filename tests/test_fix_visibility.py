"""
Tests for autoshot.fix_visibility

Test Coverage:
- fix_visibility(): rewrites listed private previews and removes the report
"""
from autoshot.fix_visibility import fix_visibility


SAMPLE_SOURCE = (
    "@Preview\n"
    "@Composable\n"
    "private fun hidden() {}\n"
    "\n"
    "@Preview\n"
    "@Composable\n"
    "private fun hiddenOther() {}\n"
)


class TestFixVisibility:
    """The report drives in-place source edits."""

    def test_fix_visibility_when_no_report_then_message(self, tmp_path, capsys):
        # Act
        fixed = fix_visibility(tmp_path / "missing.txt")

        # Assert
        assert fixed == 0
        assert "No private previews detected." in capsys.readouterr().out

    def test_fix_visibility_when_report_empty_then_removed(self, tmp_path, capsys):
        # Arrange
        report = tmp_path / "report.txt"
        report.write_text("\n", encoding="utf-8")

        # Act
        fixed = fix_visibility(report)

        # Assert
        assert fixed == 0
        assert not report.exists()
        assert "No private previews detected." in capsys.readouterr().out

    def test_fix_visibility_when_listed_then_only_named_function_changed(self, tmp_path, capsys):
        # Arrange
        source = tmp_path / "Sample.kt"
        source.write_text(SAMPLE_SOURCE, encoding="utf-8")
        report = tmp_path / "report.txt"
        report.write_text("Sample.kt|hidden\n", encoding="utf-8")

        # Act
        fixed = fix_visibility(report, root=tmp_path)

        # Assert
        content = source.read_text(encoding="utf-8")
        assert "internal fun hidden() {}" in content
        assert "private fun hiddenOther() {}" in content
        assert fixed == 1
        assert not report.exists()
        out = capsys.readouterr().out
        assert "Fixed visibility in: Sample.kt" in out
        assert "Fixed 1 private @Preview functions." in out

    def test_fix_visibility_when_absolute_paths_then_root_not_needed(self, tmp_path):
        # Arrange
        source = tmp_path / "Sample.kt"
        source.write_text(SAMPLE_SOURCE, encoding="utf-8")
        report = tmp_path / "report.txt"
        report.write_text(f"{source.as_posix()}|hidden\n{source.as_posix()}|hiddenOther\n", encoding="utf-8")

        # Act
        fixed = fix_visibility(report)

        # Assert
        assert fixed == 2
        assert "private" not in source.read_text(encoding="utf-8")

    def test_fix_visibility_when_file_gone_then_skipped(self, tmp_path, capsys):
        # Arrange
        report = tmp_path / "report.txt"
        report.write_text("Gone.kt|hidden\nmalformed\n", encoding="utf-8")

        # Act
        fixed = fix_visibility(report, root=tmp_path)

        # Assert
        assert fixed == 0
        assert not report.exists()
        assert "Fixed 0 private @Preview functions." in capsys.readouterr().out

    def test_fix_visibility_when_already_internal_then_unchanged(self, tmp_path):
        # Arrange
        source = tmp_path / "Sample.kt"
        source.write_text("internal fun hidden() {}\n", encoding="utf-8")
        report = tmp_path / "report.txt"
        report.write_text("Sample.kt|hidden\n", encoding="utf-8")

        # Act
        fixed = fix_visibility(report, root=tmp_path)

        # Assert
        assert fixed == 0
        assert source.read_text(encoding="utf-8") == "internal fun hidden() {}\n"
