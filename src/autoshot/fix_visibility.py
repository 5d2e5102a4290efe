# fix_visibility.py
"""
Rewrites `private fun <name>` to `internal fun <name>` for every preview
listed in the visibility report, then deletes the report.
"""
import logging
import re
from collections import OrderedDict
from pathlib import Path

from .unified_processor.auditor import RECORD_SEPARATOR, read_report

logger = logging.getLogger(__name__)


def _group_by_file(records):
    grouped = OrderedDict()
    for record in dict.fromkeys(records):
        file_path, sep, function_name = record.rpartition(RECORD_SEPARATOR)
        if not sep or not file_path or not function_name:
            logger.warning(f"Ignoring malformed report line: {record!r}")
            continue
        grouped.setdefault(file_path, []).append(function_name)
    return grouped


def _fix_file(source_path, function_names):
    content = source_path.read_text(encoding='utf-8')
    fixed = 0
    for name in function_names:
        pattern = re.compile(r"private(\s+fun\s+" + re.escape(name) + r")\b")
        content, count = pattern.subn(r"internal\1", content)
        if count:
            fixed += 1
    if fixed:
        source_path.write_text(content, encoding='utf-8')
        print(f"Fixed visibility in: {source_path.name}")
    return fixed


def fix_visibility(report_path, root=None) -> int:
    """Applies the report. Returns the number of functions made internal."""
    report = Path(report_path)
    if not report.exists():
        print("No private previews detected.")
        return 0

    records = read_report(report)
    if not records:
        report.unlink()
        print("No private previews detected.")
        return 0

    base = Path(root) if root is not None else None
    total_fixed = 0
    for file_path, function_names in _group_by_file(records).items():
        source_path = Path(file_path)
        if base is not None and not source_path.is_absolute():
            source_path = base / source_path
        if not source_path.exists():
            logger.warning(f"Reported file no longer exists: {source_path}")
            continue
        total_fixed += _fix_file(source_path, function_names)

    report.unlink()
    print(f"Fixed {total_fixed} private @Preview functions.")
    return total_fixed
