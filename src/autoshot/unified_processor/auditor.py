# unified_processor/auditor.py
import logging
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = "|"


def format_record(file_path, function_name):
    return f"{file_path}{RECORD_SEPARATOR}{function_name}"


def read_report(report_path) -> List[str]:
    """Non-blank report lines in file order; empty when the report does not exist."""
    path = Path(report_path)
    if not path.exists():
        return []
    with open(path, 'r', encoding='utf-8') as f:
        return [line.strip() for line in f if line.strip()]


class VisibilityAuditor:
    """
    Collects preview functions that are private, and therefore cannot be
    called from a generated test, into a `path|name` report consumed by the
    visibility fixer.
    """

    def __init__(self, report_path):
        self.report_path = Path(report_path)
        self._violations: List[Tuple[str, str]] = []

    def record(self, file_path, function_name):
        self._violations.append((file_path, function_name))
        logger.warning(f"Private preview '{function_name}' in {file_path} cannot be screenshot-tested.")

    @property
    def pending(self) -> List[Tuple[str, str]]:
        return list(self._violations)

    def flush(self) -> Optional[Path]:
        """Merges pending violations into the report (set union) and clears them."""
        if not self._violations:
            return None

        records = dict.fromkeys(read_report(self.report_path))
        before = len(records)
        for file_path, function_name in self._violations:
            records.setdefault(format_record(file_path, function_name))

        self.report_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.report_path, 'w', encoding='utf-8') as f:
            f.write("\n".join(records) + "\n")

        logger.info(f"Visibility report {self.report_path}: {len(records) - before} new, {len(records)} total.")
        self._violations.clear()
        return self.report_path
