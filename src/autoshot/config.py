# config.py
import logging
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# Source paths containing any of these fragments are never scanned (case-insensitive)
DEFAULT_EXCLUDED_PATHS = ["/generated/", "/test/", "/androidTest/", "/screenshotTest/"]

PREVIEW = "androidx.compose.ui.tooling.preview.Preview"
PREVIEW_PARAMETER = "androidx.compose.ui.tooling.preview.PreviewParameter"
PREVIEW_TEST = "com.android.tools.screenshot.PreviewTest"
COMPOSABLE = "androidx.compose.runtime.Composable"
IGNORE_PREVIEW = "com.fediim.autoshot.annotation.IgnorePreview"

PROVIDER_ARGUMENT = "provider"
TEST_SUFFIX = "ScreenshotTest"
DEFAULT_REPORT_PATH = "build/autoshot/preview_visibility_report.txt"

# Processor option keys (host passes them through as plain strings)
OPTION_EXCLUDED_PATHS = "autoshot.excludedPaths"
OPTION_REPORT_PATH = "autoshot.reportPath"
OPTION_SUFFIX = "autoshot.suffix"


class ProcessorConfig:
    """Settings for one processor instance. Defaults mirror the module constants."""

    def __init__(self, excluded_paths: Optional[List[str]] = None,
                 report_path: str = DEFAULT_REPORT_PATH,
                 suffix: str = TEST_SUFFIX,
                 preview: str = PREVIEW,
                 preview_parameter: str = PREVIEW_PARAMETER,
                 preview_test: str = PREVIEW_TEST,
                 composable: str = COMPOSABLE,
                 ignore_preview: str = IGNORE_PREVIEW):
        self._excluded_paths = list(excluded_paths) if excluded_paths is not None else list(DEFAULT_EXCLUDED_PATHS)
        self.report_path = report_path
        self.suffix = suffix
        self.preview = preview
        self.preview_parameter = preview_parameter
        self.preview_test = preview_test
        self.composable = composable
        self.ignore_preview = ignore_preview

    def excluded_paths(self) -> List[str]:
        return list(self._excluded_paths)

    def is_excluded(self, file_path):
        normalized = file_path.replace("\\", "/").lower()
        return any(fragment.lower() in normalized for fragment in self._excluded_paths)

    @classmethod
    def from_options(cls, options: Optional[Dict[str, str]]):
        """Builds a config from processor options, falling back to defaults."""
        options = options or {}
        excluded_paths = None
        raw_excluded = options.get(OPTION_EXCLUDED_PATHS)
        if raw_excluded is not None:
            excluded_paths = [p.strip() for p in raw_excluded.split(",") if p.strip()]
            logger.debug(f"Excluded paths overridden by options: {excluded_paths}")

        suffix = options.get(OPTION_SUFFIX) or TEST_SUFFIX
        return cls(
            excluded_paths=excluded_paths,
            report_path=options.get(OPTION_REPORT_PATH) or DEFAULT_REPORT_PATH,
            suffix=suffix,
        )
