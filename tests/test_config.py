"""
Tests for autoshot.config

Test Coverage:
- ProcessorConfig defaults and path exclusion
- ProcessorConfig.from_options() overrides
"""
import pytest

from autoshot.config import (DEFAULT_EXCLUDED_PATHS, DEFAULT_REPORT_PATH, OPTION_EXCLUDED_PATHS,
                             OPTION_REPORT_PATH, OPTION_SUFFIX, TEST_SUFFIX, ProcessorConfig)


class TestProcessorConfig:
    """Defaults and exclusion matching."""

    def test_defaults(self):
        config = ProcessorConfig()
        assert config.excluded_paths() == DEFAULT_EXCLUDED_PATHS
        assert config.report_path == DEFAULT_REPORT_PATH
        assert config.suffix == TEST_SUFFIX

    def test_excluded_paths_when_mutated_then_config_unchanged(self):
        config = ProcessorConfig()
        config.excluded_paths().append("/extra/")
        assert "/extra/" not in config.excluded_paths()

    @pytest.mark.parametrize("path, expected", [
        ("app/src/main/kotlin/Sample.kt", False),
        ("app/build/generated/ksp/Sample.kt", True),
        ("app/src/Test/kotlin/Sample.kt", True),
        ("app\\src\\androidTest\\Sample.kt", True),
        ("app/src/screenshotTest/kotlin/Sample.kt", True),
        ("app/src/main/kotlin/TestUtils.kt", False),
    ])
    def test_is_excluded(self, path, expected):
        assert ProcessorConfig().is_excluded(path) is expected


class TestFromOptions:
    """Processor options override the defaults."""

    def test_from_options_when_empty_then_defaults(self):
        config = ProcessorConfig.from_options(None)
        assert config.excluded_paths() == DEFAULT_EXCLUDED_PATHS

    def test_from_options_when_excluded_paths_given_then_replaced(self):
        # Act
        config = ProcessorConfig.from_options({OPTION_EXCLUDED_PATHS: " /legacy/ , ,/demo/"})

        # Assert
        assert config.excluded_paths() == ["/legacy/", "/demo/"]
        assert not config.is_excluded("app/src/test/Sample.kt")
        assert config.is_excluded("app/src/demo/Sample.kt")

    def test_from_options_when_excluded_paths_blank_then_nothing_excluded(self):
        config = ProcessorConfig.from_options({OPTION_EXCLUDED_PATHS: ""})
        assert config.excluded_paths() == []

    def test_from_options_when_report_and_suffix_given_then_used(self):
        # Act
        config = ProcessorConfig.from_options({OPTION_REPORT_PATH: "out/report.txt", OPTION_SUFFIX: "Shot"})

        # Assert
        assert config.report_path == "out/report.txt"
        assert config.suffix == "Shot"
