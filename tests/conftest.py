import json
import sys
from pathlib import Path

import pytest

# Add src to sys.path so we can import autoshot without installing it
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from autoshot.api_parser import parse_symbols  # noqa: E402
from autoshot.config import PREVIEW, PREVIEW_PARAMETER  # noqa: E402
from autoshot.resolver import SymbolTableResolver  # noqa: E402


def preview_function(name, visibility="public", annotations=None, **extra):
    """A function declaration entry annotated with @Preview unless told otherwise."""
    entry = {
        "kind": "function",
        "name": name,
        "visibility": visibility,
        "annotations": annotations if annotations is not None else [{"type": PREVIEW}],
    }
    entry.update(extra)
    return entry


@pytest.fixture
def make_resolver():
    """Build a resolver straight from a symbol dump dict."""
    def _make(dump):
        return SymbolTableResolver(parse_symbols(dump))
    return _make


@pytest.fixture
def write_dump(tmp_path: Path):
    """Write a symbol dump dict to a JSON file in tmp_path."""
    def _write(dump, name="symbols.json"):
        path = tmp_path / name
        path.write_text(json.dumps(dump), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def sample_dump():
    """Sample.kt with one public and one private preview."""
    return {
        "files": [
            {
                "path": "Sample.kt",
                "package": "com.example",
                "declarations": [
                    preview_function("Greeting"),
                    preview_function("hidden", visibility="private"),
                ],
            }
        ]
    }


@pytest.fixture
def provider_dump():
    """A preview taking its values from a PreviewParameterProvider."""
    return {
        "files": [
            {
                "path": "app/src/main/kotlin/com/example/Items.kt",
                "package": "com.example",
                "declarations": [
                    preview_function(
                        "ItemRow",
                        parameters=[{
                            "name": "item",
                            "type": "kotlin.String",
                            "annotations": [{
                                "type": PREVIEW_PARAMETER,
                                "arguments": {"provider": {"class": "com.example.FooProvider"}, "limit": 2},
                            }],
                        }],
                    ),
                ],
            }
        ],
        "classes": [
            {
                "qualifiedName": PREVIEW_PARAMETER,
                "kind": "annotation_class",
                "parameters": [
                    {"name": "provider", "type": "kotlin.reflect.KClass<*>"},
                    {"name": "limit", "type": "kotlin.Int", "default": 2147483647},
                ],
            }
        ],
    }

