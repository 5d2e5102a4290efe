# type_utils.py
import logging
import re

logger = logging.getLogger(__name__)

# Packages Kotlin imports implicitly on the JVM; names from these never need an import line
DEFAULT_IMPORT_PACKAGES = {
    "kotlin", "kotlin.annotation", "kotlin.collections", "kotlin.comparisons",
    "kotlin.io", "kotlin.ranges", "kotlin.sequences", "kotlin.text",
    "kotlin.jvm", "java.lang",
}

# Hard keywords must be backtick-escaped when used as identifiers or package segments
KOTLIN_HARD_KEYWORDS = {
    "as", "break", "class", "continue", "do", "else", "false", "for", "fun", "if",
    "in", "interface", "is", "null", "object", "package", "return", "super", "this",
    "throw", "true", "try", "typealias", "typeof", "val", "var", "when", "while",
}

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

STAR_PROJECTION = "*"

# Type references inside generated text, resolved once the whole file is known
NAME_REF_DELIMITER = "\x1f"
_NAME_REF_RE = re.compile(NAME_REF_DELIMITER + "([^" + NAME_REF_DELIMITER + "]+)" + NAME_REF_DELIMITER)


def simple_name(qualified_name):
    """'androidx.compose.runtime.Composable' -> 'Composable'"""
    if not qualified_name:
        return ""
    return qualified_name.rsplit(".", 1)[-1]


def is_implicit_import(qualified_name):
    """True when the name lives in a package Kotlin imports by default."""
    for package in DEFAULT_IMPORT_PACKAGES:
        prefix = package + "."
        if not qualified_name.startswith(prefix):
            continue
        # 'kotlin.collections.List' matches 'kotlin.collections', not 'kotlin'
        next_segment = qualified_name[len(prefix):].split(".", 1)[0]
        if next_segment[:1].isupper():
            return True
    return False


def escape_identifier(name):
    """Backtick-escapes keywords and names that are not plain identifiers."""
    if name.startswith("`") and name.endswith("`"):
        return name
    if name in KOTLIN_HARD_KEYWORDS or not _IDENTIFIER_RE.match(name):
        return f"`{name}`"
    return name


def escape_package(package_name):
    if not package_name:
        return ""
    return ".".join(escape_identifier(segment) for segment in package_name.split("."))


def kotlin_string_literal(text):
    """Quotes a Python string as a Kotlin string literal."""
    escaped = (text.replace("\\", "\\\\")
                   .replace("\"", "\\\"")
                   .replace("$", "\\$")
                   .replace("\n", "\\n")
                   .replace("\r", "\\r")
                   .replace("\t", "\\t"))
    return f"\"{escaped}\""


def base_file_name(file_name):
    """'Sample.kt' -> 'Sample', 'Legacy.java' -> 'Legacy'"""
    name = file_name.replace("\\", "/").rsplit("/", 1)[-1]
    if "." in name:
        return name.rsplit(".", 1)[0]
    return name


def name_ref(qualified_name):
    """Placeholder for a type name whose spelling depends on the rest of the file."""
    return f"{NAME_REF_DELIMITER}{qualified_name}{NAME_REF_DELIMITER}"


def resolve_name_refs(text, qualified=()):
    """
    Replaces name_ref() placeholders in `text`.

    Names listed in `qualified` are written out in full; every other name
    is written by its simple name and expected to be imported.
    """
    def replace(match):
        name = match.group(1)
        if name in qualified:
            return escape_package(name)
        return escape_identifier(simple_name(name))
    return _NAME_REF_RE.sub(replace, text)


def clashing_names(qualified_names):
    """Qualified names sharing their simple name with a different qualified name."""
    by_simple = {}
    for name in qualified_names:
        by_simple.setdefault(simple_name(name), set()).add(name)
    clashes = set()
    for names in by_simple.values():
        if len(names) > 1:
            clashes.update(names)
    return clashes


def type_to_source(type_ref, reference=simple_name):
    """Renders a resolved type with simple names, e.g. 'List<out Item>?'."""
    if type_ref is None:
        return STAR_PROJECTION
    text = reference(type_ref.qualified_name) if type_ref.qualified_name else "Any"
    if type_ref.arguments:
        text += "<" + ", ".join(_argument_to_source(arg, reference) for arg in type_ref.arguments) + ">"
    if type_ref.nullable:
        text += "?"
    return text


def _argument_to_source(argument, reference):
    if argument.is_star:
        return STAR_PROJECTION
    rendered = type_to_source(argument.type, reference)
    return f"{argument.variance} {rendered}" if argument.variance else rendered


def collect_type_imports(type_ref, imports=None):
    """Qualified names a type needs imported, generic arguments included."""
    if imports is None:
        imports = set()
    pending = [type_ref]
    while pending:
        current = pending.pop()
        if current is None:
            continue
        if current.qualified_name:
            imports.add(current.qualified_name)
        for argument in current.arguments:
            if not argument.is_star:
                pending.append(argument.type)
    return imports


def parse_type_string(text):
    """
    Parses the compact type notation used in symbol dumps:
    'kotlin.collections.Map<kotlin.String, out com.example.Item?>?'.
    Returns (qualified_name, arguments, nullable) where each argument is
    (variance, parsed) or STAR_PROJECTION.
    """
    parsed, pos = _parse_type_at(text, 0)
    if text[pos:].strip():
        raise ValueError(f"Unexpected trailing text in type '{text}' at {pos}")
    return parsed


def _parse_type_at(text, pos):
    pos = _skip_ws(text, pos)
    start = pos
    while pos < len(text) and text[pos] not in "<>,?" and not text[pos].isspace():
        pos += 1
    name = text[start:pos]
    if not name:
        raise ValueError(f"Missing type name in '{text}' at {start}")

    arguments = []
    pos = _skip_ws(text, pos)
    if pos < len(text) and text[pos] == "<":
        pos += 1
        while True:
            argument, pos = _parse_argument_at(text, pos)
            arguments.append(argument)
            pos = _skip_ws(text, pos)
            if pos >= len(text):
                raise ValueError(f"Unclosed '<' in type '{text}'")
            if text[pos] == ",":
                pos += 1
                continue
            if text[pos] == ">":
                pos += 1
                break
            raise ValueError(f"Unexpected '{text[pos]}' in type '{text}' at {pos}")

    pos = _skip_ws(text, pos)
    nullable = False
    if pos < len(text) and text[pos] == "?":
        nullable = True
        pos += 1
    return (name, arguments, nullable), pos


def _parse_argument_at(text, pos):
    pos = _skip_ws(text, pos)
    if text.startswith(STAR_PROJECTION, pos):
        return STAR_PROJECTION, pos + 1
    variance = ""
    for keyword in ("in", "out"):
        end = pos + len(keyword)
        if text.startswith(keyword, pos) and end < len(text) and text[end].isspace():
            variance = keyword
            pos = end
            break
    parsed, pos = _parse_type_at(text, pos)
    return (variance, parsed), pos


def _skip_ws(text, pos):
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos
