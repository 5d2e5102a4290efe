# api_parser.py
"""Loads a JSON symbol dump into a SymbolTable."""
import json
import logging
from typing import Dict, List, Optional

from . import type_utils
from .symbols import (Annotation, ClassDeclaration, ClassKind, FunctionDeclaration, Origin,
                      Parameter, SourceFile, TypeArgument, TypeReference, ValueArgument,
                      Visibility)
from .values import AnnotationValue, ListValue, OtherValue, StringValue, TypeValue

logger = logging.getLogger(__name__)

FUNCTION_KIND = "function"
DEFAULT_VISIBILITY = Visibility.PUBLIC


class SymbolDumpError(ValueError):
    """Raised for structurally malformed symbol dump entries."""


class SymbolTable:
    """All declarations known for one processing run."""

    def __init__(self, files: List[SourceFile], library_classes: List[ClassDeclaration] = (),
                 new_file_paths=None):
        self.files = list(files)
        self.classes: Dict[str, ClassDeclaration] = {}
        for decl in library_classes:
            if decl.qualified_name:
                self.classes[decl.qualified_name] = decl
        # Source declarations win over library entries of the same name
        for source_file in self.files:
            for decl in source_file.classes():
                if decl.qualified_name:
                    self.classes[decl.qualified_name] = decl
        self.new_file_paths = set(new_file_paths) if new_file_paths is not None else None

    def new_files(self) -> List[SourceFile]:
        if self.new_file_paths is None:
            return list(self.files)
        return [f for f in self.files if f.file_path in self.new_file_paths]


def _origin_for(path, raw_origin):
    if raw_origin:
        try:
            return Origin(raw_origin.upper())
        except ValueError:
            raise SymbolDumpError(f"Unknown origin '{raw_origin}' for {path}")
    return Origin.JAVA if path.lower().endswith(".java") else Origin.KOTLIN


def parse_type(type_obj) -> Optional[TypeReference]:
    """Accepts the compact string notation or the object form."""
    if type_obj is None:
        return None
    if isinstance(type_obj, str):
        try:
            parsed = type_utils.parse_type_string(type_obj)
        except ValueError as e:
            raise SymbolDumpError(str(e))
        return _type_from_parsed(parsed)
    if not isinstance(type_obj, dict):
        raise SymbolDumpError(f"Expected type string or object, got {type(type_obj).__name__}")

    arguments = []
    for arg in type_obj.get("arguments", []):
        if arg == type_utils.STAR_PROJECTION:
            arguments.append(TypeArgument(is_star=True))
        elif isinstance(arg, dict) and "variance" in arg:
            arguments.append(TypeArgument(type=parse_type(arg.get("type")), variance=arg["variance"]))
        else:
            arguments.append(TypeArgument(type=parse_type(arg)))

    return TypeReference(
        qualified_name=type_obj.get("name"),
        arguments=arguments,
        nullable=bool(type_obj.get("nullable", False)),
        is_error=bool(type_obj.get("error", False)),
    )


def _type_from_parsed(parsed):
    name, args, nullable = parsed
    arguments = []
    for arg in args:
        if arg == type_utils.STAR_PROJECTION:
            arguments.append(TypeArgument(is_star=True))
        else:
            variance, inner = arg
            arguments.append(TypeArgument(type=_type_from_parsed(inner), variance=variance))
    return TypeReference(qualified_name=name, arguments=arguments, nullable=nullable)


def parse_value(raw):
    """Maps a JSON value onto the literal value variants."""
    if isinstance(raw, str):
        return StringValue(raw)
    if isinstance(raw, list):
        return ListValue(tuple(parse_value(item) for item in raw))
    if isinstance(raw, dict):
        if "class" in raw:
            return TypeValue(raw["class"])
        if "annotation" in raw:
            return AnnotationValue(parse_annotation(raw["annotation"]))
        if "source" in raw:
            return OtherValue(raw.get("value"), source=raw["source"])
        raise SymbolDumpError(f"Unrecognised value object with keys {sorted(raw)}")
    if raw is None or isinstance(raw, (bool, int, float)):
        return OtherValue(raw)
    raise SymbolDumpError(f"Unsupported value type: {type(raw).__name__}")


def _parse_arguments(raw_args):
    if raw_args is None:
        return []
    if isinstance(raw_args, dict):
        return [ValueArgument(name, parse_value(value)) for name, value in raw_args.items()]
    arguments = []
    for arg in raw_args:
        if not isinstance(arg, dict) or "value" not in arg:
            raise SymbolDumpError(f"Argument entries need a 'value': {arg!r}")
        arguments.append(ValueArgument(arg.get("name"), parse_value(arg["value"])))
    return arguments


def parse_annotation(anno_obj) -> Annotation:
    if isinstance(anno_obj, str):
        return Annotation(type_name=anno_obj)
    if not isinstance(anno_obj, dict):
        raise SymbolDumpError(f"Expected annotation object, got {type(anno_obj).__name__}")
    defaults = anno_obj.get("defaults")
    return Annotation(
        type_name=anno_obj.get("type"),
        short_name=anno_obj.get("shortName", ""),
        arguments=_parse_arguments(anno_obj.get("arguments")),
        default_arguments=_parse_arguments(defaults) if defaults is not None else None,
    )


def _parse_annotations(owner):
    return [parse_annotation(a) for a in owner.get("annotations", [])]


def _parse_parameter(param_obj):
    name = param_obj.get("name")
    if not name:
        raise SymbolDumpError(f"Parameter without a name: {param_obj!r}")
    return Parameter(
        name=name,
        type=parse_type(param_obj.get("type")) or TypeReference(None, is_error=True),
        annotations=_parse_annotations(param_obj),
        default=parse_value(param_obj["default"]) if "default" in param_obj else None,
    )


def _parse_visibility(raw):
    if raw is None:
        return DEFAULT_VISIBILITY
    try:
        return Visibility(raw.lower())
    except ValueError:
        raise SymbolDumpError(f"Unknown visibility '{raw}'")


def _parse_function(decl_obj, package_name, file_path, file_origin):
    name = decl_obj.get("name")
    if not name:
        raise SymbolDumpError(f"Function without a name in {file_path}")
    origin = _origin_for(file_path, decl_obj["origin"]) if decl_obj.get("origin") else file_origin
    return FunctionDeclaration(
        simple_name=name,
        package_name=package_name,
        visibility=_parse_visibility(decl_obj.get("visibility")),
        annotations=_parse_annotations(decl_obj),
        parameters=[_parse_parameter(p) for p in decl_obj.get("parameters", [])],
        return_type=parse_type(decl_obj.get("returnType")),
        origin=origin,
        valid=bool(decl_obj.get("valid", True)),
        file_path=file_path,
    )


def _parse_class(decl_obj, package_name=None, file_path=None, origin=Origin.KOTLIN_LIB):
    qualified_name = decl_obj.get("qualifiedName")
    if not qualified_name and decl_obj.get("name"):
        qualified_name = f"{package_name}.{decl_obj['name']}" if package_name else decl_obj["name"]
    try:
        kind = ClassKind(decl_obj.get("kind", ClassKind.CLASS.value))
    except ValueError:
        raise SymbolDumpError(f"Unknown declaration kind '{decl_obj.get('kind')}'")
    return ClassDeclaration(
        qualified_name=qualified_name,
        kind=kind,
        annotations=_parse_annotations(decl_obj),
        parameters=[_parse_parameter(p) for p in decl_obj.get("parameters", [])],
        origin=origin,
        file_path=file_path,
    )


def parse_source_file(file_obj) -> SourceFile:
    path = file_obj.get("path")
    if not path:
        raise SymbolDumpError("Source file entry without a 'path'")
    package_name = file_obj.get("package", "")
    origin = _origin_for(path, file_obj.get("origin"))

    declarations = []
    for decl_obj in file_obj.get("declarations", []):
        if decl_obj.get("kind", FUNCTION_KIND) == FUNCTION_KIND:
            declarations.append(_parse_function(decl_obj, package_name, path, origin))
        else:
            declarations.append(_parse_class(decl_obj, package_name, path, origin))
    return SourceFile(file_path=path, package_name=package_name, origin=origin, declarations=declarations)


def parse_symbols(dump) -> SymbolTable:
    """Builds a SymbolTable from an already-decoded dump. Raises SymbolDumpError."""
    if not isinstance(dump, dict):
        raise SymbolDumpError(f"Symbol dump root must be an object, got {type(dump).__name__}")
    files = [parse_source_file(f) for f in dump.get("files", [])]
    library_classes = [_parse_class(c) for c in dump.get("classes", [])]
    table = SymbolTable(files, library_classes, new_file_paths=dump.get("newFiles"))

    function_count = sum(len(f.functions()) for f in files)
    logger.info(f"Loaded {len(files)} source files, {function_count} functions, {len(table.classes)} classes.")
    return table


def load_symbol_table(dump_filepath) -> Optional[SymbolTable]:
    """Loads and parses the symbol dump, logging and returning None on failure."""
    try:
        with open(dump_filepath, 'r', encoding='utf-8') as f:
            dump = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load or parse symbol dump {dump_filepath}: {e}")
        return None

    try:
        return parse_symbols(dump)
    except SymbolDumpError as e:
        logger.error(f"Malformed symbol dump {dump_filepath}: {e}")
        return None
