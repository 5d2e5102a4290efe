# symbols.py
"""
In-memory declaration graph handed over by the compiler front-end.

The processor only ever reads these objects; it never mutates them.
"""
import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .type_utils import simple_name
from .values import LiteralValue


class Visibility(enum.Enum):
    PUBLIC = "public"
    INTERNAL = "internal"
    PROTECTED = "protected"
    PRIVATE = "private"
    JAVA_PACKAGE = "java_package"
    LOCAL = "local"


class Origin(enum.Enum):
    KOTLIN = "KOTLIN"
    JAVA = "JAVA"
    KOTLIN_LIB = "KOTLIN_LIB"
    JAVA_LIB = "JAVA_LIB"
    SYNTHETIC = "SYNTHETIC"


# First-party sources; everything else is compiled or generated by the toolchain
SOURCE_ORIGINS = (Origin.KOTLIN, Origin.JAVA)


class ClassKind(enum.Enum):
    CLASS = "class"
    INTERFACE = "interface"
    OBJECT = "object"
    ENUM_CLASS = "enum_class"
    ANNOTATION_CLASS = "annotation_class"


@dataclass
class TypeArgument:
    type: Optional["TypeReference"] = None
    variance: str = "" # "", "in" or "out"
    is_star: bool = False


@dataclass
class TypeReference:
    qualified_name: Optional[str]
    arguments: List[TypeArgument] = field(default_factory=list)
    nullable: bool = False
    is_error: bool = False


@dataclass
class ValueArgument:
    name: Optional[str]
    value: LiteralValue


@dataclass
class Annotation:
    type_name: Optional[str] # None when the annotation type could not be resolved
    short_name: str = ""
    arguments: List[ValueArgument] = field(default_factory=list)
    default_arguments: Optional[List[ValueArgument]] = None

    def __post_init__(self):
        if not self.short_name:
            self.short_name = simple_name(self.type_name)


@dataclass
class Parameter:
    name: str
    type: TypeReference
    annotations: List[Annotation] = field(default_factory=list)
    default: Optional[LiteralValue] = None


@dataclass
class ClassDeclaration:
    qualified_name: Optional[str]
    kind: ClassKind = ClassKind.CLASS
    annotations: List[Annotation] = field(default_factory=list)
    parameters: List[Parameter] = field(default_factory=list)
    origin: Origin = Origin.KOTLIN_LIB
    file_path: Optional[str] = None

    @property
    def simple_name(self):
        return simple_name(self.qualified_name)

    def default_arguments(self) -> Dict[str, LiteralValue]:
        """Declared defaults of an annotation class, by parameter name."""
        return {p.name: p.default for p in self.parameters if p.default is not None}


@dataclass
class FunctionDeclaration:
    simple_name: str
    package_name: str = ""
    visibility: Visibility = Visibility.PUBLIC
    annotations: List[Annotation] = field(default_factory=list)
    parameters: List[Parameter] = field(default_factory=list)
    return_type: Optional[TypeReference] = None
    origin: Origin = Origin.KOTLIN
    valid: bool = True
    file_path: Optional[str] = None

    @property
    def qualified_name(self):
        if self.package_name:
            return f"{self.package_name}.{self.simple_name}"
        return self.simple_name

    @property
    def is_private(self):
        return self.visibility is Visibility.PRIVATE

    @property
    def is_internal(self):
        return self.visibility is Visibility.INTERNAL


@dataclass
class SourceFile:
    file_path: str
    package_name: str = ""
    origin: Origin = Origin.KOTLIN
    declarations: list = field(default_factory=list)

    @property
    def file_name(self):
        return self.file_path.replace("\\", "/").rsplit("/", 1)[-1]

    def functions(self) -> List[FunctionDeclaration]:
        return [d for d in self.declarations if isinstance(d, FunctionDeclaration)]

    def classes(self) -> List[ClassDeclaration]:
        return [d for d in self.declarations if isinstance(d, ClassDeclaration)]
