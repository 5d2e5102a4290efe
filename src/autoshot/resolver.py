# resolver.py
import abc
import logging
from typing import Dict, List, Optional

from .api_parser import SymbolTable
from .symbols import Annotation, ClassDeclaration, FunctionDeclaration, SourceFile, TypeReference
from .values import LiteralValue

logger = logging.getLogger(__name__)


class Resolver(abc.ABC):
    """Read-only view of the declaration graph for one processing round."""

    @abc.abstractmethod
    def get_new_files(self) -> List[SourceFile]:
        """Files that are new or changed since the previous round."""
        pass

    @abc.abstractmethod
    def get_all_files(self) -> List[SourceFile]:
        pass

    @abc.abstractmethod
    def get_class_declaration(self, qualified_name) -> Optional[ClassDeclaration]:
        pass

    @abc.abstractmethod
    def resolve_annotation_type(self, annotation: Annotation) -> Optional[ClassDeclaration]:
        """
        Returns the declaration of an annotation's type, or None when the
        type cannot be resolved.
        """
        pass

    @abc.abstractmethod
    def resolve_type(self, type_ref: TypeReference) -> Optional[ClassDeclaration]:
        pass

    def get_symbols_with_annotation(self, qualified_name) -> list:
        """Top-level declarations in any source file annotated directly with `qualified_name`."""
        symbols = []
        for source_file in self.get_all_files():
            for decl in source_file.declarations:
                for annotation in decl.annotations:
                    resolved = self.resolve_annotation_type(annotation)
                    if resolved is not None and resolved.qualified_name == qualified_name:
                        symbols.append(decl)
                        break
        return symbols

    def default_arguments(self, annotation: Annotation) -> Dict[str, LiteralValue]:
        """Declared defaults of the annotation's type, by argument name."""
        if annotation.default_arguments is not None:
            return {arg.name: arg.value for arg in annotation.default_arguments if arg.name}
        declaration = self.resolve_annotation_type(annotation)
        if declaration is None:
            return {}
        return declaration.default_arguments()

    def validate(self, function: FunctionDeclaration):
        """False if the function is flagged invalid or references an unresolved type."""
        if not function.valid:
            return False
        for param in function.parameters:
            if not self.type_resolves(param.type):
                return False
        if function.return_type is not None and not self.type_resolves(function.return_type):
            return False
        return True

    def type_resolves(self, type_ref: TypeReference):
        """True when resolve_type() finds the type and each of its generic arguments."""
        pending = [type_ref]
        while pending:
            current = pending.pop()
            if self.resolve_type(current) is None:
                return False
            pending.extend(arg.type for arg in current.arguments if not arg.is_star)
        return True


class SymbolTableResolver(Resolver):
    """Resolver backed by a SymbolTable loaded from a symbol dump."""

    def __init__(self, table: SymbolTable):
        self.table = table
        self._library_stubs: Dict[str, ClassDeclaration] = {}

    def get_new_files(self):
        return self.table.new_files()

    def get_all_files(self):
        return list(self.table.files)

    def get_class_declaration(self, qualified_name):
        if not qualified_name:
            return None
        declaration = self.table.classes.get(qualified_name)
        if declaration is not None:
            return declaration
        # Library classes the dump does not describe still resolve, without metadata
        stub = self._library_stubs.get(qualified_name)
        if stub is None:
            stub = ClassDeclaration(qualified_name=qualified_name)
            self._library_stubs[qualified_name] = stub
            logger.debug(f"Resolved '{qualified_name}' to a library declaration without metadata.")
        return stub

    def resolve_annotation_type(self, annotation):
        return self.get_class_declaration(annotation.type_name)

    def resolve_type(self, type_ref):
        if type_ref is None or type_ref.is_error:
            return None
        return self.get_class_declaration(type_ref.qualified_name)
