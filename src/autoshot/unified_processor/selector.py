# unified_processor/selector.py
import logging
from dataclasses import dataclass, field
from typing import List

from ..symbols import SOURCE_ORIGINS, Annotation, FunctionDeclaration, Origin, SourceFile

logger = logging.getLogger(__name__)


@dataclass
class EligibleFunction:
    source_file: SourceFile
    function: FunctionDeclaration
    markers: List[Annotation] = field(default_factory=list) # In declaration order, never empty

    @property
    def qualified_name(self):
        return self.function.qualified_name

    @property
    def visibility(self):
        return self.function.visibility

    @property
    def parameters(self):
        return self.function.parameters


class CandidateSelector:
    """Picks the functions of a source file that get a generated screenshot test."""

    def __init__(self, resolver, classifier, config, auditor=None):
        self.resolver = resolver
        self.classifier = classifier
        self.config = config
        self.auditor = auditor
        self.deferred: List[FunctionDeclaration] = []

    def accepts(self, source_file: SourceFile):
        if source_file.origin not in SOURCE_ORIGINS:
            logger.debug(f"Skipping {source_file.file_path}: origin {source_file.origin.value}")
            return False
        if self.config.is_excluded(source_file.file_path):
            logger.debug(f"Skipping excluded path {source_file.file_path}")
            return False
        return True

    def matched_markers(self, function) -> List[Annotation]:
        return [a for a in function.annotations if self.classifier.is_marker_annotation(a, self.resolver)]

    def is_opted_out(self, function):
        for annotation in function.annotations:
            declaration = self.resolver.resolve_annotation_type(annotation)
            if declaration is not None and declaration.qualified_name == self.config.ignore_preview:
                return True
        return False

    def select(self, source_file: SourceFile) -> List[EligibleFunction]:
        eligible = []
        for function in source_file.functions():
            if function.origin is Origin.SYNTHETIC:
                continue

            markers = self.matched_markers(function)
            if function.is_private:
                if markers and self.auditor is not None:
                    self.auditor.record(source_file.file_path, function.simple_name)
                continue
            if self.is_opted_out(function):
                logger.debug(f"{function.qualified_name} opted out of screenshot tests.")
                continue
            if not self.resolver.validate(function):
                if markers:
                    logger.debug(f"Deferring {function.qualified_name}: unresolved types.")
                    self.deferred.append(function)
                continue
            if not markers:
                continue

            eligible.append(EligibleFunction(source_file, function, markers))

        if eligible:
            logger.debug(f"{source_file.file_path}: {len(eligible)} eligible preview functions.")
        return eligible
