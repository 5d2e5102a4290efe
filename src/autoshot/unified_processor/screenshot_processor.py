import logging
from typing import List

from ..code_gen.emitter import FileEmitter
from ..code_gen.synthesizer import synthesize
from ..config import ProcessorConfig
from .auditor import VisibilityAuditor
from .base_processor import BaseSymbolProcessor, SymbolProcessorEnvironment, SymbolProcessorProvider
from .markers import MarkerClassifier, MarkerRegistry
from .selector import CandidateSelector

logger = logging.getLogger(__name__)


class ScreenshotProcessor(BaseSymbolProcessor):
    """
    Finds preview functions in source files and generates a screenshot test
    file per source file.

    Marker verdicts, emitted file names and pending visibility violations
    live on the instance, so a host that reuses the processor across rounds
    keeps accumulating them.
    """

    def __init__(self, environment: SymbolProcessorEnvironment, config: ProcessorConfig):
        self.environment = environment
        self.config = config
        self.logger = environment.logger

        self.marker_registry = MarkerRegistry(config.preview)
        self.classifier = MarkerClassifier(self.marker_registry)
        self.emitter = FileEmitter(environment.code_generator, config.suffix)
        self.auditor = VisibilityAuditor(config.report_path)

    @property
    def generated_files(self):
        return self.emitter.generated_files

    def process(self, resolver) -> List:
        self.classifier.seed(resolver)
        selector = CandidateSelector(resolver, self.classifier, self.config, self.auditor)

        processed = 0
        for source_file in resolver.get_new_files():
            if not selector.accepts(source_file):
                continue
            processed += 1
            eligible = selector.select(source_file)
            if not eligible:
                continue
            fragments = [synthesize(candidate, resolver, self.config) for candidate in eligible]
            self.emitter.emit(source_file, fragments)

        self.auditor.flush()

        self.logger.info(f"Round done: {processed} source files scanned, "
                         f"{len(self.emitter.generated_files)} test files generated so far, "
                         f"{len(selector.deferred)} functions deferred.")
        return list(selector.deferred)


class ScreenshotProcessorProvider(SymbolProcessorProvider):
    def create(self, environment: SymbolProcessorEnvironment) -> ScreenshotProcessor:
        return ScreenshotProcessor(environment, ProcessorConfig.from_options(environment.options))
