import abc
import logging
from dataclasses import dataclass, field
from typing import Dict, List

logger = logging.getLogger(__name__)


@dataclass
class SymbolProcessorEnvironment:
    """What the host hands a processor: options, a file sink and a logger."""
    code_generator: object
    options: Dict[str, str] = field(default_factory=dict)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("autoshot"))


class BaseSymbolProcessor(abc.ABC):
    """
    A processor is invoked once per round. It may keep state across rounds
    when the host reuses the same instance.
    """

    @abc.abstractmethod
    def process(self, resolver) -> List:
        """
        Processes the round's new files.
        Returns declarations that could not be handled yet and should be
        offered again in a later round.
        """
        pass

    def finish(self):
        """Called once after the last round."""
        pass

    def on_error(self):
        """Called instead of finish() when the host aborts processing."""
        pass


class SymbolProcessorProvider(abc.ABC):
    @abc.abstractmethod
    def create(self, environment: SymbolProcessorEnvironment) -> BaseSymbolProcessor:
        pass
