# unified_processor/markers.py
"""
Preview marker classification.

An annotation class is a marker when it is the base preview annotation or
when it is annotated, directly or through further meta-annotations, with
a marker. Annotation graphs may contain cycles (an annotation can be
meta-annotated with itself, or two annotations with each other), so the
search is an iterative breadth-first walk with a visited set, and results
are memoised per qualified name.
"""
import logging
from collections import deque
from typing import Dict, Optional, Set

from ..symbols import ClassDeclaration

logger = logging.getLogger(__name__)


class MarkerRegistry:
    """
    qualified name -> is-marker verdict.

    mark() writes each name once. promote() is the one way a verdict
    changes: a name found to carry the base marker directly becomes a
    marker even if an earlier round classified it as not one.
    """

    def __init__(self, base_marker):
        self.base_marker = base_marker
        self._verdicts: Dict[str, bool] = {base_marker: True}

    def lookup(self, qualified_name) -> Optional[bool]:
        """True/False when known, None when not yet classified."""
        return self._verdicts.get(qualified_name)

    def mark(self, qualified_name, is_marker):
        """Records a verdict. Returns False if a verdict was already present."""
        existing = self._verdicts.get(qualified_name)
        if existing is not None:
            if existing != is_marker:
                logger.debug(f"Keeping verdict {existing} for '{qualified_name}', ignoring {is_marker}.")
            return False
        self._verdicts[qualified_name] = is_marker
        return True

    def promote(self, qualified_name):
        """Records a True verdict over anything but True. Returns False if it was already True."""
        existing = self._verdicts.get(qualified_name)
        if existing:
            return False
        self._verdicts[qualified_name] = True
        if existing is False:
            # Negative verdicts may have been reached through this name
            stale = [name for name, verdict in self._verdicts.items() if verdict is False]
            for name in stale:
                del self._verdicts[name]
            logger.debug(f"Promoted '{qualified_name}' to a marker; cleared {len(stale)} negative verdicts.")
        return True

    def markers(self) -> Set[str]:
        return {name for name, verdict in self._verdicts.items() if verdict}

    def __contains__(self, qualified_name):
        return qualified_name in self._verdicts

    def __len__(self):
        return len(self._verdicts)


class MarkerClassifier:
    def __init__(self, registry: MarkerRegistry):
        self.registry = registry

    def seed(self, resolver):
        """
        Marks every source class annotated directly with the base marker.
        Run before classifying functions so wrappers are known regardless
        of the order in which declarations are visited.
        """
        seeded = 0
        for decl in resolver.get_symbols_with_annotation(self.registry.base_marker):
            # Functions carry the base marker too; only classes can act as meta-annotations
            if not isinstance(decl, ClassDeclaration) or not decl.qualified_name:
                continue
            if self.registry.promote(decl.qualified_name):
                seeded += 1
        logger.debug(f"Seeded {seeded} marker annotations from direct base-marker usage.")
        return seeded

    def is_marker_annotation(self, annotation, resolver):
        return self.is_marker(resolver.resolve_annotation_type(annotation), resolver)

    def is_marker(self, declaration, resolver):
        qualified_name = declaration.qualified_name if declaration is not None else None
        if not qualified_name:
            return False
        known = self.registry.lookup(qualified_name)
        if known is not None:
            return known

        # parent links let us mark the whole path once a marker is reached
        parents = {qualified_name: None}
        pending = deque([declaration])
        while pending:
            current = pending.popleft()
            for annotation in current.annotations:
                meta = resolver.resolve_annotation_type(annotation)
                meta_name = meta.qualified_name if meta is not None else None
                if not meta_name or meta_name in parents:
                    continue
                parents[meta_name] = current.qualified_name
                verdict = self.registry.lookup(meta_name)
                if verdict:
                    self._mark_path(parents, meta_name)
                    logger.debug(f"'{qualified_name}' is a preview marker via '{meta_name}'.")
                    return True
                if verdict is None:
                    pending.append(meta)

        # Nothing reachable from here is a marker, so neither is anything visited
        for name in parents:
            self.registry.mark(name, False)
        return False

    def _mark_path(self, parents, reached):
        name = parents[reached]
        while name is not None:
            self.registry.mark(name, True)
            name = parents[name]
