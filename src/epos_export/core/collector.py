"""
Linked entity collection.

Starting from a set of root entities, walks the weak references level by
level and returns the deduplicated closure in discovery order.
"""

import logging
from typing import Dict, List, Sequence

from ..constants import ExportLimits
from ..shared.models import Entity
from .repository import ReferenceResolver


logger = logging.getLogger(__name__)


class EntityCollector:
    """
    Breadth-first collector bounded by depth and total entity count.

    Args:
        resolver: Resolves ``LinkedEntity`` references to entities.
        max_depth: Maximum number of levels expanded.
        max_entities: Maximum number of entities in the result.
    """

    def __init__(
        self,
        resolver: ReferenceResolver,
        max_depth: int = ExportLimits.MAX_DEPTH,
        max_entities: int = ExportLimits.MAX_ENTITIES,
    ):
        self.resolver = resolver
        self.max_depth = max_depth
        self.max_entities = max_entities

    def collect(self, roots: Sequence[Entity]) -> List[Entity]:
        """
        Return the roots followed by every entity reachable from them.

        Args:
            roots: Starting entities.

        Returns:
            Entities in BFS discovery order, each uid at most once.
        """
        collected: Dict[str, Entity] = {}
        frontier: List[Entity] = []
        for entity in roots:
            if entity is None or entity.uid in collected:
                continue
            collected[entity.uid] = entity
            frontier.append(entity)

        depth = 0
        while frontier:
            if depth >= self.max_depth:
                logger.warning(
                    f"Reached maximum traversal depth ({self.max_depth}); "
                    f"{len(frontier)} entities were not expanded"
                )
                break
            if len(collected) >= self.max_entities:
                logger.warning(f"Reached maximum entity count ({self.max_entities}); stopping collection")
                break

            depth += 1
            next_frontier: List[Entity] = []
            for current in frontier:
                logger.debug(f"Processing entity {current.uid} at depth {depth}")
                for ref in current.references():
                    if ref.uid in collected:
                        continue
                    linked = self.resolver.resolve(ref.entity_type, ref.uid)
                    if linked is None:
                        logger.warning(
                            f"Could not resolve reference {ref.uid} "
                            f"({ref.entity_type or 'untyped'}) from {current.uid}"
                        )
                        continue
                    if linked.uid in collected:
                        continue
                    collected[linked.uid] = linked
                    next_frontier.append(linked)
                    if len(collected) >= self.max_entities:
                        break
                if len(collected) >= self.max_entities:
                    logger.warning(f"Reached maximum entity count ({self.max_entities}); stopping collection")
                    return list(collected.values())
            frontier = next_frontier

        logger.debug(f"Collected {len(collected)} entities in {depth} levels")
        return list(collected.values())
