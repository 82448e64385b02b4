"""
Mapper registry.

Holds the mapping strategy of each entity type. The registry is built
explicitly (usually with ``MapperRegistry.default()``) and handed to the
exporter, so different exports can run with different strategy sets.

Usage:
    registry = MapperRegistry.default()
    node = registry.map(entity, ctx)
"""

import logging
from typing import Dict, Iterable, List, Optional

from rdflib.term import Node

from ....shared.models import Entity, EntityType
from ..graph_builder import MappingContext
from . import agents, concepts, dataset, facilities, services, software, values
from .base import MappingStrategy


logger = logging.getLogger(__name__)


class MapperRegistry:
    """Entity type -> mapping strategy table."""

    def __init__(self, strategies: Optional[Iterable[MappingStrategy]] = None):
        self._strategies: Dict[EntityType, MappingStrategy] = {}
        for strategy in strategies or ():
            self.register(strategy)

    @classmethod
    def default(cls) -> "MapperRegistry":
        """Registry with the strategies of every mapped entity type."""
        strategies: List[MappingStrategy] = []
        for module in (dataset, agents, concepts, values, facilities, services, software):
            strategies.extend(module.STRATEGIES)
        return cls(strategies)

    def register(self, strategy: MappingStrategy) -> None:
        if strategy.entity_type in self._strategies:
            logger.debug(f"Replacing mapper for {strategy.entity_type.value}")
        self._strategies[strategy.entity_type] = strategy

    def get(self, entity_type: EntityType) -> Optional[MappingStrategy]:
        return self._strategies.get(entity_type)

    def __contains__(self, entity_type: EntityType) -> bool:
        return entity_type in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)

    def map(self, entity: Entity, ctx: MappingContext) -> Optional[Node]:
        """Map ``entity`` with its strategy; types without a mapper produce nothing."""
        strategy = self.get(entity.entity_type)
        if strategy is None:
            logger.warning(f"No mapper registered for {entity.entity_type.value} {entity.uid}")
            return None
        return strategy.map(entity, ctx)
