"""
Metadata export to RDF.

``MetadataExporter`` retrieves entities from the repositories, collects the
entities they link to, maps everything with the mapper registry and
serializes the resulting graph as Turtle or JSON-LD.

Usage:
    store = InMemoryEntityStore.from_file("entities.json")
    exporter = MetadataExporter(store)
    turtle = exporter.export(EntityType.DATA_PRODUCT, version=Version.V1)
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

from tqdm import tqdm

from ..constants import ExportDefaults, ExportLimits
from ..formats.rdf.graph_builder import GraphBuilder, MappingContext
from ..formats.rdf.mappers import MapperRegistry
from ..formats.rdf.serializer import normalize_format, serialize
from ..shared.models import Entity, EntityType, Version
from .collector import EntityCollector
from .repository import ReferenceResolver, RepositoryProvider


logger = logging.getLogger(__name__)

BLANK_NODE_PREFIX = "_:"


class ExportError(Exception):
    """Raised when an export fails for a reason other than invalid arguments."""
    pass


class MetadataExporter:
    """
    Exports repository entities as an RDF document.

    Args:
        provider: Supplies the per-type repositories.
        registry: Mapping strategies; ``MapperRegistry.default()`` when omitted.
        max_depth: Link traversal depth limit.
        max_entities: Link traversal size limit.
        show_progress: Show a progress bar on stderr while mapping large exports.
    """

    def __init__(
        self,
        provider: RepositoryProvider,
        registry: Optional[MapperRegistry] = None,
        max_depth: int = ExportLimits.MAX_DEPTH,
        max_entities: int = ExportLimits.MAX_ENTITIES,
        show_progress: bool = False,
    ):
        self.provider = provider
        self.show_progress = show_progress
        self.registry = registry if registry is not None else MapperRegistry.default()
        self.collector = EntityCollector(
            ReferenceResolver(provider),
            max_depth=max_depth,
            max_entities=max_entities,
        )

    def export(
        self,
        entity_type: Union[EntityType, str, None] = None,
        fmt: Optional[str] = ExportDefaults.DEFAULT_FORMAT,
        ids: Optional[Iterable[str]] = None,
        version: Union[Version, str, None] = Version.V3,
    ) -> str:
        """
        Export entities of one type (with everything they link to), or of all types.

        Args:
            entity_type: Type to export; None exports every type.
            fmt: ``turtle`` or ``json-ld`` (case-insensitive); blank selects Turtle.
            ids: Restrict the export to these uids.
            version: Vocabulary version, V3 by default.

        Returns:
            The serialized document, or an empty string when nothing matched.

        Raises:
            ValueError: On an unsupported format, or ids without an entity type.
            ExportError: If retrieval, mapping or serialization fails.
        """
        fmt = normalize_format(fmt)
        version = Version.parse(version, default=Version.V3)
        ids = [uid for uid in ids or () if uid]
        if ids and entity_type is None:
            raise ValueError("Entity type must be specified when providing specific IDs")
        if entity_type is not None:
            entity_type = EntityType.parse(entity_type)

        logger.info(
            f"Starting export of {entity_type.value if entity_type else 'all types'} "
            f"as {fmt} ({version.value})"
        )
        try:
            return self._export(entity_type, fmt, ids, version)
        except ExportError:
            raise
        except Exception as e:
            logger.error(f"Export failed: {e}")
            raise ExportError(f"Export failed: {e}") from e

    def _export(
        self,
        entity_type: Optional[EntityType],
        fmt: str,
        ids: List[str],
        version: Version,
    ) -> str:
        if entity_type is not None:
            entities = self._retrieve(entity_type, ids)
        else:
            entities = self._retrieve_all(ids)

        if not entities:
            logger.info(f"No entities found for {entity_type.value if entity_type else 'all types'}")
            return ""

        if entity_type is not None:
            entities = self.collector.collect(entities)
            logger.debug(f"Collected {len(entities)} entities including linked ones")

        lookup: Dict[str, Entity] = {}
        for entity in entities:
            lookup.setdefault(entity.uid, entity)

        excluded = {EntityType.IRI_TEMPLATE}
        if entity_type is None:
            excluded.add(EntityType.ELEMENT)
        roots = [
            entity for entity in entities
            if not entity.uid.startswith(BLANK_NODE_PREFIX) and entity.entity_type not in excluded
        ]

        builder = GraphBuilder()
        ctx = MappingContext(builder, lookup, version, self.registry)
        for entity in tqdm(roots, desc="Mapping entities", unit="entity",
                           disable=not self.show_progress or len(roots) < 10):
            self.registry.map(entity, ctx)

        logger.info(f"Mapped {len(roots)} entities into {len(builder)} triples")
        return serialize(builder.graph, fmt)

    def _retrieve(self, entity_type: EntityType, ids: List[str]) -> List[Entity]:
        repository = self.provider.repository(entity_type)
        if ids:
            entities = [repository.retrieve_by_uid(uid) for uid in ids]
            found = [entity for entity in entities if entity is not None]
            logger.debug(f"Retrieved {len(found)} of {len(ids)} requested {entity_type.value} entities")
            return found
        return [entity for entity in repository.retrieve_all() if entity is not None]

    def _retrieve_all(self, ids: List[str]) -> List[Entity]:
        entities: List[Entity] = []
        for entity_type in EntityType:
            try:
                entities.extend(self._retrieve(entity_type, ids))
            except Exception as e:
                logger.warning(f"Error retrieving entities of type {entity_type.value}: {e}")
        return entities
