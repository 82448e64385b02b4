"""
Versioned mapping strategy.

A strategy binds one entity type to its RDF class and to one pure function
per vocabulary version. The shared ``map`` method implements the rules every
type follows: cache lookup, compliance gate, node creation and typing.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from rdflib import URIRef
from rdflib.term import Node

from ....shared.models import Entity, EntityType, Version
from ..graph_builder import MappingContext, Subject


logger = logging.getLogger(__name__)

VersionFunction = Callable[[Entity, Subject, MappingContext], None]
"""Adds the triples describing ``entity`` to ``subject``."""


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return not any(not _is_blank(item) for item in value)
    return False


@dataclass(frozen=True)
class MappingStrategy:
    """
    Mapping of one entity type.

    Attributes:
        entity_type: Type tag handled by this strategy.
        rdf_class: ``rdf:type`` of the emitted node; may differ per version
            through ``rdf_class_v3``.
        v1: Function describing the entity under V1.
        v3: Function describing the entity under V3.
        required: Attribute names that must be non-blank, per version.
        embedded: Emit a fresh blank node per use instead of a cached named node.
        rdf_class_v3: Optional V3 class overriding ``rdf_class``.
    """
    entity_type: EntityType
    rdf_class: URIRef
    v1: VersionFunction
    v3: Optional[VersionFunction] = None
    required: Dict[Version, Tuple[str, ...]] = field(default_factory=dict)
    embedded: bool = False
    rdf_class_v3: Optional[URIRef] = None

    def rdf_class_for(self, version: Version) -> URIRef:
        if version is Version.V3 and self.rdf_class_v3 is not None:
            return self.rdf_class_v3
        return self.rdf_class

    def missing_fields(self, entity: Entity, version: Version) -> Tuple[str, ...]:
        """Names of the required attributes that are blank for ``version``."""
        return tuple(
            name for name in self.required.get(version, ())
            if _is_blank(getattr(entity, name, None))
        )

    def map(self, entity: Entity, ctx: MappingContext) -> Optional[Node]:
        """
        Map an entity and return its node.

        Returns:
            The cached node if this named entity was already mapped in the
            export, None when the entity fails the compliance check, else the
            new node.
        """
        if not self.embedded and entity.uid in ctx.cache:
            return ctx.cache[entity.uid]

        missing = self.missing_fields(entity, ctx.version)
        if missing:
            logger.warning(
                f"Skipping {self.entity_type.value} {entity.uid}: missing required "
                f"field(s) for {ctx.version.value}: {', '.join(missing)}"
            )
            return None

        builder = ctx.builder
        if self.embedded:
            subject: Subject = builder.blank_node()
        else:
            subject = builder.resource(entity.uid)
            # Cached before recursing so reference cycles terminate
            ctx.cache[entity.uid] = subject

        builder.add_type(subject, self.rdf_class_for(ctx.version))
        describe = self.v3 if ctx.version is Version.V3 and self.v3 is not None else self.v1
        describe(entity, subject, ctx)
        return subject
