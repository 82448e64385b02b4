"""
Category mappings (``skos:Concept``, ``skos:ConceptScheme``).
"""

from ....shared.models import Category, CategoryScheme, EntityType
from ..graph_builder import MappingContext, Subject
from ..namespaces import DCT, FOAF, SCHEMA, SKOS
from .base import MappingStrategy


def _category(entity: Category, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder
    b.add_string(subject, SKOS.prefLabel, entity.name)
    b.add_string(subject, SKOS.definition, entity.description)
    ctx.link(subject, SKOS.inScheme, entity.in_scheme, EntityType.CATEGORY_SCHEME)
    ctx.link_all(subject, SKOS.broader, entity.broader, EntityType.CATEGORY)
    ctx.link_all(subject, SKOS.narrower, entity.narrower, EntityType.CATEGORY)


def _category_scheme(entity: CategoryScheme, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder
    b.add_string(subject, SKOS.prefLabel, entity.title)
    b.add_string(subject, DCT["title"], entity.title)
    b.add_string(subject, DCT.description, entity.description)
    b.add_uri_literal(subject, FOAF.logo, entity.logo)
    b.add_uri_literal(subject, FOAF.homepage, entity.homepage)
    b.add_string(subject, SCHEMA.color, entity.color)
    b.add_string(subject, SCHEMA.orderItemNumber, entity.orderitemnumber)
    ctx.link_all(subject, SKOS.hasTopConcept, entity.top_concepts, EntityType.CATEGORY)


CATEGORY = MappingStrategy(
    entity_type=EntityType.CATEGORY,
    rdf_class=SKOS.Concept,
    v1=_category,
)

CATEGORY_SCHEME = MappingStrategy(
    entity_type=EntityType.CATEGORY_SCHEME,
    rdf_class=SKOS.ConceptScheme,
    v1=_category_scheme,
)

STRATEGIES = (CATEGORY, CATEGORY_SCHEME)
