"""
Value-type mappings: locations, time periods, quantitative values and
attributions.
"""

from ....shared.models import Attribution, EntityType, Location, PeriodOfTime, QuantitativeValue, Version, first
from ..graph_builder import MappingContext, Subject
from ..namespaces import DCAT, DCT, GSP_WKT_LITERAL, LOCN, PROV, SCHEMA
from .base import MappingStrategy


def _location(entity: Location, subject: Subject, ctx: MappingContext) -> None:
    ctx.builder.add_typed(subject, LOCN.geometry, entity.location, GSP_WKT_LITERAL)


def _period_of_time_v1(entity: PeriodOfTime, subject: Subject, ctx: MappingContext) -> None:
    ctx.builder.add_datetime(subject, SCHEMA.startDate, entity.start_date)
    ctx.builder.add_datetime(subject, SCHEMA.endDate, entity.end_date)


def _period_of_time_v3(entity: PeriodOfTime, subject: Subject, ctx: MappingContext) -> None:
    ctx.builder.add_datetime(subject, DCAT.startDate, entity.start_date)
    ctx.builder.add_datetime(subject, DCAT.endDate, entity.end_date)


def _quantitative_value_v1(entity: QuantitativeValue, subject: Subject, ctx: MappingContext) -> None:
    ctx.builder.add_literal(subject, SCHEMA.value, entity.value)
    ctx.builder.add_literal(subject, SCHEMA.unitCode, entity.unit)


def _quantitative_value_v3(entity: QuantitativeValue, subject: Subject, ctx: MappingContext) -> None:
    ctx.builder.add_literal(subject, SCHEMA.value, entity.value)
    ctx.builder.add_literal(subject, SCHEMA.unitText, entity.unit)


def _attribution_v1(entity: Attribution, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder
    if entity.agent is not None:
        b.add_uri_literal(subject, PROV.agent, entity.agent.uid)
    b.add_uri_literal(subject, PROV.hadRole, first(entity.role))


def _attribution_v3(entity: Attribution, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder
    b.add_literals(subject, PROV.hadRole, entity.role)
    agent = ctx.lookup(entity.agent)
    if agent is not None:
        b.add_uri(subject, PROV.agent, agent.uid)


LOCATION = MappingStrategy(
    entity_type=EntityType.LOCATION,
    rdf_class=DCT.Location,
    v1=_location,
    embedded=True,
)

PERIOD_OF_TIME = MappingStrategy(
    entity_type=EntityType.PERIOD_OF_TIME,
    rdf_class=DCT.PeriodOfTime,
    v1=_period_of_time_v1,
    v3=_period_of_time_v3,
    embedded=True,
)

QUANTITATIVE_VALUE = MappingStrategy(
    entity_type=EntityType.QUANTITATIVE_VALUE,
    rdf_class=SCHEMA.QuantitativeValue,
    v1=_quantitative_value_v1,
    v3=_quantitative_value_v3,
    required={Version.V1: ("value", "unit")},
)

ATTRIBUTION = MappingStrategy(
    entity_type=EntityType.ATTRIBUTION,
    rdf_class=PROV.Attribution,
    v1=_attribution_v1,
    v3=_attribution_v3,
)

STRATEGIES = (LOCATION, PERIOD_OF_TIME, QUANTITATIVE_VALUE, ATTRIBUTION)
