"""
Web service mappings: the service itself, its Hydra operations, IRI
templates and payloads, and its API documentation.
"""

import logging

from ....shared.models import (
    Documentation,
    EntityType,
    IriTemplate,
    Mapping,
    Operation,
    OutputMapping,
    Payload,
    WebService,
)
from ..graph_builder import MappingContext, Subject
from ..namespaces import DCAT, DCT, EPOS, FOAF, HTTP, HYDRA, RDFS, SCHEMA
from .agents import add_property_value_identifiers
from .base import MappingStrategy
from .dataset import split_keywords


logger = logging.getLogger(__name__)

READ_ONLY_VARIABLES = frozenset({
    "type", "organisationName", "individualName", "purpose", "status", "distributionFormat",
})
"""Template variables that are always exposed as read-only."""

PAYLOAD_DESCRIPTION = "Payload description"


def _web_service(entity: WebService, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder

    b.add_literal(subject, SCHEMA.identifier, entity.uid)
    b.add_string(subject, SCHEMA.name, entity.name)
    b.add_string(subject, SCHEMA.description, entity.description)
    b.add_uri_literal(subject, DCT.license, entity.license)
    b.add_uri_literal(subject, HYDRA.entrypoint, entity.entry_point)
    b.add_datetime(subject, SCHEMA.datePublished, entity.date_published)
    b.add_datetime(subject, SCHEMA.dateModified, entity.date_modified)
    b.add_strings(subject, SCHEMA.keywords, split_keywords(entity.keywords))

    ctx.link(subject, SCHEMA.provider, entity.provider, EntityType.ORGANIZATION)
    ctx.link_all(subject, HYDRA.supportedOperation, entity.supported_operation, EntityType.OPERATION)
    ctx.link_all(subject, DCT.spatial, entity.spatial_extent, EntityType.LOCATION)
    ctx.link_all(subject, DCT.temporal, entity.temporal_extent, EntityType.PERIOD_OF_TIME)
    ctx.link_all(subject, DCAT.theme, entity.category, EntityType.CATEGORY)
    ctx.link_all(subject, DCAT.contactPoint, entity.contact_point, EntityType.CONTACT_POINT)
    add_property_value_identifiers(subject, entity.identifier, ctx)
    b.add_uris(subject, DCT.conformsTo, entity.documentation)


def _describe_operation(entity: Operation, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder
    b.add_string(subject, HYDRA.method, entity.method)
    b.add_strings(subject, HYDRA.returns, entity.returns)
    if entity.iri_template is not None:
        b.add_reference(subject, HYDRA.property, ctx.map(entity.iri_template))


def _operation_v1(entity: Operation, subject: Subject, ctx: MappingContext) -> None:
    _describe_operation(entity, subject, ctx)
    for ref in entity.payload:
        payload = ctx.lookup(ref, EntityType.PAYLOAD)
        if payload is None:
            continue
        node = ctx.map(payload)
        if node is None:
            logger.warning(f"Skipping invalid payload {ref.uid} of operation {entity.uid}")
            continue
        ctx.builder.add_reference(subject, HYDRA.expects, node)


def _operation_v3(entity: Operation, subject: Subject, ctx: MappingContext) -> None:
    _describe_operation(entity, subject, ctx)


def _iri_template(entity: IriTemplate, subject: Subject, ctx: MappingContext) -> None:
    ctx.builder.add_string(subject, HYDRA.template, entity.template)
    ctx.link_all(subject, HYDRA.mapping, entity.mappings, EntityType.MAPPING)


def _describe_mapping(entity: Mapping, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder
    b.add_string(subject, HYDRA.variable, entity.variable)
    b.add_string(subject, HYDRA.property, entity.property)
    b.add_string(subject, RDFS.range, entity.range)
    b.add_string(subject, RDFS.label, entity.label)
    b.add_string(subject, SCHEMA.valuePattern, entity.value_pattern)
    b.add_string(subject, SCHEMA.minValue, entity.min_value)
    b.add_string(subject, SCHEMA.maxValue, entity.max_value)


def _mapping_tail(entity: Mapping, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder
    read_only = entity.read_only_value == "true" or entity.variable in READ_ONLY_VARIABLES
    b.add_boolean(subject, SCHEMA.readonlyValue, read_only)
    b.add_boolean(subject, HYDRA.required, entity.required == "true")
    b.add_strings(subject, HTTP.paramValue, entity.param_value)


def _mapping_v1(entity: Mapping, subject: Subject, ctx: MappingContext) -> None:
    _describe_mapping(entity, subject, ctx)
    # V1 keeps an explicitly empty default value
    ctx.builder.add_string_allow_empty(subject, SCHEMA.defaultValue, entity.default_value)
    if (entity.multiple_values or "").lower() == "true":
        ctx.builder.add_boolean(subject, SCHEMA.multipleValues, True)
    _mapping_tail(entity, subject, ctx)


def _mapping_v3(entity: Mapping, subject: Subject, ctx: MappingContext) -> None:
    _describe_mapping(entity, subject, ctx)
    ctx.builder.add_string(subject, SCHEMA.defaultValue, entity.default_value)
    _mapping_tail(entity, subject, ctx)


def _payload(entity: Payload, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder
    b.add_string(subject, HYDRA["title"], PAYLOAD_DESCRIPTION)
    b.add_string(subject, HYDRA.description, PAYLOAD_DESCRIPTION)

    for ref in entity.output_mapping:
        output = ctx.lookup(ref, EntityType.OUTPUT_MAPPING)
        if output is None:
            continue
        prop = b.blank_node()
        b.add_type(prop, HYDRA.SupportedProperty)
        b.add_string(prop, HYDRA.variable, output.output_variable)
        b.add_string(prop, HYDRA.property, output.output_property)
        b.add_string(prop, HYDRA.description, output.output_label)
        if output.output_required == "true":
            b.add_boolean(prop, HYDRA.required, True)
        b.add_reference(subject, HYDRA.supportedProperty, prop)


def _output_mapping(entity: OutputMapping, subject: Subject, ctx: MappingContext) -> None:
    """
    Only the class triple is emitted for a standalone output mapping.

    Its variable, property, label and required flag are written by ``_payload``
    as an inline ``hydra:SupportedProperty``.
    """


def _documentation_v1(entity: Documentation, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder
    b.add_string(subject, HYDRA.description, entity.description)
    b.add_string(subject, HYDRA["title"], entity.title)
    b.add_uri_literal(subject, HYDRA.entrypoint, entity.uri)


def _documentation_v3(entity: Documentation, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder
    b.add_string(subject, DCT["title"], entity.title)
    b.add_string(subject, DCT.description, entity.description)
    b.add_uri_literal(subject, FOAF.page, entity.uri)


WEB_SERVICE = MappingStrategy(
    entity_type=EntityType.WEB_SERVICE,
    rdf_class=EPOS.WebService,
    v1=_web_service,
)

OPERATION = MappingStrategy(
    entity_type=EntityType.OPERATION,
    rdf_class=HYDRA.Operation,
    v1=_operation_v1,
    v3=_operation_v3,
)

IRI_TEMPLATE = MappingStrategy(
    entity_type=EntityType.IRI_TEMPLATE,
    rdf_class=HYDRA.IriTemplate,
    v1=_iri_template,
    embedded=True,
)

MAPPING = MappingStrategy(
    entity_type=EntityType.MAPPING,
    rdf_class=HYDRA.IriTemplateMapping,
    v1=_mapping_v1,
    v3=_mapping_v3,
    embedded=True,
)

PAYLOAD = MappingStrategy(
    entity_type=EntityType.PAYLOAD,
    rdf_class=HYDRA.Class,
    v1=_payload,
)

OUTPUT_MAPPING = MappingStrategy(
    entity_type=EntityType.OUTPUT_MAPPING,
    rdf_class=SCHEMA.PropertyValue,
    rdf_class_v3=RDFS.Resource,
    v1=_output_mapping,
)

DOCUMENTATION = MappingStrategy(
    entity_type=EntityType.DOCUMENTATION,
    rdf_class=HYDRA.ApiDocumentation,
    rdf_class_v3=DCT.Standard,
    v1=_documentation_v1,
    v3=_documentation_v3,
)

STRATEGIES = (WEB_SERVICE, OPERATION, IRI_TEMPLATE, MAPPING, PAYLOAD, OUTPUT_MAPPING, DOCUMENTATION)
