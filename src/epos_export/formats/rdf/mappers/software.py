"""
Software mappings (``schema:SoftwareApplication``, ``schema:SoftwareSourceCode``).
"""

from ....shared.models import EntityType, SoftwareApplication, SoftwareSourceCode, Version, first
from ..graph_builder import MappingContext, Subject
from ..namespaces import ADMS, DCAT, DCT, SCHEMA
from .agents import add_property_value_identifiers
from .base import MappingStrategy


AGENT_TYPES = (EntityType.ORGANIZATION, EntityType.PERSON)


def _software_application(entity: SoftwareApplication, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder

    b.add_literal(subject, SCHEMA.identifier, entity.uid)
    b.add_string(subject, SCHEMA.name, entity.name)
    b.add_string(subject, SCHEMA.description, entity.description)
    b.add_uri_literal(subject, SCHEMA.downloadUrl, entity.download_url)
    b.add_string(subject, SCHEMA.softwareRequirements, entity.requirements)

    ctx.link_all(subject, DCAT.theme, entity.category, EntityType.CATEGORY)
    ctx.link_all(subject, DCAT.contactPoint, entity.contact_point, EntityType.CONTACT_POINT)
    ctx.link_all(subject, ADMS.identifier, entity.identifier, EntityType.IDENTIFIER)
    ctx.link_all(subject, DCT.relation, entity.related_operation, EntityType.OPERATION)


def _source_code_v1(entity: SoftwareSourceCode, subject: Subject, ctx: MappingContext) -> None:
    add_property_value_identifiers(subject, entity.identifier, ctx)
    ctx.builder.add_string(subject, SCHEMA.name, entity.name)
    ctx.builder.add_string(subject, SCHEMA.description, entity.description)


def _source_code_v3(entity: SoftwareSourceCode, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder

    if entity.identifier:
        add_property_value_identifiers(subject, entity.identifier, ctx)
    else:
        b.add_literal(subject, SCHEMA.identifier, entity.uid)

    ctx.link_all(subject, SCHEMA.contactPoint, entity.contact_point, EntityType.CONTACT_POINT)
    b.add_string(subject, SCHEMA.name, entity.name)
    b.add_uri_literal(subject, SCHEMA.codeRepository, entity.code_repository)
    b.add_string(subject, SCHEMA.description, entity.description)
    b.add_string(subject, SCHEMA.keywords, entity.keywords)
    b.add_uri_literal(subject, SCHEMA.license, entity.license_url)
    b.add_uri_literal(subject, SCHEMA.mainEntityOfPage, entity.main_entity_of_page)
    b.add_strings(subject, SCHEMA.programmingLanguage, entity.programming_language)
    b.add_string(subject, SCHEMA.runtimePlatform, entity.runtime_platform)
    b.add_string(subject, SCHEMA.softwareVersion, entity.software_version)

    ctx.link_all(subject, SCHEMA.targetProduct, entity.relation)
    ctx.link_all(subject, DCAT.theme, entity.category, EntityType.CATEGORY)
    ctx.link_all(subject, SCHEMA.author, entity.author, *AGENT_TYPES)
    ctx.link_all(subject, SCHEMA.contributor, entity.contributor, *AGENT_TYPES)
    ctx.link_all(subject, SCHEMA.creator, entity.creator, *AGENT_TYPES)
    ctx.link_all(subject, SCHEMA.funder, entity.funder, *AGENT_TYPES)
    ctx.link_all(subject, SCHEMA.maintainer, entity.maintainer, *AGENT_TYPES)
    ctx.link_all(subject, SCHEMA.provider, entity.provider, *AGENT_TYPES)
    # schema:publisher takes a single agent
    ctx.link(subject, SCHEMA.publisher, first(entity.publisher), *AGENT_TYPES)


SOFTWARE_APPLICATION = MappingStrategy(
    entity_type=EntityType.SOFTWARE_APPLICATION,
    rdf_class=SCHEMA.SoftwareApplication,
    v1=_software_application,
)

SOFTWARE_SOURCE_CODE = MappingStrategy(
    entity_type=EntityType.SOFTWARE_SOURCE_CODE,
    rdf_class=SCHEMA.SoftwareSourceCode,
    v1=_source_code_v1,
    v3=_source_code_v3,
    required={Version.V1: ("identifier",)},
)

STRATEGIES = (SOFTWARE_APPLICATION, SOFTWARE_SOURCE_CODE)
