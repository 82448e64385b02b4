"""
Agent mappings: organizations, persons, contact points and their addresses
and identifiers.
"""

from typing import Iterable, Optional

from ....shared.models import (
    Address,
    ContactPoint,
    EntityType,
    Identifier,
    LinkedEntity,
    Organization,
    Person,
    first,
)
from ..graph_builder import MappingContext, Subject
from ..namespaces import ADMS, SCHEMA, SKOS
from .base import MappingStrategy


def add_property_value_identifiers(
    subject: Subject,
    refs: Optional[Iterable[LinkedEntity]],
    ctx: MappingContext,
) -> None:
    """Attach identifiers as blank ``schema:PropertyValue`` nodes (propertyID + value)."""
    b = ctx.builder
    for ref in refs or ():
        identifier = ctx.lookup(ref, EntityType.IDENTIFIER)
        if identifier is None:
            continue
        node = b.blank_node()
        b.add_type(node, SCHEMA.PropertyValue)
        b.add_literal(node, SCHEMA.propertyID, identifier.type)
        b.add_literal(node, SCHEMA.value, identifier.identifier)
        b.add_reference(subject, SCHEMA.identifier, node)


def _organization(entity: Organization, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder

    # schema:legalName is single valued
    b.add_string(subject, SCHEMA.legalName, first(entity.legal_name))
    b.add_uri_literal(subject, SCHEMA.logo, entity.logo)
    b.add_uri_literal(subject, SCHEMA.url, entity.url)
    b.add_literals(subject, SCHEMA.email, entity.email)

    ctx.link(subject, SCHEMA.address, entity.address, EntityType.ADDRESS)
    add_property_value_identifiers(subject, entity.identifier, ctx)

    b.add_uris(subject, SCHEMA.owns, entity.owns)
    b.add_uris(subject, SCHEMA.memberOf, entity.member_of)


def _person(entity: Person, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder

    b.add_string(subject, SCHEMA.givenName, entity.given_name)
    b.add_string(subject, SCHEMA.familyName, entity.family_name)
    b.add_literals(subject, SCHEMA.email, entity.email)
    b.add_literals(subject, SCHEMA.telephone, entity.telephone)

    ctx.link(subject, SCHEMA.address, entity.address, EntityType.ADDRESS)
    add_property_value_identifiers(subject, entity.identifier, ctx)
    b.add_strings(subject, SCHEMA.qualifications, entity.qualifications)

    ctx.link_all(subject, SCHEMA.affiliation, entity.affiliation, EntityType.ORGANIZATION)
    ctx.link_all(subject, SCHEMA.contactPoint, entity.contact_point, EntityType.CONTACT_POINT)


def _contact_point(entity: ContactPoint, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder
    b.add_strings(subject, SCHEMA.email, entity.email)
    b.add_strings(subject, SCHEMA.availableLanguage, entity.language)
    b.add_string(subject, SCHEMA.contactType, entity.role)


def _address(entity: Address, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder
    b.add_string(subject, SCHEMA.streetAddress, entity.street)
    b.add_string(subject, SCHEMA.addressLocality, entity.locality)
    b.add_string(subject, SCHEMA.postalCode, entity.postal_code)
    b.add_string(subject, SCHEMA.addressCountry, entity.country)


def _identifier(entity: Identifier, subject: Subject, ctx: MappingContext) -> None:
    ctx.builder.add_literal(subject, ADMS.schemeAgency, entity.type)
    ctx.builder.add_literal(subject, SKOS.notation, entity.identifier)


ORGANIZATION = MappingStrategy(
    entity_type=EntityType.ORGANIZATION,
    rdf_class=SCHEMA.Organization,
    v1=_organization,
)

PERSON = MappingStrategy(
    entity_type=EntityType.PERSON,
    rdf_class=SCHEMA.Person,
    v1=_person,
)

CONTACT_POINT = MappingStrategy(
    entity_type=EntityType.CONTACT_POINT,
    rdf_class=SCHEMA.ContactPoint,
    v1=_contact_point,
)

ADDRESS = MappingStrategy(
    entity_type=EntityType.ADDRESS,
    rdf_class=SCHEMA.PostalAddress,
    v1=_address,
    embedded=True,
)

IDENTIFIER = MappingStrategy(
    entity_type=EntityType.IDENTIFIER,
    rdf_class=ADMS.Identifier,
    v1=_identifier,
    embedded=True,
)

STRATEGIES = (ORGANIZATION, PERSON, CONTACT_POINT, ADDRESS, IDENTIFIER)
