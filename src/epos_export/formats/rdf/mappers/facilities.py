"""
Research infrastructure mappings (``epos:Equipment``, ``epos:Facility``).
"""

from ....shared.models import EntityType, Equipment, Facility
from ..graph_builder import MappingContext, Subject
from ..namespaces import DCAT, DCT, EPOS, FOAF, SCHEMA, VCARD
from .base import MappingStrategy


def _equipment(entity: Equipment, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder

    b.add_string(subject, SCHEMA.name, entity.name)
    b.add_string(subject, SCHEMA.description, entity.description)
    b.add_uri_literal(subject, DCT.type, entity.type)
    b.add_literal(subject, SCHEMA.identifier, entity.identifier)
    b.add_string(subject, SCHEMA.serialNumber, entity.serial_number)
    b.add_string(subject, EPOS["filter"], entity.filter)
    b.add_string(subject, EPOS.resolution, entity.resolution)
    b.add_string(subject, EPOS.orientation, entity.orientation)
    b.add_uri_literal(subject, FOAF.page, entity.page_url)

    ctx.link(subject, SCHEMA.manufacturer, entity.manufacturer, EntityType.ORGANIZATION)
    b.add_uris(subject, DCT.isPartOf, entity.is_part_of)
    ctx.link_all(subject, DCT.spatial, entity.spatial_extent, EntityType.LOCATION)
    ctx.link_all(subject, DCT.temporal, entity.temporal_extent, EntityType.PERIOD_OF_TIME)
    ctx.link_all(subject, DCAT.theme, entity.category, EntityType.CATEGORY)
    ctx.link_all(subject, DCAT.contactPoint, entity.contact_point, EntityType.CONTACT_POINT)

    b.add_string(subject, EPOS.dynamicRange, entity.dynamic_range)
    b.add_string(subject, EPOS.samplePeriod, entity.sample_period)
    b.add_uris(subject, DCT.relation, entity.relation)


def _facility(entity: Facility, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder

    b.add_literal(subject, SCHEMA.name, entity.title)
    b.add_literal(subject, DCT.description, entity.description)
    b.add_literal(subject, DCT.type, entity.type)
    b.add_literal(subject, SCHEMA.identifier, entity.identifier)
    b.add_uri_literals(subject, FOAF.page, entity.page_url)

    # Facilities use vCard addresses rather than schema:PostalAddress
    for ref in entity.address:
        address = ctx.lookup(ref, EntityType.ADDRESS)
        if address is None:
            continue
        node = b.blank_node()
        b.add_type(node, VCARD.Address)
        b.add_string(node, VCARD["street-address"], address.street)
        b.add_string(node, VCARD.locality, address.locality)
        b.add_string(node, VCARD["postal-code"], address.postal_code)
        b.add_string(node, VCARD["country-name"], address.country)
        b.add_reference(subject, VCARD.hasAddress, node)

    ctx.link_all(subject, DCT.spatial, entity.spatial_extent, EntityType.LOCATION)
    ctx.link_all(subject, DCAT.theme, entity.category, EntityType.CATEGORY)
    ctx.link_all(subject, DCAT.contactPoint, entity.contact_point, EntityType.CONTACT_POINT)
    b.add_uris(subject, DCT.relation, entity.relation)


EQUIPMENT = MappingStrategy(
    entity_type=EntityType.EQUIPMENT,
    rdf_class=EPOS.Equipment,
    v1=_equipment,
)

FACILITY = MappingStrategy(
    entity_type=EntityType.FACILITY,
    rdf_class=EPOS.Facility,
    v1=_facility,
)

STRATEGIES = (EQUIPMENT, FACILITY)
