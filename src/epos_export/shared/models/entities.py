"""
Concrete entity classes of the EPOS data model.

Each class lists its reference-valued attributes in ``REFERENCE_FIELDS``;
the collector and the mappers only follow references through those
attributes. Scalar attributes mirror the source data model one to one.

Example:
    >>> product = DataProduct.from_dict({
    ...     "uid": "https://example.org/dataset/1",
    ...     "title": ["Seismic catalogue"],
    ...     "distribution": [{"uid": "https://example.org/dist/1", "entityType": "DISTRIBUTION"}],
    ... })
    >>> [ref.uid for ref in product.references()]
    ['https://example.org/dist/1']
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Type

from .base import Entity, EntityType, LinkedEntity


# ============================================================================
# Datasets and distributions
# ============================================================================

@dataclass
class DataProduct(Entity):
    """A dataset (``dcat:Dataset``)."""
    title: List[str] = field(default_factory=list)
    description: List[str] = field(default_factory=list)
    identifier: List[LinkedEntity] = field(default_factory=list)
    accrual_periodicity: Optional[str] = None
    created: Optional[datetime] = None
    issued: Optional[datetime] = None
    modified: Optional[datetime] = None
    version_info: Optional[str] = None
    type: Optional[str] = None
    spatial_extent: List[LinkedEntity] = field(default_factory=list)
    temporal_extent: List[LinkedEntity] = field(default_factory=list)
    category: List[LinkedEntity] = field(default_factory=list)
    keywords: Optional[str] = None
    contact_point: List[LinkedEntity] = field(default_factory=list)
    distribution: List[LinkedEntity] = field(default_factory=list)
    publisher: List[LinkedEntity] = field(default_factory=list)
    quality_assurance: Optional[str] = None

    ENTITY_TYPE = EntityType.DATA_PRODUCT
    REFERENCE_FIELDS = (
        "identifier", "spatial_extent", "temporal_extent", "category",
        "contact_point", "distribution", "publisher",
    )
    DATETIME_FIELDS = ("created", "issued", "modified")


@dataclass
class Distribution(Entity):
    title: List[str] = field(default_factory=list)
    description: List[str] = field(default_factory=list)
    access_url: List[str] = field(default_factory=list)
    download_url: List[str] = field(default_factory=list)
    format: Optional[str] = None
    licence: Optional[str] = None
    media_type: Optional[str] = None
    byte_size: Optional[str] = None
    issued: Optional[datetime] = None
    modified: Optional[datetime] = None
    access_service: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.DISTRIBUTION
    REFERENCE_FIELDS = ("access_service",)
    DATETIME_FIELDS = ("issued", "modified")
    FIELD_ALIASES = {"access_url": "accessURL", "download_url": "downloadURL"}


# ============================================================================
# Agents
# ============================================================================

@dataclass
class Organization(Entity):
    legal_name: List[str] = field(default_factory=list)
    logo: Optional[str] = None
    url: Optional[str] = None
    email: List[str] = field(default_factory=list)
    address: Optional[LinkedEntity] = None
    identifier: List[LinkedEntity] = field(default_factory=list)
    owns: List[LinkedEntity] = field(default_factory=list)
    member_of: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.ORGANIZATION
    REFERENCE_FIELDS = ("address", "identifier", "owns", "member_of")
    FIELD_ALIASES = {"url": "URL"}


@dataclass
class Person(Entity):
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    email: List[str] = field(default_factory=list)
    telephone: List[str] = field(default_factory=list)
    address: Optional[LinkedEntity] = None
    identifier: List[LinkedEntity] = field(default_factory=list)
    qualifications: List[str] = field(default_factory=list)
    affiliation: List[LinkedEntity] = field(default_factory=list)
    contact_point: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.PERSON
    REFERENCE_FIELDS = ("address", "identifier", "affiliation", "contact_point")


@dataclass
class ContactPoint(Entity):
    email: List[str] = field(default_factory=list)
    language: List[str] = field(default_factory=list)
    role: Optional[str] = None

    ENTITY_TYPE = EntityType.CONTACT_POINT


@dataclass
class Address(Entity):
    street: Optional[str] = None
    locality: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

    ENTITY_TYPE = EntityType.ADDRESS


@dataclass
class Identifier(Entity):
    """A typed identifier such as a DOI (``type="DOI"``)."""
    type: Optional[str] = None
    identifier: Optional[str] = None

    ENTITY_TYPE = EntityType.IDENTIFIER


# ============================================================================
# Categories
# ============================================================================

@dataclass
class Category(Entity):
    name: Optional[str] = None
    description: Optional[str] = None
    in_scheme: Optional[LinkedEntity] = None
    broader: List[LinkedEntity] = field(default_factory=list)
    narrower: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.CATEGORY
    REFERENCE_FIELDS = ("in_scheme", "broader", "narrower")


@dataclass
class CategoryScheme(Entity):
    title: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    homepage: Optional[str] = None
    color: Optional[str] = None
    orderitemnumber: Optional[str] = None
    top_concepts: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.CATEGORY_SCHEME
    REFERENCE_FIELDS = ("top_concepts",)


# ============================================================================
# Spatial and temporal values
# ============================================================================

@dataclass
class Location(Entity):
    """A geometry in WKT (``POINT(12.5 41.9)``)."""
    location: Optional[str] = None

    ENTITY_TYPE = EntityType.LOCATION


@dataclass
class PeriodOfTime(Entity):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    ENTITY_TYPE = EntityType.PERIOD_OF_TIME
    DATETIME_FIELDS = ("start_date", "end_date")


@dataclass
class QuantitativeValue(Entity):
    value: Optional[str] = None
    unit: Optional[str] = None

    ENTITY_TYPE = EntityType.QUANTITATIVE_VALUE


# ============================================================================
# Facilities and equipment
# ============================================================================

@dataclass
class Equipment(Entity):
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    identifier: Optional[str] = None
    serial_number: Optional[str] = None
    filter: Optional[str] = None
    resolution: Optional[str] = None
    orientation: Optional[str] = None
    dynamic_range: Optional[str] = None
    sample_period: Optional[str] = None
    page_url: Optional[str] = None
    manufacturer: Optional[LinkedEntity] = None
    is_part_of: List[LinkedEntity] = field(default_factory=list)
    spatial_extent: List[LinkedEntity] = field(default_factory=list)
    temporal_extent: List[LinkedEntity] = field(default_factory=list)
    category: List[LinkedEntity] = field(default_factory=list)
    contact_point: List[LinkedEntity] = field(default_factory=list)
    relation: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.EQUIPMENT
    REFERENCE_FIELDS = (
        "manufacturer", "is_part_of", "spatial_extent", "temporal_extent",
        "category", "contact_point", "relation",
    )
    FIELD_ALIASES = {"page_url": "pageURL"}


@dataclass
class Facility(Entity):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    identifier: Optional[str] = None
    page_url: List[str] = field(default_factory=list)
    address: List[LinkedEntity] = field(default_factory=list)
    spatial_extent: List[LinkedEntity] = field(default_factory=list)
    category: List[LinkedEntity] = field(default_factory=list)
    contact_point: List[LinkedEntity] = field(default_factory=list)
    relation: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.FACILITY
    REFERENCE_FIELDS = ("address", "spatial_extent", "category", "contact_point", "relation")
    FIELD_ALIASES = {"page_url": "pageURL"}


# ============================================================================
# Services and operations
# ============================================================================

@dataclass
class WebService(Entity):
    name: Optional[str] = None
    description: Optional[str] = None
    license: Optional[str] = None
    entry_point: Optional[str] = None
    date_published: Optional[datetime] = None
    date_modified: Optional[datetime] = None
    keywords: Optional[str] = None
    provider: Optional[LinkedEntity] = None
    supported_operation: List[LinkedEntity] = field(default_factory=list)
    spatial_extent: List[LinkedEntity] = field(default_factory=list)
    temporal_extent: List[LinkedEntity] = field(default_factory=list)
    category: List[LinkedEntity] = field(default_factory=list)
    contact_point: List[LinkedEntity] = field(default_factory=list)
    identifier: List[LinkedEntity] = field(default_factory=list)
    documentation: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.WEB_SERVICE
    REFERENCE_FIELDS = (
        "provider", "supported_operation", "spatial_extent", "temporal_extent",
        "category", "contact_point", "identifier", "documentation",
    )
    DATETIME_FIELDS = ("date_published", "date_modified")


@dataclass
class Mapping(Entity):
    """A variable binding of an IRI template."""
    variable: Optional[str] = None
    property: Optional[str] = None
    range: Optional[str] = None
    label: Optional[str] = None
    value_pattern: Optional[str] = None
    default_value: Optional[str] = None
    min_value: Optional[str] = None
    max_value: Optional[str] = None
    multiple_values: Optional[str] = None
    read_only_value: Optional[str] = None
    required: Optional[str] = None
    param_value: List[str] = field(default_factory=list)

    ENTITY_TYPE = EntityType.MAPPING


@dataclass
class IriTemplate(Entity):
    template: Optional[str] = None
    mappings: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.IRI_TEMPLATE
    REFERENCE_FIELDS = ("mappings",)


@dataclass
class OutputMapping(Entity):
    output_variable: Optional[str] = None
    output_property: Optional[str] = None
    output_label: Optional[str] = None
    output_required: Optional[str] = None

    ENTITY_TYPE = EntityType.OUTPUT_MAPPING


@dataclass
class Payload(Entity):
    output_mapping: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.PAYLOAD
    REFERENCE_FIELDS = ("output_mapping",)


@dataclass
class Operation(Entity):
    """
    A web service operation.

    The IRI template is held inline (``iri_template``) rather than as a
    reference; its mapping references are still followed by the collector.
    """
    method: Optional[str] = None
    returns: List[str] = field(default_factory=list)
    iri_template: Optional[IriTemplate] = None
    payload: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.OPERATION
    REFERENCE_FIELDS = ("payload",)
    EMBEDDED_FIELDS = ("iri_template",)
    FIELD_ALIASES = {"iri_template": "iriTemplateObject"}


@dataclass
class Documentation(Entity):
    title: Optional[str] = None
    description: Optional[str] = None
    uri: Optional[str] = None

    ENTITY_TYPE = EntityType.DOCUMENTATION


@dataclass
class Attribution(Entity):
    agent: Optional[LinkedEntity] = None
    role: List[str] = field(default_factory=list)

    ENTITY_TYPE = EntityType.ATTRIBUTION
    REFERENCE_FIELDS = ("agent",)


# ============================================================================
# Software
# ============================================================================

@dataclass
class SoftwareApplication(Entity):
    name: Optional[str] = None
    description: Optional[str] = None
    download_url: Optional[str] = None
    requirements: Optional[str] = None
    category: List[LinkedEntity] = field(default_factory=list)
    contact_point: List[LinkedEntity] = field(default_factory=list)
    identifier: List[LinkedEntity] = field(default_factory=list)
    related_operation: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.SOFTWARE_APPLICATION
    REFERENCE_FIELDS = ("category", "contact_point", "identifier", "related_operation")
    FIELD_ALIASES = {"download_url": "downloadURL"}


@dataclass
class SoftwareSourceCode(Entity):
    name: Optional[str] = None
    description: Optional[str] = None
    identifier: List[LinkedEntity] = field(default_factory=list)
    code_repository: Optional[str] = None
    keywords: Optional[str] = None
    license_url: Optional[str] = None
    main_entity_of_page: Optional[str] = None
    programming_language: List[str] = field(default_factory=list)
    runtime_platform: Optional[str] = None
    software_version: Optional[str] = None
    contact_point: List[LinkedEntity] = field(default_factory=list)
    relation: List[LinkedEntity] = field(default_factory=list)
    category: List[LinkedEntity] = field(default_factory=list)
    author: List[LinkedEntity] = field(default_factory=list)
    contributor: List[LinkedEntity] = field(default_factory=list)
    creator: List[LinkedEntity] = field(default_factory=list)
    funder: List[LinkedEntity] = field(default_factory=list)
    maintainer: List[LinkedEntity] = field(default_factory=list)
    provider: List[LinkedEntity] = field(default_factory=list)
    publisher: List[LinkedEntity] = field(default_factory=list)

    ENTITY_TYPE = EntityType.SOFTWARE_SOURCE_CODE
    REFERENCE_FIELDS = (
        "identifier", "contact_point", "relation", "category", "author",
        "contributor", "creator", "funder", "maintainer", "provider", "publisher",
    )
    FIELD_ALIASES = {"license_url": "licenseURL", "main_entity_of_page": "mainEntityofPage"}


@dataclass
class Element(Entity):
    """Generic typed value (telephone, e-mail, ...) of the source model; it has no RDF form."""
    type: Optional[str] = None
    value: Optional[str] = None

    ENTITY_TYPE = EntityType.ELEMENT


ENTITY_CLASSES: Dict[EntityType, Type[Entity]] = {
    cls.ENTITY_TYPE: cls
    for cls in (
        DataProduct, Distribution, Organization, Person, ContactPoint, Address,
        Category, CategoryScheme, Identifier, Operation, Location, PeriodOfTime,
        Equipment, Facility, WebService, SoftwareApplication, SoftwareSourceCode,
        Attribution, Documentation, QuantitativeValue, Mapping, OutputMapping,
        Payload, IriTemplate, Element,
    )
}


def entity_class(entity_type: Any) -> Type[Entity]:
    """Return the entity class for a type tag."""
    return ENTITY_CLASSES[EntityType.parse(entity_type)]


def entity_from_dict(entity_type: Any, data: Dict[str, Any]) -> Entity:
    """Build an entity of the given type from a source dictionary."""
    return entity_class(entity_type).from_dict(data)
