"""
EPOS data model.

Re-exports the entity base types and the concrete entity classes.
"""

from .base import (
    Entity,
    EntityType,
    LinkedEntity,
    Version,
    first,
    parse_datetime,
    to_local_datetime,
    to_utc_instant,
)
from .entities import (
    ENTITY_CLASSES,
    Address,
    Attribution,
    Category,
    CategoryScheme,
    ContactPoint,
    DataProduct,
    Distribution,
    Documentation,
    Element,
    Equipment,
    Facility,
    Identifier,
    IriTemplate,
    Location,
    Mapping,
    Operation,
    Organization,
    OutputMapping,
    Payload,
    PeriodOfTime,
    Person,
    QuantitativeValue,
    SoftwareApplication,
    SoftwareSourceCode,
    WebService,
    entity_class,
    entity_from_dict,
)

__all__ = [
    # Base
    "Entity",
    "EntityType",
    "LinkedEntity",
    "Version",
    "first",
    "parse_datetime",
    "to_local_datetime",
    "to_utc_instant",
    # Entities
    "ENTITY_CLASSES",
    "Address",
    "Attribution",
    "Category",
    "CategoryScheme",
    "ContactPoint",
    "DataProduct",
    "Distribution",
    "Documentation",
    "Element",
    "Equipment",
    "Facility",
    "Identifier",
    "IriTemplate",
    "Location",
    "Mapping",
    "Operation",
    "Organization",
    "OutputMapping",
    "Payload",
    "PeriodOfTime",
    "Person",
    "QuantitativeValue",
    "SoftwareApplication",
    "SoftwareSourceCode",
    "WebService",
    "entity_class",
    "entity_from_dict",
]
