"""
Base types of the EPOS data model.

Entities are plain dataclasses. Every entity carries a globally unique ``uid``
and refers to other entities only through weak ``LinkedEntity`` references
(uid + type tag); resolving a reference is a repository lookup, never a
pointer dereference.

Reference-valued attributes are declared explicitly per class in
``REFERENCE_FIELDS`` so that traversal code does not need to introspect
arbitrary attributes.
"""

import re
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Tuple, Type, TypeVar


class Version(Enum):
    """EPOS-DCAT-AP vocabulary versions supported by the mappers."""
    V1 = "V1"
    V3 = "V3"

    @classmethod
    def parse(cls, value: Any, default: Optional["Version"] = None) -> "Version":
        """Parse a version from an enum member or a case-insensitive string."""
        if isinstance(value, cls):
            return value
        if value is None or str(value).strip() == "":
            if default is None:
                raise ValueError("Version must be one of: V1, V3")
            return default
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unsupported version '{value}'. Version must be one of: V1, V3")


class EntityType(str, Enum):
    """Type tags of the EPOS data model, in repository iteration order."""
    DATA_PRODUCT = "DataProduct"
    DISTRIBUTION = "Distribution"
    ORGANIZATION = "Organization"
    PERSON = "Person"
    CONTACT_POINT = "ContactPoint"
    ADDRESS = "Address"
    CATEGORY = "Category"
    CATEGORY_SCHEME = "CategoryScheme"
    IDENTIFIER = "Identifier"
    OPERATION = "Operation"
    LOCATION = "Location"
    PERIOD_OF_TIME = "PeriodOfTime"
    EQUIPMENT = "Equipment"
    FACILITY = "Facility"
    WEB_SERVICE = "WebService"
    SOFTWARE_APPLICATION = "SoftwareApplication"
    SOFTWARE_SOURCE_CODE = "SoftwareSourceCode"
    ATTRIBUTION = "Attribution"
    DOCUMENTATION = "Documentation"
    QUANTITATIVE_VALUE = "QuantitativeValue"
    MAPPING = "Mapping"
    OUTPUT_MAPPING = "OutputMapping"
    PAYLOAD = "Payload"
    IRI_TEMPLATE = "IriTemplate"
    ELEMENT = "Element"

    @classmethod
    def parse(cls, value: Any) -> "EntityType":
        """Resolve a type tag given as member, value (``DataProduct``) or name (``DATA_PRODUCT``)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name or text.lower() == member.value.lower():
                return member
        raise ValueError(f"Unknown entity type: {value}")


@dataclass(frozen=True)
class LinkedEntity:
    """Weak reference to another entity."""
    uid: str
    entity_type: Optional[str] = None
    instance_id: Optional[str] = None

    @classmethod
    def from_value(cls, value: Any) -> Optional["LinkedEntity"]:
        """Build a reference from a dict, an existing reference or a bare uid."""
        if value is None:
            return None
        if isinstance(value, LinkedEntity):
            return value
        if isinstance(value, str):
            return cls(uid=value) if value else None
        if isinstance(value, dict):
            uid = value.get("uid") or value.get("instanceId")
            if not uid:
                return None
            return cls(
                uid=uid,
                entity_type=value.get("entityType") or value.get("entity_type"),
                instance_id=value.get("instanceId") or value.get("instance_id"),
            )
        raise TypeError(f"Cannot build a LinkedEntity from {type(value).__name__}")

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"uid": self.uid}
        if self.entity_type:
            result["entityType"] = self.entity_type
        if self.instance_id:
            result["instanceId"] = self.instance_id
        return result


def _camel_case(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse ISO-8601 dates and date-times; a trailing ``Z`` means UTC."""
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat on older interpreters rejects fractional digits other than 3 or 6
    text = re.sub(r"\.(\d+)", lambda m: "." + (m.group(1) + "000000")[:6], text)
    return datetime.fromisoformat(text)


def to_utc_instant(value: datetime) -> str:
    """Format a date-time as an ISO instant (``2024-01-15T10:30:00Z``); naive values are UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond:
        text += f".{value.microsecond:06d}".rstrip("0")
    return text + "Z"


def to_local_datetime(value: datetime) -> str:
    """Format a date-time without zone information (``2024-01-15T10:30:00``)."""
    return value.replace(tzinfo=None).isoformat()


E = TypeVar("E", bound="Entity")


@dataclass
class Entity:
    """
    Base class of all EPOS data model entities.

    Subclasses declare:
        ENTITY_TYPE: their type tag.
        REFERENCE_FIELDS: attributes holding a LinkedEntity or a list of them.
        EMBEDDED_FIELDS: attributes holding a nested entity object.
        DATETIME_FIELDS: attributes parsed as ``datetime``.
        FIELD_ALIASES: source keys that do not follow the camelCase rule.
    """
    uid: str

    ENTITY_TYPE: ClassVar[EntityType]
    REFERENCE_FIELDS: ClassVar[Tuple[str, ...]] = ()
    EMBEDDED_FIELDS: ClassVar[Tuple[str, ...]] = ()
    DATETIME_FIELDS: ClassVar[Tuple[str, ...]] = ()
    FIELD_ALIASES: ClassVar[Dict[str, str]] = {}

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE

    def references(self) -> Iterator[LinkedEntity]:
        """Yield every outbound weak reference, including those of embedded objects."""
        for name in self.REFERENCE_FIELDS:
            value = getattr(self, name, None)
            if value is None:
                continue
            if isinstance(value, list):
                for item in value:
                    if isinstance(item, LinkedEntity):
                        yield item
            elif isinstance(value, LinkedEntity):
                yield value
        for name in self.EMBEDDED_FIELDS:
            nested = getattr(self, name, None)
            if isinstance(nested, Entity):
                yield from nested.references()

    def embedded(self) -> Iterator["Entity"]:
        """Yield nested entity objects (e.g. an operation's IRI template)."""
        for name in self.EMBEDDED_FIELDS:
            nested = getattr(self, name, None)
            if isinstance(nested, Entity):
                yield nested

    @classmethod
    def from_dict(cls: Type[E], data: Dict[str, Any]) -> E:
        """Create an entity from a dictionary using snake_case or camelCase keys."""
        if not isinstance(data, dict):
            raise TypeError(f"{cls.__name__} data must be a dict, got {type(data).__name__}")
        if not data.get("uid"):
            raise ValueError(f"{cls.__name__} requires a 'uid'")

        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name == "uid":
                kwargs["uid"] = data["uid"]
                continue
            key = next(
                (k for k in (f.name, _camel_case(f.name), cls.FIELD_ALIASES.get(f.name)) if k and k in data),
                None,
            )
            if key is None:
                continue
            value = cls._convert(f.name, data[key])
            if f.default_factory is list and value is not None and not isinstance(value, list):
                value = [value]
            if value is None and f.default_factory is list:
                value = []
            kwargs[f.name] = value
        return cls(**kwargs)

    @classmethod
    def _convert(cls, name: str, value: Any) -> Any:
        if value is None:
            return None
        if name in cls.REFERENCE_FIELDS:
            if isinstance(value, list):
                return [ref for ref in (LinkedEntity.from_value(v) for v in value) if ref is not None]
            return LinkedEntity.from_value(value)
        if name in cls.DATETIME_FIELDS:
            return parse_datetime(value)
        if name in cls.EMBEDDED_FIELDS and isinstance(value, dict):
            from .entities import entity_from_dict
            return entity_from_dict(value.get("entityType", "IriTemplate"), value)
        return value


def first(values: Optional[List[Any]]) -> Optional[Any]:
    """Return the first element of a list, or None for a missing/empty list."""
    if not values:
        return None
    return values[0]
