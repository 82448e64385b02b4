"""
Tests for the EPOS data model (shared/models).

This module tests:
- Version and EntityType parsing
- LinkedEntity construction from source values
- Entity.from_dict key handling, date parsing and reference walking
"""

from datetime import datetime, timezone

import pytest

from epos_export.shared.models import (
    DataProduct,
    Distribution,
    EntityType,
    LinkedEntity,
    Operation,
    SoftwareSourceCode,
    Version,
    entity_from_dict,
    first,
    parse_datetime,
    to_local_datetime,
    to_utc_instant,
)


@pytest.mark.unit
class TestVersion:
    """Tests for Version.parse."""

    def test_parse_is_case_insensitive(self):
        """Lower-case version names are accepted."""
        assert Version.parse("v1") is Version.V1
        assert Version.parse(" V3 ") is Version.V3

    def test_parse_blank_uses_default(self):
        """A blank value falls back to the default."""
        assert Version.parse(None, default=Version.V3) is Version.V3
        assert Version.parse("", default=Version.V1) is Version.V1

    def test_parse_unknown_raises(self):
        """Unknown versions are rejected."""
        with pytest.raises(ValueError, match="Unsupported version"):
            Version.parse("V2")

    def test_parse_blank_without_default_raises(self):
        """A blank value without a default is an error."""
        with pytest.raises(ValueError):
            Version.parse(None)


@pytest.mark.unit
class TestEntityType:
    """Tests for EntityType.parse."""

    @pytest.mark.parametrize("value", ["DataProduct", "DATA_PRODUCT", "dataproduct"])
    def test_parse_accepts_value_name_and_lower_case(self, value):
        """Type tags resolve from the value, the member name or lower case."""
        assert EntityType.parse(value) is EntityType.DATA_PRODUCT

    def test_parse_unknown_raises(self):
        """Unknown type tags raise ValueError."""
        with pytest.raises(ValueError, match="Unknown entity type"):
            EntityType.parse("Spaceship")


@pytest.mark.unit
class TestLinkedEntity:
    """Tests for LinkedEntity.from_value."""

    def test_from_dict(self):
        """Dictionaries carry uid, type tag and instance id."""
        ref = LinkedEntity.from_value({"uid": "u1", "entityType": "PERSON", "instanceId": "i1"})
        assert ref == LinkedEntity(uid="u1", entity_type="PERSON", instance_id="i1")

    def test_from_bare_uid(self):
        """A string is taken as an untyped uid."""
        assert LinkedEntity.from_value("u2") == LinkedEntity(uid="u2")

    def test_missing_uid_gives_none(self):
        """References without any uid are dropped."""
        assert LinkedEntity.from_value({"entityType": "PERSON"}) is None
        assert LinkedEntity.from_value("") is None
        assert LinkedEntity.from_value(None) is None

    def test_to_dict_omits_empty_fields(self):
        """Only set fields are serialized."""
        assert LinkedEntity(uid="u1").to_dict() == {"uid": "u1"}


@pytest.mark.unit
class TestEntityFromDict:
    """Tests for Entity.from_dict."""

    def test_camel_case_keys(self):
        """camelCase source keys fill snake_case attributes."""
        product = DataProduct.from_dict({
            "uid": "dp",
            "title": ["T"],
            "versionInfo": "1.0",
            "contactPoint": [{"uid": "cp", "entityType": "CONTACT_POINT"}],
        })
        assert product.version_info == "1.0"
        assert product.contact_point == [LinkedEntity(uid="cp", entity_type="CONTACT_POINT")]

    def test_field_aliases(self):
        """Keys that do not follow the camelCase rule use the declared aliases."""
        distribution = Distribution.from_dict({"uid": "d", "accessURL": ["https://a"], "downloadURL": "https://b"})
        assert distribution.access_url == ["https://a"]
        assert distribution.download_url == ["https://b"]

        code = SoftwareSourceCode.from_dict({"uid": "s", "licenseURL": "https://l", "mainEntityofPage": "https://p"})
        assert code.license_url == "https://l"
        assert code.main_entity_of_page == "https://p"

    def test_datetime_fields_are_parsed(self):
        """Date-time fields become timezone-aware datetimes when a zone is given."""
        product = DataProduct.from_dict({"uid": "dp", "modified": "2023-06-15T10:30:00Z"})
        assert product.modified == datetime(2023, 6, 15, 10, 30, tzinfo=timezone.utc)

    def test_missing_uid_raises(self):
        """Entities require a uid."""
        with pytest.raises(ValueError, match="uid"):
            DataProduct.from_dict({"title": ["T"]})

    def test_non_dict_raises(self):
        """Only dictionaries can be converted."""
        with pytest.raises(TypeError):
            DataProduct.from_dict(["dp"])

    def test_references_include_embedded_objects(self):
        """An operation's inline IRI template contributes its mapping references."""
        operation = entity_from_dict("OPERATION", {
            "uid": "op",
            "payload": [{"uid": "p1", "entityType": "PAYLOAD"}],
            "iriTemplateObject": {"uid": "_:t", "mappings": [{"uid": "_:m", "entityType": "MAPPING"}]},
        })
        assert isinstance(operation, Operation)
        assert [ref.uid for ref in operation.references()] == ["p1", "_:m"]
        assert [nested.uid for nested in operation.embedded()] == ["_:t"]


@pytest.mark.unit
class TestDateHelpers:
    """Tests for the date parsing and formatting helpers."""

    def test_parse_fractional_seconds(self):
        """Fractional seconds of any length are accepted."""
        parsed = parse_datetime("2024-01-15T10:30:00.5Z")
        assert parsed.microsecond == 500000

    def test_to_utc_instant_converts_offsets(self):
        """Offsets are normalized to UTC with a Z suffix."""
        assert to_utc_instant(parse_datetime("2024-01-15T12:30:00+02:00")) == "2024-01-15T10:30:00Z"

    def test_to_local_datetime_drops_zone(self):
        """Local form keeps the wall-clock time without zone."""
        assert to_local_datetime(parse_datetime("2024-01-15T10:30:00Z")) == "2024-01-15T10:30:00"

    def test_first(self):
        """first() returns the head of a list or None."""
        assert first(["a", "b"]) == "a"
        assert first([]) is None
        assert first(None) is None
