"""
Tests for application configuration (config.py).
"""

import json

import pytest

from fixtures import MINIMAL_APP_CONFIG, SAMPLE_APP_CONFIG
from epos_export.config import AppConfig, ExportConfig, OaiPmhConfig, SparqlConfig
from epos_export.constants import ExportLimits, OaiPmhDefaults, SparqlDefaults


@pytest.mark.unit
class TestAppConfig:
    """Tests for AppConfig.from_dict and from_file."""

    def test_from_dict(self):
        """Every block is read."""
        config = AppConfig.from_dict(SAMPLE_APP_CONFIG)

        assert config.export.entities_file == "entities.json"
        assert config.export.max_depth == 5
        assert config.oaipmh.page_size == 2
        assert config.oaipmh.base_url == "https://example.org/oai"
        assert config.sparql.endpoint is None
        assert config.sparql.max_retries == 2
        assert config.logging["level"] == "DEBUG"

    def test_defaults(self):
        """An empty document gives the defaults."""
        config = AppConfig.from_dict(MINIMAL_APP_CONFIG)

        assert config.export == ExportConfig()
        assert config.export.max_entities == ExportLimits.MAX_ENTITIES
        assert config.oaipmh.page_size == OaiPmhDefaults.PAGE_SIZE
        assert config.oaipmh.base_url == ""
        assert config.sparql.refresh_interval == SparqlDefaults.REFRESH_INTERVAL_SECONDS
        assert config.logging == {}

    def test_null_blocks(self):
        """Blocks set to null behave like missing blocks."""
        config = AppConfig.from_dict({"export": None, "oaipmh": None, "sparql": None, "logging": None})
        assert config.oaipmh == OaiPmhConfig()

    def test_empty_endpoint_means_in_process(self):
        """An empty endpoint string selects the in-process dataset."""
        assert SparqlConfig.from_dict({"endpoint": ""}).endpoint is None

    def test_from_file(self, tmp_path):
        """A JSON file loads like the dict form."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps(SAMPLE_APP_CONFIG), encoding="utf-8")
        assert AppConfig.from_file(str(path)).oaipmh.repository_name == "Test EPOS Repository"

    def test_from_file_missing(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            AppConfig.from_file(str(tmp_path / "missing.json"))

    def test_from_file_invalid_json(self, tmp_path):
        """Invalid JSON raises ValueError."""
        path = tmp_path / "config.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            AppConfig.from_file(str(path))

    def test_from_file_not_an_object(self, tmp_path):
        """The document must be a JSON object."""
        path = tmp_path / "config.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ValueError, match="JSON object"):
            AppConfig.from_file(str(path))

    def test_from_file_empty_path(self):
        """An empty path is rejected."""
        with pytest.raises(ValueError):
            AppConfig.from_file("")


@pytest.mark.unit
class TestOaiPmhConfig:
    """Tests for OaiPmhConfig validation."""

    @pytest.mark.parametrize("page_size", [0, -5])
    def test_page_size_must_be_positive(self, page_size):
        """Pages need at least one record."""
        with pytest.raises(ValueError, match="page_size"):
            OaiPmhConfig(page_size=page_size)

    def test_page_size_from_string(self):
        """Numeric strings are accepted."""
        assert OaiPmhConfig.from_dict({"page_size": "25"}).page_size == 25
