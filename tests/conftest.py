"""
Pytest configuration and fixtures for the test suite.

Defines markers for selective test execution:
    pytest -m unit          # Fast unit tests
    pytest -m integration   # Export and harvesting pipelines end to end
    pytest -m resilience    # Retries, degraded start, refresh failures

Fixtures are centralized in tests/fixtures/ for reuse across all test modules.
"""

import copy
import json
import os
import sys

import pytest

# Patch tenacity's sleep before anything builds a Retrying object
import tenacity.nap
tenacity.nap.sleep = lambda seconds: None

# Add src to path for imports
src_dir = os.path.join(os.path.dirname(__file__), '..', 'src')
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

# Add tests directory to path for fixtures import
tests_dir = os.path.dirname(__file__)
if tests_dir not in sys.path:
    sys.path.insert(1, tests_dir)

from fixtures import SAMPLE_APP_CONFIG, SAMPLE_ENTITIES

from epos_export.config import OaiPmhConfig
from epos_export.core import InMemoryEntityStore, MetadataExporter
from epos_export.core.sparql import SparqlService
from epos_export.formats.oaipmh import OaiPmhService
from epos_export.shared.models import Version


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Export and harvesting pipelines end to end")
    config.addinivalue_line("markers", "resilience: Retries, degraded start and refresh failures")


# =============================================================================
# Entity Fixtures
# =============================================================================

@pytest.fixture
def sample_entities():
    """Deep copy of the sample entity document."""
    return copy.deepcopy(SAMPLE_ENTITIES)


@pytest.fixture
def entity_store(sample_entities):
    """In-memory store loaded with the sample entities."""
    return InMemoryEntityStore.from_dict(sample_entities)


@pytest.fixture
def exporter(entity_store):
    return MetadataExporter(entity_store)


@pytest.fixture
def entities_file(tmp_path, sample_entities):
    """Sample entity document written to a JSON file."""
    path = tmp_path / "entities.json"
    path.write_text(json.dumps(sample_entities), encoding="utf-8")
    return str(path)


# =============================================================================
# Harvesting Fixtures
# =============================================================================

@pytest.fixture
def sparql_service(exporter):
    """Initialized V1 snapshot of the sample entities."""
    service = SparqlService(exporter, versions=(Version.V1,))
    assert service.initialize()
    return service


@pytest.fixture
def oai_config():
    return OaiPmhConfig(
        repository_name="Test EPOS Repository",
        admin_email="admin@example.org",
        base_url="https://example.org/oai",
        page_size=3,
    )


@pytest.fixture
def oai_service(sparql_service, oai_config):
    return OaiPmhService(sparql_service, oai_config)


# =============================================================================
# Config Fixtures
# =============================================================================

@pytest.fixture
def config_file(tmp_path, entities_file):
    """Application config pointing at the sample entity file."""
    config = copy.deepcopy(SAMPLE_APP_CONFIG)
    config["export"]["entities_file"] = entities_file
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return str(path)
