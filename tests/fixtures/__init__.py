"""
Centralized test fixtures for the EPOS metadata export test suite.

Usage:
    from fixtures import SAMPLE_ENTITIES, SAMPLE_APP_CONFIG

Or use the pytest fixtures in conftest.py which build stores and services
from these.
"""

from .config_fixtures import MINIMAL_APP_CONFIG, SAMPLE_APP_CONFIG
from .entity_fixtures import (
    CATEGORY_SCHEME_1,
    CATEGORY_SEISMOLOGY,
    CONTACT_POINT_1,
    DATASET_1,
    DATASET_2,
    DATASET_NO_DESCRIPTION,
    DISTRIBUTION_1,
    HARVESTABLE_V1_RECORDS,
    OPERATION_1,
    ORGANIZATION_1,
    SAMPLE_ENTITIES,
    WEB_SERVICE_1,
    ref,
)

__all__ = [
    "CATEGORY_SCHEME_1",
    "CATEGORY_SEISMOLOGY",
    "CONTACT_POINT_1",
    "DATASET_1",
    "DATASET_2",
    "DATASET_NO_DESCRIPTION",
    "DISTRIBUTION_1",
    "HARVESTABLE_V1_RECORDS",
    "MINIMAL_APP_CONFIG",
    "OPERATION_1",
    "ORGANIZATION_1",
    "SAMPLE_APP_CONFIG",
    "SAMPLE_ENTITIES",
    "WEB_SERVICE_1",
    "ref",
]
