"""
Configuration test fixtures.
"""

SAMPLE_APP_CONFIG = {
    "export": {
        "entities_file": "entities.json",
        "default_format": "turtle",
        "default_version": "V1",
        "max_depth": 5,
        "max_entities": 200,
    },
    "oaipmh": {
        "repository_name": "Test EPOS Repository",
        "admin_email": "admin@example.org",
        "base_url": "https://example.org/oai",
        "page_size": 2,
        "epos_version": "V1",
    },
    "sparql": {
        "endpoint": None,
        "timeout": 10,
        "max_retries": 2,
        "refresh_interval": 600,
    },
    "logging": {
        "level": "DEBUG",
        "format": "text",
    },
}

MINIMAL_APP_CONFIG = {}
