"""
Shared fixtures for the scraper tests.
"""

import pytest

from .reference import ReferenceData


@pytest.fixture
def reference() -> ReferenceData:
    """Small reference tables covering the Port Pirie examples."""
    return ReferenceData.from_dicts(
        street_suburbs={
            "main street": ["PORT PIRIE SA 5540"],
            "smith street": ["ALPHA", "BETA"],
            "florence street": ["PORT PIRIE SA 5540", "SOLOMONTOWN SA 5540"],
            "napperby road": ["NAPPERBY SA 5540", "WARNERTOWN SA 5540"],
        },
        street_suffixes={
            "st": "Street",
            "rd": "Road",
            "tce": "Terrace",
        },
        suburb_names={
            "port pirie": "PORT PIRIE SA 5540",
            "solomontown": "SOLOMONTOWN SA 5540",
            "napperby": "NAPPERBY SA 5540",
        },
        hundred_suburbs={
            "example": ["BETA", "GAMMA"],
            "pirie": ["PORT PIRIE SA 5540", "SOLOMONTOWN SA 5540"],
            "napperby": ["NAPPERBY SA 5540"],
        },
    )
