from datetime import date

import pytest

from garden_engine.growing_profile import (GrowingProfile,
                                           build_growing_profile,
                                           default_growing_profile)
from garden_engine.reference_data import refresh_reference_data


@pytest.fixture(autouse=True)
def _fresh_reference_data():
    """Reload datasets around every test so env overrides never leak."""
    refresh_reference_data()
    yield
    refresh_reference_data()


@pytest.fixture
def profile_7a() -> GrowingProfile:
    """Washington DC style profile: zone 7a, frosts 2025-04-01 / 2025-10-30."""
    profile = default_growing_profile(2025)
    assert profile.last_spring_frost == date(2025, 4, 1)
    return profile


@pytest.fixture
def tropical_profile() -> GrowingProfile:
    return build_growing_profile(21.3069, -157.8583, year=2025)


@pytest.fixture
def southern_profile() -> GrowingProfile:
    return build_growing_profile(-33.8688, 151.2093, year=2025)
