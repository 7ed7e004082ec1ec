import pytest

from spotfinder.config.settings import CategorySettings
from spotfinder.models.places import TagFilter
from tests.fakes import FakeLocationServices


@pytest.fixture
def fake_services():
    return FakeLocationServices()


@pytest.fixture
def chicken_filter():
    return TagFilter.from_settings(CategorySettings())
