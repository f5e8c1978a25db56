"""Testing infrastructure for wcs.groupmapper."""

from wcs.groupmapper.testing.mixins import FakeResponse
from wcs.groupmapper.testing.mixins import KeycloakClientTestMixin
from wcs.groupmapper.testing.mixins import MemoryRealmTestMixin


__all__ = [
    "FakeResponse",
    "KeycloakClientTestMixin",
    "MemoryRealmTestMixin",
]
