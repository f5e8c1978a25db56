"""Test infrastructure for wcs.groupmapper."""
from unittest import TestCase
from wcs.groupmapper.claims import BrokeredIdentityContext
from wcs.groupmapper.testing.mixins import MemoryRealmTestMixin


def lookup_returning(value):
    """Build a claim lookup that always returns ``value``.

    The returned callable records its calls in ``calls``.
    """
    def lookup(context, claim):
        lookup.calls.append((context, claim))
        return value

    lookup.calls = []
    return lookup


class ReconcilerTesting(MemoryRealmTestMixin, TestCase):
    """Base class for tests running against an in-memory realm.

    Attributes:
        realm: The MemoryRealm, set up empty.
        context: An empty BrokeredIdentityContext.
    """

    def setUp(self):
        super().setUp()
        self._setup_realm()
        self.context = BrokeredIdentityContext(identity_provider_alias='test-idp')
