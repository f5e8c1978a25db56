"""Keycloak-backed realm, user and group implementation.

Adapts KeycloakAdminClient to the capability interfaces so the reconciler
can sync memberships of users stored in a Keycloak realm. Every call goes
to the Admin REST API; nothing is cached between calls.
"""
from wcs.groupmapper.client import KeycloakAdminClient
from wcs.groupmapper.interfaces import IBrokeredUser
from wcs.groupmapper.interfaces import IGroup
from wcs.groupmapper.interfaces import IRealm
from zope.interface import implementer
import logging


logger = logging.getLogger(__name__)


@implementer(IGroup)
class KeycloakGroup:
    """A Keycloak group, identified by its UUID."""

    def __init__(self, id, name, path=None):
        self.id = id
        self.name = name
        self.path = path or f"/{name}"

    @classmethod
    def from_representation(cls, data):
        """Build a group from a Keycloak group representation dict."""
        return cls(data['id'], data.get('name', ''), data.get('path'))

    def __eq__(self, other):
        return isinstance(other, KeycloakGroup) and other.id == self.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"<KeycloakGroup {self.path!r}>"


@implementer(IRealm)
class KeycloakRealm:
    """The group catalog of a Keycloak realm.

    Attributes:
        client: KeycloakAdminClient bound to the realm.
        name: The realm name.
    """

    def __init__(self, client):
        self.client = client
        self.name = client.realm

    @classmethod
    def from_settings(cls, server_url, realm, client_id, client_secret):
        """Create a realm with its own admin client.

        Args:
            server_url: Base URL of the Keycloak server.
            realm: The realm name.
            client_id: Service account client ID.
            client_secret: Service account client secret.

        Returns:
            KeycloakRealm instance.
        """
        return cls(KeycloakAdminClient(server_url, realm, client_id, client_secret))

    def list_groups(self):
        return [KeycloakGroup.from_representation(g) for g in self.client.list_groups()]

    def create_group(self, name):
        return KeycloakGroup.from_representation(self.client.create_group(name))

    def get_user(self, username):
        """Look up a user of the realm.

        Args:
            username: The username.

        Returns:
            KeycloakUser, or None if the realm has no such user.
        """
        data = self.client.get_user(username)
        if data is None:
            logger.debug(f"User {username} not found in Keycloak")
            return None
        return KeycloakUser(self.client, data['id'], data['username'])


@implementer(IBrokeredUser)
class KeycloakUser:
    """A Keycloak user whose memberships are managed through the API."""

    def __init__(self, client, id, username):
        self.client = client
        self.id = id
        self.username = username

    def __repr__(self):
        return f"<KeycloakUser {self.username!r}>"

    def list_groups(self):
        return [
            KeycloakGroup.from_representation(g)
            for g in self.client.get_groups_for_user(self.id)
        ]

    def join_group(self, group):
        self.client.add_user_to_group(self.id, group.id)

    def leave_group(self, group):
        self.client.remove_user_from_group(self.id, group.id)
