"""In-memory realm, user and group implementation."""
from wcs.groupmapper.interfaces import IBrokeredUser
from wcs.groupmapper.interfaces import IGroup
from wcs.groupmapper.interfaces import IRealm
from zope.interface import implementer
import itertools
import logging


logger = logging.getLogger(__name__)


class GroupExistsError(ValueError):
    """Raised when creating a group whose name is already taken."""


@implementer(IGroup)
class MemoryGroup:
    """A group held in memory.

    Attributes:
        id: Sequential identity assigned by the realm.
        name: The group name.
        members: Set of member user ids.
    """

    def __init__(self, id, name):
        self.id = id
        self.name = name
        self.members = set()

    def __repr__(self):
        return f"<MemoryGroup {self.name!r}>"


@implementer(IRealm)
class MemoryRealm:
    """A realm keeping its groups and users in dicts."""

    def __init__(self, name='memory'):
        self.name = name
        self._groups = {}
        self._users = {}
        self._ids = itertools.count(1)

    def list_groups(self):
        return list(self._groups.values())

    def create_group(self, name):
        """Create a group.

        Raises:
            GroupExistsError: If a group with this name exists.
        """
        if any(g.name == name for g in self._groups.values()):
            raise GroupExistsError(f"Group {name} already exists")
        group = MemoryGroup(f"group-{next(self._ids)}", name)
        self._groups[group.id] = group
        logger.debug(f"Created group {name} in realm {self.name}")
        return group

    def get_group(self, group_id):
        return self._groups.get(group_id)

    def add_user(self, username):
        """Add a user to the realm, returning the existing one if present."""
        user = self._users.get(username)
        if user is None:
            user = MemoryUser(self, username)
            self._users[username] = user
        return user

    def get_user(self, username):
        return self._users.get(username)


@implementer(IBrokeredUser)
class MemoryUser:
    """A user of a MemoryRealm.

    Memberships are stored on the groups, so a group's ``members`` and the
    user's ``list_groups()`` always agree.
    """

    def __init__(self, realm, username):
        self.realm = realm
        self.id = username
        self.username = username

    def __repr__(self):
        return f"<MemoryUser {self.username!r}>"

    def list_groups(self):
        return [g for g in self.realm.list_groups() if self.id in g.members]

    def join_group(self, group):
        self.realm.get_group(group.id).members.add(self.id)

    def leave_group(self, group):
        self.realm.get_group(group.id).members.discard(self.id)
