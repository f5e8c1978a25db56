"""Mapper configuration.

The operator configures a mapper instance with three options. The host
stores them as plain strings; MapperConfig turns them into typed values
once per invocation.
"""
from collections import namedtuple
from wcs.groupmapper import _


CLAIM = 'claim'
CONTAINS_TEXT = 'contains_text'
CREATE_GROUPS = 'create_groups'

# Declarative configuration schema, exposed to the host's admin UI
CONFIG_PROPERTIES = (
    {
        'id': CLAIM,
        'type': 'string',
        'mode': 'w',
        'label': _('Claim'),
        'help': _(
            "Name of claim to search for in token. This claim must be a string "
            "array with the names of the groups which the user is member. You "
            "can reference nested claims using a '.', i.e. 'address.locality'. "
            "To use dot (.) literally, escape it with backslash (\\.)"
        ),
    },
    {
        'id': CONTAINS_TEXT,
        'type': 'string',
        'mode': 'w',
        'label': _('Contains text'),
        'help': _(
            "Only sync groups that contains this text in its name. "
            "If empty, sync all groups."
        ),
    },
    {
        'id': CREATE_GROUPS,
        'type': 'boolean',
        'mode': 'w',
        'label': _('Create groups if not exists'),
        'help': _(
            "Indicates if missing groups must be created in the realms. "
            "Otherwise, they will be ignored."
        ),
    },
)


def parse_boolean(value):
    """Interpret a host config value as a boolean.

    Only ``True`` and strings equal to ``"true"`` (ignoring case) are true.
    Anything else, including a missing value, is false.

    Args:
        value: The raw config value.

    Returns:
        The boolean value.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == 'true'
    return False


class MapperConfig(namedtuple('MapperConfig', 'claim contains_text create_groups')):
    """Immutable per-invocation configuration of a claim to group mapper.

    Attributes:
        claim: Dotted path of the claim holding the group names.
        contains_text: Substring a group name must contain to be synced.
            Empty means every group is synced.
        create_groups: Whether missing groups are created in the realm.
    """

    __slots__ = ()

    def __new__(cls, claim='', contains_text='', create_groups=False):
        return super().__new__(
            cls, claim or '', contains_text or '', bool(create_groups)
        )

    @classmethod
    def from_mapping(cls, mapping):
        """Build a config from the host's string mapping.

        Args:
            mapping: Dict-like object keyed by property id, or None.

        Returns:
            MapperConfig instance.
        """
        mapping = mapping or {}
        return cls(
            claim=mapping.get(CLAIM) or '',
            contains_text=mapping.get(CONTAINS_TEXT) or '',
            create_groups=parse_boolean(mapping.get(CREATE_GROUPS)),
        )

    def matches(self, name):
        """Check if a group name falls within the sync scope.

        The check is a case-sensitive substring match; an empty
        ``contains_text`` matches every name.
        """
        return not self.contains_text or self.contains_text in name
