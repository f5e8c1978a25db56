"""Group membership reconciliation.

Brings the memberships of a brokered user into agreement with the group
names carried by an identity provider claim. Only groups whose name
matches the configured filter take part in the sync; all other
memberships are left alone.
"""
from wcs.groupmapper.claims import ABSENT
from wcs.groupmapper.claims import to_claim_value
import logging


logger = logging.getLogger(__name__)


def _group_names(groups):
    return ','.join(g.name for g in groups.values())


def _by_id(groups):
    """Index groups by their backend identity, preserving order."""
    return {group.id: group for group in groups}


def index_groups_by_name(groups):
    """Index groups by exact name.

    The first group carrying a name wins, so a later group with the same
    name is never matched.

    Args:
        groups: Iterable of IGroup.

    Returns:
        Dict of IGroup keyed by group name.
    """
    index = {}
    for group in groups:
        index.setdefault(group.name, group)
    return index


def get_current_groups(user, config):
    """Return the user's groups within the sync scope, keyed by id."""
    return _by_id(g for g in user.list_groups() if config.matches(g.name))


def get_new_group_names(claim_value, config):
    """Return the claimed group names within the sync scope."""
    return {name for name in claim_value.names() if config.matches(name)}


def get_new_groups(realm, group_names, create_groups, stats=None):
    """Resolve group names to groups of the realm.

    Names without a matching group are created when ``create_groups`` is
    set and dropped otherwise.

    Args:
        realm: IRealm the groups belong to.
        group_names: Iterable of group names.
        create_groups: Whether missing groups are created.
        stats: Optional stats dict, ``groups_created`` is incremented.

    Returns:
        Dict of IGroup keyed by group id.
    """
    groups = {}
    by_name = index_groups_by_name(realm.list_groups())

    for group_name in sorted(group_names):
        group = by_name.get(group_name)

        if group is None and create_groups:
            logger.debug(f"Realm [{realm.name}]: creating group [{group_name}]")
            group = realm.create_group(group_name)
            by_name[group_name] = group
            if stats is not None:
                stats['groups_created'] += 1

        if group is not None:
            groups[group.id] = group

    return groups


def get_groups_to_be_removed(current_groups, new_groups):
    """Groups the user is in but the claim no longer names."""
    return {gid: g for gid, g in current_groups.items() if gid not in new_groups}


def get_groups_to_be_added(current_groups, new_groups):
    """Groups the claim names but the user is not in yet."""
    return {gid: g for gid, g in new_groups.items() if gid not in current_groups}


def reconcile(realm, user, config, claim_lookup, context, identity_provider_alias=''):
    """Sync a user's group memberships with a claim.

    Nothing happens when no claim is configured or when the claim is not
    part of this login. Otherwise the user leaves every in-scope group the
    claim does not name and then joins every named group.

    Errors raised by the realm or the user propagate unchanged. Memberships
    changed before the error stay changed.

    Args:
        realm: IRealm of the user.
        user: IBrokeredUser to sync.
        config: MapperConfig of the mapper.
        claim_lookup: Callable ``(context, claim) -> value or None``.
        context: The brokered identity context passed to ``claim_lookup``.
        identity_provider_alias: Alias of the identity provider, for logging.

    Returns:
        Dict with sync statistics: groups_added, groups_removed,
        groups_created.
    """
    stats = {'groups_added': 0, 'groups_removed': 0, 'groups_created': 0}

    # do nothing if no claim was configured
    if not config.claim:
        return stats

    claim_value = to_claim_value(claim_lookup(context, config.claim))
    # the provider may omit the claim on some logins, keep memberships as they are
    if claim_value is ABSENT:
        logger.debug(
            f"Realm [{realm.name}], IdP [{identity_provider_alias}]: no group claim "
            f"(claim name: [{config.claim}]) for user [{user.username}], ignoring..."
        )
        return stats

    logger.debug(
        f"Realm [{realm.name}], IdP [{identity_provider_alias}]: "
        f"starting mapping groups for user [{user.username}]"
    )

    current_groups = get_current_groups(user, config)
    logger.debug(
        f"Realm [{realm.name}], IdP [{identity_provider_alias}]: current groups "
        f"for user [{user.username}]: {_group_names(current_groups)}"
    )

    new_group_names = get_new_group_names(claim_value, config)
    new_groups = get_new_groups(realm, new_group_names, config.create_groups, stats)
    logger.debug(
        f"Realm [{realm.name}], IdP [{identity_provider_alias}]: new groups "
        f"for user [{user.username}]: {_group_names(new_groups)}"
    )

    for group in get_groups_to_be_removed(current_groups, new_groups).values():
        user.leave_group(group)
        stats['groups_removed'] += 1

    for group in get_groups_to_be_added(current_groups, new_groups).values():
        user.join_group(group)
        stats['groups_added'] += 1

    logger.debug(
        f"Realm [{realm.name}], IdP [{identity_provider_alias}]: "
        f"finishing mapping groups for user [{user.username}]"
    )
    return stats
