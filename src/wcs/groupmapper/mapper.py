"""Claim to group identity provider mapper.

This module provides the mapper the host authentication server invokes
during federated logins. It reads the operator configuration of the
mapper instance and hands over to the reconciler.
"""
from wcs.groupmapper.claims import get_claim_value
from wcs.groupmapper.config import CONFIG_PROPERTIES
from wcs.groupmapper.config import MapperConfig
from wcs.groupmapper.interfaces import IClaimGroupMapper
from wcs.groupmapper.reconciler import reconcile
from zope.interface import implementer
import logging


logger = logging.getLogger(__name__)


PROVIDER_ID = 'oidc-group-idp-mapper'

COMPATIBLE_PROVIDERS = (
    'keycloak-oidc',
    'oidc',
)


class MapperModel:
    """A configured mapper instance as stored by the host.

    Attributes:
        name: Name of the mapper instance.
        identity_provider_alias: Alias of the identity provider it belongs to.
        config: Dict of string config values keyed by property id.
    """

    def __init__(self, name='', identity_provider_alias='', config=None):
        self.name = name
        self.identity_provider_alias = identity_provider_alias
        self.config = dict(config or {})


@implementer(IClaimGroupMapper)
class ClaimToGroupMapper:
    """Identity provider mapper syncing the user's groups from a claim.

    On every federated login the mapper reads the configured claim and
    syncs the user's groups with the realm groups named in it:

    1. Groups matching the ``contains_text`` filter that are not named in
       the claim are left
    2. Groups named in the claim are joined, created first if
       ``create_groups`` is set

    A login without the claim leaves the memberships untouched.

    Attributes:
        claim_lookup: Callable ``(context, claim) -> value or None`` used to
            read the claim. Defaults to get_claim_value().
    """

    display_category = 'Group Importer'
    display_type = 'Claim to Group Mapper'
    help_text = "If a claim exists, sync the IdP user's groups with realm groups"

    def __init__(self, claim_lookup=None):
        self.claim_lookup = claim_lookup or get_claim_value

    def get_id(self):
        return PROVIDER_ID

    def get_compatible_providers(self):
        return COMPATIBLE_PROVIDERS

    def get_config_properties(self):
        return CONFIG_PROPERTIES

    #
    # Host lifecycle events
    #
    def import_new_user(self, realm, user, mapper_model, context):
        """Sync groups of a user just imported from the identity provider.

        Args:
            realm: IRealm of the user.
            user: The newly created IBrokeredUser.
            mapper_model: MapperModel holding the configuration.
            context: BrokeredIdentityContext of the login.

        Returns:
            Dict with sync statistics, see reconcile().
        """
        logger.debug(
            f"Realm [{realm.name}], IdP [{mapper_model.identity_provider_alias}]: "
            f"importing new user [{user.username}]"
        )
        return self.sync_groups(realm, user, mapper_model, context)

    def update_brokered_user(self, realm, user, mapper_model, context):
        """Sync groups of an existing user logging in again.

        Args:
            realm: IRealm of the user.
            user: The IBrokeredUser.
            mapper_model: MapperModel holding the configuration.
            context: BrokeredIdentityContext of the login.

        Returns:
            Dict with sync statistics, see reconcile().
        """
        logger.debug(
            f"Realm [{realm.name}], IdP [{mapper_model.identity_provider_alias}]: "
            f"updating brokered user [{user.username}]"
        )
        return self.sync_groups(realm, user, mapper_model, context)

    def sync_groups(self, realm, user, mapper_model, context):
        config = MapperConfig.from_mapping(mapper_model.config)
        return reconcile(
            realm,
            user,
            config,
            self.claim_lookup,
            context,
            identity_provider_alias=mapper_model.identity_provider_alias,
        )
