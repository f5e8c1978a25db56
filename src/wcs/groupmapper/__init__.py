"""Claim to group mapping for identity brokering.

This package keeps a brokered user's group memberships in sync with a claim
delivered by an external identity provider. On every federated login the
claim is read from the provider's tokens and the user's groups are
reconciled against it.

Features:
    - Claim Resolution: Read a (possibly nested) claim from the access
      token, the ID token or the userinfo response
    - Filtering: Only sync groups whose name contains a configured text
    - Group Sync: Remove stale memberships, add missing ones and optionally
      create groups that do not exist yet

Architecture:
    The reconciliation algorithm only talks to capability interfaces:
    - IRealm: Lists and creates groups
    - IBrokeredUser: Lists, joins and leaves groups
    - IGroup: A named group with a backend identity

    Backends implementing these interfaces are provided for:
    - Memory: Plain in-process objects
    - Keycloak: The Keycloak Admin REST API

Modules:
    - mapper: ClaimToGroupMapper invoked by the host on login events
    - reconciler: Group reconciliation logic
    - claims: Claim value normalization and lookup
    - config: Mapper configuration and its schema
    - client: KeycloakAdminClient REST API client
    - interfaces: Zope interface definitions
    - backends: Realm/user/group implementations

Example:
    Syncing a Keycloak user from an ID token::

        from wcs.groupmapper.backends.keycloak import KeycloakRealm
        from wcs.groupmapper.claims import BrokeredIdentityContext
        from wcs.groupmapper.mapper import ClaimToGroupMapper
        from wcs.groupmapper.mapper import MapperModel

        realm = KeycloakRealm.from_settings(
            'https://keycloak.example.com', 'corporate', 'svc-client', 'secret',
        )
        user = realm.get_user('jdoe')
        model = MapperModel(
            identity_provider_alias='corporate',
            config={'claim': 'groups', 'create_groups': 'true'},
        )
        context = BrokeredIdentityContext(id_token={'groups': ['staff']})
        ClaimToGroupMapper().update_brokered_user(realm, user, model, context)
"""
from zope.i18nmessageid import MessageFactory
import logging


_ = MessageFactory("wcs.groupmapper")
logger = logging.getLogger("wcs.groupmapper")
