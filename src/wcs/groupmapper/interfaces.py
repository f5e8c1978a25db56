"""Interfaces for wcs.groupmapper.

This module defines the Zope interfaces the group reconciliation works
against. Any identity backend can take part in the sync by providing them.

Interfaces:
    IGroup: A group within a realm
    IRealm: The group catalog of a tenant
    IBrokeredUser: A local user provisioned from an external identity provider
    IClaimGroupMapper: The identity provider mapper invoked by the host

The reconciler never inspects concrete classes; it only calls the methods
declared here. See wcs.groupmapper.backends for the shipped implementations.
"""
from zope.interface import Attribute
from zope.interface import Interface


class IGroup(Interface):
    """A group within a realm.

    Two group objects denote the same group when their ``id`` is equal.
    The reconciler relies on this to compute set differences, so backends
    may return fresh objects on every listing.
    """

    id = Attribute("Backend identity of the group")
    name = Attribute("Name of the group, unique within its realm")


class IRealm(Interface):
    """The group catalog of a tenant."""

    name = Attribute("Name of the realm")

    def list_groups():
        """Return all groups of the realm.

        Returns:
            Sequence of IGroup.
        """

    def create_group(name):
        """Create a group with the given name.

        Args:
            name: The group name.

        Returns:
            The created IGroup.
        """


class IBrokeredUser(Interface):
    """A local user provisioned from an external identity provider."""

    id = Attribute("Backend identity of the user")
    username = Attribute("Login name of the user")

    def list_groups():
        """Return the groups the user is a member of.

        Returns:
            Sequence of IGroup.
        """

    def join_group(group):
        """Make the user a member of ``group``."""

    def leave_group(group):
        """Remove the user from ``group``."""


class IClaimGroupMapper(Interface):
    """Identity provider mapper syncing groups from a token claim.

    The host calls one of the two lifecycle methods during a federated
    login. Both receive the realm, the local user, the mapper model holding
    the operator configuration and the brokered identity context carrying
    the provider's tokens.
    """

    def get_config_properties():
        """Return the declarative configuration schema of the mapper."""

    def import_new_user(realm, user, mapper_model, context):
        """Called when a user is imported from the identity provider."""

    def update_brokered_user(realm, user, mapper_model, context):
        """Called when an existing brokered user logs in again."""
