"""Keycloak Admin REST API client."""

import logging
import requests


logger = logging.getLogger(__name__)

# Page size used when listing all groups of a realm
GROUP_PAGE_SIZE = 100


class KeycloakAdminClient:
    """Client for Keycloak Admin REST API group operations."""

    def __init__(self, server_url, realm, client_id, client_secret):
        """Initialize the Keycloak admin client.

        Args:
            server_url: Base URL of the Keycloak server
                (e.g., 'https://keycloak.example.com')
            realm: The realm to manage groups in
            client_id: Client ID of a service account with the
                manage-users and query-groups roles
            client_secret: Client secret for authentication
        """
        self.server_url = server_url.rstrip("/")
        self.realm = realm
        self.client_id = client_id
        self.client_secret = client_secret
        self._access_token = None
        self._session = requests.Session()

    def _get_token_url(self):
        return f"{self.server_url}/realms/{self.realm}/protocol/openid-connect/token"

    def _get_admin_url(self):
        return f"{self.server_url}/admin/realms/{self.realm}"

    def _authenticate(self):
        """Authenticate with Keycloak and get an access token.

        Returns:
            Access token string.

        Raises:
            KeycloakAuthenticationError: If authentication fails.
        """
        token_url = self._get_token_url()
        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }

        try:
            response = self._session.post(token_url, data=data)
            response.raise_for_status()
            token_data = response.json()
            self._access_token = token_data["access_token"]
            return self._access_token
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to authenticate with Keycloak: {e}")
            raise KeycloakAuthenticationError(f"Authentication failed: {e}") from e

    def _get_headers(self):
        if not self._access_token:
            self._authenticate()
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
        }

    def _make_request(self, method, url, **kwargs):
        """Make an authenticated request to Keycloak, handling token refresh.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            url: Full URL for the request
            **kwargs: Additional arguments for requests

        Returns:
            Response object.
        """
        headers = kwargs.pop("headers", {})
        headers.update(self._get_headers())
        logger.info(f"Making {method} request to {url}")
        response = self._session.request(method, url, headers=headers, **kwargs)

        # If token expired, refresh and retry once
        if response.status_code == 401:
            self._access_token = None
            headers.update(self._get_headers())
            response = self._session.request(method, url, headers=headers, **kwargs)

        return response

    def _get_json(self, url, params=None, what="resource"):
        """GET a JSON resource, raising KeycloakError on failure."""
        try:
            response = self._make_request("GET", url, params=params)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to get {what}: {e}")
            raise KeycloakError(f"Failed to get {what}: {e}") from e

    def get_user(self, username):
        """Get a user by username.

        Args:
            username: The username to look up.

        Returns:
            User dict if found, None otherwise.
        """
        url = f"{self._get_admin_url()}/users"
        params = {"username": username, "exact": "true"}
        users = self._get_json(url, params=params, what=f"user {username}")
        for user in users:
            if user.get("username") == username:
                return user
        return None

    def search_groups(self, search=None, exact=False, first=0, max_results=None):
        """Search for groups in Keycloak.

        Args:
            search: Search string to filter groups by name.
            exact: If True, require exact name match (default False for substring).
            first: Pagination offset (default 0).
            max_results: Maximum number of results to return.

        Returns:
            List of group dicts with keys: id, name, path, subGroups, etc.
        """
        url = f"{self._get_admin_url()}/groups"

        params = {}
        if search:
            params["search"] = search
        if exact:
            params["exact"] = "true"
        if first:
            params["first"] = first
        if max_results:
            params["max"] = max_results

        return self._get_json(url, params=params, what="groups")

    def _get_paged(self, url, what):
        """GET all pages of a JSON list resource.

        Args:
            url: Full URL of the list resource.
            what: Description of the resource (for logging).

        Returns:
            List of items from all pages.
        """
        items = []
        first = 0
        while True:
            params = {"max": GROUP_PAGE_SIZE}
            if first:
                params["first"] = first
            page = self._get_json(url, params=params, what=what)
            items.extend(page)
            if len(page) < GROUP_PAGE_SIZE:
                break
            first += GROUP_PAGE_SIZE
        return items

    def get_group_children(self, group_id):
        """Get the direct subgroups of a group.

        Args:
            group_id: The Keycloak group UUID.

        Returns:
            List of group dicts.
        """
        url = f"{self._get_admin_url()}/groups/{group_id}/children"
        return self._get_paged(url, what=f"children of group {group_id}")

    def list_groups(self):
        """List all groups of the realm, subgroups included.

        Pages through the top level groups. Subgroups are taken from the
        ``subGroups`` of a group when present. Keycloak 23 and later leave
        that field empty and only report ``subGroupCount``, in which case
        the children are fetched from the group's children endpoint.

        Returns:
            List of group dicts, parents first.
        """
        url = f"{self._get_admin_url()}/groups"
        return self._expand_groups(self._get_paged(url, what="groups"))

    def _expand_groups(self, groups):
        result = []
        for group in groups:
            result.append(group)
            children = group.get("subGroups") or []
            if not children and group.get("subGroupCount"):
                children = self.get_group_children(group["id"])
            result.extend(self._expand_groups(children))
        return result

    def get_group_by_name(self, group_name):
        """Get a group by its exact name.

        Args:
            group_name: The group name to search for.

        Returns:
            Group dict if found, None otherwise.
        """
        groups = self.search_groups(search=group_name, exact=True)
        for group in flatten_groups(groups):
            if group.get("name") == group_name:
                return group
        return None

    def get_groups_for_user(self, user_id):
        """Get the groups a user belongs to.

        Args:
            user_id: The Keycloak user UUID.

        Returns:
            List of group dicts with keys: id, name, path.
        """
        url = f"{self._get_admin_url()}/users/{user_id}/groups"
        return self._get_json(url, what=f"groups for user {user_id}")

    def create_group(self, name):
        """Create a new top level group in Keycloak.

        Args:
            name: The name of the group to create.

        Returns:
            Group dict with keys id and name.

        Raises:
            KeycloakGroupCreationError: If the group could not be created.
        """
        url = f"{self._get_admin_url()}/groups"

        try:
            response = self._make_request("POST", url, json={"name": name})
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed when creating group {name}: {e}")
            raise KeycloakGroupCreationError(f"Request failed: {e}") from e

        if response.status_code == 201:
            # Group created - extract ID from Location header
            location = response.headers.get("Location", "")
            group_id = location.rsplit("/", 1)[-1] if location else None
            if group_id:
                logger.info(f"Created Keycloak group {name} with ID {group_id}")
                return {"id": group_id, "name": name}

        elif response.status_code != 409:
            error_msg = response.text
            logger.error(f"Failed to create group {name}: {error_msg}")
            raise KeycloakGroupCreationError(f"Failed to create group {name}: {error_msg}")

        else:
            logger.warning(f"Group {name} already exists in Keycloak")

        # Location header missing or group exists: get group by name
        group = self.get_group_by_name(name)
        if group is None:
            raise KeycloakGroupCreationError(f"Group {name} not found after creation")
        return group

    def _change_membership(self, method, user_id, group_id, action):
        url = f"{self._get_admin_url()}/users/{user_id}/groups/{group_id}"

        try:
            response = self._make_request(method, url)
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed when {action} user {user_id}: {e}")
            raise KeycloakMembershipError(f"Request failed: {e}") from e

        if response.status_code != 204:
            logger.error(
                f"Failed {action} user {user_id} group {group_id}: {response.text}"
            )
            raise KeycloakMembershipError(
                f"Failed {action} user {user_id} group {group_id}: {response.text}"
            )
        logger.info(f"Done {action} user {user_id} group {group_id}")

    def add_user_to_group(self, user_id, group_id):
        """Add a user to a group.

        Args:
            user_id: The Keycloak user UUID.
            group_id: The Keycloak group UUID.

        Raises:
            KeycloakMembershipError: If the membership could not be added.
        """
        self._change_membership("PUT", user_id, group_id, "adding")

    def remove_user_from_group(self, user_id, group_id):
        """Remove a user from a group.

        Args:
            user_id: The Keycloak user UUID.
            group_id: The Keycloak group UUID.

        Raises:
            KeycloakMembershipError: If the membership could not be removed.
        """
        self._change_membership("DELETE", user_id, group_id, "removing")


def flatten_groups(groups):
    """Flatten a Keycloak group tree into a list, parents first.

    Args:
        groups: List of group dicts, possibly carrying ``subGroups``.

    Returns:
        List of group dicts.
    """
    result = []
    for group in groups:
        result.append(group)
        result.extend(flatten_groups(group.get("subGroups") or []))
    return result


class KeycloakError(Exception):
    """Base exception for Keycloak operations."""

    pass


class KeycloakAuthenticationError(KeycloakError):
    """Raised when authentication with Keycloak fails."""

    pass


class KeycloakGroupCreationError(KeycloakError):
    """Raised when group creation fails."""

    pass


class KeycloakMembershipError(KeycloakError):
    """Raised when adding or removing a group member fails."""

    pass
