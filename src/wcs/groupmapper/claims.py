"""Claim values and claim lookup.

Identity providers deliver group information in very different shapes: a
JSON array, a single string, a nested object. This module reads a claim
from the tokens of a brokered login and normalizes whatever it finds into
one of three explicit shapes:

    ABSENT          The provider did not send the claim
    ScalarClaim     A single value
    SequenceClaim   A list of values

Every shape exposes ``names()``, the set of candidate group names.
"""
import logging


logger = logging.getLogger(__name__)

SEQUENCE_TYPES = (list, tuple, set, frozenset)


def _to_text(value):
    """Coerce a JSON value to its string representation."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


class _Absent:
    """The claim was not present in any token."""

    def __repr__(self):
        return 'ABSENT'

    def __bool__(self):
        return False

    def names(self):
        return frozenset()


ABSENT = _Absent()


class ScalarClaim:
    """A claim holding a single value."""

    def __init__(self, value):
        self.value = _to_text(value)

    def __repr__(self):
        return f"ScalarClaim({self.value!r})"

    def __eq__(self, other):
        return isinstance(other, ScalarClaim) and other.value == self.value

    def __hash__(self):
        return hash(self.value)

    def names(self):
        return frozenset((self.value,))


class SequenceClaim:
    """A claim holding a list of values.

    ``None`` entries are skipped, everything else is coerced to a string.
    """

    def __init__(self, values):
        self.values = tuple(_to_text(v) for v in values if v is not None)

    def __repr__(self):
        return f"SequenceClaim({list(self.values)!r})"

    def __eq__(self, other):
        return isinstance(other, SequenceClaim) and other.values == self.values

    def __hash__(self):
        return hash(self.values)

    def names(self):
        return frozenset(self.values)


def to_claim_value(raw):
    """Normalize a raw claim value into a ClaimValue.

    Args:
        raw: The value found in the token, or None.

    Returns:
        ABSENT, ScalarClaim or SequenceClaim.
    """
    if raw is None or raw is ABSENT:
        return ABSENT
    if isinstance(raw, (_Absent, ScalarClaim, SequenceClaim)):
        return raw
    if isinstance(raw, SEQUENCE_TYPES):
        return SequenceClaim(raw)
    return ScalarClaim(raw)


def split_claim_path(path):
    """Split a claim path on unescaped dots.

    A backslash escapes the following dot, so ``'a\\.b.c'`` splits into
    ``['a.b', 'c']``. A backslash before any other character is kept.

    Args:
        path: The claim path.

    Returns:
        List of path components.
    """
    parts = []
    current = []
    i = 0
    while i < len(path):
        char = path[i]
        if char == '\\' and i + 1 < len(path) and path[i + 1] == '.':
            current.append('.')
            i += 2
            continue
        if char == '.':
            parts.append(''.join(current))
            current = []
        else:
            current.append(char)
        i += 1
    parts.append(''.join(current))
    return parts


def get_nested_value(claims, path):
    """Resolve a dotted claim path against a claims mapping.

    Args:
        claims: Dict of claims, or None.
        path: The claim path, see split_claim_path().

    Returns:
        The value found, or None if any component is missing.
    """
    if not claims or not path:
        return None

    value = claims
    for part in split_claim_path(path):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
        if value is None:
            return None
    return value


class BrokeredIdentityContext:
    """The tokens and identity data of a brokered login.

    Attributes:
        access_token: Claims of the validated access token, if any.
        id_token: Claims of the validated ID token, if any.
        userinfo: The userinfo response, if any.
        identity_provider_alias: Alias of the identity provider.
        username: Username asserted by the identity provider.
    """

    def __init__(
        self,
        access_token=None,
        id_token=None,
        userinfo=None,
        identity_provider_alias='',
        username='',
    ):
        self.access_token = access_token or {}
        self.id_token = id_token or {}
        self.userinfo = userinfo or {}
        self.identity_provider_alias = identity_provider_alias
        self.username = username

    def claim_sources(self):
        """Return the claim sets in lookup order."""
        return (
            ('access token', self.access_token),
            ('ID token', self.id_token),
            ('userinfo', self.userinfo),
        )


def get_claim_value(context, claim):
    """Look up a claim in a brokered login.

    The access token is searched first, then the ID token, then the
    userinfo response. The first value found wins.

    Args:
        context: BrokeredIdentityContext of the login.
        claim: Claim path, see split_claim_path().

    Returns:
        The raw claim value, or None if no source carries it.
    """
    for source, claims in context.claim_sources():
        value = get_nested_value(claims, claim)
        if value is not None:
            logger.debug(f"Found claim [{claim}] in {source}")
            return value
    return None
