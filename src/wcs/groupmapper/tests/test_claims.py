"""Tests for claim value normalization and claim lookup."""
from unittest import TestCase
from wcs.groupmapper.claims import ABSENT
from wcs.groupmapper.claims import BrokeredIdentityContext
from wcs.groupmapper.claims import get_claim_value
from wcs.groupmapper.claims import get_nested_value
from wcs.groupmapper.claims import ScalarClaim
from wcs.groupmapper.claims import SequenceClaim
from wcs.groupmapper.claims import split_claim_path
from wcs.groupmapper.claims import to_claim_value


class TestToClaimValue(TestCase):
    def test_none_is_absent(self):
        self.assertIs(to_claim_value(None), ABSENT)
        self.assertEqual(ABSENT.names(), frozenset())
        self.assertFalse(ABSENT)

    def test_string_is_scalar(self):
        value = to_claim_value('engineering')

        self.assertEqual(value, ScalarClaim('engineering'))
        self.assertEqual(value.names(), {'engineering'})

    def test_scalar_and_sequence_give_same_names(self):
        self.assertEqual(
            to_claim_value('engineering').names(),
            to_claim_value(['engineering']).names(),
        )

    def test_list_is_sequence(self):
        value = to_claim_value(['a', 'b'])

        self.assertIsInstance(value, SequenceClaim)
        self.assertEqual(value.names(), {'a', 'b'})

    def test_tuple_and_set_are_sequences(self):
        self.assertIsInstance(to_claim_value(('a',)), SequenceClaim)
        self.assertIsInstance(to_claim_value({'a'}), SequenceClaim)

    def test_duplicates_collapse(self):
        value = to_claim_value(['a', 'a', 'b'])

        self.assertEqual(value.names(), {'a', 'b'})

    def test_sequence_elements_are_coerced(self):
        value = to_claim_value(['1', 1, None, True])

        self.assertEqual(value.names(), {'1', 'true'})

    def test_number_scalar_is_coerced(self):
        self.assertEqual(to_claim_value(42).names(), {'42'})

    def test_empty_list_has_no_names(self):
        value = to_claim_value([])

        self.assertIsInstance(value, SequenceClaim)
        self.assertEqual(value.names(), frozenset())

    def test_already_normalized_value_is_kept(self):
        value = ScalarClaim('x')

        self.assertIs(to_claim_value(value), value)


class TestSplitClaimPath(TestCase):
    def test_simple(self):
        self.assertEqual(split_claim_path('groups'), ['groups'])

    def test_nested(self):
        self.assertEqual(split_claim_path('address.locality'), ['address', 'locality'])

    def test_escaped_dot(self):
        self.assertEqual(
            split_claim_path('https://example\\.com/groups'),
            ['https://example.com/groups'],
        )

    def test_escaped_and_nested(self):
        self.assertEqual(split_claim_path('a\\.b.c'), ['a.b', 'c'])

    def test_other_backslashes_are_kept(self):
        self.assertEqual(split_claim_path('a\\b'), ['a\\b'])


class TestGetNestedValue(TestCase):
    claims = {
        'groups': ['a', 'b'],
        'realm_access': {'groups': ['c']},
        'example.com/groups': 'd',
    }

    def test_top_level(self):
        self.assertEqual(get_nested_value(self.claims, 'groups'), ['a', 'b'])

    def test_nested(self):
        self.assertEqual(get_nested_value(self.claims, 'realm_access.groups'), ['c'])

    def test_escaped(self):
        self.assertEqual(get_nested_value(self.claims, 'example\\.com/groups'), 'd')

    def test_missing(self):
        self.assertIsNone(get_nested_value(self.claims, 'missing'))
        self.assertIsNone(get_nested_value(self.claims, 'realm_access.missing'))

    def test_walk_through_non_mapping(self):
        self.assertIsNone(get_nested_value(self.claims, 'groups.x'))

    def test_empty_claims(self):
        self.assertIsNone(get_nested_value({}, 'groups'))
        self.assertIsNone(get_nested_value(None, 'groups'))


class TestGetClaimValue(TestCase):
    def test_access_token_wins(self):
        context = BrokeredIdentityContext(
            access_token={'groups': ['from-access']},
            id_token={'groups': ['from-id']},
            userinfo={'groups': ['from-userinfo']},
        )

        self.assertEqual(get_claim_value(context, 'groups'), ['from-access'])

    def test_id_token_before_userinfo(self):
        context = BrokeredIdentityContext(
            id_token={'groups': ['from-id']},
            userinfo={'groups': ['from-userinfo']},
        )

        self.assertEqual(get_claim_value(context, 'groups'), ['from-id'])

    def test_userinfo_fallback(self):
        context = BrokeredIdentityContext(
            id_token={'sub': '123'},
            userinfo={'groups': ['from-userinfo']},
        )

        self.assertEqual(get_claim_value(context, 'groups'), ['from-userinfo'])

    def test_missing_everywhere(self):
        context = BrokeredIdentityContext(id_token={'sub': '123'})

        self.assertIsNone(get_claim_value(context, 'groups'))

    def test_nested_claim(self):
        context = BrokeredIdentityContext(
            id_token={'resource_access': {'app': {'groups': ['x']}}},
        )

        self.assertEqual(get_claim_value(context, 'resource_access.app.groups'), ['x'])
