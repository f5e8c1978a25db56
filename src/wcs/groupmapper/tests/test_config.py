"""Tests for mapper configuration parsing and schema."""
from unittest import TestCase
from wcs.groupmapper.config import CONFIG_PROPERTIES
from wcs.groupmapper.config import MapperConfig
from wcs.groupmapper.config import parse_boolean


class TestMapperConfig(TestCase):
    def test_defaults(self):
        config = MapperConfig()

        self.assertEqual(config.claim, '')
        self.assertEqual(config.contains_text, '')
        self.assertFalse(config.create_groups)

    def test_from_mapping(self):
        config = MapperConfig.from_mapping({
            'claim': 'realm_access.groups',
            'contains_text': 'team-',
            'create_groups': 'true',
        })

        self.assertEqual(config.claim, 'realm_access.groups')
        self.assertEqual(config.contains_text, 'team-')
        self.assertTrue(config.create_groups)

    def test_from_empty_mapping(self):
        self.assertEqual(MapperConfig.from_mapping({}), MapperConfig())
        self.assertEqual(MapperConfig.from_mapping(None), MapperConfig())

    def test_none_values_become_empty(self):
        config = MapperConfig.from_mapping({'claim': None, 'contains_text': None})

        self.assertEqual(config.claim, '')
        self.assertEqual(config.contains_text, '')

    def test_config_is_immutable(self):
        config = MapperConfig(claim='groups')

        with self.assertRaises(AttributeError):
            config.claim = 'other'

    def test_matches_without_filter(self):
        config = MapperConfig(claim='groups')

        self.assertTrue(config.matches('anything'))
        self.assertTrue(config.matches(''))

    def test_matches_is_case_sensitive_substring(self):
        config = MapperConfig(claim='groups', contains_text='team-')

        self.assertTrue(config.matches('team-x'))
        self.assertTrue(config.matches('my-team-x'))
        self.assertFalse(config.matches('Team-x'))
        self.assertFalse(config.matches('admins'))


class TestParseBoolean(TestCase):
    def test_true_values(self):
        for value in (True, 'true', 'TRUE', 'True', ' true '):
            self.assertTrue(parse_boolean(value), f"{value!r} should be true")

    def test_false_values(self):
        for value in (False, None, '', 'false', 'yes', '1', 1):
            self.assertFalse(parse_boolean(value), f"{value!r} should be false")


class TestConfigProperties(TestCase):
    def test_property_ids(self):
        ids = [prop['id'] for prop in CONFIG_PROPERTIES]

        self.assertEqual(ids, ['claim', 'contains_text', 'create_groups'])

    def test_property_types(self):
        types = {prop['id']: prop['type'] for prop in CONFIG_PROPERTIES}

        self.assertEqual(types['claim'], 'string')
        self.assertEqual(types['contains_text'], 'string')
        self.assertEqual(types['create_groups'], 'boolean')

    def test_claim_help_mentions_escaping(self):
        claim = CONFIG_PROPERTIES[0]

        self.assertIn('\\.', claim['help'])
