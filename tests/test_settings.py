#
# This source file is part of the docbridge open source project.
#
# Copyright 2024-present MagicStack Inc. and the docbridge authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

import unittest

from docbridge import errors
from docbridge import settings
from docbridge.schema import types


PROPS = {
    'columns': 'a,b',
    'columns.types': 'int:array<string>',
}


class TestCodecSettings(unittest.TestCase):

    def test_settings_defaults_01(self):
        cfg = settings.CodecSettings.from_properties(PROPS)
        self.assertEqual(cfg.mapping_names, '')
        self.assertFalse(cfg.write_unknown_types)
        self.assertEqual(cfg.scratch_size, settings.DEFAULT_SCRATCH_SIZE)
        self.assertEqual(cfg.schema().names, ('a', 'b'))
        self.assertEqual(cfg.schema().get_field('b').type,
                         types.List(types.STRING))
        self.assertEqual(len(cfg.alias()), 0)

    def test_settings_properties_02(self):
        cfg = settings.CodecSettings.from_properties({
            **PROPS,
            'docbridge.mapping.names': 'a:A',
            'docbridge.write.unknown.types': 'Yes',
            'docbridge.scratch.size': '64',
        })
        self.assertEqual(cfg.alias().external_name('a'), 'A')
        self.assertTrue(cfg.write_unknown_types)
        self.assertEqual(cfg.scratch_size, 64)
        self.assertEqual(
            settings.CodecSettings.from_properties(dict(cfg.properties())),
            cfg)

    def test_settings_missing_03(self):
        with self.assertRaisesRegex(errors.ConfigurationError,
                                    "missing required property "
                                    "'columns.types'"):
            settings.CodecSettings.from_properties({'columns': 'a'})

    def test_settings_invalid_values_04(self):
        with self.assertRaisesRegex(errors.ConfigurationError,
                                    'invalid boolean value'):
            settings.CodecSettings.from_properties({
                **PROPS, 'docbridge.write.unknown.types': 'maybe'})

        for size in ('-1', 'big'):
            with self.subTest(size=size):
                with self.assertRaisesRegex(errors.ConfigurationError,
                                            'invalid size'):
                    settings.CodecSettings.from_properties({
                        **PROPS, 'docbridge.scratch.size': size})

    def test_settings_environ_05(self):
        cfg = settings.CodecSettings.from_properties(PROPS)
        cfg = cfg.with_environ({
            'DOCBRIDGE_MAPPING_NAMES': 'b:B',
            'DOCBRIDGE_WRITE_UNKNOWN_TYPES': '1',
            'DOCBRIDGE_SCRATCH_SIZE': '16',
            'UNRELATED': 'x',
        })
        self.assertEqual(cfg.mapping_names, 'b:B')
        self.assertTrue(cfg.write_unknown_types)
        self.assertEqual(cfg.scratch_size, 16)

        self.assertEqual(cfg.with_environ({}), cfg)

        with self.assertRaisesRegex(errors.ConfigurationError,
                                    'DOCBRIDGE_SCRATCH_SIZE'):
            cfg.with_environ({'DOCBRIDGE_SCRATCH_SIZE': 'x'})

    def test_settings_json_06(self):
        cfg = settings.CodecSettings(
            columns='a', column_types='string', write_unknown_types=True)
        self.assertEqual(
            settings.CodecSettings.from_json(cfg.to_json()), cfg)

        with self.assertRaises(errors.ConfigurationError):
            settings.CodecSettings.from_json('{"columns": "a"}')
        with self.assertRaises(errors.ConfigurationError):
            settings.CodecSettings.from_json('not json')
        with self.assertRaisesRegex(errors.ConfigurationError,
                                    'scratch_size'):
            settings.CodecSettings.from_json(
                '{"columns": "a", "column_types": "int", '
                '"scratch_size": "abc"}')
        with self.assertRaisesRegex(errors.ConfigurationError,
                                    'scratch_size'):
            settings.CodecSettings.from_json(
                '{"columns": "a", "column_types": "int", '
                '"scratch_size": -1}')
        with self.assertRaisesRegex(errors.ConfigurationError,
                                    'write_unknown_types'):
            settings.CodecSettings.from_json(
                '{"columns": "a", "column_types": "int", '
                '"write_unknown_types": "yes"}')
        with self.assertRaisesRegex(errors.ConfigurationError,
                                    "'columns' must be a string"):
            settings.CodecSettings.from_json(
                '{"columns": ["a"], "column_types": "int"}')

    def test_settings_bad_schema_07(self):
        cfg = settings.CodecSettings(columns='a,b', column_types='int')
        with self.assertRaises(errors.ConfigurationError):
            cfg.schema()

        cfg = settings.CodecSettings(columns='a', column_types='int<')
        with self.assertRaises(errors.SchemaSyntaxError):
            cfg.schema()
