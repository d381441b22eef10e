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
from docbridge.schema import alias
from docbridge.schema import types


class TestFieldAlias(unittest.TestCase):

    def test_schema_alias_01(self):
        fa = alias.FieldAlias.from_string(' user_name:userName , age:years ')
        self.assertEqual(fa.external_name('user_name'), 'userName')
        self.assertEqual(fa.canonical_name('userName'), 'user_name')
        self.assertEqual(fa.external_name('other'), 'other')
        self.assertEqual(fa.canonical_name('other'), 'other')
        self.assertEqual(len(fa), 2)

    def test_schema_alias_identity_02(self):
        self.assertEqual(len(alias.IDENTITY), 0)
        self.assertEqual(alias.IDENTITY.external_name('x'), 'x')
        self.assertEqual(alias.FieldAlias.from_string(''), alias.IDENTITY)
        self.assertEqual(alias.FieldAlias.from_string(None), alias.IDENTITY)

    def test_schema_alias_to_string_03(self):
        fa = alias.FieldAlias({'b': 'B', 'a': 'A'})
        self.assertEqual(fa.to_string(), 'a:A,b:B')
        self.assertEqual(alias.FieldAlias.from_string(fa.to_string()), fa)
        self.assertEqual(hash(fa), hash(alias.FieldAlias({'a': 'A',
                                                          'b': 'B'})))

    def test_schema_alias_invalid_04(self):
        with self.assertRaisesRegex(errors.AliasError, 'invalid field alias'):
            alias.FieldAlias.from_string('a:b,c')
        with self.assertRaisesRegex(errors.AliasError, 'more than once'):
            alias.FieldAlias.from_string('a:b,a:c')
        with self.assertRaisesRegex(errors.AliasError, 'both mapped'):
            alias.FieldAlias.from_string('a:x,b:x')
        with self.assertRaisesRegex(errors.AliasError, 'must be strings'):
            alias.FieldAlias({'a': 1})

    def test_schema_alias_check_record_05(self):
        desc = types.Record.from_pairs([
            ('a', types.STRING),
            ('b', types.List(types.Record.from_pairs([
                ('c', types.STRING),
                ('d', types.STRING),
            ]))),
        ])
        alias.FieldAlias.from_string('a:A,c:C').check_record(desc)

        with self.assertRaisesRegex(errors.AliasError,
                                    "'a' and 'b' would both be written"):
            alias.FieldAlias.from_string('a:b').check_record(desc)

        with self.assertRaisesRegex(errors.AliasError,
                                    "'c' and 'd' would both be written"):
            alias.FieldAlias.from_string('c:d').check_record(desc)

    def test_schema_alias_is_config_error_06(self):
        self.assertTrue(issubclass(errors.AliasError,
                                   errors.ConfigurationError))
