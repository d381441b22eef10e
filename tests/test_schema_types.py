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
from docbridge.schema import types


RECORD = types.Record.from_pairs([
    ('id', types.Scalar(types.ScalarKind.NUMERIC, 'bigint')),
    ('tags', types.List(types.STRING)),
    ('owner', types.Record.from_pairs([
        ('name', types.STRING),
        ('active', types.BOOLEAN),
    ])),
])


class TestSchemaTypes(unittest.TestCase):

    def test_schema_types_render_01(self):
        self.assertEqual(
            RECORD.render(),
            'struct<id:bigint,tags:array<string>,'
            'owner:struct<name:string,active:boolean>>')
        self.assertEqual(str(types.BINARY), 'binary')
        self.assertEqual(
            types.Union((types.STRING, types.NUMERIC)).render(),
            'uniontype<string,numeric>')

    def test_schema_types_equality_02(self):
        other = types.Record.from_pairs([
            ('id', types.Scalar(types.ScalarKind.NUMERIC, 'bigint')),
            ('tags', types.List(types.STRING)),
            ('owner', types.Record.from_pairs([
                ('name', types.STRING),
                ('active', types.BOOLEAN),
            ])),
        ])
        self.assertEqual(RECORD, other)
        self.assertEqual(hash(RECORD), hash(other))
        self.assertNotEqual(types.List(types.STRING),
                            types.List(types.NUMERIC))

    def test_schema_types_record_03(self):
        self.assertEqual(RECORD.names, ('id', 'tags', 'owner'))
        self.assertEqual(len(RECORD), 3)
        self.assertEqual(RECORD.index_of('owner'), 2)
        self.assertEqual(RECORD.get_field('tags').type,
                         types.List(types.STRING))
        with self.assertRaisesRegex(KeyError, 'nope'):
            RECORD.index_of('nope')

    def test_schema_types_validation_04(self):
        with self.assertRaisesRegex(ValueError, 'duplicate record field'):
            types.Record.from_pairs([('a', types.STRING),
                                     ('a', types.NUMERIC)])
        with self.assertRaises(TypeError):
            types.List('string')
        with self.assertRaises(TypeError):
            types.Field('', types.STRING)

    def test_schema_types_union_dedup_05(self):
        u = types.Union((types.STRING, types.STRING, types.NUMERIC))
        self.assertEqual(u.variants, (types.STRING, types.NUMERIC))

    def test_schema_types_find_union_06(self):
        self.assertIsNone(types.find_union(RECORD))

        u = types.Union((types.STRING, types.NUMERIC))
        self.assertEqual(types.find_union(u), ())

        nested = types.Record.from_pairs([
            ('a', types.STRING),
            ('b', types.List(types.Record.from_pairs([('c', u)]))),
        ])
        self.assertEqual(types.find_union(nested), ('b', 0, 'c'))

    def test_schema_types_check_supported_07(self):
        types.check_supported(RECORD)

        nested = types.Record.from_pairs([
            ('x', types.List(types.Union((types.STRING,)))),
        ])
        with self.assertRaisesRegex(errors.UnsupportedShapeError,
                                    r'union.*\(at $\.x\[0\]\)') as cm:
            types.check_supported(nested)
        self.assertEqual(cm.exception.path, ('x', 0))
        self.assertIsNotNone(cm.exception.hint)

    def test_schema_types_render_tree_08(self):
        self.assertEqual(
            types.render_tree(RECORD),
            'struct<\n'
            '  id: bigint,\n'
            '  tags: array<string>,\n'
            '  owner: struct<\n'
            '    name: string,\n'
            '    active: boolean\n'
            '  >\n'
            '>')
        self.assertEqual(types.render_tree(types.NUMERIC), 'numeric')
