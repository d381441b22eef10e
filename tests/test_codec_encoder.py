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

import io
import unittest

from docbridge import errors
from docbridge import protocol
from docbridge.codec import encoder
from docbridge.codec import leaf
from docbridge.schema import alias
from docbridge.schema import typestring


Event = protocol.Event


SCHEMA = typestring.parse(
    'struct<id:bigint,name:string,tags:array<string>,'
    'owner:struct<login:string,admin:boolean>>')


class TestValueEncoder(unittest.TestCase):

    def encode(self, desc, value, **kwargs):
        out = io.BytesIO()
        with protocol.JsonGenerator(out) as gen:
            encoder.ValueEncoder(**kwargs).encode(desc, value, gen)
        return out.getvalue()

    def test_codec_encoder_record_01(self):
        doc = self.encode(SCHEMA, {
            'id': 7,
            'name': 'x',
            'tags': ['a', 'b'],
            'owner': {'login': 'root', 'admin': True},
        })
        self.assertEqual(
            doc,
            b'{"id":7,"name":"x","tags":["a","b"],'
            b'"owner":{"login":"root","admin":true}}')

    def test_codec_encoder_missing_fields_02(self):
        doc = self.encode(SCHEMA, {'id': 1, 'owner': {}, 'extra': 'ignored'})
        self.assertEqual(
            doc,
            b'{"id":1,"name":null,"tags":null,'
            b'"owner":{"login":null,"admin":null}}')

    def test_codec_encoder_null_elements_03(self):
        doc = self.encode(SCHEMA, {'tags': ['a', None]})
        self.assertEqual(
            doc,
            b'{"id":null,"name":null,"tags":["a",null],"owner":null}')

    def test_codec_encoder_top_level_null_04(self):
        self.assertEqual(self.encode(SCHEMA, None), b'null')

        union = typestring.parse('uniontype<int,string>')
        self.assertEqual(self.encode(union, None), b'null')

    def test_codec_encoder_alias_05(self):
        fa = alias.FieldAlias.from_string('name:fullName,login:user')
        doc = self.encode(
            SCHEMA, {'name': 'x', 'owner': {'login': 'u'}}, alias=fa)
        self.assertEqual(
            doc,
            b'{"id":null,"fullName":"x","tags":null,'
            b'"owner":{"user":"u","admin":null}}')

    def test_codec_encoder_union_06(self):
        desc = typestring.parse('struct<a:int,b:uniontype<int,string>>')
        gen = protocol.EventRecorder()
        with self.assertRaises(errors.UnsupportedShapeError) as cm:
            encoder.ValueEncoder().encode(desc, {'a': 1}, gen)
        self.assertEqual(cm.exception.path, ('b',))
        self.assertEqual(gen.events, [])

    def test_codec_encoder_failure_balanced_07(self):
        gen = protocol.EventRecorder()
        value = {'id': 1, 'tags': ['ok', {1, 2}]}
        with self.assertRaises(errors.EncodeFailureError) as cm:
            encoder.ValueEncoder().encode(SCHEMA, value, gen)

        self.assertEqual(cm.exception.path, ('tags', 1))
        self.assertIn('(at $.tags[1])', str(cm.exception))
        self.assertEqual(gen.depth, 0)
        self.assertEqual(
            gen.kinds(),
            [Event.BEGIN_OBJECT,
             Event.FIELD_NAME, Event.NUMBER,
             Event.FIELD_NAME, Event.NULL,
             Event.FIELD_NAME, Event.BEGIN_ARRAY, Event.STRING,
             Event.END_ARRAY,
             Event.END_OBJECT])

    def test_codec_encoder_permissive_08(self):
        writer = leaf.PythonLeafWriter(write_unknown_types=True)
        gen = protocol.ObjectBuilder()
        encoder.ValueEncoder(writer).encode(
            typestring.parse('struct<s:opaque>'), {'s': {3}}, gen)
        self.assertIsInstance(gen.result['s'], bytes)

    def test_codec_encoder_shape_mismatch_09(self):
        gen = protocol.EventRecorder()
        with self.assertRaises(errors.MalformedInputError) as cm:
            encoder.ValueEncoder().encode(SCHEMA, {'tags': 'abc'}, gen)
        self.assertEqual(cm.exception.path, ('tags',))
        self.assertEqual(gen.depth, 0)

        with self.assertRaises(errors.MalformedInputError):
            encoder.ValueEncoder().encode(SCHEMA, ['not', 'a', 'record'],
                                          protocol.EventRecorder())

    def test_codec_encoder_reuse_10(self):
        enc = encoder.ValueEncoder()
        desc = typestring.parse('array<int>')
        for value in ([1, 2], [], [3]):
            gen = protocol.ObjectBuilder()
            enc.encode(desc, value, gen)
            self.assertEqual(gen.result, value)

    def test_codec_encoder_opaque_leaf_11(self):
        # Leaf values are written by their runtime shape, whatever the
        # declared scalar kind is.
        gen = protocol.ObjectBuilder()
        encoder.ValueEncoder().encode(
            typestring.parse('struct<m:map<string,int>>'),
            {'m': {'a': 1}}, gen)
        self.assertEqual(gen.result, {'m': {'a': 1}})
