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

import collections
import unittest

from docbridge.common import render
from docbridge.common import typeutils


class TypeUtilsTests(unittest.TestCase):

    def test_common_typeutils_sequence(self):
        for value in ([], (), range(3), collections.deque()):
            with self.subTest(value=value):
                self.assertTrue(typeutils.is_sequence(value))

        for value in ('abc', b'abc', bytearray(), memoryview(b''), {}, {1}):
            with self.subTest(value=value):
                self.assertFalse(typeutils.is_sequence(value))

    def test_common_typeutils_mapping(self):
        self.assertTrue(typeutils.is_mapping({}))
        self.assertTrue(typeutils.is_mapping(collections.OrderedDict()))
        self.assertFalse(typeutils.is_mapping([]))

    def test_common_typeutils_type_name(self):
        self.assertEqual(typeutils.type_name(1), 'int')
        self.assertEqual(typeutils.type_name(collections.deque()),
                         'collections.deque')


class RenderBufferTests(unittest.TestCase):

    def test_common_render_buffer(self):
        buf = render.RenderBuffer(indent_width=4)
        self.assertIsNone(buf.lastline())
        buf.append('a')
        with buf.indent():
            buf.write('b')
            buf.append('c')
        buf.write('d')
        self.assertEqual(str(buf), 'a\n    bc\nd')
        self.assertEqual(buf.lastline(), 'd')
