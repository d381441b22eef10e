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

import contextlib
import io
import os
import unittest
from unittest import mock

from docbridge.common import debug


class DebugTests(unittest.TestCase):

    def test_common_debug_flags(self):
        flags = {flag.name: flag for flag in debug.flags}
        self.assertEqual(set(flags), {'serde', 'codec', 'typestring'})
        self.assertIn('serialized', flags['serde'].doc)
        self.assertIsInstance(debug.flags.codec, bool)

    def test_common_debug_init_flags(self):
        env = {'DOCBRIDGE_DEBUG_CODEC': '1', 'DOCBRIDGE_DEBUG_SERDE': '0'}
        saved = (debug.flags.codec, debug.flags.serde)
        try:
            with mock.patch.dict(os.environ, env):
                debug.flags.codec = debug.flags.serde = False
                debug.init_debug_flags()
                self.assertTrue(debug.flags.codec)
                self.assertFalse(debug.flags.serde)
        finally:
            debug.flags.codec, debug.flags.serde = saved

    def test_common_debug_unknown_flag(self):
        with mock.patch.dict(os.environ, {'DOCBRIDGE_DEBUG_NOPE': '1'}):
            with self.assertWarnsRegex(UserWarning, 'Unknown debug flag'):
                debug.init_debug_flags()

    def test_common_debug_output(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            debug.header('Title')
            debug.dump({'a': 1})
            debug.print('done')

        lines = out.getvalue().splitlines()
        self.assertEqual(lines[:4], ['=' * 80, 'Title', '=' * 80, "{'a': 1}"])
        self.assertEqual(lines[4], 'done')
