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

from __future__ import annotations
from typing import Optional, List

import contextlib


class RenderBuffer:
    """Line buffer for rendering nested structures with indentation."""

    ilevel: int
    buf: List[str]

    def __init__(self, *, indent_width: int = 2) -> None:
        self.ilevel = 0
        self.indent_width = indent_width
        self.buf = []

    def write(self, line: str) -> None:
        self.buf.append(' ' * (self.ilevel * self.indent_width) + line)

    def append(self, text: str) -> None:
        # Continue the last line instead of starting a new one.
        if not self.buf:
            self.write(text)
        else:
            self.buf[-1] += text

    def lastline(self) -> Optional[str]:
        return self.buf[-1] if len(self.buf) else None

    def __str__(self):
        return '\n'.join(self.buf)

    @contextlib.contextmanager
    def indent(self):
        self.ilevel += 1
        try:
            yield
        finally:
            self.ilevel -= 1
