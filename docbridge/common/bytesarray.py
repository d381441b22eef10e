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
from typing import Optional


class BytesArray:
    """A growable byte buffer that is reset and reused between records.

    Unlike io.BytesIO, resetting the buffer keeps the allocated storage,
    so a session that serializes many similarly sized records only pays
    for growing the buffer a handful of times.
    """

    __slots__ = ('_buf', '_size')

    def __init__(self, capacity: int = 512) -> None:
        if capacity < 0:
            raise ValueError(f'invalid BytesArray capacity: {capacity}')
        self._buf = bytearray(capacity)
        self._size = 0

    def reset(self) -> None:
        self._size = 0

    def _ensure(self, extra: int) -> None:
        needed = self._size + extra
        capacity = len(self._buf)
        if needed > capacity:
            self._buf.extend(bytes(max(needed - capacity, capacity)))

    def write(
        self,
        data: bytes | bytearray | memoryview,
        offset: int = 0,
        length: Optional[int] = None,
    ) -> None:
        if length is None:
            length = len(data) - offset
        if offset < 0 or length < 0 or offset + length > len(data):
            raise BufferError(
                f'cannot write bytes with offset={offset} length={length} '
                f'from a buffer of len={len(data)}')

        self._ensure(length)
        self._buf[self._size:self._size + length] = \
            data[offset:offset + length]
        self._size += length

    def flush(self) -> None:
        pass

    @property
    def capacity(self) -> int:
        return len(self._buf)

    def __len__(self) -> int:
        return self._size

    def getvalue(self) -> bytes:
        return bytes(self._buf[:self._size])

    def __repr__(self) -> str:
        return f'<BytesArray size={self._size} capacity={len(self._buf)}>'
