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


"""Document stream generators.

A generator is driven with a strict grammar of events: scalars, field
names, and matched begin/end pairs of arrays and objects.  The base class
enforces the grammar; subclasses only implement the ``_write_*`` hooks
that produce the actual output.
"""


from __future__ import annotations
from typing import Any, List, Optional, Protocol

import base64
import decimal
import enum
import math
import re

from docbridge import errors


Buffer = bytes | bytearray | memoryview


class Container(enum.Enum):

    TOP = 'top-level'
    ARRAY = 'array'
    OBJECT = 'object'


class _Frame:

    __slots__ = ('container', 'count', 'pending_field')

    def __init__(self, container: Container) -> None:
        self.container = container
        # Number of complete values written directly into this container.
        self.count = 0
        self.pending_field = False


class Generator:

    _stack: List[_Frame]

    def __init__(self) -> None:
        self._stack = [_Frame(Container.TOP)]
        self._closed = False

    # Grammar bookkeeping

    @property
    def depth(self) -> int:
        return len(self._stack) - 1

    @property
    def container(self) -> Container:
        return self._stack[-1].container

    @property
    def closed(self) -> bool:
        return self._closed

    def _state_error(self, msg: str) -> errors.DocumentStateError:
        return errors.DocumentStateError(
            f'{msg} (in {self.container.value} container at '
            f'depth {self.depth})')

    def _before_value(self) -> None:
        if self._closed:
            raise errors.DocumentStateError('generator is closed')
        frame = self._stack[-1]
        if frame.container is Container.OBJECT and not frame.pending_field:
            raise self._state_error(
                'a value inside an object must be preceded by a field name')
        if frame.container is Container.TOP and frame.count:
            raise self._state_error('the document already has a root value')

    def _after_value(self) -> None:
        frame = self._stack[-1]
        frame.count += 1
        frame.pending_field = False

    # Public API

    def write_null(self) -> None:
        self._before_value()
        self._write_null()
        self._after_value()

    def write_boolean(self, val: bool) -> None:
        self._before_value()
        self._write_boolean(bool(val))
        self._after_value()

    def write_number(self, val: int | float | decimal.Decimal) -> None:
        if isinstance(val, bool):
            val = int(val)
        elif not isinstance(val, (int, float, decimal.Decimal)):
            raise TypeError(
                f'write_number() expects a number, got {type(val).__name__}')
        self._before_value()
        self._write_number(val)
        self._after_value()

    def write_string(self, val: str) -> None:
        self._before_value()
        self._write_string(val)
        self._after_value()

    def write_utf8_string(
        self,
        data: Buffer,
        offset: int = 0,
        length: Optional[int] = None,
    ) -> None:
        view = _slice(data, offset, length)
        _check_utf8(view)
        self._before_value()
        self._write_utf8_string(view)
        self._after_value()

    def write_binary(
        self,
        data: Buffer,
        offset: int = 0,
        length: Optional[int] = None,
    ) -> None:
        view = _slice(data, offset, length)
        self._before_value()
        self._write_binary(view)
        self._after_value()

    def write_field_name(self, name: str) -> None:
        if self._closed:
            raise errors.DocumentStateError('generator is closed')
        frame = self._stack[-1]
        if frame.container is not Container.OBJECT:
            raise self._state_error(
                'field names can only be written inside an object')
        if frame.pending_field:
            raise self._state_error(
                f'field name {name!r} written while the previous field '
                f'has no value')
        self._write_field_name(name)
        frame.pending_field = True

    def write_begin_array(self) -> None:
        self._before_value()
        self._write_begin_array()
        self._stack.append(_Frame(Container.ARRAY))

    def write_end_array(self) -> None:
        if self._stack[-1].container is not Container.ARRAY:
            raise self._state_error('no array to end')
        self._stack.pop()
        self._write_end_array()
        self._after_value()

    def write_begin_object(self) -> None:
        self._before_value()
        self._write_begin_object()
        self._stack.append(_Frame(Container.OBJECT))

    def write_end_object(self) -> None:
        frame = self._stack[-1]
        if frame.container is not Container.OBJECT:
            raise self._state_error('no object to end')
        if frame.pending_field:
            raise self._state_error(
                'the last field of the object has no value')
        self._stack.pop()
        self._write_end_object()
        self._after_value()

    def unwind(self, depth: int = 0) -> None:
        """Terminate every container opened above *depth*.

        Used on the failure path so that the stream never holds unbalanced
        structure; a field name still waiting for its value gets a null.
        """
        while self.depth > depth:
            frame = self._stack[-1]
            if frame.container is Container.OBJECT:
                if frame.pending_field:
                    self.write_null()
                self.write_end_object()
            else:
                self.write_end_array()

    def flush(self) -> None:
        pass

    def close(self) -> None:
        if not self._closed:
            self.flush()
            self._closed = True
            self._release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        try:
            if exc_type is not None and not self._closed:
                self.unwind(0)
        finally:
            self.close()

    # Output hooks

    def _write_null(self) -> None:
        raise NotImplementedError

    def _write_boolean(self, val: bool) -> None:
        raise NotImplementedError

    def _write_number(self, val: int | float | decimal.Decimal) -> None:
        raise NotImplementedError

    def _write_string(self, val: str) -> None:
        self._write_utf8_string(memoryview(_encode_utf8(val)))

    def _write_utf8_string(self, data: memoryview) -> None:
        raise NotImplementedError

    def _write_binary(self, data: memoryview) -> None:
        raise NotImplementedError

    def _write_field_name(self, name: str) -> None:
        raise NotImplementedError

    def _write_begin_array(self) -> None:
        raise NotImplementedError

    def _write_end_array(self) -> None:
        raise NotImplementedError

    def _write_begin_object(self) -> None:
        raise NotImplementedError

    def _write_end_object(self) -> None:
        raise NotImplementedError

    def _release(self) -> None:
        pass


def _slice(data: Buffer, offset: int, length: Optional[int]) -> memoryview:
    view = memoryview(data)
    if length is None:
        length = len(view) - offset
    if offset < 0 or length < 0 or offset + length > len(view):
        raise errors.DocumentStateError(
            f'invalid byte range offset={offset} length={length} for a '
            f'buffer of len={len(view)}')
    return view[offset:offset + length]


def _encode_utf8(val: str) -> bytes:
    try:
        return val.encode('utf-8')
    except UnicodeEncodeError as e:
        raise errors.EncodeFailureError(
            f'string is not encodable as UTF-8: {e.reason} at position '
            f'{e.start}') from e


def _check_utf8(data: memoryview) -> None:
    try:
        str(data, 'utf-8')
    except UnicodeDecodeError as e:
        raise errors.EncodeFailureError(
            f'invalid UTF-8 data: {e.reason} at byte {e.start}') from e


class Output(Protocol):

    def write(self, data: Any, /) -> Any:
        ...


ESCAPE = re.compile(rb'[\x00-\x1f\\"]')

ESCAPE_DCT = {
    b'\\': b'\\\\',
    b'"': b'\\"',
    b'\b': b'\\b',
    b'\f': b'\\f',
    b'\n': b'\\n',
    b'\r': b'\\r',
    b'\t': b'\\t',
}

for i in range(0x20):
    ESCAPE_DCT.setdefault(bytes((i,)), b'\\u%04x' % i)


def _encode_str(data: bytes) -> bytes:
    def replace(match: re.Match[bytes]) -> bytes:
        return ESCAPE_DCT[match.group(0)]
    return b'"' + ESCAPE.sub(replace, data) + b'"'


class JsonGenerator(Generator):
    """Writes compact UTF-8 JSON into any object with a ``write()`` method.

    Non-finite numbers are written as quoted strings ("NaN", "Infinity",
    "-Infinity") and binary values as base64 strings.
    """

    def __init__(self, out: Output) -> None:
        super().__init__()
        self._out: Optional[Output] = out

    def _separate(self) -> None:
        frame = self._stack[-1]
        if frame.container is Container.ARRAY and frame.count:
            self._out.write(b',')

    def _write_null(self) -> None:
        self._separate()
        self._out.write(b'null')

    def _write_boolean(self, val: bool) -> None:
        self._separate()
        self._out.write(b'true' if val else b'false')

    def _write_number(self, val: int | float | decimal.Decimal) -> None:
        self._separate()
        if isinstance(val, int):
            self._out.write(int.__repr__(val).encode('ascii'))
        elif isinstance(val, float):
            if math.isfinite(val):
                self._out.write(float.__repr__(val).encode('ascii'))
            elif math.isnan(val):
                self._out.write(b'"NaN"')
            else:
                self._out.write(b'"Infinity"' if val > 0 else b'"-Infinity"')
        else:
            if val.is_finite():
                self._out.write(
                    decimal.Decimal.__str__(val).encode('ascii'))
            elif val.is_nan():
                self._out.write(b'"NaN"')
            else:
                self._out.write(
                    b'"Infinity"' if val > 0 else b'"-Infinity"')

    def _write_utf8_string(self, data: memoryview) -> None:
        self._separate()
        self._out.write(_encode_str(bytes(data)))

    def _write_binary(self, data: memoryview) -> None:
        self._separate()
        self._out.write(b'"' + base64.b64encode(data) + b'"')

    def _write_field_name(self, name: str) -> None:
        encoded = _encode_str(_encode_utf8(name))
        if self._stack[-1].count:
            self._out.write(b',')
        self._out.write(encoded)
        self._out.write(b':')

    def _write_begin_array(self) -> None:
        self._separate()
        self._out.write(b'[')

    def _write_end_array(self) -> None:
        self._out.write(b']')

    def _write_begin_object(self) -> None:
        self._separate()
        self._out.write(b'{')

    def _write_end_object(self) -> None:
        self._out.write(b'}')

    def flush(self) -> None:
        flush = getattr(self._out, 'flush', None)
        if flush is not None:
            flush()

    def _release(self) -> None:
        self._out = None
