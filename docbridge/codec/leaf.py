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


"""Leaf value writers.

A leaf writer turns one host-native value into document events.  Writing
is split in two steps: ``classify()`` maps the value to a
:class:`Capability` and a per-capability method emits the events.  Hosts
with their own scalar types subclass :class:`LeafWriter` and implement
``classify()`` (and, where the value needs unwrapping, the matching
``write_*`` methods).

``write()`` returns False instead of raising when a value cannot be
written, so that the caller decides whether that aborts the record.
"""


from __future__ import annotations
from typing import Any, Callable, Dict, Optional

import collections.abc
import decimal
import enum
import functools
import logging
import numbers
import pickle

from docbridge.protocol import generator as gen


logger = logging.getLogger('docbridge.codec')


class Capability(enum.Enum):

    NULL = 'null'
    TEXT = 'text'
    UTF8_TEXT = 'utf8-text'
    INTEGRAL = 'integral'
    FLOATING = 'floating'
    BOOLEAN = 'boolean'
    BINARY = 'binary'
    SEQUENCE = 'sequence'
    MAPPING = 'mapping'


class LeafWriter:

    def __init__(self, *, write_unknown_types: bool = False) -> None:
        self.write_unknown_types = write_unknown_types
        self._writers: Dict[Capability, Callable[[Any, gen.Generator], bool]]
        self._writers = {
            Capability.NULL: self.write_null,
            Capability.TEXT: self.write_text,
            Capability.UTF8_TEXT: self.write_utf8_text,
            Capability.INTEGRAL: self.write_integral,
            Capability.FLOATING: self.write_floating,
            Capability.BOOLEAN: self.write_boolean,
            Capability.BINARY: self.write_binary,
            Capability.SEQUENCE: self.write_sequence,
            Capability.MAPPING: self.write_mapping,
        }

    def classify(self, value: Any) -> Optional[Capability]:
        raise NotImplementedError

    def write(self, value: Any, generator: gen.Generator) -> bool:
        capability = self.classify(value)
        if capability is None:
            if self.write_unknown_types:
                return self.handle_unknown(value, generator)
            return False
        return self._writers[capability](value, generator)

    def write_null(self, value: Any, generator: gen.Generator) -> bool:
        generator.write_null()
        return True

    def write_text(self, value: Any, generator: gen.Generator) -> bool:
        generator.write_string(str(value))
        return True

    def write_utf8_text(self, value: Any, generator: gen.Generator) -> bool:
        generator.write_utf8_string(value)
        return True

    def write_integral(self, value: Any, generator: gen.Generator) -> bool:
        generator.write_number(int(value))
        return True

    def write_floating(self, value: Any, generator: gen.Generator) -> bool:
        if not isinstance(value, (float, decimal.Decimal)):
            value = float(value)
        generator.write_number(value)
        return True

    def write_boolean(self, value: Any, generator: gen.Generator) -> bool:
        generator.write_boolean(bool(value))
        return True

    def write_binary(self, value: Any, generator: gen.Generator) -> bool:
        generator.write_binary(value)
        return True

    def write_sequence(self, value: Any, generator: gen.Generator) -> bool:
        generator.write_begin_array()
        for item in value:
            if not self.write(item, generator):
                return False
        generator.write_end_array()
        return True

    def write_mapping(self, value: Any, generator: gen.Generator) -> bool:
        generator.write_begin_object()
        for key, item in value.items():
            generator.write_field_name(str(key))
            if not self.write(item, generator):
                return False
        generator.write_end_object()
        return True

    def handle_unknown(self, value: Any, generator: gen.Generator) -> bool:
        try:
            data = self.to_bytes(value)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            logger.debug('cannot write value of type %s: %s',
                         type(value).__name__, e)
            return False
        generator.write_binary(data)
        return True

    def to_bytes(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)


@functools.singledispatch
def classify_python(value: Any) -> Optional[Capability]:
    return None


@classify_python.register(type(None))
def _null(value):
    return Capability.NULL


@classify_python.register(str)
def _text(value):
    return Capability.TEXT


@classify_python.register(bool)
def _boolean(value):
    return Capability.BOOLEAN


@classify_python.register(int)
@classify_python.register(numbers.Integral)
def _integral(value):
    return Capability.INTEGRAL


@classify_python.register(float)
@classify_python.register(decimal.Decimal)
@classify_python.register(numbers.Real)
def _floating(value):
    return Capability.FLOATING


@classify_python.register(bytes)
@classify_python.register(bytearray)
@classify_python.register(memoryview)
def _binary(value):
    return Capability.BINARY


@classify_python.register(collections.abc.Sequence)
def _sequence(value):
    return Capability.SEQUENCE


@classify_python.register(collections.abc.Mapping)
def _mapping(value):
    return Capability.MAPPING


class PythonLeafWriter(LeafWriter):
    """Leaf writer for plain Python values.

    Sets are not ordered collections and, like any other unregistered
    type, are only written in permissive mode.
    """

    def classify(self, value: Any) -> Optional[Capability]:
        return classify_python(value)
