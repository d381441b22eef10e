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
from typing import Any, List, NamedTuple, Optional

import decimal
import enum

from docbridge import errors

from . import generator


class Event(enum.Enum):

    NULL = 'null'
    BOOLEAN = 'boolean'
    NUMBER = 'number'
    STRING = 'string'
    BINARY = 'binary'
    FIELD_NAME = 'field_name'
    BEGIN_ARRAY = 'begin_array'
    END_ARRAY = 'end_array'
    BEGIN_OBJECT = 'begin_object'
    END_OBJECT = 'end_object'


class Record(NamedTuple):

    event: Event
    value: Any = None


class EventRecorder(generator.Generator):
    """Keeps every event written to it; handy for tests and debugging."""

    def __init__(self) -> None:
        super().__init__()
        self.events: List[Record] = []

    def _add(self, event: Event, value: Any = None) -> None:
        self.events.append(Record(event, value))

    def _write_null(self) -> None:
        self._add(Event.NULL)

    def _write_boolean(self, val: bool) -> None:
        self._add(Event.BOOLEAN, val)

    def _write_number(self, val: int | float | decimal.Decimal) -> None:
        self._add(Event.NUMBER, val)

    def _write_string(self, val: str) -> None:
        self._add(Event.STRING, val)

    def _write_utf8_string(self, data: memoryview) -> None:
        self._add(Event.STRING, str(data, 'utf-8'))

    def _write_binary(self, data: memoryview) -> None:
        self._add(Event.BINARY, bytes(data))

    def _write_field_name(self, name: str) -> None:
        self._add(Event.FIELD_NAME, name)

    def _write_begin_array(self) -> None:
        self._add(Event.BEGIN_ARRAY)

    def _write_end_array(self) -> None:
        self._add(Event.END_ARRAY)

    def _write_begin_object(self) -> None:
        self._add(Event.BEGIN_OBJECT)

    def _write_end_object(self) -> None:
        self._add(Event.END_OBJECT)

    def kinds(self) -> List[Event]:
        return [rec.event for rec in self.events]


class ObjectBuilder(generator.Generator):
    """Materializes the written document as plain Python objects.

    Objects become dicts, arrays become lists and binary values stay
    ``bytes``.  The result is available as :attr:`result` once the root
    value is complete.
    """

    _NOTHING = object()

    def __init__(self) -> None:
        super().__init__()
        self._values: List[Any] = []
        self._fields: List[Optional[str]] = []
        self._result = self._NOTHING

    @property
    def result(self) -> Any:
        if self._result is self._NOTHING:
            raise errors.DocumentStateError('the document is not complete')
        return self._result

    def _add(self, val: Any) -> None:
        if not self._values:
            self._result = val
            return

        container = self._values[-1]
        if isinstance(container, dict):
            container[self._fields[-1]] = val
        else:
            container.append(val)

    def _write_null(self) -> None:
        self._add(None)

    def _write_boolean(self, val: bool) -> None:
        self._add(val)

    def _write_number(self, val: int | float | decimal.Decimal) -> None:
        self._add(val)

    def _write_string(self, val: str) -> None:
        self._add(val)

    def _write_utf8_string(self, data: memoryview) -> None:
        self._add(str(data, 'utf-8'))

    def _write_binary(self, data: memoryview) -> None:
        self._add(bytes(data))

    def _write_field_name(self, name: str) -> None:
        self._fields[-1] = name

    def _write_begin_array(self) -> None:
        self._values.append([])
        self._fields.append(None)

    def _write_end_array(self) -> None:
        self._fields.pop()
        self._add(self._values.pop())

    def _write_begin_object(self) -> None:
        self._values.append({})
        self._fields.append(None)

    def _write_end_object(self) -> None:
        self._fields.pop()
        self._add(self._values.pop())
