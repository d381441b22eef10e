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


"""Adapters between positional host records and name-keyed containers."""


from __future__ import annotations
from typing import Any, Dict, Iterator, Optional, Sequence

import collections.abc

from docbridge import errors
from docbridge.common import typeutils
from docbridge.schema import types


class RecordView(collections.abc.Mapping):
    """Read-only name-keyed view over a positional record (tuple/row).

    Positions beyond the end of a short row read as absent, so those
    fields are written as null.  Nested records given positionally
    (including records inside lists) are viewed the same way; nested
    mappings are used as they are.
    """

    __slots__ = ('_desc', '_values')

    def __init__(self, desc: types.Record, values: Sequence[Any]) -> None:
        if len(values) > len(desc.fields):
            raise errors.MalformedInputError(
                f'record has {len(desc.fields)} fields but {len(values)} '
                f'values were given')
        self._desc = desc
        self._values = values

    def __getitem__(self, name: str) -> Any:
        idx = self._desc.index_of(name)
        if idx >= len(self._values):
            raise KeyError(name)
        return _view(self._desc.fields[idx].type, self._values[idx])

    def __iter__(self) -> Iterator[str]:
        return iter(self._desc.names[:len(self._values)])

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f'<RecordView {dict(self)!r}>'


def _view(desc: types.TypeDesc, value: Any) -> Any:
    if value is None:
        return None
    elif isinstance(desc, types.Record):
        if typeutils.is_sequence(value):
            return RecordView(desc, value)
        return value
    elif (isinstance(desc, types.List)
            and isinstance(desc.element, (types.Record, types.List))
            and typeutils.is_sequence(value)):
        return [_view(desc.element, item) for item in value]
    else:
        return value


def bind_record(
    desc: types.Record,
    values: Optional[Sequence[Any]],
) -> Optional[Dict[str, Any]]:
    """Bind a decoded positional record to its canonical field names.

    Nested records are bound recursively, including records inside lists.
    """
    if values is None:
        return None
    if len(values) != len(desc.fields):
        raise errors.MalformedInputError(
            f'record has {len(desc.fields)} fields but {len(values)} '
            f'values were given')
    return {
        field.name: _bind(field.type, value)
        for field, value in zip(desc.fields, values)
    }


def _bind(desc: types.TypeDesc, value: Any) -> Any:
    if value is None:
        return None
    elif isinstance(desc, types.Record):
        return bind_record(desc, value)
    elif isinstance(desc, types.List):
        return [_bind(desc.element, item) for item in value]
    else:
        return value
