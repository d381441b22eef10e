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


"""Type descriptors: the schema a value is encoded and decoded against.

Descriptors are immutable and hashable; a single tree is built per
session and shared by every encode/decode call (and thread) of it.
"""


from __future__ import annotations

import dataclasses
import enum
import functools
import re
import typing

from docbridge import errors
from docbridge.common import render


class Kind(enum.Enum):

    SCALAR = 'scalar'
    LIST = 'list'
    RECORD = 'record'
    UNION = 'union'


class ScalarKind(enum.Enum):

    NUMERIC = 'numeric'
    STRING = 'string'
    BOOLEAN = 'boolean'
    BINARY = 'binary'
    OPAQUE = 'opaque'


_PLAIN_NAME = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')


def quote_name(name: str) -> str:
    """Render a field name, backquoting it unless it is a plain identifier."""
    if _PLAIN_NAME.fullmatch(name):
        return name
    return f'`{name}`'


class TypeDesc:

    __slots__ = ()

    kind: typing.ClassVar[Kind]

    def render(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.render()


@dataclasses.dataclass(frozen=True)
class Scalar(TypeDesc):

    kind: typing.ClassVar[Kind] = Kind.SCALAR

    scalar_kind: ScalarKind
    # Host type name, e.g. "bigint"; only used for rendering.
    name: typing.Optional[str] = None

    def render(self) -> str:
        return self.name or self.scalar_kind.value


@dataclasses.dataclass(frozen=True)
class List(TypeDesc):

    kind: typing.ClassVar[Kind] = Kind.LIST

    element: TypeDesc

    def __post_init__(self):
        if not isinstance(self.element, TypeDesc):
            raise TypeError(
                f'List element must be a TypeDesc, got {self.element!r}')

    def render(self) -> str:
        return f'array<{self.element.render()}>'


@dataclasses.dataclass(frozen=True)
class Field:

    name: str
    type: TypeDesc

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise TypeError(f'invalid field name: {self.name!r}')
        if not isinstance(self.type, TypeDesc):
            raise TypeError(
                f'type of field {self.name!r} must be a TypeDesc, '
                f'got {self.type!r}')

    def render(self) -> str:
        return f'{quote_name(self.name)}:{self.type.render()}'


@dataclasses.dataclass(frozen=True)
class Record(TypeDesc):

    kind: typing.ClassVar[Kind] = Kind.RECORD

    fields: typing.Tuple[Field, ...]

    def __post_init__(self):
        fields = tuple(self.fields)
        seen = set()
        for field in fields:
            if not isinstance(field, Field):
                raise TypeError(f'Record fields must be Fields, got {field!r}')
            if field.name in seen:
                raise ValueError(f'duplicate record field {field.name!r}')
            seen.add(field.name)
        object.__setattr__(self, 'fields', fields)

    @classmethod
    def from_pairs(
        cls,
        pairs: typing.Iterable[typing.Tuple[str, TypeDesc]],
    ) -> Record:
        return cls(tuple(Field(name, type) for name, type in pairs))

    @functools.cached_property
    def names(self) -> typing.Tuple[str, ...]:
        return tuple(field.name for field in self.fields)

    @functools.cached_property
    def _index(self) -> typing.Dict[str, int]:
        return {field.name: i for i, field in enumerate(self.fields)}

    def index_of(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f'record has no field {name!r}') from None

    def get_field(self, name: str) -> Field:
        return self.fields[self.index_of(name)]

    def __len__(self) -> int:
        return len(self.fields)

    def render(self) -> str:
        inner = ','.join(field.render() for field in self.fields)
        return f'struct<{inner}>'


@dataclasses.dataclass(frozen=True)
class Union(TypeDesc):

    kind: typing.ClassVar[Kind] = Kind.UNION

    variants: typing.Tuple[TypeDesc, ...]

    def __post_init__(self):
        variants = []
        for variant in self.variants:
            if not isinstance(variant, TypeDesc):
                raise TypeError(
                    f'Union variants must be TypeDescs, got {variant!r}')
            if variant not in variants:
                variants.append(variant)
        object.__setattr__(self, 'variants', tuple(variants))

    def render(self) -> str:
        inner = ','.join(v.render() for v in self.variants)
        return f'uniontype<{inner}>'


NUMERIC = Scalar(ScalarKind.NUMERIC)
STRING = Scalar(ScalarKind.STRING)
BOOLEAN = Scalar(ScalarKind.BOOLEAN)
BINARY = Scalar(ScalarKind.BINARY)
OPAQUE = Scalar(ScalarKind.OPAQUE)


@functools.lru_cache(256)
def find_union(
    desc: TypeDesc,
) -> typing.Optional[typing.Tuple[str | int, ...]]:
    """Return the path to the first Union in *desc*, or None.

    List elements are reported with index 0 since the path describes
    the descriptor, not any particular value.
    """
    if isinstance(desc, Union):
        return ()
    elif isinstance(desc, List):
        sub = find_union(desc.element)
        return None if sub is None else (0,) + sub
    elif isinstance(desc, Record):
        for field in desc.fields:
            sub = find_union(field.type)
            if sub is not None:
                return (field.name,) + sub
    return None


def check_supported(desc: TypeDesc) -> None:
    path = find_union(desc)
    if path is not None:
        raise errors.UnsupportedShapeError(
            'union types are not supported',
            hint='declare the column with a single concrete type',
            path=path,
        )


def render_tree(desc: TypeDesc) -> str:
    buf = render.RenderBuffer()
    _render_node(desc, buf)
    return str(buf)


def _render_node(desc: TypeDesc, buf: render.RenderBuffer) -> None:
    if isinstance(desc, Record):
        buf.append('struct<')
        with buf.indent():
            for i, field in enumerate(desc.fields):
                buf.write(f'{quote_name(field.name)}: ')
                _render_node(field.type, buf)
                if i < len(desc.fields) - 1:
                    buf.append(',')
        buf.write('>')
    elif isinstance(desc, List):
        buf.append('array<')
        _render_node(desc.element, buf)
        buf.append('>')
    else:
        buf.append(desc.render())
