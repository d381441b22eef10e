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
from typing import Iterator, Mapping, Optional, Tuple

import immutables

from docbridge import errors

from . import types


class FieldAlias:
    """Translates record field names between the host and the document.

    Names without an entry map to themselves.  The table is immutable, so
    a single instance is shared by the encoder and the decoder of a session
    (and by any number of threads).
    """

    __slots__ = ('_to_external', '_to_canonical')

    def __init__(self, mapping: Optional[Mapping[str, str]] = None) -> None:
        to_external = immutables.Map(mapping or {})
        to_canonical = {}
        for canonical, external in to_external.items():
            if not isinstance(canonical, str) or not isinstance(external, str):
                raise errors.AliasError(
                    f'field aliases must be strings, got '
                    f'{canonical!r} -> {external!r}')
            if external in to_canonical:
                raise errors.AliasError(
                    f'fields {to_canonical[external]!r} and {canonical!r} '
                    f'are both mapped to {external!r}')
            to_canonical[external] = canonical

        self._to_external = to_external
        self._to_canonical = immutables.Map(to_canonical)

    @classmethod
    def from_string(cls, text: Optional[str]) -> FieldAlias:
        """Parse an alias list like ``"user_name:userName, age:years"``."""
        mapping = {}
        for item in (text or '').split(','):
            item = item.strip()
            if not item:
                continue
            canonical, sep, external = item.partition(':')
            canonical = canonical.strip()
            external = external.strip()
            if not sep or not canonical or not external:
                raise errors.AliasError(
                    f'invalid field alias {item!r}',
                    hint='expected <field>:<alias> pairs separated by commas')
            if canonical in mapping:
                raise errors.AliasError(
                    f'field {canonical!r} is aliased more than once')
            mapping[canonical] = external
        return cls(mapping)

    def external_name(self, canonical: str) -> str:
        return self._to_external.get(canonical, canonical)

    def canonical_name(self, external: str) -> str:
        return self._to_canonical.get(external, external)

    def check_record(self, desc: types.TypeDesc) -> None:
        """Verify that aliasing keeps field names unique in every record.

        Otherwise two fields would be written under the same document key
        and could not be told apart when reading the document back.
        """
        if isinstance(desc, types.Record):
            seen = {}
            for field in desc.fields:
                external = self.external_name(field.name)
                if external in seen:
                    raise errors.AliasError(
                        f'fields {seen[external]!r} and {field.name!r} '
                        f'would both be written as {external!r}')
                seen[external] = field.name
                self.check_record(field.type)
        elif isinstance(desc, types.List):
            self.check_record(desc.element)
        elif isinstance(desc, types.Union):
            for variant in desc.variants:
                self.check_record(variant)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self._to_external.items())

    def to_string(self) -> str:
        return ','.join(f'{c}:{e}' for c, e in sorted(self.items()))

    def __len__(self) -> int:
        return len(self._to_external)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldAlias):
            return NotImplemented
        return self._to_external == other._to_external

    def __hash__(self) -> int:
        return hash(self._to_external)

    def __repr__(self) -> str:
        return f'<FieldAlias {self.to_string()!r}>'


IDENTITY = FieldAlias()
