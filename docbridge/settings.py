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
from typing import Mapping, NamedTuple, Optional, Tuple

import json
import logging
import os

from docbridge import errors
from docbridge.schema import alias
from docbridge.schema import typestring
from docbridge.schema import types


logger = logging.getLogger('docbridge.settings')


COLUMNS = 'columns'
COLUMN_TYPES = 'columns.types'
MAPPING_NAMES = 'docbridge.mapping.names'
WRITE_UNKNOWN_TYPES = 'docbridge.write.unknown.types'
SCRATCH_SIZE = 'docbridge.scratch.size'

ENV_PREFIX = 'DOCBRIDGE_'

DEFAULT_SCRATCH_SIZE = 512

_TRUE = frozenset({'1', 'true', 'yes', 'on'})
_FALSE = frozenset({'0', 'false', 'no', 'off', ''})


def parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise errors.ConfigurationError(
        f'invalid boolean value {value!r} for {name!r}')


def parse_size(name: str, value: str) -> int:
    try:
        size = int(value.strip())
    except ValueError:
        size = -1
    if size < 0:
        raise errors.ConfigurationError(
            f'invalid size {value!r} for {name!r}',
            hint='expected a non-negative integer')
    return size


class CodecSettings(NamedTuple):

    columns: str
    column_types: str
    mapping_names: str = ''
    write_unknown_types: bool = False
    scratch_size: int = DEFAULT_SCRATCH_SIZE

    @classmethod
    def from_properties(cls, props: Mapping[str, str]) -> CodecSettings:
        try:
            columns = props[COLUMNS]
            column_types = props[COLUMN_TYPES]
        except KeyError as e:
            raise errors.ConfigurationError(
                f'missing required property {e.args[0]!r}') from None

        return cls(
            columns=columns,
            column_types=column_types,
            mapping_names=props.get(MAPPING_NAMES, ''),
            write_unknown_types=parse_bool(
                WRITE_UNKNOWN_TYPES, props.get(WRITE_UNKNOWN_TYPES, 'false')),
            scratch_size=parse_size(
                SCRATCH_SIZE,
                props.get(SCRATCH_SIZE, str(DEFAULT_SCRATCH_SIZE))),
        )

    def with_environ(
        self,
        environ: Optional[Mapping[str, str]] = None,
    ) -> CodecSettings:
        """Apply ``DOCBRIDGE_*`` environment overrides."""
        if environ is None:
            environ = os.environ

        overrides = {}
        for prop, parse in (
            (MAPPING_NAMES, None),
            (WRITE_UNKNOWN_TYPES, parse_bool),
            (SCRATCH_SIZE, parse_size),
        ):
            env_name = ENV_PREFIX + prop[len('docbridge.'):].replace(
                '.', '_').upper()
            value = environ.get(env_name)
            if value is None:
                continue
            field = prop[len('docbridge.'):].replace('.', '_')
            overrides[field] = value if parse is None else parse(
                env_name, value)
            logger.debug('%s overridden by %s', prop, env_name)

        return self._replace(**overrides)

    def to_json(self) -> str:
        return json.dumps(self._asdict())

    @classmethod
    def from_json(cls, js: str) -> CodecSettings:
        try:
            dct = json.loads(js)
            cfg = cls(**dct)
        except (ValueError, TypeError) as e:
            raise errors.ConfigurationError(
                f'invalid serialized settings: {e}') from e

        for field in ('columns', 'column_types', 'mapping_names'):
            value = getattr(cfg, field)
            if not isinstance(value, str):
                raise errors.ConfigurationError(
                    f'invalid serialized settings: {field!r} must be a '
                    f'string, got {value!r}')
        if not isinstance(cfg.write_unknown_types, bool):
            raise errors.ConfigurationError(
                f'invalid serialized settings: \'write_unknown_types\' '
                f'must be a boolean, got {cfg.write_unknown_types!r}')
        size = cfg.scratch_size
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise errors.ConfigurationError(
                f'invalid serialized settings: \'scratch_size\' must be a '
                f'non-negative integer, got {size!r}')
        return cfg

    def schema(self) -> types.Record:
        return typestring.parse_columns(self.columns, self.column_types)

    def alias(self) -> alias.FieldAlias:
        return alias.FieldAlias.from_string(self.mapping_names)

    def properties(self) -> Tuple[Tuple[str, str], ...]:
        return (
            (COLUMNS, self.columns),
            (COLUMN_TYPES, self.column_types),
            (MAPPING_NAMES, self.mapping_names),
            (WRITE_UNKNOWN_TYPES, str(self.write_unknown_types).lower()),
            (SCRATCH_SIZE, str(self.scratch_size)),
        )
