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
from typing import Any, List, Optional

import functools
import logging

from docbridge import errors
from docbridge.common import debug
from docbridge.common import typeutils
from docbridge.schema import alias as alias_mod
from docbridge.schema import types


logger = logging.getLogger('docbridge.codec')


class ValueDecoder:
    """Rebuilds a value tree from already parsed document fields.

    Records come back as lists ordered like the descriptor's fields;
    scalars are passed through untouched.
    """

    def __init__(self, alias: Optional[alias_mod.FieldAlias] = None) -> None:
        self._alias = alias if alias is not None else alias_mod.IDENTITY

    @property
    def alias(self) -> alias_mod.FieldAlias:
        return self._alias

    def decode(self, desc: types.TypeDesc, data: Any) -> Any:
        if data is None:
            return None

        types.check_supported(desc)
        return self._decode(desc, data)

    def _decode(self, desc: types.TypeDesc, data: Any) -> Any:
        if data is None:
            return None
        return self._decode_value(desc, data)

    @functools.singledispatchmethod
    def _decode_value(self, desc: types.TypeDesc, data: Any) -> Any:
        raise TypeError(f'unexpected type descriptor: {desc!r}')

    @_decode_value.register
    def _decode_scalar(self, desc: types.Scalar, data: Any) -> Any:
        return data

    @_decode_value.register
    def _decode_list(self, desc: types.List, data: Any) -> List[Any]:
        if not typeutils.is_sequence(data):
            raise errors.MalformedInputError(
                f'expected an array for {desc.render()}, got '
                f'{typeutils.type_name(data)!r}')

        element = desc.element
        result = []
        for i, item in enumerate(data):
            with errors.ensure_path_segment(i):
                result.append(self._decode(element, item))
        return result

    @_decode_value.register
    def _decode_record(self, desc: types.Record, data: Any) -> List[Any]:
        if not typeutils.is_mapping(data):
            raise errors.MalformedInputError(
                f'expected an object for record, got '
                f'{typeutils.type_name(data)!r}')

        if debug.flags.codec:
            logger.debug('decoding record with fields %s from keys %s',
                         desc.names, list(data.keys()))

        external_name = self._alias.external_name
        result = []
        for field in desc.fields:
            value = data.get(external_name(field.name))
            with errors.ensure_path_segment(field.name):
                result.append(self._decode(field.type, value))
        return result

    @_decode_value.register
    def _decode_union(self, desc: types.Union, data: Any) -> Any:
        raise errors.UnsupportedShapeError('union types are not supported')
