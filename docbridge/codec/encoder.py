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
from typing import Any, Optional

import functools
import logging

from docbridge import errors
from docbridge.common import debug
from docbridge.common import typeutils
from docbridge.protocol import generator as gen
from docbridge.schema import alias as alias_mod
from docbridge.schema import types

from . import leaf


logger = logging.getLogger('docbridge.codec')


class ValueEncoder:
    """Writes a value as document events, guided by its type descriptor.

    The encoder keeps no per-call state, so one instance may be used from
    several threads as long as each call gets its own generator.
    """

    def __init__(
        self,
        leaf_writer: Optional[leaf.LeafWriter] = None,
        alias: Optional[alias_mod.FieldAlias] = None,
    ) -> None:
        if leaf_writer is None:
            leaf_writer = leaf.PythonLeafWriter()
        self._leaf = leaf_writer
        self._alias = alias if alias is not None else alias_mod.IDENTITY

    @property
    def leaf_writer(self) -> leaf.LeafWriter:
        return self._leaf

    @property
    def alias(self) -> alias_mod.FieldAlias:
        return self._alias

    def encode(
        self,
        desc: types.TypeDesc,
        value: Any,
        generator: gen.Generator,
    ) -> None:
        if value is None:
            generator.write_null()
            return

        types.check_supported(desc)

        depth = generator.depth
        try:
            self._encode(desc, value, generator)
        except BaseException:
            # Leave the stream balanced; the caller must still discard
            # the output of a failed record.
            if not generator.closed:
                generator.unwind(depth)
            raise

    def _encode(
        self,
        desc: types.TypeDesc,
        value: Any,
        generator: gen.Generator,
    ) -> None:
        if value is None:
            generator.write_null()
        else:
            self._encode_value(desc, value, generator)

    @functools.singledispatchmethod
    def _encode_value(
        self,
        desc: types.TypeDesc,
        value: Any,
        generator: gen.Generator,
    ) -> None:
        raise TypeError(f'unexpected type descriptor: {desc!r}')

    @_encode_value.register
    def _encode_scalar(
        self,
        desc: types.Scalar,
        value: Any,
        generator: gen.Generator,
    ) -> None:
        if debug.flags.codec:
            logger.debug('encoding %s leaf of type %s',
                         desc.render(), type(value).__name__)
        if not self._leaf.write(value, generator):
            raise errors.EncodeFailureError(
                f'cannot encode value of type '
                f'{typeutils.type_name(value)!r} as {desc.render()}',
                hint='enable writing of unknown types to store such values '
                     'as opaque binary data',
            )

    @_encode_value.register
    def _encode_list(
        self,
        desc: types.List,
        value: Any,
        generator: gen.Generator,
    ) -> None:
        if not typeutils.is_sequence(value):
            raise errors.MalformedInputError(
                f'expected a sequence for {desc.render()}, got '
                f'{typeutils.type_name(value)!r}')

        element = desc.element
        generator.write_begin_array()
        for i, item in enumerate(value):
            with errors.ensure_path_segment(i):
                self._encode(element, item, generator)
        generator.write_end_array()

    @_encode_value.register
    def _encode_record(
        self,
        desc: types.Record,
        value: Any,
        generator: gen.Generator,
    ) -> None:
        if not typeutils.is_mapping(value):
            raise errors.MalformedInputError(
                f'expected a mapping of field names to values for record, '
                f'got {typeutils.type_name(value)!r}')

        external_name = self._alias.external_name
        generator.write_begin_object()
        for field in desc.fields:
            # Absent fields are written as null: the document always has
            # one entry per declared field.
            generator.write_field_name(external_name(field.name))
            with errors.ensure_path_segment(field.name):
                child = value.get(field.name)
                self._encode(field.type, child, generator)
        generator.write_end_object()

    @_encode_value.register
    def _encode_union(
        self,
        desc: types.Union,
        value: Any,
        generator: gen.Generator,
    ) -> None:
        raise errors.UnsupportedShapeError('union types are not supported')
