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


"""Per-table serializer/deserializer session.

A DocumentSerDe is created once per table (or relation) and then used to
convert every record of that table.  It owns a scratch buffer which is
reused between records, so a single instance must not be shared by
concurrently running tasks; create one session per worker instead.
"""


from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Sequence

import logging

from docbridge import adapters
from docbridge import errors
from docbridge import settings as settings_mod
from docbridge.codec import decoder
from docbridge.codec import encoder
from docbridge.codec import leaf
from docbridge.common import bytesarray
from docbridge.common import debug
from docbridge.protocol import generator
from docbridge.protocol import reader
from docbridge.schema import alias as alias_mod
from docbridge.schema import types


logger = logging.getLogger('docbridge.serde')


class DocumentSerDe:

    def __init__(
        self,
        schema: types.Record,
        *,
        alias: Optional[alias_mod.FieldAlias] = None,
        leaf_writer: Optional[leaf.LeafWriter] = None,
        scratch_size: int = settings_mod.DEFAULT_SCRATCH_SIZE,
    ) -> None:
        if not isinstance(schema, types.Record):
            raise errors.ConfigurationError(
                f'table schema must be a record, got {schema.render()}')

        if alias is None:
            alias = alias_mod.IDENTITY
        alias.check_record(schema)

        self._schema = schema
        self._alias = alias
        self._encoder = encoder.ValueEncoder(leaf_writer, alias)
        self._decoder = decoder.ValueDecoder(alias)
        self._scratch = bytesarray.BytesArray(scratch_size)
        self._trace = logger.isEnabledFor(logging.DEBUG)

        logger.debug('created serde for %s', schema.render())

    @classmethod
    def from_settings(cls, cfg: settings_mod.CodecSettings) -> DocumentSerDe:
        return cls(
            cfg.schema(),
            alias=cfg.alias(),
            leaf_writer=leaf.PythonLeafWriter(
                write_unknown_types=cfg.write_unknown_types),
            scratch_size=cfg.scratch_size,
        )

    @classmethod
    def from_properties(
        cls,
        props: Mapping[str, str],
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> DocumentSerDe:
        cfg = settings_mod.CodecSettings.from_properties(props)
        return cls.from_settings(cfg.with_environ(environ))

    @property
    def schema(self) -> types.Record:
        return self._schema

    @property
    def alias(self) -> alias_mod.FieldAlias:
        return self._alias

    def serialize(self, record: Optional[Mapping[str, Any]]) -> bytes:
        """Serialize one record into a JSON document.

        The returned bytes are a copy; the scratch buffer is reused by
        the next call.
        """
        scratch = self._scratch
        scratch.reset()
        with generator.JsonGenerator(scratch) as gen:
            self._encoder.encode(self._schema, record, gen)

        result = scratch.getvalue()
        if self._trace:
            logger.debug('serialized %d bytes', len(result))
        if debug.flags.serde:
            debug.header('Serialized document')
            debug.print(result.decode('utf-8'))
        return result

    def serialize_tuple(self, values: Optional[Sequence[Any]]) -> bytes:
        """Serialize a positional row ordered like the schema fields."""
        if values is None:
            return self.serialize(None)
        return self.serialize(adapters.RecordView(self._schema, values))

    def deserialize(
        self,
        blob: bytes | bytearray | memoryview | str | Mapping[str, Any] | None,
    ) -> Optional[List[Any]]:
        if blob is None:
            return None

        if isinstance(blob, (bytes, bytearray, memoryview, str)):
            data = reader.read_document(blob)
        else:
            data = blob

        result = self._decoder.decode(self._schema, data)
        if self._trace:
            logger.debug('deserialized record with %d fields',
                         len(self._schema))
        if debug.flags.serde:
            debug.header('Deserialized record')
            debug.dump(result)
        return result

    def deserialize_record(
        self,
        blob: bytes | bytearray | memoryview | str | Mapping[str, Any] | None,
    ) -> Optional[Dict[str, Any]]:
        return adapters.bind_record(self._schema, self.deserialize(blob))

    def __repr__(self) -> str:
        return f'<DocumentSerDe {self._schema.render()}>'
