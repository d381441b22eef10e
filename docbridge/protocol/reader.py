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
from typing import Any, Iterable, Iterator, Tuple

import base64
import binascii
import json

from docbridge import errors


def read_document(data: bytes | bytearray | memoryview | str) -> Any:
    """Parse one JSON document into plain Python objects."""
    if isinstance(data, memoryview):
        data = bytes(data)
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise errors.MalformedInputError(
            f'cannot parse document: {e}') from e


def iter_documents(
    lines: Iterable[bytes | str],
) -> Iterator[Tuple[int, Any]]:
    """Parse newline-delimited JSON, yielding ``(lineno, document)``.

    Blank lines are skipped.
    """
    for lineno, line in enumerate(lines, 1):
        if not line.strip():
            continue
        try:
            yield lineno, read_document(line)
        except errors.MalformedInputError as e:
            e.set_hint_and_details(None, f'line {lineno}')
            raise


def decode_binary(text: str) -> bytes:
    """Decode a binary value that was written as a base64 string."""
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise errors.MalformedInputError(
            f'invalid base64 binary value: {e}') from e
