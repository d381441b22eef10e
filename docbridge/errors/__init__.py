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

from .base import *  # NoQA


__all__ = base.__all__ + (  # type: ignore
    'ConfigurationError',
    'SchemaSyntaxError',
    'AliasError',
    'CodecError',
    'UnsupportedShapeError',
    'EncodeFailureError',
    'MalformedInputError',
    'DocumentStateError',
)


class ConfigurationError(DocBridgeError):
    _code = 0x_03_00_00_00


class SchemaSyntaxError(ConfigurationError):
    _code = 0x_03_01_00_00


class AliasError(ConfigurationError):
    _code = 0x_03_02_00_00


class CodecError(DocBridgeError):
    _code = 0x_04_00_00_00


class UnsupportedShapeError(CodecError):
    _code = 0x_04_01_00_00


class EncodeFailureError(CodecError):
    _code = 0x_04_02_00_00


class MalformedInputError(CodecError):
    _code = 0x_04_03_00_00


class DocumentStateError(DocBridgeError):
    _code = 0x_05_00_00_00
