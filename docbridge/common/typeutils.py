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

import collections.abc
import functools


@functools.lru_cache(1024)
def _is_sequence_type(cls):
    return (
        issubclass(cls, collections.abc.Sequence)
        and not issubclass(cls, (str, bytes, bytearray, memoryview))
    )


@functools.lru_cache(1024)
def _is_mapping_type(cls):
    return issubclass(cls, collections.abc.Mapping)


def is_sequence(obj):
    """Is *obj* an ordered collection of values (and not text or bytes)?"""
    return _is_sequence_type(obj.__class__)


def is_mapping(obj):
    return _is_mapping_type(obj.__class__)


def type_name(obj):
    cls = obj.__class__
    if cls.__module__ == 'builtins':
        return cls.__qualname__
    return f'{cls.__module__}.{cls.__qualname__}'
