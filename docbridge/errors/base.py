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

from typing import Any, Optional, Sequence, Type, Iterator, Dict, List

import contextlib


__all__ = (
    'DocBridgeError', 'ensure_path_segment', 'format_path',
)


class DocBridgeErrorMeta(type):
    _error_map: Dict[int, Type[DocBridgeError]] = {}
    _name_map: Dict[str, Type[DocBridgeError]] = {}

    def __new__(mcls, name, bases, dct):
        cls = super().__new__(mcls, name, bases, dct)

        assert name not in mcls._name_map
        mcls._name_map[name] = cls

        code = dct.get('_code')
        if code is not None:
            mcls._error_map[code] = cls

        return cls

    def __init__(cls, name, bases, dct):
        if cls._code is None and cls.__module__ != __name__:
            # We don't want any DocBridgeError subclasses to not
            # have a code.
            raise RuntimeError(
                'direct subclassing of DocBridgeError is prohibited; '
                'subclass one of its subclasses in docbridge.errors')

    @classmethod
    def get_error_class_from_code(mcls, code: int) -> Type[DocBridgeError]:
        return mcls._error_map[code]

    @classmethod
    def get_error_class_from_name(mcls, name: str) -> Type[DocBridgeError]:
        return mcls._name_map[name]


class DocBridgeError(Exception, metaclass=DocBridgeErrorMeta):

    _code: Optional[int] = None
    _attrs: Dict[int, Any]

    def __init__(
        self,
        msg: Optional[str] = None,
        *,
        hint: Optional[str] = None,
        details: Optional[str] = None,
        path: Optional[Sequence[str | int]] = None,
        position: Optional[int] = None,
    ):
        if type(self) is DocBridgeError:
            raise RuntimeError(
                'DocBridgeError is not supposed to be instantiated directly')

        self._attrs = {}
        self._path: List[str | int] = list(path) if path else []

        if position is not None:
            self._attrs[FIELD_POSITION] = position

        self.set_hint_and_details(hint, details)

        super().__init__(msg)

    @classmethod
    def get_code(cls):
        if cls._code is None:
            raise RuntimeError(
                f'docbridge error code is not set (type: {cls.__name__})')
        return cls._code

    def __str__(self):
        msg = super().__str__()
        if self._path:
            msg = f'{msg} (at {format_path(self._path)})'
        return msg

    def to_json(self):
        err_dct = {
            'message': str(self),
            'type': str(type(self).__name__),
            'code': self.get_code(),
        }
        for name, field in _JSON_FIELDS.items():
            if field in self._attrs:
                err_dct[name] = self._attrs[field]
        if self._path:
            err_dct['path'] = format_path(self._path)

        return err_dct

    def set_hint_and_details(self, hint, details=None):
        if hint is not None:
            self._attrs[FIELD_HINT] = hint
        if details is not None:
            self._attrs[FIELD_DETAILS] = details

    def add_path_segment(self, segment: str | int) -> None:
        # Segments are added while the error propagates up the value
        # tree, so the innermost one arrives first.
        self._path.insert(0, segment)

    @property
    def path(self) -> tuple[str | int, ...]:
        return tuple(self._path)

    @property
    def position(self):
        return self._attrs.get(FIELD_POSITION, -1)

    @property
    def hint(self):
        return self._attrs.get(FIELD_HINT)

    @property
    def details(self):
        return self._attrs.get(FIELD_DETAILS)


def format_path(path: Sequence[str | int]) -> str:
    steps = ['$']
    for segment in path:
        if isinstance(segment, int):
            steps.append(f'[{segment}]')
        else:
            steps.append(f'.{segment}')
    return ''.join(steps)


@contextlib.contextmanager
def ensure_path_segment(segment: str | int) -> Iterator[None]:
    try:
        yield
    except DocBridgeError as e:
        e.add_path_segment(segment)
        raise


FIELD_HINT = 0x_00_01
FIELD_DETAILS = 0x_00_02
FIELD_POSITION = 0x_FF_F1

# Fields to include in the json dump of the error
_JSON_FIELDS = {
    'hint': FIELD_HINT,
    'details': FIELD_DETAILS,
    'position': FIELD_POSITION,
}
