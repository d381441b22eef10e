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


"""Parser for Hive-style type strings.

Examples of accepted input:

    int
    array<struct<name:string,tags:array<string>>>
    map<string,bigint>
    decimal(10,2)

``map`` types have no descriptor of their own: they are parsed as opaque
scalars and are written by the leaf writer as key-value collections.
"""


from __future__ import annotations
from typing import List, Optional, Sequence, Union

from docbridge import errors
from docbridge.common import debug
from docbridge.common import lexer

from . import types


class TypeLexer(lexer.Lexer):

    rules = (
        lexer.Rule(token='WS', regexp=r'\s+', skip=True),
        lexer.Rule(token='IDENT', regexp=r'[A-Za-z_][A-Za-z0-9_]*'),
        lexer.Rule(token='QIDENT', regexp=r'`[^`]+`'),
        lexer.Rule(token='ICONST', regexp=r'\d+'),
        lexer.Rule(token='<', regexp=lexer.group('<')),
        lexer.Rule(token='>', regexp=lexer.group('>')),
        lexer.Rule(token='(', regexp=lexer.group('(')),
        lexer.Rule(token=')', regexp=lexer.group(')')),
        lexer.Rule(token=',', regexp=lexer.group(',')),
        lexer.Rule(token=':', regexp=lexer.group(':')),
    )

    def get_eof_token(self):
        return lexer.Token('', type='EOF', start=self.end, end=self.end)


_SCALARS = {
    'tinyint': types.ScalarKind.NUMERIC,
    'smallint': types.ScalarKind.NUMERIC,
    'int': types.ScalarKind.NUMERIC,
    'integer': types.ScalarKind.NUMERIC,
    'bigint': types.ScalarKind.NUMERIC,
    'float': types.ScalarKind.NUMERIC,
    'double': types.ScalarKind.NUMERIC,
    'decimal': types.ScalarKind.NUMERIC,
    'numeric': types.ScalarKind.NUMERIC,
    'string': types.ScalarKind.STRING,
    'varchar': types.ScalarKind.STRING,
    'char': types.ScalarKind.STRING,
    'boolean': types.ScalarKind.BOOLEAN,
    'binary': types.ScalarKind.BINARY,
    'timestamp': types.ScalarKind.OPAQUE,
    'date': types.ScalarKind.OPAQUE,
    'interval': types.ScalarKind.OPAQUE,
    'void': types.ScalarKind.OPAQUE,
    'opaque': types.ScalarKind.OPAQUE,
}


class TypeParser:

    def __init__(self, text: str) -> None:
        self.text = text
        lex = TypeLexer()
        lex.setinputstr(text)
        try:
            self.tokens = list(lex.lex())
        except lexer.LexError as e:
            raise errors.SchemaSyntaxError(
                f'invalid type string {text!r}: {e}', position=e.col) from e
        self.pos = 0

        if debug.flags.typestring:
            debug.header('Type string tokens')
            debug.dump(self.tokens)

    def peek(self) -> lexer.Token:
        return self.tokens[self.pos]

    def next(self) -> lexer.Token:
        tok = self.tokens[self.pos]
        if tok.type != 'EOF':
            self.pos += 1
        return tok

    def error(self, msg: str, tok: lexer.Token) -> errors.SchemaSyntaxError:
        return errors.SchemaSyntaxError(
            f'{msg} at column {tok.start + 1} of type string {self.text!r}',
            position=tok.start + 1)

    def expect(self, *toktypes: str) -> lexer.Token:
        tok = self.next()
        if tok.type not in toktypes:
            found = 'end of input' if tok.type == 'EOF' else repr(tok.value)
            expected = ' or '.join(repr(t) for t in toktypes)
            raise self.error(f'expected {expected}, found {found}', tok)
        return tok

    def parse_type(self) -> types.TypeDesc:
        tok = self.expect('IDENT')
        kw = tok.value.lower()

        if kw == 'array':
            self.expect('<')
            element = self.parse_type()
            self.expect('>')
            return types.List(element)

        elif kw == 'struct':
            self.expect('<')
            fields: List[types.Field] = []
            names = set()
            while True:
                name_tok = self.expect('IDENT', 'QIDENT')
                name = name_tok.value
                if name_tok.type == 'QIDENT':
                    name = name[1:-1]
                if name in names:
                    raise self.error(f'duplicate field {name!r}', name_tok)
                names.add(name)
                self.expect(':')
                fields.append(types.Field(name, self.parse_type()))
                if self.expect(',', '>').type == '>':
                    break
            return types.Record(tuple(fields))

        elif kw == 'uniontype':
            self.expect('<')
            variants = [self.parse_type()]
            while self.expect(',', '>').type == ',':
                variants.append(self.parse_type())
            return types.Union(tuple(variants))

        elif kw == 'map':
            self.expect('<')
            key = self.parse_type()
            self.expect(',')
            value = self.parse_type()
            self.expect('>')
            return types.Scalar(
                types.ScalarKind.OPAQUE,
                f'map<{key.render()},{value.render()}>')

        try:
            scalar_kind = _SCALARS[kw]
        except KeyError:
            raise self.error(f'unknown type {tok.value!r}', tok) from None

        name: Optional[str] = kw
        if self.peek().type == '(':
            self.next()
            params = [self.expect('ICONST').value]
            while self.expect(',', ')').type == ',':
                params.append(self.expect('ICONST').value)
            name = f'{kw}({",".join(params)})'
        elif kw == scalar_kind.value:
            name = None

        return types.Scalar(scalar_kind, name)

    def parse_eof(self) -> None:
        tok = self.peek()
        if tok.type != 'EOF':
            raise self.error(f'unexpected {tok.value!r}', tok)


def parse(text: str) -> types.TypeDesc:
    parser = TypeParser(text)
    desc = parser.parse_type()
    parser.parse_eof()
    if debug.flags.typestring:
        debug.header('Parsed type')
        debug.print(types.render_tree(desc))
    return desc


def parse_column_types(text: str) -> List[types.TypeDesc]:
    """Parse a list of types separated by ':' or ','."""
    parser = TypeParser(text)
    result = [parser.parse_type()]
    while parser.peek().type in {':', ','}:
        parser.next()
        result.append(parser.parse_type())
    parser.parse_eof()
    return result


def parse_columns(
    names: Union[str, Sequence[str]],
    column_types: Union[str, Sequence[types.TypeDesc]],
) -> types.Record:
    if isinstance(names, str):
        names = [n.strip() for n in names.split(',') if n.strip()]
    if isinstance(column_types, str):
        column_types = parse_column_types(column_types)

    if len(names) != len(column_types):
        raise errors.ConfigurationError(
            f'{len(names)} column names but {len(column_types)} column '
            f'types were given')

    try:
        return types.Record.from_pairs(zip(names, column_types))
    except ValueError as e:
        raise errors.ConfigurationError(str(e)) from e
