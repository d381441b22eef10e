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

import collections
import re
import types


class LexError(Exception):
    def __init__(self, msg, *, col=None):
        if col is not None:
            msg = f"{msg} at column {col}"

        super().__init__(msg)
        self.col = col


Token = collections.namedtuple('Token', ['value', 'type', 'start', 'end'])


class UnknownTokenError(LexError):
    pass


class Rule:
    _idx = 0
    _map = {}

    def __init__(self, *, token, regexp, skip=False):
        cls = self.__class__
        cls._idx += 1
        self.id = 'rule{}'.format(cls._idx)
        cls._map[self.id] = self

        self.token = token
        self.regexp = regexp
        self.skip = skip

    def __repr__(self):
        return '<{} {} {!r}>'.format(self.id, self.token, self.regexp)


def group(*literals, _re_alpha=re.compile(r'^\w+$')):
    rx = []
    for lit in literals:
        if r'\b' not in lit:
            lit = re.escape(lit)
        if _re_alpha.match(lit):
            lit = r'\b' + lit + r'\b'
        rx.append(lit)
    return ' | '.join(rx)


class Lexer:
    """Single-state regular expression lexer.

    Subclasses define a ``rules`` sequence of :class:`Rule` objects; the
    combined expression is compiled once per subclass.  Rules created with
    ``skip=True`` (whitespace) consume input without producing tokens.
    """

    RE_FLAGS = re.X

    def __init_subclass__(cls):
        if not hasattr(cls, 'rules'):
            return

        res = ['(?P<{}>{})'.format(rule.id, rule.regexp) for rule in cls.rules]
        res.append('(?P<err>.)')
        cls.re_rules = re.compile(' | '.join(res), cls.RE_FLAGS)
        cls.rule_ids = types.MappingProxyType(
            {rule.id: rule for rule in cls.rules})

    def __init__(self):
        self.reset()

    def reset(self):
        self.start = 0

    def setinputstr(self, inputstr):
        self.inputstr = inputstr
        self.end = len(inputstr)
        self.reset()

    def get_eof_token(self):
        """Return an EOF token or None if no EOF token is wanted."""
        return None

    def lex(self):
        """Tokenize the input string.

        Generator. Yields tokens (as defined by the rules) and
        may raise UnknownTokenError.
        """
        src = self.inputstr

        for match in self.re_rules.finditer(src, self.start):
            rule_id = match.lastgroup
            txt = match.group(rule_id)

            if rule_id == 'err':
                self.handle_error(txt)

            start = self.start
            self.start += len(txt)

            rule = self.rule_ids[rule_id]
            if not rule.skip:
                yield Token(txt, type=rule.token, start=start, end=self.start)

        eof_tok = self.get_eof_token()
        if eof_tok is not None:
            yield eof_tok

    def handle_error(self, txt, *, exc_type=UnknownTokenError):
        raise exc_type(f"Unexpected {txt!r}", col=self.start + 1)
