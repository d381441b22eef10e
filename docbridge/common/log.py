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

# DON'T IMPORT any package that creates its own logger here,
# or the "session" value cannot be injected.
import contextlib
import contextvars
import logging


current_session = contextvars.ContextVar("current_session", default="-")


class DocBridgeLogger(logging.Logger):

    def makeRecord(
        self,
        name,
        level,
        fn,
        lno,
        msg,
        args,
        exc_info,
        func=None,
        extra=None,
        sinfo=None,
    ):
        # Unlike the standard Logger class, we allow overwriting
        # all attributes of the log record with stuff from *extra*.
        factory = logging.getLogRecordFactory()
        rv = factory(name, level, fn, lno, msg, args, exc_info, func, sinfo)
        rv.__dict__["session"] = current_session.get()
        if extra is not None:
            rv.__dict__.update(extra)
        return rv


class SessionFilter(logging.Filter):
    """Fill in the "session" attribute for records of foreign loggers."""

    def filter(self, record):
        if not hasattr(record, "session"):
            record.session = current_session.get()
        return True


@contextlib.contextmanager
def session(name: str):
    token = current_session.set(name)
    try:
        yield
    finally:
        current_session.reset(token)


def early_setup():
    logging.setLoggerClass(DocBridgeLogger)
