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

from docbridge.common.log import early_setup
# ruff: noqa: E402
early_setup()

import json
import logging

import click

from docbridge import errors
from docbridge import logsetup
from docbridge import serde
from docbridge import settings
from docbridge.common import debug
from docbridge.common import log
from docbridge.protocol import reader
from docbridge.schema import types


logger = logging.getLogger('docbridge.cli')


_schema_options = [
    click.option(
        '--columns', required=True,
        help='comma-separated column names'),
    click.option(
        '--types', 'column_types', required=True,
        help='column types, e.g. "int:string:array<struct<a:int>>"'),
    click.option(
        '--mapping-names', default='',
        help='field aliases as <field>:<alias> pairs separated by commas'),
    click.option(
        '--write-unknown-types', is_flag=True,
        help='store values of unknown types as opaque binary data'),
]


def schema_options(func):
    for option in reversed(_schema_options):
        func = option(func)
    return func


def _make_serde(
    columns: str,
    column_types: str,
    mapping_names: str,
    write_unknown_types: bool,
) -> serde.DocumentSerDe:
    cfg = settings.CodecSettings(
        columns=columns,
        column_types=column_types,
        mapping_names=mapping_names,
        write_unknown_types=write_unknown_types,
    )
    try:
        return serde.DocumentSerDe.from_settings(cfg.with_environ())
    except errors.DocBridgeError as e:
        raise click.ClickException(str(e)) from e


def _convert_lines(stream, convert):
    """Echo *convert(line)* for each non-blank line, tagging errors."""
    for lineno, line in enumerate(stream, 1):
        if not line.strip():
            continue
        with log.session(f'line:{lineno}'):
            try:
                click.echo(convert(line))
            except errors.DocBridgeError as e:
                logger.debug('failed to convert line %d', lineno,
                             exc_info=True)
                raise click.ClickException(f'line {lineno}: {e}') from e


@click.group(
    context_settings=dict(help_option_names=['-h', '--help']))
@click.option('-l', '--log-level', default=None,
              help='logging level: S(ilent), D(ebug), I(nfo), W(arn), '
                   'E(rror)')
@click.option('--log-to', default='stderr',
              help='send logs to stderr, syslog or a file path')
def main(log_level, log_to):
    if log_level is not None:
        try:
            logsetup.setup_logging(log_level, log_to)
        except RuntimeError as e:
            raise click.BadParameter(str(e), param_hint='--log-level')


@main.command()
@schema_options
@click.argument('input', type=click.File('r'), default='-')
def encode(input, columns, column_types, mapping_names, write_unknown_types):
    """Convert JSON-lines records into one document per line."""
    sd = _make_serde(columns, column_types, mapping_names, write_unknown_types)

    def convert(line):
        return sd.serialize(reader.read_document(line)).decode('utf-8')

    _convert_lines(input, convert)


@main.command()
@schema_options
@click.option('--named', is_flag=True,
              help='emit objects keyed by field names instead of arrays')
@click.argument('input', type=click.File('r'), default='-')
def decode(input, columns, column_types, mapping_names, write_unknown_types,
           named):
    """Convert documents back into records, one per line."""
    sd = _make_serde(columns, column_types, mapping_names, write_unknown_types)

    def convert(line):
        if named:
            return json.dumps(sd.deserialize_record(line))
        else:
            return json.dumps(sd.deserialize(line))

    _convert_lines(input, convert)


@main.command()
@schema_options
def describe(columns, column_types, mapping_names, write_unknown_types):
    """Print the table schema and its field aliases."""
    sd = _make_serde(columns, column_types, mapping_names, write_unknown_types)
    click.echo(types.render_tree(sd.schema))
    for canonical, external in sorted(sd.alias.items()):
        click.echo(f'{canonical} -> {external}')


@main.command('dflags')
def dflags():
    """Print available debug flags."""
    for flag in debug.flags:
        click.echo(f'env DOCBRIDGE_DEBUG_{flag.name.upper()}=1')
        click.echo(f'    {flag.doc}\n')
