#
# Copyright (c) 2023  The opmodels authors.
# All rights reserved.
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
""" A non-interactive tool for checking and displaying drive records. """

import argparse
import io
import json
import logging
import sys

from opmodels import opcatch, opconfig, opdoc, opfmt, opjson, optype, optypes
from opmodels import oputils


LOG = logging.getLogger(__name__)

RECORD_TYPES = ('drive', 'drives', 'server')

VALIDATE_TIMEOUT = 30


def err_exit(name, descr, code=1, **args):
    """ Output an error in JSON form to the standard error stream and exit. """
    err = {
        'error': {
            'name': name,
            'descr': descr,
        },
    }
    err['error'].update(args)
    print(json.dumps(err, indent=2), file=sys.stderr)
    sys.exit(code)


def parse_args(argv=None):
    """ Parse the command-line arguments without letting the ArgumentParser
    output anything to the standard error stream, since we want to report
    all errors in JSON form. """
    parser = argparse.ArgumentParser(
        prog='opmodels_req',
        description='Decode, validate and display drive status records',
    )
    parser.add_argument('-t', '--type', type=str, choices=RECORD_TYPES,
                        default='drive',
                        help='The kind of record to expect in the input')
    parser.add_argument('-H', '--human', action='store_true',
                        help='Display the records as a table')
    parser.add_argument('-V', '--validate', action='store_true',
                        help='Validate the records after decoding them')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Log more diagnostic messages')
    parser.add_argument('--reference', action='store_true',
                        help='Output the HTML reference of the record types')
    parser.add_argument('filename', type=str, nargs='?', default='-',
                        help='The file to read from; standard input if '
                             'omitted or "-"')

    errbuf = io.StringIO()
    orig_stderr = sys.stderr
    sys.stderr = errbuf
    try:
        args = parser.parse_args(argv)
    except SystemExit as ex_err:
        sys.stderr = orig_stderr
        if ex_err.code == 0:
            sys.exit(0)
        err_exit('cliParseArgs',
                 'Could not parse the command-line arguments',
                 parser_errors=errbuf.getvalue())
    finally:
        sys.stderr = orig_stderr

    return args


def setup_logging(args, cfg):
    """ Log to the standard error stream at the configured level. """
    if args.verbose > 1:
        level = logging.DEBUG
    elif args.verbose == 1:
        level = logging.INFO
    else:
        name = cfg.get('OP_LOG_LEVEL', 'WARNING').strip().upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            err_exit('cliConfig', 'Invalid OP_LOG_LEVEL setting', value=name)

    logging.basicConfig(
        stream=sys.stderr, level=level,
        format='%(asctime)s %(name)s %(levelname)s %(message)s')


def read_input(filename):
    """ Read the raw data from a file or the standard input. """
    if filename == '-':
        return sys.stdin.buffer.read()
    with open(filename, mode='rb') as infile:
        return infile.read()


def decode_drives(data):
    """ Decode a JSON array of drive records. """
    try:
        raw = opjson.loads(data)
    except (TypeError, ValueError) as err:
        raise opcatch.DeserializationError(
            'malformed JSON input: {err}', err=err)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise opcatch.DeserializationError(
            'expected a JSON array, got {tname}', tname=type(raw).__name__)

    try:
        return optype.spType([optypes.ServerDrives]).handleVal(raw)
    except opcatch.InvalidArgumentError as err:
        raise opcatch.DeserializationError(
            '{msg}', msg=err.message, partial=err.partial)


def decode(rtype, data):
    """ Decode the input into a list of records of the requested kind. """
    if rtype == 'drives':
        return decode_drives(data)
    if rtype == 'server':
        return [optypes.ServerProperties().from_binary(data)]
    return [optypes.ServerDrives().from_binary(data)]


def format_drives(drives, units):
    """ Build a table describing the drives. """
    k8s = units == 'k8s'
    rows = [('ENDPOINT', 'PATH', 'STATE', 'HEALING', 'ROOT',
             'USED', 'AVAILABLE', 'TOTAL', 'USE%')]
    for drive in drives:
        ratio = oputils.used_ratio(drive.usedSpace, drive.totalSpace)
        rows.append((
            drive.endpoint or '-',
            drive.drivePath or '-',
            drive.state or '-',
            'yes' if drive.healing else 'no',
            'yes' if drive.rootDisk else 'no',
            oputils.nice_bytes(drive.usedSpace, k8s),
            oputils.nice_bytes(drive.availableSpace, k8s),
            oputils.nice_bytes(drive.totalSpace, k8s),
            '-' if ratio is None else '{0:.1f}%'.format(ratio * 100),
        ))

    widths = [max(len(row[idx]) for row in rows)
              for idx in range(len(rows[0]))]
    return '\n'.join(
        '  '.join(col.ljust(width) for col, width in zip(row, widths))
        .rstrip()
        for row in rows)


def format_server(server, units):
    """ Describe a server and build a table of its drives. """
    k8s = units == 'k8s'
    lines = [
        '{endpoint}: {state}, version {version}, pool {pool}, up {uptime}s'
        .format(endpoint=server.endpoint or '-', state=server.state or '-',
                version=server.version or '-', pool=server.poolNumber,
                uptime=server.uptime),
        'Drives: {count}, used {used} of {total}'.format(
            count=len(server.drives),
            used=oputils.nice_bytes(server.used_space(), k8s),
            total=oputils.nice_bytes(server.total_space(), k8s)),
    ]
    if server.drives:
        lines.append(format_drives(server.drives, units))
    return '\n'.join(lines)


def main(argv=None):
    """ Main function: parse the arguments, decode, validate, report. """
    args = parse_args(argv)

    try:
        cfg = opconfig.OPConfig(missing_ok=True).with_overrides()
        indent = opconfig.json_indent(cfg)
        units = opconfig.size_units(cfg)
    except opconfig.OPConfigException as err:
        err_exit('cliConfig', str(err))
    setup_logging(args, cfg)

    if args.reference:
        print(optypes.reference().build(opdoc.Html()))
        return

    try:
        data = read_input(args.filename)
    except (IOError, OSError) as err:
        err_exit('cliReadInput', str(err), filename=args.filename)
    LOG.debug('Read %d bytes from %s', len(data), args.filename)

    try:
        records = decode(args.type, data)
        if args.validate:
            ctx = opfmt.ValidationContext(timeout=VALIDATE_TIMEOUT)
            for record in records:
                record.context_validate(ctx, opfmt.DEFAULT)
            LOG.info('Validated %d record(s)', len(records))
    except opcatch.DeserializationError as err:
        err_exit('cliDecode', str(err), code=2, type=args.type)
    except (opcatch.ValidationError, opfmt.ContextCancelled) as err:
        err_exit('cliValidate', str(err), code=2, type=args.type)

    if args.human:
        if args.type == 'server':
            print(format_server(records[0], units))
        else:
            print(format_drives(records, units))
        return

    try:
        for record in records:
            print(record.to_binary(indent=indent).decode('UTF-8'))
    except opcatch.SerializationError as err:
        err_exit('cliEncode', str(err), code=2, type=args.type)


if __name__ == '__main__':
    main()
