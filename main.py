#!/usr/bin/env python3
"""
ESC/POS Decoder - command line tool

Decodes ESC/POS printer data (hex string, .bin/.hex file, TCP port 9100 or
serial port) into commands and text, and renders a simulated printout.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from escpos_decoder import __version__
from escpos_decoder.config import load_config
from escpos_decoder.errors import ESCPOSError, InvalidInputFormat
from escpos_decoder.logging_config import setup_logging
from escpos_decoder.report import build_report, render_detailed
from escpos_decoder.sources import parse_hex_string, read_file
from escpos_decoder.tokenizer import tokenize

logger = logging.getLogger(__name__)

FORMATS = ('detailed', 'text', 'json')

EXAMPLES = """
ESC/POS Decoder examples:

# Decode a hex string
escpos-decoder 1B401B610148656C6C6F20576F726C640A

# Decode a binary capture
escpos-decoder -f receipt.bin

# Decode a hex dump and print only the simulated receipt
escpos-decoder -f receipt.hex --format text

# UTF-8 text, JSON report saved to a file
escpos-decoder -x "1B40 1B61 01 48656C6C6F 0A" -e utf8 --format json -o result.json

# Act as a network printer and decode the next job sent to port 9100
escpos-decoder --listen 9100 --format text

# Read a job from a serial port and post the report to a server
escpos-decoder --serial /dev/ttyUSB0 --post https://example.com/api/receipts
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='escpos-decoder',
        description='Decode ESC/POS printer data and simulate the printout',
    )
    parser.add_argument('hex_string', nargs='?', help='hex string to decode')
    source = parser.add_mutually_exclusive_group()
    source.add_argument('-f', '--file', help='read data from a file (*.hex files are parsed as hex text)')
    source.add_argument('-x', '--hex', dest='hex_option', help='hex string to decode')
    source.add_argument('--listen', metavar='[HOST:]PORT', help='receive one job on a TCP port')
    source.add_argument('--serial', metavar='DEVICE', help='receive one job from a serial port')
    parser.add_argument('--baudrate', type=int, default=9600, help='serial baud rate (default 9600)')
    parser.add_argument('-e', '--encoding', help='text encoding (default from config, gbk)')
    parser.add_argument('-w', '--line-width', type=int, help='printout width in columns (default 48)')
    parser.add_argument('-o', '--output', help='write the result to a file')
    parser.add_argument('--format', choices=FORMATS, default='detailed', help='output format')
    parser.add_argument('--post', metavar='URL', help='POST the JSON report to this URL')
    parser.add_argument('--config', help='path to a config.json')
    parser.add_argument('--log-file', help='log file path')
    parser.add_argument('-v', '--verbose', action='store_true', help='log to stderr too')
    parser.add_argument('--help-examples', action='store_true', help='show usage examples')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def parse_listen_address(value: str) -> Tuple[str, int]:
    host, _, port = value.rpartition(':')
    try:
        return host or '0.0.0.0', int(port)
    except ValueError:
        raise InvalidInputFormat(f"Invalid listen address: {value!r}")


def read_input(args, config) -> bytes:
    if args.file:
        logger.info("Decoding file %s", args.file)
        return read_file(args.file)

    hex_string = args.hex_option or args.hex_string
    if hex_string:
        logger.info("Decoding hex string %s%s", hex_string[:50], '...' if len(hex_string) > 50 else '')
        return parse_hex_string(hex_string)

    if args.listen or args.serial:
        from escpos_decoder.capture import PrintJobCapture

        capture = PrintJobCapture(idle_timeout=config['capture_idle_timeout'])
        if args.listen:
            host, port = parse_listen_address(args.listen)
            return capture.capture_network(host, port)
        return capture.capture_serial(args.serial, args.baudrate)

    raise InvalidInputFormat("No input given; pass a hex string, --file, --listen or --serial")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.help_examples:
        print(EXAMPLES)
        return 0

    try:
        config = load_config(args.config)
    except ESCPOSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        setup_logging(
            log_path=args.log_file or config['log_file'] or False,
            console=args.verbose,
            level=config['log_level'],
        )
    except (ESCPOSError, OSError, ValueError) as e:
        print(f"Error: cannot set up logging: {e}", file=sys.stderr)
        return 1

    encoding = args.encoding or config['encoding']
    line_width = args.line_width or config['line_width']

    try:
        data = read_input(args, config)
        report = build_report(tokenize(data, encoding), line_width)
    except (ESCPOSError, ValueError) as e:
        logger.error("Decode failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.format == 'text':
        output = report.formatted_text
    elif args.format == 'json':
        output = report.to_json()
    else:
        output = render_detailed(report)

    if args.output:
        try:
            Path(args.output).write_text(output, encoding='utf-8')
        except OSError as e:
            print(f"Error: failed to write {args.output}: {e}", file=sys.stderr)
            return 1
        print(f"Result saved to: {args.output}")
    else:
        print(output)

    post_url = args.post or config['report_url']
    if post_url:
        from escpos_decoder.report_sink import ReportUploader

        result = ReportUploader(post_url, api_key=config['api_key']).upload(report)
        if not result['success']:
            print(f"Error: upload failed: {result.get('error')}", file=sys.stderr)
            return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
