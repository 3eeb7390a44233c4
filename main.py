#!/usr/bin/env python3
"""Main entry point for NFC Type 2 tag operations."""

import argparse
import logging
import os

from src.codec.area import decode_data_area
from src.codec.exceptions import NDEFError
from src.tag.analyzer import analyze_tag, format_area, format_report
from src.tag.constants import DATA_START_PAGE, DEFAULT_UID_FORMAT, DEFAULT_URL_HOST, UID_FORMATS
from src.tag.demo import ideal_format_lines
from src.tag.exceptions import NFCError, TagLockedException
from src.tag.formatter import format_tag
from src.tag.reader import NFCReader
from src.tag.store import MemoryPageStore
from src.tag.topology import detect_tag
from src.tag.writer import write_tag_url
from src.utils.csv_handler import CSVHandler, CSVRecord
from src.utils.logging import setup_logging
from src.utils.uid import format_uid


def wait_for_tag() -> bool:
    """Prompt until the user places a tag; False when they quit."""
    logging.info("Waiting for tag... Please touch an NFC tag to the reader then press enter or (q) to quit.")
    return input().lower() != 'q'


def log_lines(lines):
    for line in lines:
        logging.info(line)


def handle_read(args, reader: NFCReader):
    """Analyze the tag on the reader."""
    if not wait_for_tag():
        return
    report = analyze_tag(reader)
    log_lines(format_report(report, args.uid_format))


def handle_uid(args, reader: NFCReader):
    """Print tag UIDs until the user quits."""
    while wait_for_tag():
        try:
            uid = reader.get_uid()
        except NFCError as e:
            logging.error(f"Failed to read UID: {e}")
            continue
        logging.info(f"UID: {format_uid(uid, args.format)}")
        if args.once:
            break


def handle_format(args, reader: NFCReader):
    """Format the tag as an empty NFC Forum Type 2 tag."""
    if not wait_for_tag():
        return
    family = None
    if args.family_cc:
        family = detect_tag(reader).family
        logging.info(f"Tag Type: {family.value}")
    format_tag(reader, family)


def handle_write(args, reader: NFCReader):
    """Write each tag's own URL, one tag after another."""
    log = CSVHandler(args.log_file)
    processed = log.processed_uids()
    success_count = 0
    fail_count = 0

    while wait_for_tag():
        try:
            uid = format_uid(reader.get_uid())
        except NFCError as e:
            logging.error(f"Failed to read tag. Please try again. ({e})")
            continue

        if uid in processed and not args.force:
            logging.warning(f"This tag has already been written: {uid}")
            continue

        try:
            url = write_tag_url(reader, host=args.host, force=args.force)
        except TagLockedException as e:
            fail_count += 1
            logging.error(f"{e} - cannot write")
            log.write_record(CSVRecord(uid, '', 'failed', str(e)))
        except (NFCError, NDEFError) as e:
            fail_count += 1
            logging.error(f"Write failed: {e}")
            log.write_record(CSVRecord(uid, '', 'failed', str(e)))
        else:
            success_count += 1
            processed.add(uid)
            log.write_record(CSVRecord(uid, url))
            logging.info(f"Success ({success_count} written, {fail_count} failed)")

        if args.once:
            break

    logging.info(f"\nOperation complete: {success_count} successful, {fail_count} failed")


def handle_decode(args):
    """Decode a hex dump without a reader."""
    if args.data:
        area = decode_data_area(bytes.fromhex(''.join(args.data.split())), args.start_page)
        log_lines(format_area(area))
        return

    store = MemoryPageStore.from_hex(args.dump)
    log_lines(format_report(analyze_tag(store), args.uid_format))


def create_parser():
    """Create argument parser."""
    parser = argparse.ArgumentParser(description='NFC Forum Type 2 tag tools')
    parser.add_argument('--debug', action='store_true', help='Show debug output')
    parser.add_argument('--log-dir', default='output', help='Directory for operations.log')
    subparsers = parser.add_subparsers(dest='command')

    uid_format_args = argparse.ArgumentParser(add_help=False)
    uid_format_args.add_argument('--uid-format', choices=UID_FORMATS, default=DEFAULT_UID_FORMAT,
                                 help='How to render the UID')

    subparsers.add_parser('read', parents=[uid_format_args], help='Analyze an NFC tag')

    uid_parser = subparsers.add_parser('uid', help='Read tag UIDs')
    uid_parser.add_argument('--format', '-f', choices=UID_FORMATS, default=DEFAULT_UID_FORMAT,
                            help=f'UID format (default: {DEFAULT_UID_FORMAT})')
    uid_parser.add_argument('--once', action='store_true', help='Read one tag and exit')

    format_parser = subparsers.add_parser('format', help='Format a tag for NDEF')
    format_parser.add_argument('--family-cc', action='store_true',
                               help='Size the capability container for the detected tag family')

    write_parser = subparsers.add_parser('write', help='Write https://<host>/r/<UID> to tags')
    write_parser.add_argument('--host', default=DEFAULT_URL_HOST,
                              help=f'URL host (default: {DEFAULT_URL_HOST})')
    write_parser.add_argument('--log-file', default='output/written_tags.csv',
                              help='CSV file recording written tags')
    write_parser.add_argument('--force', action='store_true',
                              help='Write even if the tag looks locked or was already written')
    write_parser.add_argument('--once', action='store_true', help='Write one tag and exit')

    decode_parser = subparsers.add_parser('decode', parents=[uid_format_args],
                                          help='Decode a hex memory dump')
    source = decode_parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--dump', help='Hex dump of tag memory starting at page 0')
    source.add_argument('--data', help='Hex dump of the data area only')
    decode_parser.add_argument('--start-page', type=int, default=DATA_START_PAGE,
                               help='Page the data area dump starts at')

    subparsers.add_parser('demo', help='Show the layout of a formatted tag')

    return parser


def validate_args(args):
    """Validate command line arguments."""
    if not args.command:
        return False, "No command specified"

    if args.command == 'write' and not args.host:
        return False, "URL host is required"

    if args.command == 'decode' and args.start_page < 0:
        return False, "Start page must not be negative"

    log_dir = os.path.dirname(os.path.abspath(args.log_dir))
    if not os.path.isdir(log_dir):
        return False, f"Log directory parent not found: {log_dir}"

    return True, ""


READER_COMMANDS = {
    'read': handle_read,
    'uid': handle_uid,
    'format': handle_format,
    'write': handle_write,
}


def main():
    parser = create_parser()
    args = parser.parse_args()

    # Validate arguments before setting up logging
    valid, error = validate_args(args)
    if not valid:
        if error:
            print(f"Error: {error}")
        parser.print_help()
        return

    setup_logging(args.log_dir, args.debug)

    try:
        if args.command == 'demo':
            log_lines(ideal_format_lines())
        elif args.command == 'decode':
            handle_decode(args)
        else:
            reader = NFCReader()
            reader.connect()
            try:
                READER_COMMANDS[args.command](args, reader)
            except KeyboardInterrupt:
                logging.info("Operation stopped by user")
            finally:
                reader.close()

    except (NFCError, NDEFError) as e:
        logging.error(f"Operation failed: {e}")
    except ValueError as e:
        logging.error(f"Invalid input: {e}")


if __name__ == "__main__":
    main()
