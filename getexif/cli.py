# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for GetExif

Prints the EXIF summary, or every decoded tag, of one or more JPEG files
as text or JSON.

Copyright 2025 DNAi inc.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from getexif import __version__
from getexif.core import GetExif
from getexif.exceptions import GetExifError
from getexif.exif_tags import tag_name
from getexif.log_helpers import setup_logger, shutdown_logger
from getexif.options import DecoderOptions, FieldSet, FormatMode

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='getexif',
        description='Read EXIF metadata from JPEG files',
    )
    parser.add_argument('files', nargs='+', type=Path, help='JPEG files to read')
    parser.add_argument('--fields', choices=[f.value for f in FieldSet], default=FieldSet.ALL.value,
                        help='Fields to include in the summary (default: all)')
    parser.add_argument('--format', dest='format_mode', choices=[m.value for m in FormatMode],
                        default=FormatMode.HUMAN_WITH_UNITS.value,
                        help='Exposure value format (default: human_unit)')
    parser.add_argument('--keep-raw', action='store_true', help='Include every decoded tag in the summary')
    parser.add_argument('--tags', action='store_true', help='List every decoded tag instead of the summary')
    parser.add_argument('-j', '--json', action='store_true', help='JSON output')
    parser.add_argument('--max-bytes', type=int, help='Limit file reading to this many bytes')
    parser.add_argument('--interop', action='store_true', help='Also decode the Interoperability IFD')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log decoding details')
    parser.add_argument('--log-file', type=str, help='Write the log to this file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def _flatten(data: Dict[str, Any], prefix: str = '') -> Dict[str, Any]:
    flat = {}
    for key, value in data.items():
        name = f'{prefix}{key}'
        if isinstance(value, dict) and value:
            flat.update(_flatten(value, f'{name}.'))
        else:
            flat[name] = value
    return flat


def format_output(metadata: Any, format_type: str = "text") -> str:
    """
    Format metadata output based on format type.

    Args:
        metadata: Dictionary of metadata
        format_type: Output format ('text' or 'json')

    Returns:
        Formatted output string
    """
    if format_type == "json":
        return json.dumps(metadata, indent=2, ensure_ascii=False, default=str)

    lines = []
    for tag, value in _flatten(metadata).items():
        lines.append(f"{tag}: {'' if value is None else value}")
    return "\n".join(lines)


def list_tags(reader: GetExif, file_path: Path) -> Dict[str, Any]:
    """Every decoded tag of a file as {"GROUP:TagName": value}."""
    document = reader.decode_file(file_path)
    tags = {}
    for group_name, ifd in document.groups.items():
        for tag, entry in ifd.items():
            tags[f'{group_name}:{tag_name(group_name, tag)}'] = entry.value.to_python()
    for error in document.errors:
        logger.warning(f"{file_path}: {error}")
    return tags


def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)

    root_logger = setup_logger(args.log_file, logging.DEBUG if args.verbose else logging.WARNING)
    reader = GetExif(
        max_bytes=args.max_bytes,
        options=DecoderOptions(follow_interop=args.interop),
    )

    status = 0
    results = []
    try:
        for file_path in args.files:
            try:
                if args.tags:
                    data = list_tags(reader, file_path)
                else:
                    data = reader.read(
                        file_path,
                        fields=args.fields,
                        format_mode=args.format_mode,
                        keep_raw_keys=args.keep_raw,
                    )
            except (OSError, GetExifError) as e:
                logger.error(f"{file_path}: {e}")
                status = 1
                continue

            if args.json:
                results.append({'SourceFile': str(file_path), **data})
            else:
                if len(args.files) > 1:
                    print(f"======== {file_path}")
                print(format_output(data))

        if args.json and results:
            print(format_output(results[0] if len(args.files) == 1 else results, "json"))
    finally:
        shutdown_logger(root_logger)
    return status


if __name__ == "__main__":
    sys.exit(main())
