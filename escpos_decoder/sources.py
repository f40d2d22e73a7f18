# Input sources for ESC/POS Decoder
# Hex strings and files (.bin raw, .hex text) to bytes

import logging
import re
from pathlib import Path
from typing import Union

from .errors import InvalidInputFormat, SourceUnavailable

logger = logging.getLogger(__name__)

WHITESPACE = re.compile(r'\s+')
HEX_DIGITS = re.compile(r'[0-9a-fA-F]*')


def parse_hex_string(hex_string: str) -> bytes:
    """Parse '1B 40 1B 61 01 ...' style input (any whitespace ignored)"""
    if not isinstance(hex_string, str):
        raise InvalidInputFormat("Hex input must be a string")

    clean = WHITESPACE.sub('', hex_string)
    if not clean:
        raise InvalidInputFormat("Hex string contains no hex digits")
    if len(clean) % 2 != 0:
        raise InvalidInputFormat(f"Hex string length must be even, got {len(clean)}")
    if not HEX_DIGITS.fullmatch(clean):
        bad = next(c for c in clean if c not in '0123456789abcdefABCDEF')
        raise InvalidInputFormat(f"Invalid hex character: {bad!r}")

    return bytes.fromhex(clean)


def read_file(path: Union[str, Path]) -> bytes:
    """Read a capture file; *.hex files are parsed as hex text"""
    if not path:
        raise SourceUnavailable("File path is empty")

    path = Path(path)
    if not path.is_file():
        raise SourceUnavailable(f"File not found: {path}")

    try:
        if path.suffix.lower() == '.hex':
            logger.info("Reading hex file %s", path)
            return parse_hex_string(path.read_text(encoding='utf-8'))
        logger.info("Reading binary file %s", path)
        return path.read_bytes()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnavailable(f"Failed to read {path}: {e}") from e
