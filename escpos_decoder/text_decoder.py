# Text decoding for ESC/POS Decoder
# requested encoding -> the other of GBK/UTF-8 -> truncated 7-bit ASCII

import codecs
import logging
from typing import NamedTuple

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = 'utf8'
GBK = 'gbk'
UTF8 = 'utf8'
ASCII = 'ascii'
ASCII_FALLBACK_LIMIT = 50


class DecodedText(NamedTuple):
    text: str
    encoding: str


def normalize_encoding(encoding: str) -> str:
    """Map codec aliases onto the short names used in token output"""
    try:
        name = codecs.lookup(encoding).name
    except (LookupError, TypeError):
        return str(encoding).lower()
    if name == 'utf-8':
        return UTF8
    if name == 'gbk':
        return GBK
    return name


def ascii_fallback(raw: bytes) -> str:
    """Lossy rendering of the first 50 bytes, high bit dropped"""
    return bytes(b & 0x7F for b in raw[:ASCII_FALLBACK_LIMIT]).decode(ASCII)


def decode_text(raw: bytes, encoding: str = DEFAULT_ENCODING) -> DecodedText:
    """Decode a text run; never raises.

    The reported encoding is the caller's name when the requested codec works,
    otherwise the short name of the fallback that was used.
    """
    requested = normalize_encoding(encoding)
    try:
        return DecodedText(bytes(raw).decode(requested), encoding)
    except (UnicodeDecodeError, LookupError) as e:
        logger.debug("Decoding %d bytes as %s failed: %s", len(raw), requested, e)

    alternative = UTF8 if requested == GBK else GBK
    try:
        return DecodedText(bytes(raw).decode(alternative), alternative)
    except UnicodeDecodeError as e:
        logger.debug("Fallback %s failed too, using ASCII: %s", alternative, e)

    return DecodedText(ascii_fallback(raw), ASCII)
