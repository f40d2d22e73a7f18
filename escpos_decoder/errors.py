# Errors for ESC/POS Decoder
# Input problems are raised before any decoding starts; the core itself never raises on bad bytes


class ESCPOSError(Exception):
    """Base class for decoder errors"""


class InvalidInput(ESCPOSError, TypeError):
    """Tokenizer was handed something that is not a byte buffer"""


class InvalidInputFormat(ESCPOSError, ValueError):
    """Malformed hex string or config file"""


class SourceUnavailable(ESCPOSError, OSError):
    """File, socket or serial port could not be read"""
