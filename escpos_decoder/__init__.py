# ESC/POS Decoder
# Turns receipt printer byte streams into commands, text and a printout simulation

__version__ = '0.1.0'

from .commands import CommandDefinition, CommandRegistry, DEFAULT_REGISTRY, find_command
from .errors import ESCPOSError, InvalidInput, InvalidInputFormat, SourceUnavailable
from .tokens import CommandToken, TextToken, Token
from .text_decoder import decode_text, DecodedText
from .tokenizer import ESCPOSTokenizer, tokenize
from .formatter import TextFormatter, format_text
from .report import Report, Summary, build_report, summarize
from .sources import parse_hex_string, read_file

__all__ = [
    'CommandDefinition',
    'CommandRegistry',
    'DEFAULT_REGISTRY',
    'find_command',
    'ESCPOSError',
    'InvalidInput',
    'InvalidInputFormat',
    'SourceUnavailable',
    'CommandToken',
    'TextToken',
    'Token',
    'decode_text',
    'DecodedText',
    'ESCPOSTokenizer',
    'tokenize',
    'TextFormatter',
    'format_text',
    'Report',
    'Summary',
    'build_report',
    'summarize',
    'parse_hex_string',
    'read_file',
]
