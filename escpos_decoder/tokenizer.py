# ESC/POS Tokenizer for ESC/POS Decoder
# Splits a receipt printer byte stream into command and text tokens

import dataclasses
import logging
from typing import List, Optional, Tuple

from .commands import DEFAULT_REGISTRY, CommandDefinition, CommandRegistry, is_newline, is_printable
from .errors import InvalidInput
from .text_decoder import DEFAULT_ENCODING, decode_text
from .tokens import NEWLINE, CommandToken, TextToken, Token

logger = logging.getLogger(__name__)


class ESCPOSTokenizer:
    """Tokenizer for ESC/POS byte streams"""

    def __init__(self, encoding: str = DEFAULT_ENCODING,
                 registry: CommandRegistry = DEFAULT_REGISTRY):
        self.encoding = encoding
        self.registry = registry
        self.skipped_offsets: List[int] = []

    def tokenize(self, raw_data) -> List[Token]:
        """Tokenize a whole buffer; every byte ends up in a token or in skipped_offsets"""
        if not isinstance(raw_data, (bytes, bytearray, memoryview)):
            raise InvalidInput(f"Expected a byte buffer, got {type(raw_data).__name__}")

        data = bytes(raw_data)
        self.skipped_offsets = []
        tokens: List[Token] = []
        index = 0

        while index < len(data):
            definition = self.registry.match(data, index)
            if definition:
                token, index = self._parse_command(data, index, definition)
            else:
                token, index = self._parse_text(data, index)
            if token is not None:
                tokens.append(token)

        if data:
            logger.info(
                "Tokenized %d bytes into %d token(s), %d byte(s) skipped",
                len(data), len(tokens), len(self.skipped_offsets),
            )
        return tokens

    def _parse_command(self, data: bytes, index: int,
                       definition: CommandDefinition) -> Tuple[Token, int]:
        token = definition.parse(data, index)
        next_index = index + len(definition.signature)
        # Fixed one-byte parameter; multi-byte parameters are not supported
        if definition.decode is not None and token.value is not None:
            next_index += 1
        token = dataclasses.replace(token, offset=index, raw=data[index:next_index])
        return token, next_index

    def _parse_text(self, data: bytes, start: int) -> Tuple[Optional[Token], int]:
        index = start
        run_start = None
        run = bytearray()

        while index < len(data):
            if self.registry.match(data, index):
                break

            byte = data[index]

            if is_newline(byte):
                if run:
                    break
                token = TextToken(
                    text=NEWLINE,
                    raw=bytes([byte]),
                    encoding=self.encoding,
                    description='Line break',
                    offset=index,
                )
                return token, index + 1

            if is_printable(byte):
                if run_start is None:
                    run_start = index
                run.append(byte)
            elif run:
                break
            else:
                logger.debug("Skipping unprintable byte 0x%02X at %d", byte, index)
                self.skipped_offsets.append(index)

            index += 1

        if not run:
            return None, index

        decoded = decode_text(bytes(run), self.encoding)
        token = TextToken(
            text=decoded.text,
            raw=bytes(run),
            encoding=decoded.encoding,
            description=f'Text: "{decoded.text}"',
            offset=run_start,
        )
        return token, index

    def get_skipped_offsets(self) -> List[int]:
        return list(self.skipped_offsets)


def tokenize(raw_data, encoding: str = DEFAULT_ENCODING,
             registry: CommandRegistry = DEFAULT_REGISTRY) -> List[Token]:
    return ESCPOSTokenizer(encoding, registry).tokenize(raw_data)
