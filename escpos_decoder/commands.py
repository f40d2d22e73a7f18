# ESC/POS command table for ESC/POS Decoder
# Fixed byte signatures, matched in table order (first match wins)

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from .tokens import CommandToken

ESC = 0x1B
GS = 0x1D
LF = 0x0A
CR = 0x0D

ALIGNMENTS = {0: 'left', 1: 'center', 2: 'right'}
CUT_MODES = {0: 'full cut', 1: 'partial cut'}
UNDERLINE_MODES = {0: 'off', 1: '1-dot thin', 2: '2-dot thick'}

Decoder = Callable[[bytes, int], CommandToken]


@dataclass(frozen=True)
class CommandDefinition:
    """One entry of the command table"""
    name: str
    signature: bytes
    description: str
    decode: Optional[Decoder] = None

    def matches(self, data: bytes, index: int) -> bool:
        end = index + len(self.signature)
        if end > len(data):
            return False
        return data[index:end] == self.signature

    def parse(self, data: bytes, index: int) -> CommandToken:
        if self.decode is None:
            return CommandToken(name=self.name, description=self.description)
        return self.decode(data, index)


def _param(data: bytes, index: int) -> Optional[int]:
    """Parameter byte after a two-byte signature, None past the end"""
    pos = index + 2
    if pos < len(data):
        return data[pos]
    return None


def _show(value: Optional[int]) -> str:
    return 'unknown' if value is None else str(value)


def _decode_align(data: bytes, index: int) -> CommandToken:
    value = _param(data, index)
    label = ALIGNMENTS.get(value, 'unknown')
    return CommandToken('ALIGN', f"Set alignment: {label}", value)


def _decode_print_and_feed(data: bytes, index: int) -> CommandToken:
    lines = _param(data, index)
    return CommandToken('PRINT_AND_FEED', f"Print and feed {_show(lines)} lines", lines)


def _decode_cut_paper(data: bytes, index: int) -> CommandToken:
    mode = _param(data, index)
    label = CUT_MODES.get(mode, 'unknown mode')
    return CommandToken('CUT_PAPER', f"Cut paper: {label}", mode)


def _decode_font_size(data: bytes, index: int) -> CommandToken:
    size = _param(data, index)
    if size is None:
        return CommandToken('FONT_SIZE', 'Set font size: unknown')
    width = ((size & 0xF0) >> 4) + 1
    height = (size & 0x0F) + 1
    return CommandToken(
        'FONT_SIZE',
        f"Set font size: width {width}x height {height}x",
        size,
        extras=(('width', width), ('height', height)),
    )


def _decode_bold(data: bytes, index: int) -> CommandToken:
    enable = _param(data, index)
    return CommandToken('BOLD', 'Bold on' if enable else 'Bold off', enable)


def _decode_underline(data: bytes, index: int) -> CommandToken:
    mode = _param(data, index)
    label = UNDERLINE_MODES.get(mode, 'unknown')
    return CommandToken('UNDERLINE', f"Underline: {label}", mode)


def _decode_line_spacing(data: bytes, index: int) -> CommandToken:
    spacing = _param(data, index)
    return CommandToken('LINE_SPACING', f"Set line spacing: {_show(spacing)} dots", spacing)


def _decode_char_spacing(data: bytes, index: int) -> CommandToken:
    spacing = _param(data, index)
    return CommandToken('CHAR_SPACING', f"Set character spacing: {_show(spacing)} dots", spacing)


def _decode_bold_mode(data: bytes, index: int) -> CommandToken:
    enable = _param(data, index)
    return CommandToken('BOLD_MODE', 'Bold mode on' if enable else 'Bold mode off', enable)


# Order matters: a signature that is a prefix of another must come after it
BUILTIN_COMMANDS: Tuple[CommandDefinition, ...] = (
    CommandDefinition('INITIALIZE', bytes([ESC, 0x40]), 'Initialize printer'),
    CommandDefinition('ALIGN', bytes([ESC, 0x61]), 'Set alignment', _decode_align),
    CommandDefinition('PRINT_AND_FEED', bytes([ESC, 0x64]), 'Print and feed', _decode_print_and_feed),
    CommandDefinition('CUT_PAPER', bytes([GS, 0x56]), 'Cut paper', _decode_cut_paper),
    CommandDefinition('FONT_SIZE', bytes([GS, 0x21]), 'Set font size', _decode_font_size),
    CommandDefinition('BOLD', bytes([ESC, 0x45]), 'Set bold', _decode_bold),
    CommandDefinition('UNDERLINE', bytes([ESC, 0x2D]), 'Set underline', _decode_underline),
    CommandDefinition('LINE_SPACING', bytes([ESC, 0x33]), 'Set line spacing', _decode_line_spacing),
    CommandDefinition('CHAR_SPACING', bytes([ESC, 0x20]), 'Set character spacing', _decode_char_spacing),
    CommandDefinition('BOLD_MODE', bytes([GS, 0x42]), 'Bold mode control', _decode_bold_mode),
)


class CommandRegistry:
    """Immutable, ordered set of command definitions"""

    def __init__(self, definitions=BUILTIN_COMMANDS):
        self._definitions: Tuple[CommandDefinition, ...] = tuple(definitions)

    def __iter__(self) -> Iterator[CommandDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def names(self) -> List[str]:
        return [d.name for d in self._definitions]

    def match(self, data: bytes, index: int) -> Optional[CommandDefinition]:
        """First definition whose signature matches at index, or None"""
        for definition in self._definitions:
            if definition.matches(data, index):
                return definition
        return None

    def extended(self, *definitions: CommandDefinition) -> 'CommandRegistry':
        """New registry with definitions appended after the existing ones"""
        return CommandRegistry(self._definitions + tuple(definitions))


DEFAULT_REGISTRY = CommandRegistry()


def find_command(data: bytes, index: int) -> Optional[CommandDefinition]:
    return DEFAULT_REGISTRY.match(data, index)


def is_printable(byte: int) -> bool:
    # 0x80-0xFF covers lead/trail bytes of GBK and UTF-8 text
    return 0x20 <= byte <= 0x7E or byte >= 0x80


def is_newline(byte: int) -> bool:
    return byte == LF or byte == CR
