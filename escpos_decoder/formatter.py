# Text formatter for ESC/POS Decoder
# Replays a token list into a plain-text simulation of the printed receipt

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, List

from .tokens import CommandToken, TextToken, Token

DEFAULT_LINE_WIDTH = 48
CUT_FEED_LINES = 6
CUT_MARKER = '[ PAPER CUT ]'
RULE_MARKER = '---'
BOLD_MARKERS = ('**', '**')
UNDERLINE_MARKERS = ('_', '_')

CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')
CJK_CHARS = re.compile(r"[\u4e00-\u9fff\uff00-\uffef]")


class Alignment(IntEnum):
    LEFT = 0
    CENTER = 1
    RIGHT = 2

    @classmethod
    def from_value(cls, value) -> 'Alignment':
        try:
            return cls(value)
        except ValueError:
            return cls.LEFT


def text_width(text: str) -> int:
    """Display width: CJK and fullwidth characters take two columns"""
    return sum(2 if CJK_CHARS.match(ch) else 1 for ch in text)


def clean_text(text: str) -> str:
    return CONTROL_CHARS.sub('', text).replace('!', '')


@dataclass
class FormatterState:
    """Mutable state of one formatting pass"""
    alignment: Alignment = Alignment.LEFT
    bold: bool = False
    underline: bool = False
    line_buffer: str = ''
    lines: List[str] = field(default_factory=list)


class TextFormatter:
    """Renders tokens into display lines"""

    def __init__(self, line_width: int = DEFAULT_LINE_WIDTH):
        if not isinstance(line_width, int) or isinstance(line_width, bool) or line_width <= 0:
            raise ValueError(f"line_width must be a positive integer, got {line_width!r}")
        self.line_width = line_width

    def format(self, tokens: Iterable[Token]) -> str:
        state = FormatterState()
        for token in tokens:
            if isinstance(token, TextToken):
                self._process_text(state, token)
            elif isinstance(token, CommandToken):
                self._process_command(state, token)
            else:
                raise TypeError(f"Unsupported token type: {type(token).__name__}")

        self._flush(state)
        return '\n'.join(state.lines)

    def _process_text(self, state: FormatterState, token: TextToken):
        if token.is_newline:
            # A bare newline ends the line but never adds a blank one
            self._flush(state)
            return

        text = clean_text(token.text)
        if text:
            state.line_buffer += text

    def _process_command(self, state: FormatterState, token: CommandToken):
        name = token.name
        value = token.value or 0

        if name == 'ALIGN':
            state.alignment = Alignment.from_value(value)

        elif name in ('BOLD', 'BOLD_MODE'):
            state.bold = value > 0

        elif name == 'UNDERLINE':
            state.underline = value > 0

        elif name == 'PRINT_AND_FEED':
            self._flush(state)
            feed_lines = value or 1
            state.lines.extend([''] * (feed_lines - 1))
            if state.lines and RULE_MARKER in state.lines[-1]:
                state.lines.append('')

        elif name == 'CUT_PAPER':
            self._flush(state)
            rule = '-' * self.line_width
            state.lines.extend([''] * CUT_FEED_LINES)
            state.lines.append(rule)
            state.lines.append(self._pad(CUT_MARKER, Alignment.CENTER))
            state.lines.append(rule)

        elif name == 'INITIALIZE':
            self._flush(state)
            state.alignment = Alignment.LEFT
            state.bold = False
            state.underline = False

        # FONT_SIZE and anything else leave the layout alone

    def _flush(self, state: FormatterState):
        if state.line_buffer:
            state.lines.append(self.format_line(state, state.line_buffer))
            state.line_buffer = ''

    def format_line(self, state: FormatterState, text: str) -> str:
        styled = text
        if state.bold:
            styled = BOLD_MARKERS[0] + styled + BOLD_MARKERS[1]
        if state.underline:
            styled = UNDERLINE_MARKERS[0] + styled + UNDERLINE_MARKERS[1]

        # Source already padded the line itself
        if text.startswith(' '):
            return styled
        return self._pad(styled, state.alignment)

    def _pad(self, text: str, alignment: Alignment) -> str:
        width = text_width(text)
        if alignment == Alignment.CENTER:
            return ' ' * max(0, (self.line_width - width) // 2) + text
        if alignment == Alignment.RIGHT:
            return ' ' * max(0, self.line_width - width) + text
        return text


def format_text(tokens: Iterable[Token], line_width: int = DEFAULT_LINE_WIDTH) -> str:
    return TextFormatter(line_width).format(tokens)
