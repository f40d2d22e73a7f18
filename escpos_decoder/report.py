# Report builder for ESC/POS Decoder
# Summary counts + token items + formatted receipt text

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .formatter import DEFAULT_LINE_WIDTH, format_text
from .tokens import CommandToken, TextToken, Token, tokens_to_dicts


@dataclass
class Summary:
    total_items: int = 0
    commands: int = 0
    text_blocks: int = 0
    total_bytes: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'totalItems': self.total_items,
            'commands': self.commands,
            'textBlocks': self.text_blocks,
            'totalBytes': self.total_bytes,
        }


@dataclass
class Report:
    """Everything one decode run produces"""
    summary: Summary
    items: List[Token] = field(default_factory=list)
    formatted_text: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'summary': self.summary.to_dict(),
            'items': tokens_to_dicts(self.items),
            'formattedText': self.formatted_text,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def summarize(tokens: List[Token]) -> Summary:
    summary = Summary(total_items=len(tokens))
    for token in tokens:
        if isinstance(token, CommandToken):
            summary.commands += 1
        elif isinstance(token, TextToken):
            summary.text_blocks += 1
            summary.total_bytes += len(token.raw)
        else:
            raise TypeError(f"Unsupported token type: {type(token).__name__}")
    return summary


def build_report(tokens: List[Token], line_width: int = DEFAULT_LINE_WIDTH) -> Report:
    tokens = list(tokens)
    return Report(
        summary=summarize(tokens),
        items=tokens,
        formatted_text=format_text(tokens, line_width),
    )


def render_detailed(report: Report) -> str:
    """Human-readable listing: counts, numbered items, then the receipt"""
    summary = report.summary
    lines = [
        '=' * 60,
        'ESC/POS decode result',
        '=' * 60,
        f"Total items: {summary.total_items}",
        f"Commands:    {summary.commands}",
        f"Text blocks: {summary.text_blocks}",
        f"Text bytes:  {summary.total_bytes}",
        '',
        'Items:',
        '-' * 40,
    ]

    for number, token in enumerate(report.items, start=1):
        if isinstance(token, CommandToken):
            lines.append(f"{number}. {token.description}")
            if token.value is not None:
                lines.append(f"  value: {token.value}")
        elif isinstance(token, TextToken):
            lines.append(f'{number}. Text: "{token.text}"')
            lines.append(f"  bytes: {' '.join(f'{b:02X}' for b in token.raw)}")
        else:
            raise TypeError(f"Unsupported token type: {type(token).__name__}")

    lines.append('')
    lines.append(report.formatted_text)
    return '\n'.join(lines)
