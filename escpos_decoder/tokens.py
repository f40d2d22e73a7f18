# Token types for ESC/POS Decoder
# A decoded stream is a list of CommandToken / TextToken in buffer order

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

NEWLINE = '\n'


@dataclass(frozen=True)
class CommandToken:
    """A recognized control command and its parameter"""
    name: str
    description: str
    value: Optional[int] = None
    extras: Tuple[Tuple[str, int], ...] = ()
    offset: int = 0
    raw: bytes = b''

    def to_dict(self) -> Dict[str, Any]:
        item: Dict[str, Any] = {'type': 'command', 'command': self.name}
        # Missing parameter byte: key is left out entirely
        if self.value is not None:
            item['value'] = self.value
        item.update(dict(self.extras))
        item['description'] = self.description
        return item


@dataclass(frozen=True)
class TextToken:
    """A run of printable bytes and its decoded text"""
    text: str
    raw: bytes
    encoding: str
    description: str = ''
    offset: int = 0

    @property
    def is_newline(self) -> bool:
        return self.text == NEWLINE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'text',
            'data': self.text,
            'text': self.text,
            'bytes': list(self.raw),
            'encoding': self.encoding,
            'description': self.description,
        }


Token = Union[CommandToken, TextToken]


def tokens_to_dicts(tokens: List[Token]) -> List[Dict[str, Any]]:
    """JSON-ready list of token dicts"""
    items = []
    for token in tokens:
        if not isinstance(token, (CommandToken, TextToken)):
            raise TypeError(f"Unsupported token type: {type(token).__name__}")
        items.append(token.to_dict())
    return items
