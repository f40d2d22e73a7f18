# Tests for the command table and the tokenizer

import random

import pytest
from escpos_decoder.commands import (
    BUILTIN_COMMANDS, DEFAULT_REGISTRY, CommandDefinition, CommandRegistry,
    find_command, is_newline, is_printable,
)
from escpos_decoder.errors import InvalidInput
from escpos_decoder.sources import parse_hex_string
from escpos_decoder.tokenizer import ESCPOSTokenizer, tokenize
from escpos_decoder.tokens import CommandToken, TextToken


class TestCommandRegistry:
    """Test command lookup"""

    def test_builtin_names_in_order(self):
        """Test the built-in table order"""
        assert DEFAULT_REGISTRY.names() == [
            'INITIALIZE', 'ALIGN', 'PRINT_AND_FEED', 'CUT_PAPER', 'FONT_SIZE',
            'BOLD', 'UNDERLINE', 'LINE_SPACING', 'CHAR_SPACING', 'BOLD_MODE',
        ]

    def test_find_command(self):
        """Test matching at an offset"""
        data = b'xx\x1d\x56\x00'

        assert find_command(data, 2).name == 'CUT_PAPER'
        assert find_command(data, 0) is None

    def test_fails_closed_at_end_of_buffer(self):
        """Test a partial signature never matches"""
        assert find_command(b'\x1b', 0) is None
        assert find_command(b'A\x1d', 1) is None

    def test_first_registered_wins(self):
        """Test a prefix signature shadows a longer one registered after it"""
        long_cmd = CommandDefinition('LONG', b'\x1bZ\x01', 'long')
        short_cmd = CommandDefinition('SHORT', b'\x1bZ', 'short')
        data = b'\x1bZ\x01'

        assert CommandRegistry((long_cmd, short_cmd)).match(data, 0).name == 'LONG'
        assert CommandRegistry((short_cmd, long_cmd)).match(data, 0).name == 'SHORT'

    def test_extended_leaves_default_untouched(self):
        """Test extending returns a new registry"""
        extra = CommandDefinition('PULSE', b'\x1bp', 'Cash drawer pulse')

        registry = DEFAULT_REGISTRY.extended(extra)

        assert registry.names()[-1] == 'PULSE'
        assert len(registry) == len(DEFAULT_REGISTRY) + 1
        assert 'PULSE' not in DEFAULT_REGISTRY.names()

    def test_byte_classes(self):
        """Test printable and newline classification"""
        assert is_printable(0x20) and is_printable(0x7E) and is_printable(0x80) and is_printable(0xFF)
        assert not is_printable(0x1F) and not is_printable(0x7F)
        assert is_newline(0x0A) and is_newline(0x0D)
        assert not is_newline(0x20)


class TestTokenizer:
    """Test ESC/POS tokenizer"""

    def setup_method(self):
        self.tokenizer = ESCPOSTokenizer()

    def test_empty_input(self):
        """Test empty buffer yields no tokens"""
        assert tokenize(b'') == []

    def test_initialize(self):
        """Test 1B40 decodes to INITIALIZE"""
        tokens = tokenize(parse_hex_string('1B40'))

        assert len(tokens) == 1
        assert isinstance(tokens[0], CommandToken)
        assert tokens[0].name == 'INITIALIZE'
        assert tokens[0].value is None
        assert tokens[0].raw == b'\x1b\x40'

    def test_align_then_text(self):
        """Test ALIGN center followed by ASCII text"""
        tokens = tokenize(parse_hex_string('1B610148656C6C6F'))

        assert len(tokens) == 2
        assert tokens[0].name == 'ALIGN'
        assert tokens[0].value == 1
        assert tokens[0].description == 'Set alignment: center'
        assert isinstance(tokens[1], TextToken)
        assert tokens[1].text == 'Hello'
        assert tokens[1].raw == b'Hello'
        assert tokens[1].encoding == 'utf8'
        assert tokens[1].offset == 3

    def test_cut_paper(self):
        """Test 1D5600 is a full cut"""
        tokens = tokenize(parse_hex_string('1D5600'))

        assert len(tokens) == 1
        assert tokens[0].name == 'CUT_PAPER'
        assert tokens[0].value == 0
        assert tokens[0].description == 'Cut paper: full cut'

    def test_each_signature_alone(self):
        """Test every registered command decodes on its own"""
        for definition in BUILTIN_COMMANDS:
            data = definition.signature + (b'\x01' if definition.decode else b'')

            tokens = tokenize(data)

            assert len(tokens) == 1, definition.name
            assert tokens[0].name == definition.name
            assert tokens[0].raw == data

    def test_each_bare_signature(self):
        """Test every command with nothing after its signature"""
        for definition in BUILTIN_COMMANDS:
            tokens = tokenize(definition.signature)

            assert len(tokens) == 1, definition.name
            assert tokens[0].name == definition.name
            assert tokens[0].value is None
            assert tokens[0].raw == definition.signature
            assert 'value' not in tokens[0].to_dict()

    def test_font_size_nibbles(self):
        """Test GS ! packs width and height"""
        token = tokenize(b'\x1d\x21\x12')[0]

        assert token.value == 0x12
        assert dict(token.extras) == {'width': 2, 'height': 3}
        assert token.to_dict()['width'] == 2
        assert token.to_dict()['height'] == 3

    def test_command_tokens_are_hashable(self):
        """Test tokens with extras can be hashed and put in a set"""
        first = tokenize(b'\x1d\x21\x12')[0]
        second = tokenize(b'\x1d\x21\x12')[0]

        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_missing_parameter_at_end(self):
        """Test a command cut off before its parameter byte"""
        tokens = tokenize(b'Hi\x1ba')

        assert [t.raw for t in tokens] == [b'Hi', b'\x1ba']
        assert tokens[1].value is None
        assert tokens[1].description == 'Set alignment: unknown'

    def test_unknown_parameter_value(self):
        """Test out-of-range values are kept"""
        token = tokenize(b'\x1ba\x07')[0]

        assert token.value == 7
        assert token.description == 'Set alignment: unknown'

    def test_command_splits_word(self):
        """Test a signature inside text is never absorbed"""
        tokens = tokenize(b'AB\x1bE\x01CD')

        assert [type(t) for t in tokens] == [TextToken, CommandToken, TextToken]
        assert tokens[0].text == 'AB'
        assert tokens[1].name == 'BOLD'
        assert tokens[2].text == 'CD'

    def test_newlines(self):
        """Test CR and LF become separate newline tokens"""
        tokens = tokenize(b'A\r\nB')

        assert [t.text for t in tokens] == ['A', '\n', '\n', 'B']
        assert tokens[1].raw == b'\r'
        assert tokens[2].raw == b'\n'
        assert tokens[1].is_newline

    def test_unprintable_bytes_skipped(self):
        """Test control bytes are skipped and recorded"""
        tokens = self.tokenizer.tokenize(b'\x00\x01Hi\x02')

        assert len(tokens) == 1
        assert tokens[0].text == 'Hi'
        assert tokens[0].offset == 2
        assert self.tokenizer.get_skipped_offsets() == [0, 1, 4]

    def test_commands_only(self):
        """Test a command-only buffer has no text tokens"""
        tokens = tokenize(b'\x1b@\x1ba\x01\x1bE\x01\x1dV\x01')

        assert len(tokens) == 4
        assert not any(isinstance(t, TextToken) for t in tokens)

    def test_gbk_text(self):
        """Test Chinese text decoded as GBK"""
        tokens = tokenize('你好'.encode('gbk') + b'\n', 'gbk')

        assert tokens[0].text == '你好'
        assert tokens[0].encoding == 'gbk'
        assert tokens[1].is_newline

    def test_encoding_alias_kept(self):
        """Test text and newline tokens report the encoding name given"""
        tokens = tokenize(b'Hi\n', 'cp936')

        assert [t.encoding for t in tokens] == ['cp936', 'cp936']

    def test_every_byte_accounted_for(self):
        """Test tokens and skipped bytes partition arbitrary input"""
        rng = random.Random(1234)
        alphabet = [0x1B, 0x1D, 0x40, 0x61, 0x56, 0x21, 0x45, 0x0A, 0x0D, 0x00, 0x07, 0x41, 0x20, 0xC4, 0xE3, 0xFF]

        for _ in range(200):
            data = bytes(rng.choice(alphabet) for _ in range(rng.randint(0, 64)))
            tokenizer = ESCPOSTokenizer('gbk')

            tokens = tokenizer.tokenize(data)

            covered = []
            for token in tokens:
                assert data[token.offset:token.offset + len(token.raw)] == token.raw
                covered.extend(range(token.offset, token.offset + len(token.raw)))
            covered.extend(tokenizer.skipped_offsets)
            assert sorted(covered) == list(range(len(data)))
            assert [t.offset for t in tokens] == sorted(t.offset for t in tokens)

    def test_accepts_bytearray(self):
        """Test bytearray and memoryview input"""
        assert tokenize(bytearray(b'\x1b@'))[0].name == 'INITIALIZE'
        assert tokenize(memoryview(b'Hi'))[0].text == 'Hi'

    def test_rejects_str(self):
        """Test non-bytes input is rejected"""
        with pytest.raises(InvalidInput):
            tokenize('1B40')

    def test_custom_registry(self):
        """Test tokenizing with an extended registry"""
        registry = DEFAULT_REGISTRY.extended(CommandDefinition('PULSE', b'\x1bp', 'Cash drawer pulse'))

        tokens = tokenize(b'A\x1bpB', registry=registry)

        assert [getattr(t, 'name', None) for t in tokens] == [None, 'PULSE', None]
        assert tokens[1].to_dict() == {'type': 'command', 'command': 'PULSE', 'description': 'Cash drawer pulse'}


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
