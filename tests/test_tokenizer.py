"""Tests for the key layout tokenizer."""

import pytest

from crates.key_layout import Tokenizer

WHITESPACE = " \t\r"


@pytest.fixture
def tokenizer():
    """Create a tokenizer over two short lines."""
    return Tokenizer.from_contents("test.kl", "key 1  ESC\r\n\taxis 0x00 X # stick\n")


class TestTokenizer:
    """Tests for Tokenizer."""

    def test_tokens_on_first_line(self, tokenizer):
        """Test reading whitespace separated tokens."""
        assert tokenizer.next_token(WHITESPACE) == "key"
        tokenizer.skip_delimiters(WHITESPACE)
        assert tokenizer.next_token(WHITESPACE) == "1"
        tokenizer.skip_delimiters(WHITESPACE)
        assert tokenizer.next_token(WHITESPACE) == "ESC"
        tokenizer.skip_delimiters(WHITESPACE)
        assert tokenizer.is_eol()

    def test_tokens_do_not_cross_lines(self, tokenizer):
        """Test token reads stop at the end of the line."""
        tokenizer.next_token(WHITESPACE)
        for _ in range(5):
            tokenizer.skip_delimiters(WHITESPACE)
            tokenizer.next_token(WHITESPACE)
        assert tokenizer.is_eol()
        assert tokenizer.next_token(WHITESPACE) == ""

    def test_next_line_and_location(self, tokenizer):
        """Test moving to the next line updates the location."""
        assert tokenizer.get_location() == "test.kl:1"
        tokenizer.next_line()
        assert tokenizer.get_location() == "test.kl:2"
        tokenizer.skip_delimiters(WHITESPACE)
        assert tokenizer.next_token(WHITESPACE) == "axis"

    def test_peek_char_and_remainder(self, tokenizer):
        """Test peeking does not consume input."""
        tokenizer.next_line()
        tokenizer.skip_delimiters(WHITESPACE)
        assert tokenizer.peek_char() == "a"
        assert tokenizer.peek_remainder_of_line() == "axis 0x00 X # stick"
        assert tokenizer.next_char() == "a"
        assert tokenizer.peek_char() == "x"

    def test_eof(self, tokenizer):
        """Test end of file after the last line."""
        tokenizer.next_line()
        assert not tokenizer.is_eof()
        tokenizer.next_line()
        assert tokenizer.is_eof()
        assert tokenizer.is_eol()
        assert tokenizer.peek_char() == ""
        assert tokenizer.next_char() == ""

    def test_last_line_without_newline(self):
        """Test a file that does not end in a newline."""
        tokenizer = Tokenizer.from_contents("test.kl", "led 0 NUML")
        tokenizer.next_line()
        assert tokenizer.is_eof()
        assert tokenizer.line_number == 1

    def test_empty_contents(self):
        """Test an empty file is immediately at EOF."""
        tokenizer = Tokenizer.from_contents("empty.kl", "")
        assert tokenizer.is_eof()

    def test_open_file(self, tmp_path):
        """Test opening a file from disk."""
        path = tmp_path / "Vendor_1234_Product_5678.kl"
        path.write_text("key 30 A\n", encoding="utf-8")

        tokenizer = Tokenizer.open(path)

        assert tokenizer.filename == str(path)
        assert tokenizer.next_token(WHITESPACE) == "key"

    def test_open_missing_file(self, tmp_path):
        """Test opening a missing file raises OSError."""
        with pytest.raises(OSError):
            Tokenizer.open(tmp_path / "missing.kl")
