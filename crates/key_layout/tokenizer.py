"""Line-oriented tokenizer for key layout map files."""

from pathlib import Path


class Tokenizer:
    """Walks file contents one line at a time, handing out delimited tokens.

    Tokens never span lines: every read stops at the end of the current
    line, and ``next_line()`` moves on to the next one.
    """

    def __init__(self, filename: str, contents: str):
        self.filename = filename
        self._contents = contents
        self._pos = 0
        self.line_number = 1

    @classmethod
    def open(cls, path: str | Path) -> "Tokenizer":
        """Create a tokenizer over a file's contents.

        Raises:
            OSError: The file could not be read.
            UnicodeDecodeError: The file is not valid UTF-8.
        """
        contents = Path(path).read_bytes().decode("utf-8")
        return cls(str(path), contents)

    @classmethod
    def from_contents(cls, filename: str, contents: str) -> "Tokenizer":
        """Create a tokenizer over an in-memory string."""
        return cls(filename, contents)

    def is_eof(self) -> bool:
        return self._pos >= len(self._contents)

    def is_eol(self) -> bool:
        return self.is_eof() or self._contents[self._pos] == "\n"

    def get_location(self) -> str:
        """Human readable location, e.g. ``Generic.kl:12``."""
        return f"{self.filename}:{self.line_number}"

    def peek_char(self) -> str:
        """Get the next character without consuming it ('' at end of file)."""
        if self.is_eof():
            return ""
        return self._contents[self._pos]

    def next_char(self) -> str:
        char = self.peek_char()
        if char:
            self._pos += 1
        return char

    def peek_remainder_of_line(self) -> str:
        end = self._contents.find("\n", self._pos)
        if end < 0:
            end = len(self._contents)
        return self._contents[self._pos:end]

    def skip_delimiters(self, delimiters: str) -> None:
        while not self.is_eol() and self._contents[self._pos] in delimiters:
            self._pos += 1

    def next_token(self, delimiters: str) -> str:
        """Consume characters up to the next delimiter or end of line."""
        start = self._pos
        while not self.is_eol() and self._contents[self._pos] not in delimiters:
            self._pos += 1
        return self._contents[start:self._pos]

    def next_line(self) -> None:
        """Skip the rest of the current line, including its newline."""
        end = self._contents.find("\n", self._pos)
        if end < 0:
            self._pos = len(self._contents)
        else:
            self._pos = end + 1
            self.line_number += 1
