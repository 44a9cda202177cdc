# Primary-file buffer and macro-aware source locations
from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np

from hipify.frontends.raw_lexer import lex_one


@dataclass(frozen=True)
class SourceLocation:
    """A token position in the primary file.

    `offset` is where the token is spelled. Tokens produced by a macro
    expansion also carry `expansion`, the offsets of the first and last token
    of the outermost macro invocation in the file. Tokens substituted for a
    macro parameter are spelled at the call site (`from_arg`), so their file
    location is their spelling.
    """
    offset: int
    expansion: Optional[Tuple[int, int]] = None
    from_arg: bool = False
    at_expansion_start: bool = False
    at_expansion_end: bool = False

    @property
    def is_macro_body(self):
        return self.expansion is not None and not self.from_arg

    @property
    def spelling(self):
        return self.offset

    def file_loc(self, end=False):
        if not self.is_macro_body:
            return self.offset
        return self.expansion[1] if end else self.expansion[0]


class SourceBuffer:
    def __init__(self, text: str, name: str = "<stdin>"):
        self.text = text
        self.name = name
        # one uint32 per code point, so offsets below are character offsets
        cps = np.frombuffer(text.encode("utf-32-le"), dtype=np.uint32)
        self._line_starts = np.concatenate(([0], np.flatnonzero(cps == 10) + 1))

    def __len__(self):
        return len(self.text)

    @property
    def line_count(self):
        n = len(self._line_starts)
        # a trailing newline does not open a new line
        if n > 1 and self._line_starts[-1] == len(self.text):
            n -= 1
        return n

    @property
    def byte_size(self):
        return len(self.text.encode("utf-8"))

    def line_of(self, offset: int) -> int:
        return int(np.searchsorted(self._line_starts, offset, side="right"))

    def column_of(self, offset: int) -> int:
        return offset - int(self._line_starts[self.line_of(offset) - 1]) + 1

    def token_end(self, offset: int) -> int:
        """End offset of the token starting at offset."""
        tok = lex_one(self.text, offset)
        if tok is None or tok.start != offset:
            return offset
        return tok.end

    def byte_length(self, start: int, end: int) -> int:
        return len(self.text[start:end].encode("utf-8"))

    def __getitem__(self, key):
        return self.text[key]
