# Raw token scanner: parser-independent renaming of identifiers and strings
import re

from hipify.frontends.raw_lexer import IDENTIFIER, STRING
from hipify.frontends.source import SourceLocation
from hipify.engine.tables import ConvType

DIALECT_MARKER = "cu"
_WS = re.compile(r"\s")
_RAW_OPEN = re.compile(r'R"([^()\\ \t\n]{0,16})\(')


def string_content(text):
    """(start, end) of the characters between the quotes of a string literal token."""
    q = text.find('"')
    if q < 0:
        return 0, 0
    if q > 0 and text[q - 1] == "R":
        m = _RAW_OPEN.match(text, q - 1)
        if m:
            close = text.rfind(")" + m.group(1) + '"')
            return m.end(), (close if close >= m.end() else len(text))
    end = len(text) - 1 if len(text) > q + 1 and text.endswith('"') else len(text)
    return q + 1, end


class RawTokenScanner:
    """Runs over every raw token of the primary file, including code the
    preprocessor would drop, and hands CUDA-looking names to the Renamer."""

    def __init__(self, renamer, table):
        self.renamer = renamer
        self.table = table

    def scan(self, tokens):
        for tok in tokens:
            self.rewrite_token(tok)

    def rewrite_token(self, tok):
        if tok.kind == STRING:
            self.rewrite_string(tok)
        elif tok.kind == IDENTIFIER:
            self.renamer.find_and_replace(tok.text, SourceLocation(tok.start), self.table)

    def rewrite_string(self, tok):
        lo, hi = string_content(tok.text)
        s = tok.text[lo:hi]
        pos = 0
        while True:
            begin = s.find(DIALECT_MARKER, pos)
            if begin < 0:
                break
            m = _WS.search(s, begin)
            end = m.start() if m else len(s)
            self.renamer.find_and_replace(s[begin:end], SourceLocation(tok.start + lo + begin),
                                          self.table, type=ConvType.LITERAL)
            if m is None:
                break
            pos = end + 1
