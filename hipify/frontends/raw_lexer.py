# Raw C/C++/CUDA lexer (no preprocessing, tolerant of unparsed text)
import re
from dataclasses import dataclass

IDENTIFIER = "identifier"
STRING = "string"
CHAR = "char"
NUMBER = "number"
PUNCT = "punct"
HEADER_NAME = "header_name"

_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_NUMBER_RE = re.compile(r"\.?[0-9](?:[eEpP][+-]|'[0-9A-Za-z_]|[0-9A-Za-z_.])*")
_RAW_DELIM_RE = re.compile(r'R"([^()\\ \t\n]{0,16})\(')
_STRING_PREFIXES = ("u8", "u", "U", "L")

# longest first; <<< and >>> are the CUDA launch brackets
_PUNCTUATORS = sorted([
    "<<<", ">>>", "<<=", ">>=", "...", "->*", "<=>",
    "::", "->", "++", "--", "<<", ">>", "<=", ">=", "==", "!=", "&&", "||",
    "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "##", ".*",
], key=len, reverse=True)

_INCLUDE_KEYWORDS = ("include", "include_next", "import")


@dataclass(frozen=True)
class Token:
    kind: str
    start: int
    end: int
    text: str
    bol: bool = False   # first token of a logical line

    def is_punct(self, text):
        return self.kind == PUNCT and self.text == text

    def is_ident(self, text=None):
        return self.kind == IDENTIFIER and (text is None or self.text == text)


def _skip_space(text, i, n):
    """Skip whitespace, comments and line splices. Returns (i, saw_newline)."""
    newline = False
    while i < n:
        c = text[i]
        if c == "\n":
            newline = True
            i += 1
        elif c in " \t\r\f\v":
            i += 1
        elif c == "\\" and text.startswith("\n", i + 1):
            i += 2
        elif c == "\\" and text.startswith("\r\n", i + 1):
            i += 3
        elif text.startswith("//", i):
            j = i
            # a spliced line comment continues on the next line
            while True:
                j = text.find("\n", j)
                if j == -1:
                    return n, newline
                if text[j - 1] == "\\" or (text[j - 1] == "\r" and text[j - 2] == "\\"):
                    j += 1
                    continue
                break
            i = j
        elif text.startswith("/*", i):
            j = text.find("*/", i + 2)
            i = n if j == -1 else j + 2
        else:
            break
    return i, newline


def _quoted_end(text, i, n, quote):
    """End offset of a quoted literal whose opening quote is at i."""
    j = i + 1
    while j < n:
        c = text[j]
        if c == "\\":
            j += 2
            continue
        if c == quote:
            return j + 1
        if c == "\n":
            # unterminated: stop at end of line
            return j
        j += 1
    return n


def _literal_at(text, i, n):
    """Return (kind, end) if a string/char literal (with prefix) starts at i."""
    for prefix in _STRING_PREFIXES + ("",):
        if not text.startswith(prefix, i):
            continue
        j = i + len(prefix)
        if text.startswith('R"', j):
            m = _RAW_DELIM_RE.match(text, j)
            if m:
                close = ")" + m.group(1) + '"'
                k = text.find(close, m.end())
                return STRING, (n if k == -1 else k + len(close))
        if j < n and text[j] == '"':
            return STRING, _quoted_end(text, j, n, '"')
        if j < n and text[j] == "'":
            return CHAR, _quoted_end(text, j, n, "'")
    return None, i


def _header_name_at(text, i, n):
    close = {"<": ">", '"': '"'}.get(text[i]) if i < n else None
    if close is None:
        return None
    j = i + 1
    while j < n and text[j] not in (close, "\n"):
        j += 1
    if j < n and text[j] == close:
        return j + 1
    return None


def lex(text, start=0, end=None):
    """Yield raw tokens of text[start:end]."""
    n = len(text) if end is None else end
    i = start
    bol = True
    # directive state: 0 none, 1 after '#', 2 after '#include'
    directive = 0
    while True:
        i, newline = _skip_space(text, i, n)
        if newline:
            bol = True
            directive = 0
        if i >= n:
            return
        c = text[i]
        if directive == 2:
            hend = _header_name_at(text, i, n)
            directive = 0
            if hend is not None:
                yield Token(HEADER_NAME, i, hend, text[i:hend], bol)
                bol = False
                i = hend
                continue
        kind, lend = _literal_at(text, i, n)
        if kind is not None:
            yield Token(kind, i, lend, text[i:lend], bol)
        elif c.isdigit() or (c == "." and i + 1 < n and text[i + 1].isdigit()):
            m = _NUMBER_RE.match(text, i)
            lend = m.end()
            yield Token(NUMBER, i, lend, text[i:lend], bol)
        elif c == "_" or c == "$" or c.isalpha():
            m = _IDENT_RE.match(text, i)
            lend = m.end() if m else i + 1
            word = text[i:lend]
            if directive == 1:
                directive = 2 if word in _INCLUDE_KEYWORDS else 0
            yield Token(IDENTIFIER, i, lend, word, bol)
        else:
            for p in _PUNCTUATORS:
                if text.startswith(p, i):
                    lend = i + len(p)
                    break
            else:
                lend = i + 1
            if bol and c == "#":
                directive = 1
            else:
                directive = 0
            yield Token(PUNCT, i, lend, text[i:lend], bol)
        bol = False
        i = lend


def lex_one(text, offset):
    """The token starting at (or after whitespace following) offset."""
    for tok in lex(text, offset):
        return tok
    return None
