# Preprocessor pass: directives, conditionals, events and macro expansion
import ast, re, logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from hipify.frontends.raw_lexer import IDENTIFIER, NUMBER, PUNCT, HEADER_NAME, lex
from hipify.frontends.source import SourceLocation

logger = logging.getLogger(__name__)

_INCLUDE_KEYWORDS = ("include", "include_next", "import")
_OCTAL_RE = re.compile(r"0[0-7]+")
_INT_SUFFIX_RE = re.compile(r"(?<=[0-9A-Fa-f])[uUlLzZ]+$")
_PY_OPERATORS = {"&&": " and ", "||": " or ", "!": " not ", "/": "//"}
_MAX_CONDITION_CHARS = 1 << 16
_UINT64_MASK = (1 << 64) - 1


def _wrap(value):
    """Two's complement 64-bit, like the intmax_t arithmetic of #if."""
    value &= _UINT64_MASK
    return value - (1 << 64) if value >> 63 else value


def _divide(a, b, remainder=False):
    # C division truncates toward zero
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return a - q * b if remainder else q


_BINARY = {
    ast.Add: lambda a, b: a + b,
    ast.Sub: lambda a, b: a - b,
    ast.Mult: lambda a, b: a * b,
    ast.FloorDiv: _divide,
    ast.Mod: lambda a, b: _divide(a, b, remainder=True),
    ast.BitOr: lambda a, b: a | b,
    ast.BitAnd: lambda a, b: a & b,
    ast.BitXor: lambda a, b: a ^ b,
}
_COMPARE = {
    ast.Eq: lambda a, b: a == b,
    ast.NotEq: lambda a, b: a != b,
    ast.Lt: lambda a, b: a < b,
    ast.LtE: lambda a, b: a <= b,
    ast.Gt: lambda a, b: a > b,
    ast.GtE: lambda a, b: a >= b,
}


def _eval_condition(node):
    """Integer value of a parsed #if expression. Anything but integer arithmetic raises ValueError."""
    if isinstance(node, ast.Expression):
        return _eval_condition(node.body)
    if isinstance(node, ast.Constant):
        if type(node.value) is not int:
            raise ValueError(f"unsupported literal {node.value!r}")
        return _wrap(node.value)
    if isinstance(node, ast.UnaryOp):
        v = _eval_condition(node.operand)
        if isinstance(node.op, ast.Not):
            return int(not v)
        if isinstance(node.op, ast.USub):
            return _wrap(-v)
        if isinstance(node.op, ast.UAdd):
            return v
        if isinstance(node.op, ast.Invert):
            return _wrap(~v)
    elif isinstance(node, ast.BoolOp):
        if isinstance(node.op, ast.And):
            return int(all(_eval_condition(v) for v in node.values))
        return int(any(_eval_condition(v) for v in node.values))
    elif isinstance(node, ast.BinOp):
        a, b = _eval_condition(node.left), _eval_condition(node.right)
        if isinstance(node.op, (ast.LShift, ast.RShift)):
            if not 0 <= b < 64:
                raise ValueError(f"shift by {b}")
            return _wrap(a << b if isinstance(node.op, ast.LShift) else a >> b)
        op = _BINARY.get(type(node.op))
        if op is not None:
            return _wrap(op(a, b))
    elif isinstance(node, ast.Compare):
        # C compares left to right: a < b < c is (a < b) < c
        left = _eval_condition(node.left)
        for cmp, right in zip(node.ops, node.comparators):
            op = _COMPARE.get(type(cmp))
            if op is None:
                raise ValueError(f"unsupported comparison {type(cmp).__name__}")
            left = int(op(left, _eval_condition(right)))
        return left
    raise ValueError(f"unsupported #if construct {type(node).__name__}")


@dataclass(frozen=True)
class IncludeDirective:
    hash_offset: int
    name: str
    angled: bool
    filename_start: int
    filename_end: int     # one past the closing '>' or '"'


@dataclass(frozen=True)
class PragmaDirective:
    hash_offset: int
    name: str
    name_end: int


@dataclass(frozen=True)
class IfndefDirective:
    hash_offset: int
    macro: str
    macro_end: int


@dataclass(frozen=True)
class Macro:
    name: str
    params: Optional[Tuple[str, ...]]
    body: tuple
    variadic: bool = False

    @property
    def expandable(self):
        # stringizing and pasting are not modelled
        return not any(t.kind == PUNCT and t.text in ("#", "##") for t in self.body)


@dataclass(frozen=True)
class PPToken:
    kind: str
    text: str
    loc: SourceLocation

    def is_punct(self, text):
        return self.kind == PUNCT and self.text == text

    def is_ident(self, text=None):
        return self.kind == IDENTIFIER and (text is None or self.text == text)


class Preprocessor:
    """Single pass over the raw tokens of the primary file.

    Produces the preprocessor events, the macro-expanded token stream of the
    active code (directive lines excluded) and the header-guard macro.
    """

    def __init__(self, text, tokens=None):
        self.text = text
        self.tokens = list(tokens) if tokens is not None else list(lex(text))
        self.macros = {}
        self.events = []
        self.expanded = []
        self.controlling_macro = None
        self._stack = []      # [parent_active, active, taken]
        self._active = True
        self._guard = None    # candidate header-guard macro
        self._guard_state = "unseen"

    def run(self):
        toks = self.tokens
        n = len(toks)
        pending = []
        i = 0
        while i < n:
            t = toks[i]
            self._note_guard_token()
            if t.bol and t.kind == PUNCT and t.text == "#":
                j = i + 1
                while j < n and not toks[j].bol:
                    j += 1
                self._flush(pending)
                pending = []
                self._directive(toks[i:j])
                i = j
                continue
            if self._guard_state == "unseen":
                self._guard_state = "dead"
            if self._active:
                pending.append(PPToken(t.kind, t.text, SourceLocation(t.start)))
            i += 1
        self._flush(pending)
        if self._guard_state == "closed":
            self.controlling_macro = self._guard
        return self

    # -- header guard -------------------------------------------------

    def _note_guard_token(self):
        if self._guard_state == "closed":
            # something follows the guard's #endif
            self._guard_state = "dead"

    # -- directives ---------------------------------------------------

    def _directive(self, toks):
        if len(toks) < 2 or toks[1].kind != IDENTIFIER:
            if self._guard_state == "unseen":
                self._guard_state = "dead"
            return
        kw = toks[1].text
        rest = toks[2:]
        first = self._guard_state == "unseen"
        if first and kw not in ("ifndef", "if"):
            self._guard_state = "dead"

        if kw in ("if", "ifdef", "ifndef"):
            parent = self._active
            if kw == "if":
                cond = self._evaluate(rest) if parent else False
                guard = self._negated_defined(rest)
            else:
                name = rest[0].text if rest and rest[0].kind == IDENTIFIER else ""
                cond = (name in self.macros) == (kw == "ifdef")
                guard = name if kw == "ifndef" else None
                if kw == "ifndef" and parent and name:
                    self.events.append(IfndefDirective(toks[0].start, name, rest[0].end))
            if first:
                if guard:
                    self._guard = guard
                    self._guard_state = "open"
                else:
                    self._guard_state = "dead"
            active = parent and cond
            self._stack.append([parent, active, active])
            self._active = active
            return
        if kw in ("elif", "else", "elifdef", "elifndef"):
            if not self._stack:
                return
            if len(self._stack) == 1 and self._guard_state == "open":
                self._guard_state = "dead"
            parent, _, taken = self._stack[-1]
            if kw == "else":
                active = parent and not taken
            elif taken or not parent:
                active = False
            elif kw == "elif":
                active = self._evaluate(rest)
            else:
                name = rest[0].text if rest else ""
                active = (name in self.macros) == (kw == "elifdef")
            self._stack[-1] = [parent, active, taken or active]
            self._active = active
            return
        if kw == "endif":
            if not self._stack:
                return
            parent = self._stack.pop()[0]
            self._active = parent
            if not self._stack and self._guard_state == "open":
                self._guard_state = "closed"
            return

        if not self._active:
            return
        if kw == "define":
            self._define(rest)
        elif kw == "undef":
            if rest:
                self.macros.pop(rest[0].text, None)
        elif kw in _INCLUDE_KEYWORDS:
            if rest and rest[0].kind == HEADER_NAME:
                h = rest[0]
                self.events.append(IncludeDirective(
                    toks[0].start, h.text[1:-1], h.text.startswith("<"), h.start, h.end))
        elif kw == "pragma":
            if rest:
                self.events.append(PragmaDirective(toks[0].start, rest[0].text, rest[0].end))

    @staticmethod
    def _negated_defined(toks):
        """X for '#if !defined(X)' or '#if !defined X', else None."""
        texts = [t.text for t in toks]
        if texts[:3] == ["!", "defined", "("] and len(texts) == 5 and texts[4] == ")":
            return texts[3]
        if texts[:2] == ["!", "defined"] and len(texts) == 3:
            return texts[2]
        return None

    def _define(self, toks):
        if not toks or toks[0].kind != IDENTIFIER:
            return
        name = toks[0]
        params = None
        variadic = False
        body_at = 1
        if len(toks) > 1 and toks[1].text == "(" and toks[1].start == name.end:
            params = []
            k = 2
            while k < len(toks) and toks[k].text != ")":
                t = toks[k]
                if t.text == "...":
                    variadic = True
                    if not (params and params[-1] != "__VA_ARGS__" and toks[k - 1].kind == IDENTIFIER):
                        params.append("__VA_ARGS__")
                elif t.kind == IDENTIFIER:
                    params.append(t.text)
                k += 1
            params = tuple(params)
            body_at = k + 1
        self.macros[name.text] = Macro(name.text, params, tuple(toks[body_at:]), variadic)

    def _condition(self, toks, seen=frozenset()):
        """#if tokens as a Python expression string, macros resolved, identifiers as 0."""
        parts = []
        size = 0
        i = 0
        while i < len(toks):
            t = toks[i]
            if t.kind == IDENTIFIER and t.text == "defined":
                j = i + 1
                paren = j < len(toks) and toks[j].text == "("
                if paren:
                    j += 1
                name = toks[j].text if j < len(toks) else ""
                parts.append("1" if name in self.macros else "0")
                i = j + (2 if paren else 1)
                continue
            if t.kind == IDENTIFIER:
                m = self.macros.get(t.text)
                if t.text == "true":
                    parts.append("1")
                elif m is not None and m.params is None and m.body and t.text not in seen:
                    parts.append("(" + self._condition(m.body, seen | {t.text}) + ")")
                else:
                    parts.append("0")
            elif t.kind == NUMBER:
                parts.append(self._number(t.text))
            elif t.kind == PUNCT:
                parts.append(_PY_OPERATORS.get(t.text, t.text))
            else:
                raise ValueError(f"unexpected {t.text!r} in #if")
            size += len(parts[-1]) + 1
            if size > _MAX_CONDITION_CHARS:
                raise ValueError("#if expression too long")
            i += 1
        return " ".join(parts)

    def _evaluate(self, toks):
        try:
            expr = self._condition(toks)
            return bool(_eval_condition(ast.parse(expr, mode="eval")))
        except (ValueError, SyntaxError, ArithmeticError, RecursionError) as e:
            logger.debug("cannot evaluate #if (%s), assuming true", e)
            return True

    @staticmethod
    def _number(text):
        text = _INT_SUFFIX_RE.sub("", text) if not text.lower().startswith("0x") else text.rstrip("uUlL")
        if _OCTAL_RE.fullmatch(text):
            return str(int(text, 8))
        return text

    # -- macro expansion ----------------------------------------------

    def _flush(self, pending):
        if pending:
            self.expanded.extend(self._expand(pending, frozenset(), top=True))

    def _expand(self, tokens, hide, top=False):
        out = []
        i = 0
        n = len(tokens)
        while i < n:
            t = tokens[i]
            m = self.macros.get(t.text) if t.kind == IDENTIFIER else None
            if m is None or t.text in hide or not m.expandable:
                out.append(t)
                i += 1
                continue
            if m.params is None:
                args, last, nxt = None, t, i + 1
            else:
                collected = self._collect_args(tokens, i + 1, m)
                if collected is None:
                    out.append(t)
                    i += 1
                    continue
                args, last, nxt = collected
            body = self._substitute(m, t, last, args, hide)
            if top and body:
                body[0] = replace(body[0], loc=replace(body[0].loc, at_expansion_start=True))
                body[-1] = replace(body[-1], loc=replace(body[-1].loc, at_expansion_end=True))
            out.extend(body)
            i = nxt
        return out

    @staticmethod
    def _collect_args(tokens, j, macro):
        if j >= len(tokens) or not tokens[j].is_punct("("):
            return None
        args = [[]]
        commas = []
        depth = 0
        for k in range(j, len(tokens)):
            t = tokens[k]
            if t.is_punct("("):
                depth += 1
                if depth == 1:
                    continue
            elif t.is_punct(")"):
                depth -= 1
                if depth == 0:
                    break
            elif t.is_punct(",") and depth == 1:
                args.append([])
                commas.append(t)
                continue
            args[-1].append(t)
        else:
            return None
        nparams = len(macro.params)
        if macro.variadic and len(args) > nparams:
            rest = args[nparams - 1]
            for comma, extra in zip(commas[nparams - 1:], args[nparams:]):
                rest = rest + [comma] + extra
            args = args[:nparams - 1] + [rest]
        if nparams == 0 and args == [[]]:
            args = []
        if len(args) != nparams and not (macro.variadic and len(args) == nparams - 1):
            return None
        return args, tokens[k], k + 1

    def _substitute(self, macro, name_tok, last_tok, args, hide):
        if name_tok.loc.is_macro_body:
            expansion = name_tok.loc.expansion
        else:
            expansion = (name_tok.loc.offset, last_tok.loc.file_loc(end=True))
        index = {p: k for k, p in enumerate(macro.params or ())}
        result = []
        for bt in macro.body:
            k = index.get(bt.text) if bt.kind == IDENTIFIER else None
            if k is None:
                result.append(PPToken(bt.kind, bt.text, SourceLocation(bt.start, expansion)))
                continue
            arg = args[k] if k < len(args) else []
            for at in self._expand(arg, hide):
                if at.loc.is_macro_body:
                    result.append(at)
                else:
                    loc = SourceLocation(at.loc.offset, expansion, from_arg=True)
                    result.append(PPToken(at.kind, at.text, loc))
        return self._expand(result, hide | {macro.name})


def preprocess(text, tokens=None):
    return Preprocessor(text, tokens).run()
