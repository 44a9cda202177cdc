#!/usr/bin/env python3
# CUDA front-end: raw tokens, preprocessor events and AST-pattern matches
import sys, json, argparse, pathlib, dataclasses
from dataclasses import dataclass
from typing import Optional

from hipify.data.cuda2hip import CUDA_DEVICE_DECLARATIONS
from hipify.frontends.ast_nodes import (
    CV_QUALIFIERS, CallExpr, ConfigArg, Expr, FunctionDecl, KernelLaunch,
    SharedVarDecl, TypeInfo, builtin_name)
from hipify.frontends.preprocessor import preprocess
from hipify.frontends.raw_lexer import IDENTIFIER, PUNCT, STRING, lex
from hipify.frontends.source import SourceBuffer

_FUNC_ATTRS = {"__global__": "global", "__device__": "device", "__host__": "host"}
_VAR_ATTRS = {"__shared__": "shared", "__device__": "device", "__constant__": "constant",
              "__managed__": "managed"}
# attribute-like keywords followed by a parenthesized argument list
_PAREN_ATTRS = ("__launch_bounds__", "__attribute__", "__align__", "alignas", "__declspec")
_OPEN = {"(": ")", "[": "]", "{": "}"}
_CLOSE = {")", "]", "}"}
_ANGLE = {">": 1, ">>": 2, "<": -1, "<<": -2}

# typedefs the CUDA and system headers bring in
SYSTEM_TYPEDEFS = {
    "uint": ("unsigned", "int"), "ushort": ("unsigned", "short"),
    "ulong": ("unsigned", "long"), "uchar": ("unsigned", "char"),
    "size_t": ("unsigned", "long"), "ptrdiff_t": ("long",),
    "int8_t": ("signed", "char"), "uint8_t": ("unsigned", "char"),
    "int16_t": ("short",), "uint16_t": ("unsigned", "short"),
    "int32_t": ("int",), "uint32_t": ("unsigned", "int"),
    "int64_t": ("long",), "uint64_t": ("unsigned", "long"),
}


@dataclass
class TranslationUnit:
    buffer: SourceBuffer
    tokens: list
    events: list
    nodes: list
    controlling_macro: Optional[str]
    decls: dict


class _Matcher:
    def __init__(self, toks, builtin_declarations):
        self.toks = toks
        self.n = len(toks)
        self.typedefs = dict(SYSTEM_TYPEDEFS)
        self.decls = {}
        self.decl_positions = set()
        self.builtins = {name: FunctionDecl(name, frozenset(attrs))
                         for name, attrs in (builtin_declarations or {}).items()}

    # -- helpers ------------------------------------------------------

    def _match_forward(self, i):
        """Index of the bracket closing the one at i, or None."""
        stack = []
        for k in range(i, self.n):
            t = self.toks[k]
            if t.kind != PUNCT:
                continue
            if t.text in _OPEN:
                stack.append(_OPEN[t.text])
            elif t.text in _CLOSE:
                if not stack or stack.pop() != t.text:
                    return None
                if not stack:
                    return k
        return None

    def _match_backward(self, i):
        depth = 0
        for k in range(i, -1, -1):
            t = self.toks[k]
            if t.kind != PUNCT:
                continue
            if t.text in _CLOSE:
                depth += 1
            elif t.text in _OPEN:
                depth -= 1
                if depth == 0:
                    return k
        return None

    def _split(self, lo, hi):
        """Split toks[lo:hi] on top-level commas into (first, last) index pairs."""
        parts = []
        start = lo
        depth = 0
        for k in range(lo, hi):
            t = self.toks[k]
            if t.kind == PUNCT and t.text in _OPEN:
                depth += 1
            elif t.kind == PUNCT and t.text in _CLOSE:
                depth -= 1
            elif t.is_punct(",") and depth == 0:
                parts.append((start, k - 1))
                start = k + 1
        if hi > lo:
            parts.append((start, hi - 1))
        return parts

    def _statement_start(self, i):
        while i > 0 and not (self.toks[i - 1].kind == PUNCT and self.toks[i - 1].text in (";", "{", "}")):
            i -= 1
        return i

    def _statement_end(self, i):
        depth = 0
        for k in range(i, self.n):
            t = self.toks[k]
            if t.kind != PUNCT:
                continue
            if t.text in _OPEN:
                depth += 1
            elif t.text in _CLOSE:
                if depth == 0:
                    return k
                depth -= 1
            elif t.text == ";" and depth == 0:
                return k
        return self.n

    @staticmethod
    def _spell(toks):
        out = ""
        prev = None
        for t in toks:
            if prev is not None and prev.kind != PUNCT and t.kind != PUNCT:
                out += " "
            elif t.text in ("*", "&", "&&") and prev is not None and prev.kind != PUNCT:
                out += " "
            out += t.text
            prev = t
        return out

    # -- declarations -------------------------------------------------

    def collect_declarations(self):
        toks = self.toks
        for i, t in enumerate(toks):
            if t.is_ident("typedef"):
                end = self._statement_end(i)
                seg = toks[i + 1:end]
                if len(seg) >= 2 and seg[-1].kind == IDENTIFIER and \
                        not any(s.kind == PUNCT and s.text in ("(", "{", "[") for s in seg):
                    self.typedefs[seg[-1].text] = tuple(s.text for s in seg[:-1])
            elif t.is_ident("using") and i + 2 < self.n and toks[i + 1].kind == IDENTIFIER \
                    and toks[i + 2].is_punct("="):
                end = self._statement_end(i)
                self.typedefs[toks[i + 1].text] = tuple(s.text for s in toks[i + 3:end])
        seen = set()
        for i, t in enumerate(toks):
            if t.kind != IDENTIFIER or t.text not in _FUNC_ATTRS:
                continue
            j = self._declared_name(i)
            if j is None or j in seen:
                continue
            seen.add(j)
            start = self._statement_start(i)
            attrs = frozenset(_FUNC_ATTRS[u.text] for u in toks[start:j]
                              if u.kind == IDENTIFIER and u.text in _FUNC_ATTRS)
            is_template = any(u.is_ident("template") for u in toks[start:j])
            name = toks[j].text
            old = self.decls.get(name)
            if old is not None:
                attrs = attrs | old.attrs
                is_template = is_template or old.is_template
            self.decls[name] = FunctionDecl(name, attrs, is_template)
            self.decl_positions.add(j)

    def _declared_name(self, i):
        k = i
        while k < self.n:
            u = self.toks[k]
            if u.kind == PUNCT and u.text in (";", "{", "}", "="):
                return None
            if u.kind == IDENTIFIER and k + 1 < self.n and self.toks[k + 1].is_punct("("):
                if u.text in _PAREN_ATTRS:
                    k = self._match_forward(k + 1)
                    if k is None:
                        return None
                    k += 1
                    continue
                return k
            k += 1
        return None

    def resolve_callee(self, name):
        return self.decls.get(name) or self.builtins.get(name)

    # -- kernel launches ----------------------------------------------

    def launches(self):
        toks = self.toks
        for j, t in enumerate(toks):
            if not t.is_punct("<<<"):
                continue
            close = None
            depth = 0
            for k in range(j + 1, self.n):
                u = toks[k]
                if u.kind == PUNCT and u.text in _OPEN:
                    depth += 1
                elif u.kind == PUNCT and u.text in _CLOSE:
                    depth -= 1
                elif u.is_punct(">>>") and depth == 0:
                    close = k
                    break
                elif u.is_punct(";") and depth <= 0:
                    break
            if close is None or close + 1 >= self.n or not toks[close + 1].is_punct("("):
                continue
            rparen = self._match_forward(close + 1)
            if rparen is None:
                continue
            callee, name, template_args = self._callee(j)
            decl = None
            if name is not None:
                decl = self.resolve_callee(name) or FunctionDecl(name, frozenset({"global"}))
            config = [ConfigArg(Expr(toks[a].loc, toks[b].loc)) if b >= a else ConfigArg(None, True)
                      for a, b in self._split(j + 1, close)]
            if 0 < len(config) < 4:
                config += [ConfigArg(None, True)] * (4 - len(config))
            args = [Expr(toks[a].loc, toks[b].loc) for a, b in self._split(close + 2, rparen) if b >= a]
            begin = callee.begin if callee is not None else t.loc
            yield KernelLaunch(begin, toks[rparen].loc, callee, decl, template_args,
                               tuple(config), tuple(args))

    def _callee(self, j):
        """(callee Expr, direct callee name, explicit template args) left of '<<<'."""
        toks = self.toks
        k = j - 1
        if k < 0:
            return None, None, False
        template_args = False
        if toks[k].kind == PUNCT and toks[k].text in (">", ">>"):
            depth = 0
            while k >= 0:
                if toks[k].kind == PUNCT:
                    depth += _ANGLE.get(toks[k].text, 0)
                if depth <= 0:
                    break
                k -= 1
            if k <= 0:
                return None, None, False
            template_args = True
            k -= 1
        if toks[k].kind == IDENTIFIER:
            name_at = k
            while k >= 2 and toks[k - 1].is_punct("::") and toks[k - 2].kind == IDENTIFIER:
                k -= 2
            if k >= 1 and toks[k - 1].is_punct("::"):
                k -= 1
            return Expr(toks[k].loc, toks[j - 1].loc), toks[name_at].text, template_args
        if toks[k].is_punct(")"):
            opened = self._match_backward(k)
            if opened is not None:
                return Expr(toks[opened].loc, toks[j - 1].loc), None, template_args
        return None, None, False

    # -- shared declarations ------------------------------------------

    def shared_decls(self):
        done = set()
        for s, t in enumerate(self.toks):
            if not t.is_ident("__shared__"):
                continue
            b = self._statement_start(s)
            if b in done:
                continue
            done.add(b)
            node = self._shared_decl(b, self._statement_end(s))
            if node is not None:
                yield node

    def _shared_decl(self, b, e):
        toks = self.toks
        storage = ""
        attrs = set()
        type_toks = []
        type_at = []
        k = b
        while k < e:
            t = toks[k]
            if t.kind == IDENTIFIER and t.text in ("extern", "static"):
                storage = t.text
                if t.text == "extern" and k + 1 < e and toks[k + 1].kind == STRING:
                    k += 1   # linkage, as in extern "C"
            elif t.kind == IDENTIFIER and t.text in _VAR_ATTRS:
                attrs.add(_VAR_ATTRS[t.text])
            elif t.kind == IDENTIFIER and t.text in _PAREN_ATTRS and k + 1 < e and toks[k + 1].is_punct("("):
                close = self._match_forward(k + 1)
                if close is None:
                    return None
                k = close
            elif t.kind == PUNCT and t.text in ("[", "=", ",", ";", "("):
                break
            else:
                type_toks.append(t)
                type_at.append(k)
            k += 1
        if not type_toks or type_toks[-1].kind != IDENTIFIER:
            return None
        name_tok = type_toks.pop()
        type_at.pop()
        type_end = name_tok.loc
        incomplete = k + 1 < e and toks[k].is_punct("[") and toks[k + 1].is_punct("]")
        dims = ""
        if k < e and toks[k].is_punct("["):
            m = k
            while m < e and toks[m].is_punct("["):
                close = self._match_forward(m)
                if close is None:
                    return None
                if m > k:
                    dims += "[" + self._spell(toks[m + 1:close]) + "]"
                type_end = toks[close].loc
                m = close + 1
        return SharedVarDecl(name_tok.text, frozenset(attrs), storage, incomplete,
                             self._type_info(type_toks, dims), toks[b].loc, type_end,
                             self._runs(type_at))

    def _runs(self, positions):
        """Expr per run of adjacent token positions."""
        runs = []
        for k in positions:
            if runs and runs[-1][1] == k - 1:
                runs[-1][1] = k
            else:
                runs.append([k, k])
        return tuple(Expr(self.toks[a].loc, self.toks[z].loc) for a, z in runs)

    def _type_info(self, type_toks, dims=""):
        spelling = self._spell(type_toks)
        if dims:
            return TypeInfo(spelling, (), False, dims)
        words = [t.text for t in type_toks if t.text not in CV_QUALIFIERS]
        for _ in range(16):
            if len(words) == 1 and words[0] in self.typedefs:
                words = [w for w in self.typedefs[words[0]] if w not in CV_QUALIFIERS]
            else:
                break
        return TypeInfo(spelling, tuple(words), builtin_name(words) is not None)

    # -- calls --------------------------------------------------------

    def calls(self):
        toks = self.toks
        for i, t in enumerate(toks):
            if t.kind != IDENTIFIER or i + 1 >= self.n or not toks[i + 1].is_punct("("):
                continue
            if i in self.decl_positions:
                continue
            if i > 0 and toks[i - 1].kind == PUNCT and toks[i - 1].text in (".", "->", "::"):
                continue
            decl = self.resolve_callee(t.text)
            if decl is None:
                continue
            close = self._match_forward(i + 1)
            end = toks[close].loc if close is not None else t.loc
            yield CallExpr(decl, t.loc, end)


def parse(text, name="<stdin>", builtin_declarations=None):
    """Run the front-end over one primary file."""
    buffer = SourceBuffer(text, name)
    tokens = list(lex(text))
    pp = preprocess(text, tokens)
    if builtin_declarations is None:
        builtin_declarations = CUDA_DEVICE_DECLARATIONS
    matcher = _Matcher(pp.expanded, builtin_declarations)
    matcher.collect_declarations()
    nodes = list(matcher.launches()) + list(matcher.shared_decls()) + list(matcher.calls())
    nodes.sort(key=lambda node: node.begin.file_loc() if hasattr(node, "begin") else node.outer_start.file_loc())
    return TranslationUnit(buffer, tokens, pp.events, nodes, pp.controlling_macro, matcher.decls)


def describe(unit):
    """JSON-friendly summary of what the front-end found."""
    def row(obj):
        d = dataclasses.asdict(obj)
        d["kind"] = type(obj).__name__
        return d
    return {
        "source": unit.buffer.name,
        "controlling_macro": unit.controlling_macro,
        "events": [row(e) for e in unit.events],
        "nodes": [row(n) for n in unit.nodes],
    }


def _jsonable(o):
    if isinstance(o, (set, frozenset)):
        return sorted(o)
    raise TypeError(f"not JSON serializable: {type(o).__name__}")


def main():
    ap = argparse.ArgumentParser(description="CUDA front-end match dump")
    ap.add_argument("input")
    ap.add_argument("-o", "--output", default=None)
    args = ap.parse_args()
    p = pathlib.Path(args.input)
    if not p.exists(): sys.exit("input not found")
    unit = parse(p.read_text(encoding="utf-8"), str(p))
    out = pathlib.Path(args.output) if args.output else p.with_suffix(".matches.json")
    out.write_text(json.dumps(describe(unit), indent=2, default=_jsonable))
    print(f"[OK] matches written: {out}")

if __name__ == "__main__":
    main()
