# Match nodes handed from the front-end to the syntax rules
from dataclasses import dataclass
from typing import Optional, Tuple

from hipify.frontends.source import SourceLocation

CV_QUALIFIERS = ("const", "volatile", "restrict", "__restrict__")

_SINGLE_WORD_BUILTINS = frozenset([
    "void", "bool", "_Bool", "char", "wchar_t", "char8_t", "char16_t", "char32_t",
    "float", "double", "__int128", "_Float16", "__fp16", "__bf16",
])


def builtin_name(words):
    """Canonical spelling of a builtin type given its specifier words.

    Returns None when the words do not name a builtin type. Qualifiers are
    dropped, 'int' is implied where C allows it to be omitted.
    """
    ws = [w for w in words if w not in CV_QUALIFIERS]
    if not ws:
        return None
    unsigned = "unsigned" in ws
    signed = "signed" in ws
    if unsigned and signed:
        return None
    base = [w for w in ws if w not in ("signed", "unsigned")]
    longs = base.count("long")
    rest = sorted(w for w in base if w != "long")
    if rest in ([], ["int"]):
        name = {0: "int", 1: "long", 2: "long long"}.get(longs)
    elif rest in (["short"], ["int", "short"]) and not longs:
        name = "short"
    elif rest == ["char"] and not longs:
        name = "signed char" if signed else "char"
        if unsigned:
            return "unsigned char"
        return name
    elif rest == ["double"] and longs == 1 and not (signed or unsigned):
        return "long double"
    elif rest == ["__int128"] and not longs:
        name = "__int128"
    elif len(rest) == 1 and not longs and rest[0] in _SINGLE_WORD_BUILTINS and not (signed or unsigned):
        return rest[0]
    else:
        return None
    if name is None:
        return None
    return "unsigned " + name if unsigned else name


@dataclass(frozen=True)
class Expr:
    begin: SourceLocation
    end: SourceLocation     # location of the last token


@dataclass(frozen=True)
class ConfigArg:
    expr: Optional[Expr]
    defaulted: bool = False


@dataclass(frozen=True)
class FunctionDecl:
    name: str
    attrs: frozenset = frozenset()
    is_template: bool = False

    @property
    def is_device_side(self):
        return bool(self.attrs & {"device", "global"}) and "host" not in self.attrs


@dataclass(frozen=True)
class TypeInfo:
    spelling: str
    canonical: Tuple[str, ...] = ()
    is_builtin: bool = False
    dims: str = ""     # trailing array bounds of an array element type

    def printed(self):
        """Builtins print canonically (typedefs collapsed), others as written."""
        if self.is_builtin:
            return builtin_name(self.canonical) or ""
        if not self.spelling:
            return ""
        return f"{self.spelling} {self.dims}" if self.dims else self.spelling


@dataclass(frozen=True)
class KernelLaunch:
    begin: SourceLocation
    end: SourceLocation
    callee: Optional[Expr]
    callee_decl: Optional[FunctionDecl]
    template_args: bool
    config: Tuple[ConfigArg, ...]
    args: Tuple[Expr, ...]

    @property
    def is_template_instantiation(self):
        return self.template_args or bool(self.callee_decl and self.callee_decl.is_template)


@dataclass(frozen=True)
class SharedVarDecl:
    name: str
    attrs: frozenset
    storage: str
    incomplete_array: bool
    element_type: TypeInfo
    outer_start: SourceLocation
    type_end: SourceLocation
    type_ranges: Tuple[Expr, ...] = ()   # runs of tokens spelling the element type

    @property
    def has_external_linkage(self):
        return self.storage == "extern"


@dataclass(frozen=True)
class CallExpr:
    callee: FunctionDecl
    begin: SourceLocation
    end: SourceLocation
