"""Tests for the raw C/C++/CUDA lexer."""

from __future__ import annotations

import pytest

from hipify.frontends.raw_lexer import CHAR, HEADER_NAME, IDENTIFIER, NUMBER, PUNCT, STRING, lex, lex_one


def _texts(src):
    return [t.text for t in lex(src)]


def test_launch_brackets_are_single_punctuators() -> None:
    assert _texts("a<<<1, 2>>>(x);") == ["a", "<<<", "1", ",", "2", ">>>", "(", "x", ")", ";"]


def test_template_close_before_launch_bracket() -> None:
    assert _texts("k<float><<<1, 1>>>()")[:6] == ["k", "<", "float", ">", "<<<", "1"]


@pytest.mark.parametrize(
    "src, name",
    [
        ("#include <cuda.h>\n", "<cuda.h>"),
        ('#include "cublas_v2.h"\n', '"cublas_v2.h"'),
        ("  #  include_next <curand.h>\n", "<curand.h>"),
    ],
)
def test_header_name_after_include(src: str, name: str) -> None:
    toks = list(lex(src))
    assert toks[0].is_punct("#") and toks[0].bol
    assert toks[-1].kind == HEADER_NAME
    assert toks[-1].text == name
    assert src[toks[-1].start:toks[-1].end] == name


def test_less_than_outside_include_is_punctuation() -> None:
    toks = list(lex("if (a <b> c) {}"))
    assert all(t.kind != HEADER_NAME for t in toks)


def test_comments_are_skipped_and_bol_tracked() -> None:
    toks = list(lex("int /* c */ x; // y\nz"))
    assert [t.text for t in toks] == ["int", "x", ";", "z"]
    assert toks[0].bol and not toks[1].bol and toks[3].bol


def test_line_splice_continues_logical_line() -> None:
    toks = list(lex("#define A \\\n  1\nB"))
    one = next(t for t in toks if t.text == "1")
    b = next(t for t in toks if t.text == "B")
    assert not one.bol
    assert b.bol


def test_string_prefixes_and_raw_strings() -> None:
    toks = list(lex('u8"cuda" R"d(cu "x")d" L\'c\''))
    assert [t.kind for t in toks] == [STRING, STRING, CHAR]
    assert toks[0].text == 'u8"cuda"'
    assert toks[1].text == 'R"d(cu "x")d"'


def test_identifiers_numbers_and_dollar() -> None:
    toks = list(lex("x$1 = 0x1Fu + 1.5e-3f;"))
    assert toks[0].kind == IDENTIFIER and toks[0].text == "x$1"
    assert [t.text for t in toks if t.kind == NUMBER] == ["0x1Fu", "1.5e-3f"]
    assert toks[-1].kind == PUNCT


def test_unterminated_string_stops_at_end_of_line() -> None:
    toks = list(lex('"abc\nnext'))
    assert toks[0].text == '"abc'
    assert toks[1].text == "next"


def test_lex_one_skips_leading_space() -> None:
    tok = lex_one("foo bar", 3)
    assert tok.text == "bar"
    assert tok.start == 4
    assert lex_one("x   ", 1) is None
