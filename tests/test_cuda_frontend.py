"""Tests for the pattern-matching CUDA front-end."""

from __future__ import annotations

import json

import pytest

from hipify.frontends import cuda_frontend
from hipify.frontends.ast_nodes import CallExpr, KernelLaunch, SharedVarDecl, builtin_name
from hipify.frontends.cuda_frontend import parse


def _nodes(src, kind):
    return [n for n in parse(src, "t.cu").nodes if isinstance(n, kind)]


def test_launch_with_two_config_arguments() -> None:
    src = "__global__ void foo(int *a, int *b) {}\nvoid run(int *a, int *b) { foo<<<grid, block>>>(a, b); }\n"
    (launch,) = _nodes(src, KernelLaunch)
    assert launch.callee_decl.name == "foo"
    assert launch.callee_decl.attrs == frozenset({"global"})
    assert [c.defaulted for c in launch.config] == [False, False, True, True]
    assert len(launch.args) == 2
    assert src[launch.begin.offset:launch.end.offset + 1] == "foo<<<grid, block>>>(a, b)"
    assert not launch.is_template_instantiation


def test_launch_config_split_on_top_level_commas() -> None:
    src = "void f() { k<<<dim3(1, 2), dim3(3, 4), 0, s>>>(g(1, 2)); }\n"
    (launch,) = _nodes(src, KernelLaunch)
    assert [c.defaulted for c in launch.config] == [False] * 4
    assert len(launch.args) == 1
    grid = launch.config[0].expr
    assert src[grid.begin.offset:grid.end.offset + 1] == "dim3(1, 2)"


def test_template_launch() -> None:
    src = "template <typename T> __global__ void k(T *p) {}\nvoid h(float *p) { k<float><<<1, 2>>>(p); }\n"
    (launch,) = _nodes(src, KernelLaunch)
    assert launch.template_args
    assert launch.is_template_instantiation
    assert src[launch.callee.begin.offset:launch.callee.end.offset + 1] == "k<float>"


def test_qualified_callee() -> None:
    src = "void h() { ns::k<<<1, 1>>>(); }\n"
    (launch,) = _nodes(src, KernelLaunch)
    assert launch.callee_decl.name == "k"
    assert src[launch.callee.begin.offset:launch.callee.end.offset + 1] == "ns::k"
    assert launch.args == ()


@pytest.mark.parametrize(
    "decl, printed",
    [
        ("extern __shared__ unsigned sdata[];", "unsigned int"),
        ("extern __shared__ float sdata[];", "float"),
        ("extern __shared__ uint sdata[];", "unsigned int"),
        ("extern __shared__ long long int sdata[];", "long long"),
        ("extern __shared__ __align__(16) double sdata[];", "double"),
    ],
)
def test_incomplete_shared_builtin_types(decl: str, printed: str) -> None:
    (node,) = _nodes("__global__ void k() {\n  " + decl + "\n}\n", SharedVarDecl)
    assert node.incomplete_array
    assert node.has_external_linkage
    assert "shared" in node.attrs
    assert node.name == "sdata"
    assert node.element_type.printed() == printed


def test_typedef_collapses_to_builtin() -> None:
    src = "typedef unsigned short u16;\n__global__ void k() { extern __shared__ u16 buf[]; }\n"
    (node,) = _nodes(src, SharedVarDecl)
    assert node.element_type.is_builtin
    assert node.element_type.printed() == "unsigned short"


def test_user_type_and_array_element() -> None:
    src = "__global__ void k() { extern __shared__ Pair a[]; extern __shared__ float b[][4]; }\n"
    a, b = _nodes(src, SharedVarDecl)
    assert not a.element_type.is_builtin
    assert a.element_type.printed() == "Pair"
    assert b.element_type.dims == "[4]"
    assert b.element_type.printed() == "float [4]"
    assert src[b.outer_start.offset:b.type_end.offset + 1] == "extern __shared__ float b[][4]"


def test_sized_shared_array_is_not_incomplete() -> None:
    (node,) = _nodes("__global__ void k() { __shared__ float tile[16]; }\n", SharedVarDecl)
    assert not node.incomplete_array
    assert not node.has_external_linkage


def test_calls_resolve_file_and_builtin_declarations() -> None:
    src = (
        "__device__ float sq(float x) { return x * x; }\n"
        "__global__ void k(float *p) { p[0] = sq(p[0]) + sqrtf(p[1]); other(p); obj.sq(1); }\n"
    )
    calls = {c.callee.name: c for c in _nodes(src, CallExpr)}
    assert set(calls) == {"sq", "sqrtf"}
    assert calls["sq"].callee.is_device_side
    assert not calls["sqrtf"].callee.is_device_side


def test_nodes_are_in_source_order() -> None:
    src = (
        "__global__ void k(int *p) { extern __shared__ int s[]; __syncthreads(); }\n"
        "void h(int *p) { k<<<1, 1>>>(p); }\n"
    )
    kinds = [type(n).__name__ for n in parse(src).nodes]
    assert kinds == ["SharedVarDecl", "CallExpr", "KernelLaunch"]


@pytest.mark.parametrize(
    "words, name",
    [
        (["unsigned"], "unsigned int"),
        (["long", "unsigned", "int"], "unsigned long"),
        (["signed", "char"], "signed char"),
        (["const", "short", "int"], "short"),
        (["long", "double"], "long double"),
        (["signed", "unsigned"], None),
        (["Foo"], None),
    ],
)
def test_builtin_name(words: list, name) -> None:
    assert builtin_name(words) == name


def test_main_dumps_matches(tmp_path, monkeypatch, capsys) -> None:
    src = tmp_path / "k.cu"
    src.write_text("__global__ void k() {}\nvoid h() { k<<<1, 1>>>(); }\n")
    monkeypatch.setattr("sys.argv", ["cuda_frontend", str(src)])
    cuda_frontend.main()
    out = tmp_path / "k.matches.json"
    data = json.loads(out.read_text())
    assert [n["kind"] for n in data["nodes"]] == ["KernelLaunch"]
    assert "[OK] matches written" in capsys.readouterr().out
