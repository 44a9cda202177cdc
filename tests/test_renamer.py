"""Tests for the identifier/string renamer and the raw token scanner."""

from __future__ import annotations

import pytest

from hipify.data.cuda2hip import CUDA_RENAMES
from hipify.engine.ledger import Ledger, Replacement
from hipify.engine.ranges import RangeResolver
from hipify.engine.renamer import DiagnosticSink, Renamer
from hipify.engine.scanner import RawTokenScanner, string_content
from hipify.engine.statistics import Statistics
from hipify.engine.tables import ApiType, ConvType, Flavor, RenameEntry, RenameTable, SupportDegree
from hipify.frontends.raw_lexer import lex
from hipify.frontends.source import SourceBuffer, SourceLocation

TOY = RenameTable({
    "cuFoo": RenameEntry("hipFoo", type=ConvType.MEMORY),
    "cuUnsupportedThing": RenameEntry("hipThing", support=SupportDegree.UNSUPPORTED),
    "cuSame": RenameEntry("cuSame"),
})


class _Run:
    def __init__(self, text, table=CUDA_RENAMES, flavor=Flavor.HIP):
        self.buffer = SourceBuffer(text, "t.cu")
        self.stats = Statistics("t.cu")
        self.ledger = Ledger(self.buffer, self.stats)
        self.diagnostics = DiagnosticSink(self.buffer)
        self.renamer = Renamer(self.ledger, self.stats, self.diagnostics, RangeResolver(self.buffer), flavor)
        RawTokenScanner(self.renamer, table).scan(lex(text))

    @property
    def output(self):
        return self.ledger.apply()


def test_string_with_supported_and_unsupported_names() -> None:
    text = 'const char *s = "cuFoo bar cuUnsupportedThing";\n'
    run = _Run(text, TOY)
    assert run.ledger.replacements == [Replacement(text.index("cuFoo"), 5, "hipFoo")]
    assert len(run.diagnostics) == 1
    d = run.diagnostics[0]
    assert d.name == "cuUnsupportedThing"
    assert d.message == "CUDA identifier is unsupported in HIP."
    assert d.offset == text.index("cuUnsupportedThing")
    assert run.stats.by_type["literal"] == 2
    assert run.stats.unsupported["cuUnsupportedThing"] == 1


def test_string_candidate_runs_to_whitespace() -> None:
    run = _Run('printf("cuFoo(x) cuFoo");\n', TOY)
    # "cuFoo(x)" is not a table entry; only the second candidate matches
    assert run.output == 'printf("cuFoo(x) hipFoo");\n'


def test_identifiers_renamed_everywhere_including_inactive_code() -> None:
    text = "#if 0\ncudaFree(p);\n#endif\ncudaMalloc(&p, n); // cudaMemcpy in a comment\n"
    run = _Run(text)
    assert run.output == "#if 0\nhipFree(p);\n#endif\nhipMalloc(&p, n); // cudaMemcpy in a comment\n"
    assert run.stats.counts == {"cudaFree": 1, "cudaMalloc": 1}


def test_header_names_are_not_scanned() -> None:
    run = _Run("#include <cuda_runtime.h>\n#include \"cuFoo\"\n", TOY)
    assert len(run.ledger) == 0


def test_target_equal_to_name_counts_without_edit() -> None:
    run = _Run("cuSame();\n", TOY)
    assert len(run.ledger) == 0
    assert run.stats.counts["cuSame"] == 1


def test_unsupported_identifier_warns_at_location() -> None:
    text = "x;\n  cudaMemAdvise(p, n, a, d);\n"
    run = _Run(text)
    assert len(run.ledger) == 0
    (d,) = run.diagnostics
    assert (d.line, d.column) == (2, 3)
    assert str(d) == "t.cu:2:3: warning: CUDA identifier is unsupported in HIP."


@pytest.mark.parametrize(
    "name, flavor, expected, warning",
    [
        ("cublasSgemm", Flavor.HIP, "hipblasSgemm", None),
        ("cublasSgemm", Flavor.ROC, "rocblas_sgemm", None),
        ("cudaMalloc", Flavor.ROC, "hipMalloc", None),
        ("cublasSgelsBatched", Flavor.HIP, "hipblasSgelsBatched", None),
        ("cublasSgelsBatched", Flavor.ROC, "cublasSgelsBatched", "CUDA identifier is unsupported in ROC."),
        ("cudaMemAdvise", Flavor.ROC, "cudaMemAdvise", "CUDA identifier is unsupported in HIP."),
        ("cudaConfigureCall", Flavor.HIP, "cudaConfigureCall", "CUDA identifier is unsupported in HIP."),
    ],
)
def test_flavor_selection(name: str, flavor: Flavor, expected: str, warning) -> None:
    run = _Run(name + "();\n", flavor=flavor)
    assert run.output == expected + "();\n"
    assert [d.message for d in run.diagnostics] == ([warning] if warning else [])


def test_macro_body_use_rewrites_definition_once() -> None:
    text = "#define ALLOC cudaMalloc\n"
    run = _Run(text)
    loc = SourceLocation(text.index("cudaMalloc"), expansion=(40, 40))
    # a second sighting through an expansion lands on the same spelling
    assert run.renamer.find_and_replace("cudaMalloc", loc, CUDA_RENAMES) is False
    assert run.output == "#define ALLOC hipMalloc\n"
    assert run.stats.counts["cudaMalloc"] == 2


def test_api_counted_per_entry() -> None:
    run = _Run("cublasCreate(&h); cudaMalloc(&p, 4);\n")
    assert run.stats.by_api[ApiType.BLAS.value] == 1
    assert run.stats.by_api[ApiType.RUNTIME.value] == 1


@pytest.mark.parametrize(
    "token, content",
    [
        ('"abc"', "abc"),
        ('u8"abc"', "abc"),
        ('LR"x(a "b")x"', 'a "b"'),
        ('"abc', "abc"),
    ],
)
def test_string_content(token: str, content: str) -> None:
    lo, hi = string_content(token)
    assert token[lo:hi] == content
