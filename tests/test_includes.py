"""Tests for the include-directive policy and the runtime header injector."""

from __future__ import annotations

import pytest

from hipify.backends.hip_backend import hipify_source
from hipify.engine.action import Options
from hipify.engine.includes import HeaderFamily, HeaderState, header_family
from hipify.engine.injector import RUNTIME_INCLUDE, HeaderInjector, IfndefGuards
from hipify.engine.ledger import Ledger
from hipify.engine.statistics import Statistics
from hipify.engine.tables import Flavor
from hipify.data.cuda2hip import CUDA_INCLUDES
from hipify.frontends.source import SourceBuffer


def _hipify(text, flavor=Flavor.HIP):
    return hipify_source(text, "t.cu", Options(flavor=flavor))


def test_runtime_header_twice_keeps_first_and_drops_second() -> None:
    text = "#include <cuda_runtime.h>\n#include <cuda_runtime.h>\nint x;\n"
    result, out = _hipify(text)
    assert out == "#include <hip/hip_runtime.h>\n\nint x;\n"
    assert result.stats.counts["cuda_runtime.h"] == 2


def test_driver_and_runtime_headers_share_a_family() -> None:
    _, out = _hipify('#include "cuda.h"\n#include <cuda_runtime.h>\n')
    assert out == '#include "hip/hip_runtime.h"\n\n'


@pytest.mark.parametrize(
    "flavor, expected",
    [
        (Flavor.HIP, '#include "hipblas.h"\n'),
        (Flavor.ROC, '#include "rocblas.h"\n'),
    ],
)
def test_blas_header_keeps_quotes_and_gets_runtime(flavor: Flavor, expected: str) -> None:
    _, out = _hipify('#include "cublas_v2.h"\n', flavor)
    # the runtime header still has to be added, before the first header
    assert out == RUNTIME_INCLUDE + expected


def test_header_with_empty_target_is_removed() -> None:
    _, out = _hipify("#include <cuda_runtime.h>\n#include <device_launch_parameters.h>\nint x;\n")
    assert out == "#include <hip/hip_runtime.h>\n\nint x;\n"


def test_rand_kernel_variant_included_once() -> None:
    _, out = _hipify("#include <cuda_runtime.h>\n#include <curand_kernel.h>\n#include <curand_normal.h>\n")
    assert out == "#include <hip/hip_runtime.h>\n#include <hiprand_kernel.h>\n\n"


def test_unsupported_header_warns_and_stays() -> None:
    text = "#include <cuda_runtime.h>\n#include <cufftXt.h>\n"
    result, out = _hipify(text)
    assert out == "#include <hip/hip_runtime.h>\n#include <cufftXt.h>\n"
    (d,) = result.diagnostics
    assert d.message == "Unsupported CUDA header."
    assert (d.line, d.column) == (2, 10)


def test_unknown_headers_untouched() -> None:
    _, out = _hipify("#include <stdio.h>\n#include <cuda_runtime.h>\n")
    assert out == "#include <stdio.h>\n#include <hip/hip_runtime.h>\n"


def test_headers_in_inactive_code_are_ignored() -> None:
    _, out = _hipify("#ifdef NEVER\n#include <cuda_runtime.h>\n#endif\nint x;\n")
    assert out.startswith(RUNTIME_INCLUDE + "#ifdef NEVER\n#include <cuda_runtime.h>\n")


def test_header_family() -> None:
    assert header_family(CUDA_INCLUDES["cuda.h"]) is HeaderFamily.RUNTIME
    assert header_family(CUDA_INCLUDES["cublas_v2.h"]) is HeaderFamily.BLAS
    assert header_family(CUDA_INCLUDES["curand_kernel.h"]) is HeaderFamily.RAND_KERNEL
    assert header_family(CUDA_INCLUDES["curand.h"]) is HeaderFamily.RAND


# -- injector ----------------------------------------------------------


def test_no_headers_no_guard_inserts_at_start() -> None:
    result, out = _hipify("int x;\n")
    assert out == RUNTIME_INCLUDE + "int x;\n"
    assert result.replacements[0].offset == 0
    assert result.replacements[0].length == 0


def test_pragma_once_placement() -> None:
    _, out = _hipify("#pragma once\nint x;\n")
    assert out == "#pragma once" + RUNTIME_INCLUDE + "\nint x;\n"


def test_header_guard_placement() -> None:
    _, out = _hipify("#ifndef K_H\n#define K_H\nint x;\n#endif\n")
    assert out == "#ifndef K_H" + RUNTIME_INCLUDE + "\n#define K_H\nint x;\n#endif\n"


def test_ifndef_that_is_not_a_guard_uses_first_header() -> None:
    text = "#ifndef N\n#define N 4\n#endif\n#include <stdio.h>\nint x;\n"
    _, out = _hipify(text)
    assert out == "#ifndef N\n#define N 4\n#endif\n" + RUNTIME_INCLUDE + "#include <stdio.h>\nint x;\n"


def _injector():
    state = HeaderState()
    guards = IfndefGuards()
    buffer = SourceBuffer("x" * 64)
    return state, guards, HeaderInjector(state, guards, Ledger(buffer, Statistics()))


def test_placement_prefers_earlier_of_pragma_and_guard() -> None:
    state, guards, injector = _injector()
    state.pragma_once = 30
    guards.record("G", 12)
    guards.record("G", 50)
    state.first_header = 5
    assert injector.placement("G") == 12
    assert injector.placement("OTHER") == 30
    state.pragma_once = None
    assert injector.placement(None) == 5


def test_no_injection_once_runtime_family_is_present() -> None:
    state, _, injector = _injector()
    state.claim(HeaderFamily.RUNTIME)
    assert injector.placement() is None
    assert injector.inject() is None
    assert len(injector.ledger) == 0


def test_inject_claims_runtime() -> None:
    state, _, injector = _injector()
    rep = injector.inject()
    assert (rep.offset, rep.length, rep.text) == (0, 0, RUNTIME_INCLUDE)
    assert state[HeaderFamily.RUNTIME]
    assert injector.inject() is None
