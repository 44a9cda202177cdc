# Include-directive policy and per-file header injection state
import enum, logging

from hipify.engine.ledger import Replacement
from hipify.engine.tables import ApiType, ConvType

logger = logging.getLogger(__name__)


class HeaderFamily(enum.Enum):
    RUNTIME = "runtime"
    BLAS = "blas"
    RAND = "rand"
    RAND_KERNEL = "rand_kernel"
    DNN = "dnn"
    FFT = "fft"
    COMPLEX = "complex"
    SPARSE = "sparse"


FAMILY_OF_API = {
    ApiType.DRIVER: HeaderFamily.RUNTIME,
    ApiType.RUNTIME: HeaderFamily.RUNTIME,
    ApiType.BLAS: HeaderFamily.BLAS,
    ApiType.RAND: HeaderFamily.RAND,
    ApiType.DNN: HeaderFamily.DNN,
    ApiType.FFT: HeaderFamily.FFT,
    ApiType.COMPLEX: HeaderFamily.COMPLEX,
    ApiType.SPARSE: HeaderFamily.SPARSE,
}

# target headers that form their own family
KERNEL_VARIANT_HEADERS = {"hiprand_kernel.h": HeaderFamily.RAND_KERNEL}


def header_family(entry):
    return KERNEL_VARIANT_HEADERS.get(entry.hip_name) or FAMILY_OF_API.get(entry.api)


class HeaderState:
    """Which family headers this file already has, and where headers start."""

    def __init__(self):
        self.reset()

    def reset(self):
        self.inserted = {family: False for family in HeaderFamily}
        self.first_header = None
        self.pragma_once = None

    def __getitem__(self, family):
        return self.inserted[family]

    def claim(self, family):
        """Mark family present. True if this is the first time."""
        if self.inserted[family]:
            return False
        self.inserted[family] = True
        return True


class IncludePolicy:
    def __init__(self, table, state, ledger, stats, diagnostics, flavor):
        self.table = table
        self.state = state
        self.ledger = ledger
        self.stats = stats
        self.diagnostics = diagnostics
        self.flavor = flavor

    def exclude(self, entry):
        """Should the directive for entry be deleted rather than rewritten?"""
        family = header_family(entry)
        if entry.type is ConvType.INCLUDE_MAIN:
            if family is None:
                return False
            return not self.state.claim(family)
        if entry.type is ConvType.INCLUDE:
            if not entry.target(self.flavor):
                return True
            if family is HeaderFamily.RAND_KERNEL:
                return not self.state.claim(family)
        return False

    def on_include(self, directive):
        if self.state.first_header is None:
            self.state.first_header = directive.hash_offset
        entry = self.table.get(directive.name)
        if entry is None:
            return None
        self.stats.increment(entry, directive.name, self.flavor)
        if entry.is_unsupported(self.flavor):
            self.diagnostics.warn(directive.filename_start, "Unsupported CUDA header.", directive.name)
            return None
        if self.exclude(entry):
            start = directive.hash_offset
            text = ""
        else:
            start = directive.filename_start
            name = entry.target(self.flavor)
            text = f"<{name}>" if directive.angled else f'"{name}"'
        rep = Replacement(start, directive.filename_end - start, text)
        self.ledger.submit(rep)
        return rep
