# Rename tables: immutable name -> RenameEntry lookups
import enum, json, pathlib
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType


class ConvType(enum.Enum):
    VERSION = "version"
    INIT = "init"
    DEVICE = "device"
    MEMORY = "memory"
    ADDRESSING = "addressing"
    STREAM = "stream"
    EVENT = "event"
    EXECUTION = "execution"
    ERROR = "error"
    TEXTURE = "texture"
    THREAD = "thread"
    MATH_FUNC = "math_func"
    DEVICE_FUNC = "device_func"
    TYPE = "type"
    LITERAL = "literal"
    NUMERIC_LITERAL = "numeric_literal"
    INCLUDE = "include"
    INCLUDE_MAIN = "include_cuda_main_header"
    OTHER = "other"


class ApiType(enum.Enum):
    DRIVER = "CUDA Driver API"
    RUNTIME = "CUDA RT API"
    BLAS = "CUBLAS API"
    RAND = "CURAND API"
    DNN = "CUDNN API"
    FFT = "CUFFT API"
    SPARSE = "CUSPARSE API"
    COMPLEX = "cuComplex API"


class SupportDegree(enum.Enum):
    FULL = "full"
    HIP_UNSUPPORTED = "hip_unsupported"
    ROC_UNSUPPORTED = "roc_unsupported"
    UNSUPPORTED = "unsupported"


class Flavor(enum.Enum):
    HIP = "HIP"
    ROC = "ROC"


@dataclass(frozen=True)
class RenameEntry:
    hip_name: str
    roc_name: str = ""
    type: ConvType = ConvType.OTHER
    api: ApiType = ApiType.RUNTIME
    support: SupportDegree = SupportDegree.FULL

    def to_roc(self, flavor):
        return flavor is Flavor.ROC and bool(self.roc_name)

    def target(self, flavor):
        return self.roc_name if self.to_roc(flavor) else self.hip_name

    def target_flavor(self, flavor):
        return Flavor.ROC if self.to_roc(flavor) else Flavor.HIP

    def is_unsupported(self, flavor):
        if self.support is SupportDegree.UNSUPPORTED:
            return True
        if self.to_roc(flavor):
            return self.support is SupportDegree.ROC_UNSUPPORTED
        return self.support is SupportDegree.HIP_UNSUPPORTED


class RenameTable(Mapping):
    """Read-only name -> RenameEntry map."""

    def __init__(self, entries=None, name="renames"):
        self.name = name
        self._entries = MappingProxyType(dict(entries or {}))

    def __getitem__(self, key):
        return self._entries[key]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return f"RenameTable({self.name!r}, {len(self)} entries)"

    def merged(self, other):
        combined = dict(self._entries)
        combined.update(other)
        return RenameTable(combined, self.name)

    @classmethod
    def from_json(cls, path, name=None):
        """Load a table from JSON: {"cudaFoo": {"hip": "hipFoo", "roc": "", "type": "memory",
        "api": "CUDA RT API", "support": "full"}, ...}. A bare string value is the hip name."""
        p = pathlib.Path(path)
        raw = json.loads(p.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"{p}: rename table must be a JSON object")
        entries = {}
        for cuda_name, value in raw.items():
            if isinstance(value, str):
                value = {"hip": value}
            entries[cuda_name] = RenameEntry(
                hip_name=value.get("hip", ""),
                roc_name=value.get("roc", ""),
                type=ConvType(value.get("type", ConvType.OTHER.value)),
                api=ApiType(value.get("api", ApiType.RUNTIME.value)),
                support=SupportDegree(value.get("support", SupportDegree.FULL.value)),
            )
        return cls(entries, name or p.stem)
