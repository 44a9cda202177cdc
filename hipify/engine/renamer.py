# Rename-table lookup, support decision and diagnostics
import logging
from dataclasses import dataclass

from hipify.engine.ledger import Replacement
from hipify.engine.ranges import Mode
from hipify.engine.tables import Flavor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    source: str
    line: int
    column: int
    offset: int
    message: str
    name: str = ""
    level: str = "warning"

    def __str__(self):
        return f"{self.source}:{self.line}:{self.column}: {self.level}: {self.message}"


class DiagnosticSink(list):
    """Diagnostics for one primary file, located against its buffer."""

    def __init__(self, buffer):
        super().__init__()
        self.buffer = buffer

    def warn(self, offset, message, name=""):
        d = Diagnostic(self.buffer.name, self.buffer.line_of(offset),
                       self.buffer.column_of(offset), offset, message, name)
        logger.info("%s", d)
        self.append(d)
        return d


class Renamer:
    """Look at, and possibly rewrite, one CUDA name at one location.

    Unknown names are left alone. Unsupported ones are counted and reported
    without an edit. Supported ones are counted and replaced by the target
    flavor's spelling.
    """

    def __init__(self, ledger, stats, diagnostics, resolver, flavor=Flavor.HIP):
        self.ledger = ledger
        self.stats = stats
        self.diagnostics = diagnostics
        self.resolver = resolver
        self.flavor = flavor

    def find_and_replace(self, name, loc, table, type=None):
        entry = table.get(name)
        if entry is None:
            return False
        self.stats.increment(entry, name, self.flavor, type)
        if entry.is_unsupported(self.flavor):
            where = entry.target_flavor(self.flavor).value
            self.diagnostics.warn(loc.file_loc(), f"CUDA identifier is unsupported in {where}.", name)
            return False
        target = entry.target(self.flavor)
        if target == name:
            return False
        offset, _ = self.resolver.resolve(loc, loc, Mode.WRITE)
        return self.ledger.submit(Replacement(offset, len(name), target), loc)
