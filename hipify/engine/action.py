# One primary file through the rewrite engine: scan, directives, rules, injection
import logging
from dataclasses import dataclass, field
from typing import Optional

from hipify.data.cuda2hip import CUDA_DEVICE_FUNCTIONS, CUDA_INCLUDES, CUDA_RENAMES
from hipify.frontends.preprocessor import IfndefDirective, IncludeDirective, PragmaDirective
from hipify.engine.includes import HeaderState, IncludePolicy
from hipify.engine.injector import HeaderInjector, IfndefGuards
from hipify.engine.ledger import Ledger
from hipify.engine.ranges import RangeResolver
from hipify.engine.renamer import DiagnosticSink, Renamer
from hipify.engine.rules import SyntaxRules
from hipify.engine.scanner import RawTokenScanner
from hipify.engine.statistics import Statistics
from hipify.engine.tables import Flavor, RenameTable

logger = logging.getLogger(__name__)


@dataclass
class Options:
    flavor: Flavor = Flavor.HIP
    extra_renames: Optional[str] = None     # JSON file merged into the identifier table
    print_stats: bool = False
    stats_csv: Optional[str] = None
    jobs: int = 1

    def tables(self):
        """(identifiers, includes, device functions) for this run."""
        renames = CUDA_RENAMES
        if self.extra_renames:
            renames = renames.merged(RenameTable.from_json(self.extra_renames))
        return renames, CUDA_INCLUDES, CUDA_DEVICE_FUNCTIONS


@dataclass
class FileResult:
    source: str
    replacements: list = field(default_factory=list)
    diagnostics: list = field(default_factory=list)
    stats: Optional[Statistics] = None
    error: Optional[Exception] = None

    @property
    def ok(self):
        return self.error is None


class HipifyAction:
    """Runs the engine over one parsed translation unit."""

    def __init__(self, renames=CUDA_RENAMES, includes=CUDA_INCLUDES,
                 device_functions=CUDA_DEVICE_FUNCTIONS, flavor=Flavor.HIP):
        self.renames = renames
        self.includes = includes
        self.device_functions = device_functions
        self.flavor = flavor
        self.state = HeaderState()
        self.guards = IfndefGuards()

    @classmethod
    def from_options(cls, options):
        renames, includes, device_functions = options.tables()
        return cls(renames, includes, device_functions, options.flavor)

    def run(self, unit):
        """Rewrite unit. Raises ConflictError if two edits collide."""
        buffer = unit.buffer
        self.state.reset()
        self.guards.clear()
        stats = Statistics(buffer.name)
        ledger = Ledger(buffer, stats)
        diagnostics = DiagnosticSink(buffer)
        renamer = Renamer(ledger, stats, diagnostics, RangeResolver(buffer), self.flavor)

        RawTokenScanner(renamer, self.renames).scan(unit.tokens)

        policy = IncludePolicy(self.includes, self.state, ledger, stats, diagnostics, self.flavor)
        for event in unit.events:
            if isinstance(event, IncludeDirective):
                policy.on_include(event)
            elif isinstance(event, PragmaDirective):
                if event.name == "once" and self.state.pragma_once is None:
                    self.state.pragma_once = event.name_end
            elif isinstance(event, IfndefDirective):
                self.guards.record(event.macro, event.macro_end)

        rules = SyntaxRules(renamer, self.device_functions, self.flavor)
        claimed = sum(1 for node in unit.nodes if rules.run(node))
        logger.debug("%s: %d of %d matches rewritten", buffer.name, claimed, len(unit.nodes))

        HeaderInjector(self.state, self.guards, ledger).inject(unit.controlling_macro)
        stats.add_file(buffer.byte_size, buffer.line_count)
        return FileResult(buffer.name, ledger.replacements, list(diagnostics), stats)
