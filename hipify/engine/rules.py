# Syntax rules over front-end matches: kernel launches, dynamic shared arrays, device calls
import logging

from hipify.frontends.ast_nodes import CallExpr, Expr, KernelLaunch, SharedVarDecl
from hipify.engine.ledger import Replacement
from hipify.engine.ranges import Mode
from hipify.engine.tables import ConvType, Flavor, RenameEntry

logger = logging.getLogger(__name__)

LAUNCH_MACRO = "hipLaunchKernelGGL"
SHARED_MACRO = "HIP_DYNAMIC_SHARED"

# counted like table entries so they show up in the per-name statistics
LAUNCH_ENTRY = RenameEntry(LAUNCH_MACRO, type=ConvType.EXECUTION)
SHARED_ENTRY = RenameEntry(SHARED_MACRO, type=ConvType.MEMORY)
LAUNCH_COUNTER = "<<<>>>"
SHARED_COUNTER = "extern __shared__"


class SyntaxRules:
    def __init__(self, renamer, device_table, flavor=Flavor.HIP):
        self.renamer = renamer
        self.device_table = device_table
        self.flavor = flavor

    @property
    def ledger(self):
        return self.renamer.ledger

    @property
    def resolver(self):
        return self.renamer.resolver

    @property
    def stats(self):
        return self.renamer.stats

    def run(self, node):
        """Offer node to each rule in turn. True once a rule claims it."""
        for rule in (self.kernel_launch, self.shared_incomplete_array, self.device_call):
            if rule(node):
                return True
        return False

    def _read(self, expr):
        return self.resolver.read_text(expr.begin, expr.end, self.ledger)

    def _write_range(self, begin, end):
        resolved = self.resolver.resolve(begin, end, Mode.WRITE)
        if resolved is None:
            return None
        return self.resolver.char_range(*resolved)

    def kernel_launch(self, node):
        if not isinstance(node, KernelLaunch):
            return False
        if node.callee is None or node.callee_decl is None or len(node.config) != 4:
            return False
        grid, block, shared, stream = node.config
        if grid.defaulted or block.defaulted or grid.expr is None or block.expr is None:
            return False
        where = self._write_range(node.begin, node.end)
        if where is None:
            logger.debug("launch at %d declined: no writable range", node.begin.file_loc())
            return False
        offset, length = where
        # a launch spelled inside a macro body is matched once per expansion
        if self.ledger.find(offset, length) is not None:
            return True

        callee = self._read(node.callee)
        if callee is None:
            return False
        if node.is_template_instantiation:
            callee = f"({callee})"
        parts = [callee]
        for arg, wrap in ((grid, "dim3"), (block, "dim3"), (shared, None), (stream, None)):
            if arg.defaulted or arg.expr is None:
                parts.append("0")
                continue
            text = self._read(arg.expr)
            if text is None:
                return False
            parts.append(f"{wrap}({text})" if wrap else text)
        if node.args:
            # first argument through last, copied as one range
            text = self._read(Expr(node.args[0].begin, node.args[-1].end))
            if text is None:
                return False
            parts.append(text)

        rep = Replacement(offset, length, f"{LAUNCH_MACRO}({', '.join(parts)})")
        if self.ledger.submit(rep, node.begin, absorb=True):
            self.stats.increment(LAUNCH_ENTRY, LAUNCH_COUNTER, self.flavor)
        return True

    def shared_incomplete_array(self, node):
        if not isinstance(node, SharedVarDecl):
            return False
        if not (node.incomplete_array and node.has_external_linkage and "shared" in node.attrs):
            return False
        where = self._write_range(node.outer_start, node.type_end)
        if where is None:
            return False
        offset, length = where
        if self.ledger.find(offset, length) is not None:
            return True
        element = node.element_type
        if element.is_builtin:
            type_name = element.printed()
        elif node.type_ranges:
            texts = [self._read(r) for r in node.type_ranges]
            type_name = "" if None in texts else " ".join(texts)
            if type_name and element.dims:
                type_name = f"{type_name} {element.dims}"
        else:
            type_name = ""
        if not type_name:
            self.renamer.diagnostics.warn(
                node.outer_start.file_loc(),
                f"Cannot determine element type of dynamic shared array '{node.name}'; "
                "declaration left unchanged.", node.name)
            return False
        rep = Replacement(offset, length, f"{SHARED_MACRO}({type_name}, {node.name})")
        if self.ledger.submit(rep, node.outer_start, absorb=True):
            self.stats.increment(SHARED_ENTRY, SHARED_COUNTER, self.flavor)
        return True

    def device_call(self, node):
        if not isinstance(node, CallExpr) or not node.callee.is_device_side:
            return False
        name = node.callee.name
        if name not in self.device_table:
            return False
        self.renamer.find_and_replace(name, node.begin, self.device_table)
        return True
