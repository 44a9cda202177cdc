# Mandatory runtime header injection after the file has been processed
from hipify.engine.includes import HeaderFamily
from hipify.engine.ledger import Replacement

RUNTIME_INCLUDE = "\n#include <hip/hip_runtime.h>\n"


class IfndefGuards(dict):
    """macro name -> offset just past the name in its first #ifndef."""

    def record(self, macro, end_offset):
        self.setdefault(macro, end_offset)


class HeaderInjector:
    def __init__(self, state, guards, ledger):
        self.state = state
        self.guards = guards
        self.ledger = ledger

    def placement(self, controlling_macro=None):
        """Offset where the runtime header goes, or None if it is already there."""
        if self.state[HeaderFamily.RUNTIME]:
            return None
        candidates = []
        if self.state.pragma_once is not None:
            candidates.append(self.state.pragma_once)
        if controlling_macro is not None and controlling_macro in self.guards:
            candidates.append(self.guards[controlling_macro])
        if candidates:
            return min(candidates)
        if self.state.first_header is not None:
            return self.state.first_header
        return 0

    def inject(self, controlling_macro=None):
        at = self.placement(controlling_macro)
        if at is None:
            return None
        rep = Replacement(at, 0, RUNTIME_INCLUDE)
        self.ledger.submit(rep)
        self.state.claim(HeaderFamily.RUNTIME)
        return rep
