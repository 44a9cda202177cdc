# Replacement ledger: non-overlapping edits over the primary file
import logging
from bisect import bisect_right
from dataclasses import dataclass

from hipify.engine.errors import ConflictError, OutOfRangeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Replacement:
    offset: int
    length: int
    text: str

    @property
    def end(self):
        return self.offset + self.length


def _overlaps(a, b):
    if a.length and b.length:
        return a.offset < b.end and b.offset < a.end
    if not a.length and not b.length:
        return a.offset == b.offset
    ins, rng = (a, b) if not a.length else (b, a)
    return rng.offset < ins.offset < rng.end


def _contains(outer, inner):
    if not outer.length:
        return False
    if inner.length:
        return outer.offset <= inner.offset and inner.end <= outer.end
    return outer.offset < inner.offset < outer.end


class Ledger:
    """Accepted edits for one primary file, kept sorted and disjoint."""

    def __init__(self, buffer, stats):
        self.buffer = buffer
        self.stats = stats
        self._reps = []
        self._starts = []

    def __len__(self):
        return len(self._reps)

    def __iter__(self):
        return iter(list(self._reps))

    @property
    def replacements(self):
        return list(self._reps)

    def _near(self, rep):
        """Accepted edits that might touch rep's range."""
        i = bisect_right(self._starts, rep.end) - 1
        while i >= 0:
            r = self._reps[i]
            if r.end < rep.offset:
                break
            yield r
            i -= 1

    def find(self, offset, length):
        """The accepted edit covering exactly [offset, offset + length), if any."""
        for r in self._near(Replacement(offset, length, "")):
            if r.offset == offset and r.length == length:
                return r
        return None

    def submit(self, rep, location=None, absorb=False):
        """Accept rep or raise ConflictError. Returns False for an exact duplicate.

        With absorb, accepted edits lying entirely inside rep are dropped in its
        favour; the caller must have built rep.text from render().
        """
        if rep.offset < 0 or rep.end > len(self.buffer):
            raise OutOfRangeError(f"replacement [{rep.offset}, {rep.end}) outside {self.buffer.name}")
        absorbed = []
        for r in self._near(rep):
            if r == rep:
                return False
            if not _overlaps(rep, r):
                continue
            if absorb and _contains(rep, r):
                absorbed.append(r)
                continue
            raise ConflictError(rep, r)
        for r in absorbed:
            i = self._reps.index(r)
            del self._reps[i]
            del self._starts[i]
        i = bisect_right(self._reps, rep)
        self._reps.insert(i, rep)
        self._starts.insert(i, rep.offset)

        changed = self.buffer.byte_length(rep.offset, rep.end)
        changed -= sum(self.buffer.byte_length(r.offset, r.end) for r in absorbed)
        self.stats.add_bytes_changed(changed)
        at = location.file_loc() if location is not None else rep.offset
        self.stats.line_touched(self.buffer.line_of(at), self.buffer.name)
        logger.debug("%s: [%d, %d) -> %r", self.buffer.name, rep.offset, rep.end, rep.text)
        return True

    def render(self, start, end):
        """buffer[start:end] with the accepted edits inside that span applied."""
        out = []
        pos = start
        for r in self._reps:
            if r.offset < start or r.end > end:
                continue
            if not r.length and not start < r.offset < end:
                continue
            if r.offset < pos:
                continue
            out.append(self.buffer.text[pos:r.offset])
            out.append(r.text)
            pos = r.end
        out.append(self.buffer.text[pos:end])
        return "".join(out)

    def apply(self):
        """The whole edited file."""
        out = []
        pos = 0
        for r in self._reps:
            out.append(self.buffer.text[pos:r.offset])
            out.append(r.text)
            pos = r.end
        out.append(self.buffer.text[pos:])
        return "".join(out)
