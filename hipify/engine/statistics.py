# Conversion statistics (usage counts, bytes changed, lines touched)
import threading, time
from collections import Counter

from hipify.engine.tables import Flavor


class Statistics:
    """Additive counters for one file or, after merging, a whole run."""

    def __init__(self, name="GLOBAL"):
        self.name = name
        self.counts = Counter()        # cuda name -> references
        self.by_type = Counter()       # ConvType.value -> references
        self.by_api = Counter()        # ApiType.value -> references
        self.unsupported = Counter()   # cuda name -> unconverted references
        self.bytes_changed = 0
        self.lines_touched = set()     # (source, line)
        self.total_bytes = 0
        self.total_lines = 0
        self.files = 0
        self.failed = 0
        self.started = time.monotonic()
        self._lock = threading.Lock()

    def increment(self, entry, name, flavor=Flavor.HIP, type=None):
        type = type or entry.type
        with self._lock:
            if entry.is_unsupported(flavor):
                self.unsupported[name] += 1
            else:
                self.counts[name] += 1
            self.by_type[type.value] += 1
            self.by_api[entry.api.value] += 1

    def line_touched(self, line, source=None):
        with self._lock:
            self.lines_touched.add((source or self.name, line))

    def add_bytes_changed(self, n):
        with self._lock:
            self.bytes_changed += n

    def add_file(self, total_bytes, total_lines):
        with self._lock:
            self.files += 1
            self.total_bytes += total_bytes
            self.total_lines += total_lines

    def merge(self, other):
        """Fold another accumulator in. Safe to call from worker threads."""
        with self._lock:
            self.counts.update(other.counts)
            self.by_type.update(other.by_type)
            self.by_api.update(other.by_api)
            self.unsupported.update(other.unsupported)
            self.bytes_changed += other.bytes_changed
            self.lines_touched |= other.lines_touched
            self.total_bytes += other.total_bytes
            self.total_lines += other.total_lines
            self.files += other.files
            self.failed += other.failed

    @property
    def converted_refs(self):
        return sum(self.counts.values())

    @property
    def unconverted_refs(self):
        return sum(self.unsupported.values())

    @property
    def elapsed(self):
        return time.monotonic() - self.started
