# Exceptions raised by the rewrite engine


class HipifyError(Exception):
    """Base class for hipify failures."""


class ConflictError(HipifyError):
    """Two edits claim overlapping source ranges."""

    def __init__(self, new, existing):
        self.new = new
        self.existing = existing
        super().__init__(
            f"replacement [{new.offset}, {new.end}) -> {new.text!r} overlaps "
            f"[{existing.offset}, {existing.end}) -> {existing.text!r}")


class FrontendError(HipifyError):
    """The input could not be read or lexed."""


class OutOfRangeError(HipifyError, ValueError):
    """An edit reaches outside the primary file."""
