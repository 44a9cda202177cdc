# Macro-aware source range resolution for reading and rewriting
import enum


class Mode(enum.Enum):
    READ = "read"     # copy existing text into a synthesized replacement
    WRITE = "write"   # overwrite text in place


class RangeResolver:
    """Maps token ranges (begin/end SourceLocations) onto the primary file.

    READ keeps file locations unless an endpoint sits in the middle of a macro
    body, where the expansion would copy partially expanded text; it then
    falls back to spelling locations. WRITE edits the macro definition only
    when both endpoints come from the body of the same expansion; any other
    range is written at its file locations.
    """

    def __init__(self, buffer):
        self.buffer = buffer

    def resolve(self, begin, end, mode):
        """(begin_offset, end_token_offset) in the primary file, or None."""
        if mode is Mode.READ:
            begin_safe = not begin.is_macro_body or begin.at_expansion_start
            end_safe = not end.is_macro_body or end.at_expansion_end
            use_file = begin_safe and end_safe
        else:
            use_file = not (begin.is_macro_body and end.is_macro_body
                            and begin.expansion == end.expansion)
        if use_file:
            b, e = begin.file_loc(), end.file_loc(end=True)
        else:
            b, e = begin.spelling, end.spelling
        if e < b:
            return None
        return b, e

    def char_range(self, b, e):
        """(offset, length) covering the tokens from b through the token at e."""
        return b, self.buffer.token_end(e) - b

    def read_text(self, begin, end, ledger=None):
        """Source text of a READ range, with accepted edits applied when a ledger is given."""
        resolved = self.resolve(begin, end, Mode.READ)
        if resolved is None:
            return None
        offset, length = self.char_range(*resolved)
        if ledger is None:
            return self.buffer.text[offset:offset + length]
        return ledger.render(offset, offset + length)
