# Conversion statistics -> text or CSV report
import csv, io
import numpy as np

COLUMNS = [
    "source", "converted_refs", "unconverted_refs", "conversion_percent",
    "replaced_bytes", "total_bytes", "changed_lines", "total_lines",
    "code_changed_bytes_percent", "code_changed_lines_percent", "time_elapsed_s",
]


def _percents(parts, wholes):
    """Elementwise 100 * parts / wholes, 0 where the whole is 0."""
    parts = np.asarray(parts, dtype=np.float64)
    wholes = np.asarray(wholes, dtype=np.float64)
    out = np.zeros_like(parts)
    np.divide(parts * 100.0, wholes, out=out, where=wholes > 0)
    return np.round(out, 1)


def summary(stats):
    """Flat dict of the headline numbers for one Statistics object."""
    converted = stats.converted_refs
    unconverted = stats.unconverted_refs
    changed_lines = len(stats.lines_touched)
    conv, byte_pct, line_pct = _percents(
        [converted, stats.bytes_changed, changed_lines],
        [converted + unconverted, stats.total_bytes, stats.total_lines])
    return {
        "source": stats.name,
        "converted_refs": converted,
        "unconverted_refs": unconverted,
        "conversion_percent": float(conv),
        "replaced_bytes": stats.bytes_changed,
        "total_bytes": stats.total_bytes,
        "changed_lines": changed_lines,
        "total_lines": stats.total_lines,
        "code_changed_bytes_percent": float(byte_pct),
        "code_changed_lines_percent": float(line_pct),
        "time_elapsed_s": round(stats.elapsed, 3),
        "by_type": dict(sorted(stats.by_type.items())),
        "by_api": dict(sorted(stats.by_api.items())),
        "unsupported": dict(sorted(stats.unsupported.items())),
    }


def render_text(s):
    L = [f"[HIPIFY] statistics for {s['source']}",
         f"  CONVERTED refs count: {s['converted_refs']}",
         f"  UNCONVERTED refs count: {s['unconverted_refs']}",
         f"  CONVERSION %: {s['conversion_percent']}",
         f"  REPLACED bytes: {s['replaced_bytes']}",
         f"  TOTAL bytes: {s['total_bytes']}",
         f"  CHANGED lines of code: {s['changed_lines']}",
         f"  TOTAL lines of code: {s['total_lines']}",
         f"  CODE CHANGED (in bytes) %: {s['code_changed_bytes_percent']}",
         f"  CODE CHANGED (in lines) %: {s['code_changed_lines_percent']}",
         f"  TIME ELAPSED s: {s['time_elapsed_s']}"]
    for title, key in (("by type", "by_type"), ("by API", "by_api"), ("unconverted", "unsupported")):
        if s[key]:
            L.append(f"  {title}:")
            L += [f"    {k}: {v}" for k, v in s[key].items()]
    return "\n".join(L)


def render_csv(stats_list):
    """One row per Statistics object, headline columns plus per-type and per-API counts."""
    rows = [summary(st) for st in stats_list]
    extra = sorted({f"type:{k}" for r in rows for k in r["by_type"]} |
                   {f"api:{k}" for r in rows for k in r["by_api"]})
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow(COLUMNS + extra)
    for r in rows:
        counts = {f"type:{k}": v for k, v in r["by_type"].items()}
        counts.update({f"api:{k}": v for k, v in r["by_api"].items()})
        w.writerow([r[c] for c in COLUMNS] + [counts.get(c, 0) for c in extra])
    return buf.getvalue()

