#!/usr/bin/env python3
# CUDA -> HIP source rewrite: edit application, batch driver and CLI
import sys, argparse, logging, pathlib
from concurrent.futures import ThreadPoolExecutor

from hipify.backends import report_backend
from hipify.engine.action import FileResult, HipifyAction, Options
from hipify.engine.errors import FrontendError, HipifyError
from hipify.engine.statistics import Statistics
from hipify.engine.tables import Flavor
from hipify.frontends.cuda_frontend import parse

logger = logging.getLogger(__name__)


def emit(text, replacements):
    """Apply a sorted, non-overlapping edit set to text."""
    out = []
    pos = 0
    for r in sorted(replacements):
        if r.offset < pos:
            raise ValueError(f"overlapping replacement at {r.offset}")
        out.append(text[pos:r.offset])
        out.append(r.text)
        pos = r.end
    out.append(text[pos:])
    return "".join(out)


def hipify_source(text, name="<stdin>", options=None, action=None):
    """(FileResult, rewritten text) for one in-memory file. ConflictError propagates."""
    options = options or Options()
    action = action or HipifyAction.from_options(options)
    unit = parse(text, name)
    result = action.run(unit)
    return result, emit(text, result.replacements)


def output_path(path, output=None, inplace=False):
    if inplace:
        return path
    if output:
        return pathlib.Path(output)
    return path.with_name(path.name + ".hip")


def hipify_file(path, output=None, inplace=False, options=None, action=None):
    """Rewrite one file on disk. Errors are caught and reported in the FileResult."""
    path = pathlib.Path(path)
    try:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FrontendError(f"{path}: {e}") from e
        result, new_text = hipify_source(text, str(path), options, action)
    except HipifyError as e:
        logger.error("%s: %s", path, e)
        stats = Statistics(str(path))
        stats.failed = 1
        return FileResult(str(path), stats=stats, error=e)
    dest = output_path(path, output, inplace)
    if inplace:
        # keep the original next to the rewritten file
        path.with_name(path.name + ".prehip").write_text(text, encoding="utf-8")
    dest.write_text(new_text, encoding="utf-8")
    logger.info("%s -> %s (%d edits)", path, dest, len(result.replacements))
    return result


def hipify_files(paths, output=None, inplace=False, options=None, total=None):
    """Rewrite several files on a thread pool. Returns (results, merged statistics).

    Each file gets its own HipifyAction; a conflict fails only that file.
    """
    options = options or Options()
    total = total or Statistics()
    tables = options.tables()

    def one(path):
        action = HipifyAction(*tables, flavor=options.flavor)
        result = hipify_file(path, output, inplace, options, action)
        total.merge(result.stats)
        return result

    with ThreadPoolExecutor(max_workers=max(1, options.jobs)) as pool:
        results = list(pool.map(one, paths))
    return results, total


def main(argv=None):
    ap = argparse.ArgumentParser(prog="hipify-py", description="Translate CUDA sources to HIP")
    ap.add_argument("inputs", nargs="+")
    ap.add_argument("-o", "--output", default=None, help="output file (single input only)")
    ap.add_argument("--inplace", action="store_true", help="overwrite inputs, keeping a .prehip copy")
    ap.add_argument("--roc", action="store_true", help="prefer roc* spellings where they exist")
    ap.add_argument("--print-stats", action="store_true")
    ap.add_argument("--stats-csv", default=None, metavar="PATH")
    ap.add_argument("--extra-renames", default=None, metavar="PATH",
                    help="JSON rename table merged into the identifier table")
    ap.add_argument("-j", "--jobs", type=int, default=1)
    ap.add_argument("-v", "--verbose", action="store_true")
    a = ap.parse_args(argv)
    if a.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if a.output and (len(a.inputs) > 1 or a.inplace):
        ap.error("-o/--output takes a single input and excludes --inplace")
    paths = [pathlib.Path(p) for p in a.inputs]
    for p in paths:
        if not p.exists(): sys.exit(f"input not found: {p}")
    if a.extra_renames and not pathlib.Path(a.extra_renames).exists():
        sys.exit("rename table not found")
    options = Options(flavor=Flavor.ROC if a.roc else Flavor.HIP, extra_renames=a.extra_renames,
                      print_stats=a.print_stats, stats_csv=a.stats_csv, jobs=a.jobs)
    try:
        options.tables()
    except ValueError as e:
        sys.exit(f"bad rename table: {e}")

    results, total = hipify_files(paths, a.output, a.inplace, options)
    for p, r in zip(paths, results):
        for d in r.diagnostics:
            print(f"[WARN] {d.source}:{d.line}:{d.column}: {d.message}")
        if r.ok:
            print(f"[OK] HIP written: {output_path(p, a.output, a.inplace)}")
        else:
            print(f"[FAIL] {p}: {r.error}")
    if options.print_stats:
        for r in results:
            if r.ok:
                print(report_backend.render_text(report_backend.summary(r.stats)))
        if len(results) > 1:
            print(report_backend.render_text(report_backend.summary(total)))
    if options.stats_csv:
        stats = [r.stats for r in results if r.ok]
        if len(results) > 1:
            stats.append(total)
        pathlib.Path(options.stats_csv).write_text(report_backend.render_csv(stats))
        print(f"[OK] statistics written: {options.stats_csv}")
    if total.failed:
        sys.exit(1)

if __name__ == "__main__":
    main()
