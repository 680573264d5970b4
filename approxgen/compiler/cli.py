from __future__ import annotations
import argparse, sys
from pathlib import Path

from approxgen.compiler.config import ConfigError, load_config
from approxgen.compiler.pipeline import compile_source
from approxgen.internals.report import Reporter
from approxgen.internals.version import print_banner


def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="approxgen",
        description="Generate approximate equality methods for declared data types",
    )
    ap.add_argument("source", nargs="?", help="Path to declaration file (.apx)")
    ap.add_argument("-o", "--out", metavar="OUT",
                    help="Output module path (default: <source stem> + output-suffix)")
    ap.add_argument("--stdout", action="store_true", help="Write the generated module to stdout")
    ap.add_argument("--check", action="store_true",
                    help="Validate declarations only; write nothing")
    ap.add_argument("--dump-parse", action="store_true", help="Print raw Lark tree")
    ap.add_argument("--dump-ast", action="store_true", help="Print declaration AST")
    ap.add_argument("--dump-ir", action="store_true", help="Print synthesized comparison expressions")
    ap.add_argument("--runtime-module", metavar="MODULE",
                    help="Module providing abs_diff_eq/relative_eq (default: approxgen.runtime)")
    ap.add_argument("--no-frozen", action="store_true",
                    help="Generate mutable dataclasses instead of frozen ones")
    ap.add_argument("-q", "--quiet", action="store_true", help="Suppress banner and progress output")
    ap.add_argument("--traceback", action="store_true",
                    help="Print full traceback on internal errors (for debugging)")
    ap.add_argument("--version", action="store_true", help="Print version and exit")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)

    if args.version:
        from approxgen import __version__
        print(f"approxgen {__version__}")
        return 0

    # Generated source on stdout must stay clean
    quiet = args.quiet or args.stdout
    if not quiet:
        print_banner()

    if not args.source:
        print("error: source file required", file=sys.stderr)
        return 2

    src_path = Path(args.source).resolve()
    try:
        src = src_path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"error: cannot read {src_path}: {e}", file=sys.stderr)
        return 2

    try:
        config = load_config(src_path)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    runtime_module = args.runtime_module
    if runtime_module is not None and not all(p.isidentifier() for p in runtime_module.split(".")):
        print(f"error: --runtime-module is not a module path: '{runtime_module}'", file=sys.stderr)
        return 2
    config = config.override(runtime_module=runtime_module, frozen=False if args.no_frozen else None)

    reporter = Reporter(source=src, filename=str(src_path))
    try:
        generated = compile_source(
            src, reporter, config=config, source_name=src_path.name,
            dump_parse=args.dump_parse, dump_ast=args.dump_ast, dump_ir=args.dump_ir,
        )
    except RuntimeError as e:
        print(f"Generation failed: {e}", file=sys.stderr)
        if args.traceback:
            import traceback
            traceback.print_exc()
        return 2

    reporter.print()
    if generated is None:
        return 2

    if args.check:
        if not quiet:
            print(f"OK: {len(generated.types)} types checked in {src_path.name}")
        return reporter.exit_code()

    if args.stdout:
        sys.stdout.write(generated.source)
        return reporter.exit_code()

    out_path = Path(args.out) if args.out else config.output_path(src_path)
    try:
        out_path.write_text(generated.source, encoding="utf-8")
    except OSError as e:
        print(f"error: cannot write {out_path}: {e}", file=sys.stderr)
        return 2

    if not quiet:
        print(f"Generated {len(generated.types)} types -> {out_path}")
    return reporter.exit_code()


if __name__ == "__main__":
    raise SystemExit(main())
