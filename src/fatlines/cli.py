"""
Command-line interface for fatlines.

Provides commands for merging segment files into fat lines, unifying
collinear lines and writing a default configuration.
"""

import argparse
import sys

from fatlines.config import save_default_config
from fatlines.tracer import configure_tracer, get_tracer


def _add_common_arguments(parser):
    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Segments JSON file",
    )
    parser.add_argument(
        "--out", "-o",
        required=True,
        help="Output directory",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="fatlines",
        description="fatlines: group overlapping thick segments and merge them into fat lines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    merge_parser = subparsers.add_parser("merge", help="Group segments and build fat lines")
    _add_common_arguments(merge_parser)

    unify_parser = subparsers.add_parser("unify", help="Deduplicate and merge collinear segments")
    _add_common_arguments(unify_parser)

    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="fatlines_config.yaml",
        help="Output path for config file",
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "merge":
        return handle_merge(args)
    elif args.command == "unify":
        return handle_unify(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def _configure_tracing(args):
    configure_tracer(
        enabled=args.trace,
        level=args.trace_level,
        file_path=args.trace_file,
        json_output=args.trace_json,
    )


def handle_merge(args):
    """Handle the merge command."""
    _configure_tracing(args)
    tracer = get_tracer()

    try:
        from fatlines.pipeline import run_merge

        with tracer.span("cli_merge", module="cli"):
            document = run_merge(
                input_path=args.input,
                out_dir=args.out,
                config_path=args.config,
            )

        singletons = sum(1 for g in document.groups if g.is_singleton)
        print(f"\nMerge completed successfully.")
        print(f"  Segments read: {document.segment_count}")
        print(f"  Segments rejected: {len(document.rejected)}")
        print(f"  Groups: {len(document.groups)} ({singletons} singletons)")
        print(f"  Fat lines: {sum(len(g.fat_lines) for g in document.groups)}")
        print(f"\nOutputs saved to: {args.out}/")

        if document.validation.has_errors:
            print(f"\n[!] Validation errors detected. Review validation_report.json")
            return 1

        return 0

    except Exception as e:
        tracer.event(f"Merge failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1


def handle_unify(args):
    """Handle the unify command."""
    _configure_tracing(args)
    tracer = get_tracer()

    try:
        from fatlines.pipeline import run_unify

        with tracer.span("cli_unify", module="cli"):
            document = run_unify(
                input_path=args.input,
                out_dir=args.out,
                config_path=args.config,
            )

        print(f"\nUnify completed successfully.")
        print(f"  Segments read: {document.input_count}")
        print(f"  Lines written: {len(document.lines)}")
        print(f"\nOutputs saved to: {args.out}/")

        return 0

    except Exception as e:
        tracer.event(f"Unify failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
