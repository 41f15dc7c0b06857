"""
Command line interface for the ctorlint engine.

Examples:
  ctorlint --paths src/ --format pretty
  ctorlint --paths src/Models --rules "style.*" --jobs 4 --validate
  ctorlint --paths src/ --fix --diff
"""

import argparse
import json
import logging
import sys
import threading
from typing import Any, Dict, List, Optional

from .schema import validate_runner_output
from .types import AnalysisCancelled
from .validation import get_validation_service

logger = logging.getLogger(__name__)


def format_output(output: Dict[str, Any], format_type: str) -> str:
    """Format a runner output document as json or pretty text."""
    if format_type == "json":
        return json.dumps(output, indent=2)

    elif format_type == "pretty":
        findings = output["findings"]
        lines = [
            f"Scanned {output['files_scanned']} files with {output['rules_run']} rules",
            f"Found {len(findings)} issues",
            "",
        ]

        by_file: Dict[str, List[Dict[str, Any]]] = {}
        for finding in findings:
            by_file.setdefault(finding["file_path"], []).append(finding)

        for file_path, file_findings in sorted(by_file.items()):
            lines.append(file_path)
            for finding in file_findings:
                location = f"{finding['range']['startLine']}:{finding['range']['startCol']}"
                fixable = " [fixable]" if finding.get("autofix") else ""
                lines.append(f"  {finding['severity']} {location}: {finding['message']} ({finding['rule_id']}){fixable}")
            lines.append("")

        metrics = output["metrics"]
        lines.append("Metrics:")
        lines.append(f"  Parse time: {metrics['parse_ms']:.1f}ms")
        lines.append(f"  Rules time: {metrics['rules_ms']:.1f}ms")
        lines.append(f"  Total time: {metrics['total_ms']:.1f}ms")

        return "\n".join(lines)

    else:
        raise ValueError(f"Unknown format: {format_type}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ctorlint",
        description="Check and fix the layout of C# constructor parameter lists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("\n", 2)[2],
    )

    parser.add_argument(
        "--paths",
        nargs="+",
        required=True,
        help="Paths to files or directories to analyze"
    )

    parser.add_argument(
        "--rules",
        default="*",
        help="Rule patterns to run: '*' for all, or comma-separated IDs/patterns (default: *)"
    )

    parser.add_argument(
        "--config",
        help="Path to configuration file (default: search upwards from the first path)"
    )

    parser.add_argument(
        "--jobs",
        type=int,
        default=0,
        help="Number of parallel jobs (0=auto, 1=sequential, N=parallel)"
    )

    parser.add_argument(
        "--format",
        choices=["json", "pretty"],
        default="json",
        help="Output format: json (protocol v1) or pretty (human-readable)"
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate JSON output against schema and warn about malformed suppression comments"
    )

    parser.add_argument(
        "--fix",
        action="store_true",
        help="Apply all available fixes in place before reporting"
    )

    parser.add_argument(
        "--diff",
        action="store_true",
        help="Print a unified diff of the fixes (without --fix, files are left untouched)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging on stderr"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    rule_patterns = [pattern.strip() for pattern in args.rules.split(",") if pattern.strip()]
    service = get_validation_service()
    config = service.load_config_for(args.paths, args.config)
    cancel_event = threading.Event()

    try:
        if args.fix or args.diff:
            results = service.autofix_paths(args.paths, rule_patterns, config, write=args.fix,
                                            cancel_event=cancel_event)
            for result in results:
                if args.diff and result.changed:
                    sys.stdout.write(result.diff())
                logger.info(f"{result.file_path}: {result.fixes_applied} fixes in {result.passes} passes")

        output = service.validate_paths(args.paths, rule_patterns, config, args.jobs, cancel_event)
    except (KeyboardInterrupt, AnalysisCancelled):
        cancel_event.set()
        print("Analysis cancelled", file=sys.stderr)
        return 130

    if output["files_scanned"] == 0:
        print("No files found to analyze", file=sys.stderr)
        return 1

    if args.validate:
        for file_path, line, message in service.check_suppressions(args.paths):
            print(f"warning: {file_path}:{line}: {message}", file=sys.stderr)

        errors = validate_runner_output(output)
        if errors:
            print("JSON validation errors:", file=sys.stderr)
            for error in errors:
                print(f"  {error}", file=sys.stderr)
            return 1

    # Only the diff goes to stdout in dry-run mode
    if not (args.diff and not args.fix):
        print(format_output(output, args.format))

    return 1 if output["findings"] else 0


if __name__ == "__main__":
    sys.exit(main())
