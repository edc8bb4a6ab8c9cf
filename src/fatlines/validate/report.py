"""
Validation report generation for fatlines.

Writes the JSON report and a plain-text summary next to the run outputs.
"""

import os

from fatlines.io.save_artifacts import save_json, save_text
from fatlines.tracer import get_tracer, trace


@trace(label="generate_report")
def generate_report(report, out_dir):
    """
    Generate validation report files.

    Creates:
    - validation_report.json: Full check results
    - validation_summary.txt: Human-readable summary

    Returns the two paths.
    """
    tracer = get_tracer()

    report_path = os.path.join(out_dir, "validation_report.json")
    save_json(report, report_path)

    summary_path = os.path.join(out_dir, "validation_summary.txt")
    save_text(format_summary(report), summary_path)

    tracer.event(f"Report saved: {len(report.checks)} checks, {report.error_count} errors")

    return report_path, summary_path


def format_summary(report):
    """Render a ValidationReport as text."""
    passed = [c for c in report.checks if c.passed]
    failed = [c for c in report.checks if not c.passed]

    lines = ["fatlines Validation Report", "=" * 40, ""]
    lines.append(f"Total checks: {len(report.checks)}")
    lines.append(f"Passed: {len(passed)}")
    lines.append(f"Failed: {len(failed)}")
    lines.append("")

    if failed:
        lines.append("ISSUES:")
        lines.append("-" * 40)
        lines.extend(format_check_result(c) for c in failed)
        lines.append("")

    lines.append("ALL CHECKS:")
    lines.append("-" * 40)
    lines.extend(format_check_result(c) for c in report.checks)

    return "\n".join(lines) + "\n"


def format_check_result(check):
    """Format a single check result for display."""
    status = "PASS" if check.passed else "FAIL"
    severity = check.severity.value.upper()
    return f"[{status}][{severity}] {check.rule_id}: {check.message}"
