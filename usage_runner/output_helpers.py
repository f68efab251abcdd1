"""Text rendering of a usage report."""

from __future__ import annotations

from usage_runner.models.report import UsageReport


def format_report(report: UsageReport) -> list[str]:
    """Return the report lines, with blank lines between the groups."""
    return [
        f"User CPU time (s): {report.user_cpu_seconds}",
        f"System CPU time (s): {report.system_cpu_seconds}",
        f"Total CPU time (s): {report.total_cpu_seconds}",
        f"Total Wall time (s): {report.wall_seconds:6.2f}",
        "",
        f"Maximum memory (KB): {report.peak_memory_kb}",
        f"Maximum memory (MB): {report.peak_memory_mb}",
        f"Maximum memory (GB): {report.peak_memory_gb}",
        "",
        f"Maximum code (KB): {report.code_size_kb}",
        f"Maximum code (MB): {report.code_size_mb}",
        "",
        f"Maximum data (KB): {report.data_size_kb}",
        f"Maximum data (MB): {report.data_size_mb}",
        "",
        f"Maximum stack (KB): {report.stack_size_kb}",
        f"Maximum stack (MB): {report.stack_size_mb}",
        "",
        f"Number of FS Reads : {report.fs_reads}",
        f"Number of FS Writes: {report.fs_writes}",
    ]


def render_report(report: UsageReport) -> str:
    return "\n".join(format_report(report))
