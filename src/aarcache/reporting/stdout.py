"""Human-readable stdout reporter for sync results."""

from __future__ import annotations

from pathlib import Path

from aarcache.constants.branding import ASCII_LOGO_LINES, SYNC_SUMMARY_TITLE
from aarcache.constants.reporting import ANSI_GREEN, ANSI_RED, ANSI_RESET, ANSI_YELLOW
from aarcache.model import SyncResult


def _colorize(text: str, color: str) -> str:
    return f"{color}{text}{ANSI_RESET}"


def _color_count(count: int, color: str) -> str:
    return _colorize(str(count), color) if count else str(count)


class StdoutReporter:
    """Formats a sync result as a compact summary block."""

    def __init__(
        self,
        result: SyncResult,
        *,
        color: bool = True,
        verbose: bool = False,
        cache_dir: Path | None = None,
        fingerprint: str | None = None,
    ) -> None:
        self._result = result
        self._color = color
        self._verbose = verbose
        self._cache_dir = cache_dir
        self._fingerprint = fingerprint

    def render(self) -> str:
        """Render the full stdout report as a single string."""
        r = self._result
        sep = "  " + "─" * 38
        stats = r.stats

        lines = [
            "",
            f"  {ASCII_LOGO_LINES[0]}",
            f"  {ASCII_LOGO_LINES[1]}",
            f"  {SYNC_SUMMARY_TITLE}",
            sep,
            "",
            f"  Mode        {r.mode}",
            f"  Status      {self._render_status()}",
            f"  AARs        {r.declared} declared / {r.updated} updated / {r.removed} removed",
            (
                f"  Unpacked    {stats.unpacked} ok / "
                f"{self._failures(stats.failed_unpacks)} failed"
            ),
            (
                f"  Merged      {stats.merged_libraries} libraries / {stats.copied_files} files copied / "
                f"{stats.skipped_files} skipped / {self._failures(stats.failed_copies)} failed"
            ),
            f"  Duration    {r.duration_seconds:.3f}s",
        ]
        if self._verbose:
            if self._cache_dir is not None:
                lines.append(f"  Cache dir   {self._cache_dir}")
            if self._fingerprint is not None:
                lines.append(f"  Config      {self._fingerprint[:12]}")
            lines.append(f"  Strays      {stats.removed_strays} removed")
        for warning in r.warnings:
            lines.append(f"  Warning     {warning}")
        lines.append("")
        return "\n".join(lines)

    def _render_status(self) -> str:
        r = self._result
        if r.cancelled:
            status, color = "cancelled", ANSI_YELLOW
        elif not r.completed:
            status, color = "incomplete", ANSI_RED
        elif r.stats.failed_unpacks or r.stats.failed_copies:
            status, color = "completed with failures", ANSI_YELLOW
        else:
            status, color = "completed", ANSI_GREEN
        return _colorize(status, color) if self._color else status

    def _failures(self, count: int) -> str:
        return _color_count(count, ANSI_RED) if self._color else str(count)
