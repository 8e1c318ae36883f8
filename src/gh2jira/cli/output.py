"""
Output - Console output for sync passes.

Log records go to stderr through `logging`; this module prints the
human-facing parts: the run header, per-pass headings and summaries.
"""

import sys
from collections.abc import Sequence
from datetime import datetime

from ..application.sync import SyncResult


class Colors:
    """ANSI color codes."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"

    BG_YELLOW = "\033[43m"


class Symbols:
    """Unicode symbols for output."""

    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    WARN = "⚠"
    GEAR = "⚙"
    RULE = "─"


class Console:
    """Console output helper with colors and formatting."""

    # How many keys or errors a summary lists before eliding the rest.
    MAX_LISTED = 5

    def __init__(self, color: bool = True, verbose: bool = False):
        self.color = color and sys.stdout.isatty()
        self.verbose = verbose

    def _c(self, text: str, *codes: str) -> str:
        """Apply color codes to text."""
        if not self.color:
            return text
        return "".join(codes) + text + Colors.RESET

    def print(self, text: str = "") -> None:
        print(text)

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def success(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.CHECK} {text}", Colors.GREEN))

    def error(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.CROSS} {text}", Colors.RED))

    def warning(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.WARN} {text}", Colors.YELLOW))

    def detail(self, text: str) -> None:
        """Print an indented, dimmed line under a message."""
        self.print(self._c(f"    {text}", Colors.DIM))

    def config_errors(self, errors: Sequence[str]) -> None:
        self.error("Configuration errors:")
        for error in errors:
            self.detail(error)

    # -------------------------------------------------------------------------
    # Run and Pass Output
    # -------------------------------------------------------------------------

    def header(self, repo_name: str, project_key: str) -> None:
        """Print the run header naming both ends of the mirror."""
        text = f"gh2jira: {repo_name} {Symbols.ARROW} {project_key}"
        rule = (Symbols.RULE if self.color else "-") * max(len(text) + 4, 50)

        self.print()
        self.print(self._c(rule, Colors.CYAN))
        self.print(self._c(f"  {text}", Colors.BOLD, Colors.CYAN))
        self.print(self._c(rule, Colors.CYAN))

    def dry_run_banner(self) -> None:
        self.print()
        banner = f"  {Symbols.GEAR} DRY-RUN MODE - Jira will not be changed (pass --confirm to apply)"
        if self.color:
            self.print(f"{Colors.BG_YELLOW}{Colors.BOLD}{banner}{Colors.RESET}")
        else:
            self.print(f"*** {banner} ***")

    def pass_started(self, number: int, since: datetime) -> None:
        """Print the heading of a sync pass."""
        self.print()
        self.print(self._c(
            f"{Symbols.ARROW} Pass {number}: issues updated since {since.isoformat()}",
            Colors.BOLD, Colors.BLUE,
        ))

    def sync_result(self, result: SyncResult) -> None:
        """
        Print the outcome of one pass.

        Counts are shown as a small grid, followed by the Jira keys that
        were touched and the first few per-issue errors.
        """
        self.print()
        self.detail(f"{result.issues_seen} GitHub issue(s) examined")
        self._grid(
            ["", "Created", "Updated", "Unchanged"],
            [
                ["Issues", result.issues_created, result.issues_updated, result.issues_unchanged],
                ["Comments", result.comments_created, result.comments_updated, result.comments_unchanged],
            ],
        )

        self._keys("Created", result.created_keys)
        self._keys("Updated", result.updated_keys)

        if result.errors:
            self.print()
            self.error(f"{len(result.errors)} issue(s) failed:")
            for error in result.errors[:self.MAX_LISTED]:
                self.detail(error)
            if len(result.errors) > self.MAX_LISTED:
                self.detail(f"... and {len(result.errors) - self.MAX_LISTED} more")

        self.print()
        if not result.success:
            self.error("Pass finished with errors")
        elif result.dry_run:
            self.success("Pass finished (dry run, nothing written)")
        else:
            self.success("Pass finished")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _grid(self, headers: list[str], rows: list[list]) -> None:
        """Row labels left-aligned, counts right-aligned."""
        widths = [max(len(str(row[i])) for row in [headers] + rows) for i in range(len(headers))]

        def line(cells: list, bold: bool = False) -> str:
            parts = [str(cells[0]).ljust(widths[0])]
            parts += [str(cell).rjust(widths[i]) for i, cell in enumerate(cells) if i > 0]
            text = "  " + "  ".join(parts)
            return self._c(text, Colors.BOLD) if bold else text

        self.print(line(headers, bold=True))
        for row in rows:
            self.print(line(row))

    def _keys(self, label: str, keys: Sequence[str]) -> None:
        if not keys:
            return
        shown = ", ".join(keys[:self.MAX_LISTED])
        if len(keys) > self.MAX_LISTED:
            shown += f" (+{len(keys) - self.MAX_LISTED} more)"
        self.detail(f"{label}: {shown}")
