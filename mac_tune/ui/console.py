"""
ConsoleUI - Rich-based console interface and activity log.

Every info/success/warn/error line is also appended to the log file in
the format `[LEVEL] YYYY-MM-DD HH:MM:SS - message`.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, List, Union

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from ..descriptors import SettingDescriptor
from ..snapshot.models import (
    Snapshot,
    SnapshotInfo,
    SnapshotDiff,
    RestorePreview,
    RestoreReport,
)


LEVEL_STYLES = {
    "INFO": "blue",
    "SUCCESS": "green",
    "WARN": "yellow",
    "ERROR": "bold red",
}


class ConsoleUI:
    """
    Rich console interface for mac_tune.

    Doubles as the vault's log sink.
    """

    def __init__(
        self,
        quiet: bool = False,
        log_file: Optional[Union[str, Path]] = None,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        self.quiet = quiet
        self.log_file = Path(log_file).expanduser() if log_file else None
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)
        self._log_failed = False

    # =========================================================================
    # Activity log
    # =========================================================================

    def info(self, message: str):
        self._log("INFO", message)

    def success(self, message: str):
        self._log("SUCCESS", message)

    def warn(self, message: str):
        self._log("WARN", message)

    def error(self, message: str):
        self._log("ERROR", message)

    def _log(self, level: str, message: str):
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        self._append(f"[{level}] {stamp} - {message}")

        if self.quiet:
            return

        target = self.err_console if level in ("WARN", "ERROR") else self.console
        target.print(f"[{LEVEL_STYLES[level]}]{level:<7}[/] {escape(message)}")

    def _append(self, line: str):
        if self.log_file is None or self._log_failed:
            return
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            # Keep going without the file, like `tee -a` on a bad path
            self._log_failed = True
            self.err_console.print(f"[yellow]Cannot write log file {escape(str(self.log_file))}: {escape(str(e))}[/]")

    # =========================================================================
    # General output
    # =========================================================================

    def print(self, *args, **kwargs):
        """Print to console."""
        if self.quiet:
            return
        self.console.print(*args, **kwargs)

    def print_header(self, title: str):
        """Print a section header."""
        if self.quiet:
            return
        self.console.print()
        self.console.rule(f"[bold blue]{escape(title)}[/]")

    def print_error(self, message: str, exception: Optional[Exception] = None):
        """Display error message (always shown, also logged)."""
        self._append(f"[ERROR] {datetime.now().strftime('%Y-%m-%d %H:%M:%S')} - {message}")
        self.err_console.print(f"[bold red]Error:[/] {escape(message)}")
        if exception:
            self.err_console.print(f"[dim]{type(exception).__name__}: {escape(str(exception))}[/]")

    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask for confirmation."""
        if self.quiet:
            return default
        return Confirm.ask(message, default=default, console=self.console)

    # =========================================================================
    # Snapshot display
    # =========================================================================

    def print_descriptors(self, descriptors: List[SettingDescriptor]):
        table = Table(title="Tracked preferences")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Domain")
        table.add_column("Key", style="cyan")
        table.add_column("Type", style="dim")

        for i, d in enumerate(descriptors, start=1):
            table.add_row(str(i), escape(d.domain), escape(d.key), d.value_type.flag)

        self.print(table)

    def print_snapshot_list(self, snapshots: List[SnapshotInfo]):
        if not snapshots:
            self.print("[dim]No snapshots found.[/]")
            return

        table = Table(title="Snapshots (newest first)")
        table.add_column("ID", style="cyan")
        table.add_column("Created")
        table.add_column("Keys", justify="right")
        table.add_column("File", style="dim")

        for info in snapshots:
            keys = str(info.record_count)
            if info.rejected_count:
                keys += f" [yellow](+{info.rejected_count} bad)[/]"
            table.add_row(
                info.id,
                info.created_at.strftime("%Y-%m-%d %H:%M:%S"),
                keys,
                escape(info.path.name),
            )

        self.print(table)

    def print_snapshot(self, snapshot: Snapshot):
        self.print_header(f"Snapshot {snapshot.id}")

        table = Table(show_header=True, box=None)
        table.add_column("Domain", style="dim")
        table.add_column("Key", style="cyan")
        table.add_column("Type", style="dim")
        table.add_column("Value")

        for record in snapshot.records:
            value = escape(record.raw_value) if record.present_at_capture else "[dim](absent)[/]"
            table.add_row(
                escape(record.domain),
                escape(record.key),
                record.descriptor.value_type.flag,
                value,
            )

        self.print(table)

        for rejected in snapshot.rejected_lines:
            self.print(f"[yellow]line {rejected.line_number}: {escape(rejected.reason)}[/] [dim]{escape(rejected.text)}[/]")

    def print_preview(self, preview: RestorePreview):
        self.print_header(f"Restore preview: {preview.snapshot_id}")

        if not preview.changes:
            self.print("[green]Live preferences already match the snapshot.[/]")
            return

        table = Table(show_header=True, box=None)
        table.add_column("Domain", style="dim")
        table.add_column("Key", style="cyan")
        table.add_column("Current")
        table.add_column("")
        table.add_column("Snapshot", style="green")

        for change in preview.changes:
            current = escape(change.current_value) if change.current_value is not None else "[dim](unset)[/]"
            table.add_row(
                escape(change.domain),
                escape(change.key),
                current,
                "->",
                escape(change.snapshot_value),
            )

        self.print(table)
        self.print(f"\n{preview.total_changes} change(s), {preview.unchanged} unchanged")
        if preview.restart_processes:
            self.print(f"[yellow]Relaunch needed: {', '.join(preview.restart_processes)}[/]")

    def print_restore_report(self, report: RestoreReport):
        title = "Dry run" if report.dry_run else "Restore"
        verb = "would restore" if report.dry_run else "restored"

        color = "green" if report.success else "yellow"
        summary = f"[{color}]{report.restored} {verb}[/], {report.failed} failed"
        # Only in-memory snapshots carry unset keys
        if report.skipped:
            summary += f", {report.skipped} skipped (unset at capture)"
        if report.malformed:
            summary += f", {len(report.malformed)} malformed line(s)"

        self.print(Panel(summary, title=f"{title}: {report.snapshot_id}", border_style=color))

        for failure in report.failures:
            self.print(f"  [red]FAILED[/] {escape(failure.domain)} {escape(failure.key)}: {escape(failure.error)}")
        for rejected in report.malformed:
            self.print(f"  [yellow]SKIPPED[/] line {rejected.line_number}: {escape(rejected.reason)}")

        if report.restart_processes and not report.dry_run:
            self.print(f"[yellow]Relaunch needed for changes to show: {', '.join(report.restart_processes)}[/]")

    def print_diff(self, diff: SnapshotDiff):
        self.print_header(f"{diff.snapshot_a} vs {diff.snapshot_b}")

        if diff.total_differences == 0:
            self.print("[green]Snapshots are identical.[/]")
            return

        if diff.changes:
            table = Table(show_header=True, box=None)
            table.add_column("Domain", style="dim")
            table.add_column("Key", style="cyan")
            table.add_column(diff.snapshot_a)
            table.add_column(diff.snapshot_b)
            for change in diff.changes:
                table.add_row(
                    escape(change.domain),
                    escape(change.key),
                    escape(change.current_value or ""),
                    escape(change.snapshot_value),
                )
            self.print(table)

        for name in diff.only_in_a:
            self.print(f"  [red]-[/] {escape(name)} [dim](only in {diff.snapshot_a})[/]")
        for name in diff.only_in_b:
            self.print(f"  [green]+[/] {escape(name)} [dim](only in {diff.snapshot_b})[/]")
