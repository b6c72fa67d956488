"""
CLI - Command-line interface for mac_tune.

Backs up and restores the macOS preference keys touched by performance
tuning. One mode per invocation.
"""

import argparse
import sys
from typing import List, Optional

from .config import Config, create_example_config
from .errors import VaultError
from .preferences import DefaultsStore, PreferenceStore, restart_process
from .snapshot import SettingsVault, VaultConfig, LATEST
from .ui import ConsoleUI


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mac-tune",
        description="Back up and restore macOS defaults touched by performance tuning",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    mac-tune --backup
    mac-tune --list
    mac-tune --restore                      # latest backup, asks first
    mac-tune --restore --snapshot 20250101_120000 --yes
    mac-tune --restore --dry-run
    mac-tune --diff 20250101_120000 20250102_090000

Restoring asks for confirmation; --quiet without --yes cancels.
        """,
    )

    # ==================== Modes ====================
    mode_group = parser.add_argument_group('Modes')
    modes = mode_group.add_mutually_exclusive_group()

    modes.add_argument(
        "--backup",
        action="store_true",
        help="Back up the current values of the tracked defaults keys"
    )
    modes.add_argument(
        "--restore",
        action="store_true",
        help="Restore defaults from the latest (or --snapshot) backup"
    )
    modes.add_argument(
        "--preview",
        action="store_true",
        help="Show which live values differ from the latest (or --snapshot) backup"
    )
    modes.add_argument(
        "--list",
        action="store_true",
        help="List backups"
    )
    modes.add_argument(
        "--show",
        metavar="ID",
        help="Show the records of a backup (or 'latest')"
    )
    modes.add_argument(
        "--diff",
        nargs=2,
        metavar=("A", "B"),
        help="Compare two backups"
    )
    modes.add_argument(
        "--descriptors",
        action="store_true",
        help="Print the tracked preference keys"
    )
    modes.add_argument(
        "--show-config",
        action="store_true",
        help="Print the effective configuration"
    )
    modes.add_argument(
        "--init-config",
        nargs="?",
        const="mac_tune.toml",
        metavar="PATH",
        help="Write an example config file (default: ./mac_tune.toml)"
    )

    # ==================== Restore Options ====================
    restore_group = parser.add_argument_group('Restore Options')

    restore_group.add_argument(
        "--snapshot",
        metavar="ID",
        default=LATEST,
        help="Backup id to restore or preview (default: latest)"
    )
    restore_group.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be written without writing"
    )
    restore_group.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Do not ask for confirmation"
    )
    restore_group.add_argument(
        "--restart-apps",
        action="store_true",
        help="Relaunch Dock/Finder/Mail afterwards so restored values take effect"
    )

    # ==================== Configuration ====================
    config_group = parser.add_argument_group('Configuration')

    config_group.add_argument(
        "-c", "--config",
        help="Config file (default: search ./mac_tune.toml, ~/.mac_tune/config.toml)"
    )
    config_group.add_argument(
        "--backup-dir",
        help="Backup directory (default: ~/.macos_performance_backup)"
    )
    config_group.add_argument(
        "--log-file",
        help="Activity log file (default: /tmp/tune_macos_performance.log)"
    )
    config_group.add_argument(
        "--no-sudo",
        action="store_true",
        help="Run defaults write without sudo"
    )
    config_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only print errors"
    )

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def run(
    args: argparse.Namespace,
    ui: Optional[ConsoleUI] = None,
    store: Optional[PreferenceStore] = None,
) -> int:
    """
    Execute one mode.

    Args:
        args: Parsed arguments
        ui: Console to use (built from config if None)
        store: Preference store (DefaultsStore if None)

    Returns:
        Process exit status
    """
    if args.init_config:
        ui = ui or ConsoleUI()
        try:
            path = create_example_config(args.init_config)
        except (FileExistsError, OSError) as e:
            ui.print_error(str(e))
            return 1
        ui.print(f"[green]Wrote example config to {path}[/]")
        return 0

    try:
        config = Config.load(args.config)
    except FileNotFoundError as e:
        (ui or ConsoleUI()).print_error(str(e))
        return 1
    except OSError as e:
        (ui or ConsoleUI()).print_error(f"Cannot read config file: {e}")
        return 1
    except ValueError as e:
        # tomllib.TOMLDecodeError is a ValueError
        (ui or ConsoleUI()).print_error(f"Invalid config file: {e}")
        return 1

    config.override_from_args(args)

    errors = config.validate()
    if errors:
        ui = ui or ConsoleUI()
        for error in errors:
            ui.print_error(error)
        return 1

    ui = ui or ConsoleUI(quiet=config.log.quiet, log_file=config.log.file)

    if args.show_config:
        ui.print(config.summary())
        return 0

    if args.descriptors:
        ui.print_descriptors(list(config.descriptors()))
        return 0

    store = store or DefaultsStore(
        command=config.defaults.command,
        use_sudo=config.defaults.use_sudo,
        timeout=config.defaults.timeout,
    )
    vault = SettingsVault(
        VaultConfig(
            backup_dir=config.vault.path,
            log=ui,
            extension=config.vault.extension,
        ),
        store,
    )

    try:
        if args.backup:
            snapshot = vault.capture(config.descriptors())
            ui.print(f"Snapshot id: [cyan]{snapshot.id}[/]")
            return 0

        if args.restore:
            return _restore(args, vault, ui)

        if args.preview:
            ui.print_preview(vault.preview(args.snapshot))
            return 0

        if args.list:
            ui.print_snapshot_list(vault.list_snapshots())
            return 0

        if args.show:
            ui.print_snapshot(vault.resolve(args.show))
            return 0

        if args.diff:
            diff = vault.compare(*args.diff)
            if diff is None:
                ui.print_error(f"Snapshot not found: {args.diff[0]} or {args.diff[1]}")
                return 1
            ui.print_diff(diff)
            return 0

    except VaultError as e:
        ui.print_error(str(e))
        return 1

    build_parser().print_usage(sys.stderr)
    return 1


def _restore(args: argparse.Namespace, vault: SettingsVault, ui: ConsoleUI) -> int:
    """Confirm, restore, optionally relaunch affected apps."""
    snapshot = vault.resolve(args.snapshot)

    if args.dry_run:
        report = vault.restore(snapshot, dry_run=True)
        ui.print_restore_report(report)
        return 0

    if not args.yes:
        ui.print_preview(vault.preview(snapshot))
        if not ui.confirm(f"Overwrite live preferences with backup {snapshot.id}?"):
            ui.info("Operation cancelled by user.")
            return 0

    report = vault.restore(snapshot)
    ui.print_restore_report(report)

    if args.restart_apps and report.restart_processes:
        names = ", ".join(report.restart_processes)
        if args.yes or ui.confirm(f"Relaunch {names} now?", default=True):
            for name in report.restart_processes:
                if restart_process(name):
                    ui.success(f"Relaunched {name}")
                else:
                    ui.warn(f"Could not relaunch {name}; log out and back in instead")

    return 0 if report.success else 1


def main():
    """Main entry point."""
    sys.exit(run(parse_args()))


if __name__ == "__main__":
    main()
