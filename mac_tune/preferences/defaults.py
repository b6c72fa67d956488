"""
DefaultsStore - PreferenceStore backed by macOS defaults(1).
"""

import subprocess
from typing import List, Tuple

from ..descriptors import ValueType
from ..errors import PreferenceReadError, PreferenceWriteError
from .base import PreferenceStore


class DefaultsStore(PreferenceStore):
    """Reads with `defaults read`, writes with `[sudo] defaults write`."""

    def __init__(
        self,
        command: str = "defaults",
        use_sudo: bool = True,
        timeout: int = 30,
    ):
        """
        Args:
            command: defaults binary to invoke
            use_sudo: Prefix writes with sudo (needed for /Library/Preferences)
            timeout: Seconds before a single invocation is abandoned
        """
        self.command = command
        self.use_sudo = use_sudo
        self.timeout = timeout

    def read(self, domain: str, key: str) -> Tuple[bool, str]:
        try:
            result = subprocess.run(
                [self.command, "read", domain, key],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise PreferenceReadError(f"'{self.command}' not found; is this macOS?") from None
        except subprocess.TimeoutExpired:
            raise PreferenceReadError(
                f"'{self.command} read {domain} {key}' timed out after {self.timeout}s"
            ) from None

        if result.returncode != 0:
            return False, ""

        return True, _strip_newline(result.stdout)

    def write(self, domain: str, key: str, value_type: ValueType, raw_value: str) -> None:
        cmd = self.write_command(domain, key, value_type, raw_value)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise PreferenceWriteError(domain, key, str(e)) from e

        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            raise PreferenceWriteError(domain, key, detail)

    def write_command(self, domain: str, key: str, value_type: ValueType, raw_value: str) -> List[str]:
        """Argument vector for a write (also used for dry-run display)."""
        cmd = [self.command, "write", domain, key, value_type.flag, raw_value]
        if self.use_sudo:
            cmd.insert(0, "sudo")
        return cmd


def restart_process(name: str, timeout: int = 30) -> bool:
    """
    Relaunch a process that only rereads preferences at startup (Dock, Finder).

    Returns:
        True if killall reported success
    """
    try:
        result = subprocess.run(
            ["killall", name],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError):
        return False
    return result.returncode == 0


def _strip_newline(text: str) -> str:
    # defaults terminates output with exactly one newline
    if text.endswith("\n"):
        return text[:-1]
    return text
