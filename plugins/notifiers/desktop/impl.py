from __future__ import annotations
import shutil
import subprocess
import sys
from typing import List, Optional

from core.errors import NotifierError


def _applescript_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _powershell_quote(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


class DesktopNotifier:
    """OS notification popups.

    Linux uses ``notify-send``, macOS ``osascript`` and Windows a PowerShell
    balloon tip. Every failure is raised as :class:`NotifierError`.
    """

    def __init__(self, platform: Optional[str] = None, timeout: float = 10.0):
        self.platform = platform or sys.platform
        self.timeout = timeout

    def command(self, title: str, body: str) -> List[str]:
        if self.platform.startswith("linux"):
            exe = shutil.which("notify-send")
            if exe:
                return [exe, title, body]
        elif self.platform == "darwin":
            exe = shutil.which("osascript")
            if exe:
                script = f"display notification {_applescript_quote(body)} with title {_applescript_quote(title)}"
                return [exe, "-e", script]
        elif self.platform.startswith("win"):
            exe = shutil.which("powershell.exe")
            if exe:
                script = (
                    "Add-Type -AssemblyName System.Windows.Forms;"
                    "$n = New-Object System.Windows.Forms.NotifyIcon;"
                    "$n.Icon = [System.Drawing.SystemIcons]::Information;"
                    "$n.Visible = $true;"
                    f"$n.ShowBalloonTip(5000, {_powershell_quote(title)}, {_powershell_quote(body)}, 'Info')"
                )
                return [exe, "-NoProfile", "-Command", script]
        raise NotifierError(f"no desktop notification tool available on {self.platform}")

    def notify(self, title: str, body: str) -> None:
        cmd = self.command(title, body)
        try:
            subprocess.run(cmd, check=True, timeout=self.timeout, capture_output=True)
        except (OSError, subprocess.SubprocessError) as exc:
            raise NotifierError(f"{cmd[0]} failed: {exc}") from exc
