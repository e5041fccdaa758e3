from __future__ import annotations
import shutil
import subprocess
import sys

class Beeper:
    """Audible alert: PowerShell console beep when available, BEL otherwise."""
    def __init__(self, frequency: int = 2000, duration_ms: int = 300, timeout: float = 5.0):
        self.frequency = frequency
        self.duration_ms = duration_ms
        self.timeout = timeout
        self.powershell = shutil.which("powershell.exe")

    def beep(self) -> None:
        if self.powershell:
            subprocess.run(
                [self.powershell, "-c", f"[console]::beep({self.frequency}, {self.duration_ms})"],
                check=True,
                timeout=self.timeout,
            )
        else:
            sys.stdout.write("\a")
            sys.stdout.flush()
