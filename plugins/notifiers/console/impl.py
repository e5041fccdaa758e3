from __future__ import annotations
from typing import List, Tuple
import typer
class ConsoleNotifier:
    def __init__(self, err: bool = False): self.err = err; self.sent: List[Tuple[str, str]] = []
    def notify(self, title: str, body: str) -> None:
        self.sent.append((title, body))
        typer.echo(f"[{title}] {body}", err=self.err)
