"""Terminal prompts built on rich.

Blocking reads run in a worker thread so the poll keeps ticking while the
operator thinks.
"""

from __future__ import annotations

import asyncio
from typing import TextIO

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from fleetpanel.allowlist import AllowListEditor, AllowListParams

ALLOW_LIST_HELP = "Toggle [bold]#[/bold], [bold]a[/bold]ll, [bold]n[/bold]one, [bold]s[/bold]ave, [bold]c[/bold]ancel"


def render_allow_list(editor: AllowListEditor) -> Table:
    table = Table(title=f"Allowed machine types ({editor.provider_name or 'unknown provider'})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Machine type")
    table.add_column("Allowed", justify="center")
    for i, name in enumerate(editor.catalog, start=1):
        table.add_row(str(i), name, "[green]✔[/green]" if name in editor.allowed else "")
    return table


class RichPrompts:
    def __init__(self, console: Console | None = None, *, stream: TextIO | None = None) -> None:
        self._console = console or Console()
        self._stream = stream

    async def confirm(self, prompt: str) -> bool:
        return await asyncio.to_thread(
            Confirm.ask, prompt, console=self._console, default=False, stream=self._stream
        )

    async def select_allow_list(self, params: AllowListParams) -> frozenset[str] | None:
        return await asyncio.to_thread(self._select_allow_list, params)

    def _select_allow_list(self, params: AllowListParams) -> frozenset[str] | None:
        editor = AllowListEditor(params)
        while True:
            self._console.print(render_allow_list(editor))
            answer = Prompt.ask(
                ALLOW_LIST_HELP, console=self._console, default="s", stream=self._stream
            ).strip().lower()

            match answer:
                case "s" | "save":
                    return editor.confirm()
                case "c" | "cancel":
                    editor.cancel()
                    return None
                case "a" | "all":
                    editor.toggle_select_all(not editor.is_all_selected())
                case "n" | "none":
                    editor.toggle_select_all(False)
                case number if number.isdigit() and 1 <= int(number) <= len(editor.catalog):
                    name = editor.catalog[int(number) - 1]
                    editor.toggle(name, name not in editor.allowed)
                case _:
                    self._console.print(f"[red]Unknown choice {answer!r}[/red]")
