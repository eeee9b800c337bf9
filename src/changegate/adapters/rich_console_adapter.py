from rich.console import Console
from rich.markup import escape


class RichConsoleAdapter:
    """ConsolePort backed by a rich Console.

    Change snapshots are printed bold green, timeout warnings orange on stderr.
    """

    def __init__(self, console: Console | None = None, error_console: Console | None = None):
        self._console = console or Console(highlight=False)
        self._error_console = error_console or Console(stderr=True, highlight=False)

    def highlight(self, msg: str) -> None:
        self._console.print(f"\n [bold green]{escape(msg)}[/bold green]")

    def warn(self, msg: str) -> None:
        self._error_console.print(f"\n    [orange1]{escape(msg)}[/orange1]")

    def plain(self, msg: str) -> None:
        self._console.print(f"\n{escape(msg)}")
