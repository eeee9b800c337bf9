from typing import Protocol


class ConsolePort(Protocol):
    """Human-facing console lines, separate from diagnostic logging.

    Purely cosmetic: nothing printed here influences a poll outcome.
    """

    def highlight(self, msg: str) -> None:  # pragma: no cover - protocol
        """Emphasised line, used for change snapshots that differ from the last poll."""
        ...

    def warn(self, msg: str) -> None:  # pragma: no cover - protocol
        ...

    def plain(self, msg: str) -> None:  # pragma: no cover - protocol
        ...
