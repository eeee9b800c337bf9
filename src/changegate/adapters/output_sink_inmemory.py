"""In-memory implementation of OutputSinkPort.

Keeps outputs in a dict plus the ordered list of writes. Suitable for tests
and for running the gate outside a CI host.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from changegate.core.interfaces.output_sink import OutputSinkPort


class InMemoryOutputSink(OutputSinkPort):
    def __init__(self) -> None:
        self.outputs: Dict[str, str] = {}
        self.writes: List[Tuple[str, str]] = []

    def set_output(self, name: str, value: str) -> None:
        self.outputs[name] = value
        self.writes.append((name, value))
