"""GitHub Actions step output adapter.

Appends outputs to the file named by `GITHUB_OUTPUT`, using the same format as
the runner toolkit: `name=value` for single-line values and a heredoc block
with a random delimiter when the value spans lines.
"""
from __future__ import annotations

import os
import uuid

from changegate.core.interfaces.output_sink import OutputSinkPort
from changegate.core.settings import logger


class GitHubOutputAdapter(OutputSinkPort):
    def __init__(self, output_file: str | None = None) -> None:
        self._output_file = output_file or os.environ.get("GITHUB_OUTPUT")

    def _format(self, name: str, value: str) -> str:
        if "\n" not in value and "\r" not in value:
            return f"{name}={value}\n"
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"

    def set_output(self, name: str, value: str) -> None:
        if not self._output_file:
            # Old runners without GITHUB_OUTPUT read the workflow command from stdout
            print(f"::set-output name={name}::{value}")
            return
        with open(self._output_file, "a", encoding="utf-8") as f:
            f.write(self._format(name, value))
        logger.debug("[output] %s=%s", name, value)
