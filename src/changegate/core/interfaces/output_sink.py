"""OutputSinkPort: hexagonal port for publishing named step outputs.

The CI host (GitHub Actions) exposes step outputs to later steps; the core
only knows output names and string values.
"""
from abc import ABC, abstractmethod

CHANGE_REQUEST_NUMBER = "change-request-number"
CHANGE_REQUEST_SYS_ID = "change-request-sys-id"


class OutputSinkPort(ABC):
    @abstractmethod
    def set_output(self, name: str, value: str) -> None:
        """Publish `value` under `name`; a later call for the same name wins."""
        raise NotImplementedError
