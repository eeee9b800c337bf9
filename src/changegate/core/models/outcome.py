"""Outcome of a single change status poll.

Every poll resolves to exactly one variant of the `Outcome` union. Expected
results (pending, rejected, timeouts) are values, not exceptions; the caller
inspects `is_terminal` / `is_fatal` to decide whether to keep polling.

`signal()` renders the compact marker understood by the step reporting layer:
either a bare HTTP-derived code (e.g. ``"401"``) or a structured JSON string
(``{"status": "error", "details": ...}``).
"""

import json
from enum import StrEnum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from changegate.core.models.change import ChangeDetails

TIMEOUT_CONTINUE_MARKER = "ChangeCreationFailure_DontFailTheStep"


class OutcomeKind(StrEnum):
    success = "success"
    pending = "pending"
    stopped = "stopped"
    failed = "failed"
    timeout_abort = "timeout_abort"
    timeout_continue = "timeout_continue"
    transport_error = "transport_error"


def _error_signal(*details: Any) -> str:
    """Structured error marker; called without details the key is left out."""
    payload: dict[str, Any] = {"status": "error"}
    if details:
        payload["details"] = details[0]
    return json.dumps(payload)


class _OutcomeBase(BaseModel):
    model_config = {"frozen": True}

    @property
    def is_terminal(self) -> bool:
        return True

    @property
    def is_fatal(self) -> bool:
        return True

    def signal(self) -> str:  # pragma: no cover - overridden by every variant
        raise NotImplementedError


class Success(_OutcomeBase):
    """Change approved (HTTP 200)."""

    kind: Literal[OutcomeKind.success] = OutcomeKind.success
    details: ChangeDetails = Field(default_factory=dict)

    @property
    def is_fatal(self) -> bool:
        return False

    def signal(self) -> str:
        return "true"


class Pending(_OutcomeBase):
    """Change awaiting a decision; poll again."""

    kind: Literal[OutcomeKind.pending] = OutcomeKind.pending
    details: ChangeDetails = Field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return False

    @property
    def is_fatal(self) -> bool:
        return False

    def signal(self) -> str:
        return json.dumps({"statusCode": "201", "details": self.details})


class Stopped(_OutcomeBase):
    """Change rejected or canceled by a user. Terminal but not an error."""

    kind: Literal[OutcomeKind.stopped] = OutcomeKind.stopped
    code: int = 202
    state: Optional[str] = None
    details: ChangeDetails = Field(default_factory=dict)

    @property
    def is_fatal(self) -> bool:
        return False

    def signal(self) -> str:
        return str(self.code)


class Failed(_OutcomeBase):
    """Change reached a failed state, or a state this gate does not know.

    Known failure states carry the remote `details` message; unknown states
    carry only the bare `code`.
    """

    kind: Literal[OutcomeKind.failed] = OutcomeKind.failed
    code: Optional[int] = None
    state: Optional[str] = None
    details: Any = None

    def signal(self) -> str:
        if self.code is not None:
            return str(self.code)
        if "details" not in self.model_fields_set:
            return _error_signal()
        return _error_signal(self.details)


class TimeoutAbort(_OutcomeBase):
    kind: Literal[OutcomeKind.timeout_abort] = OutcomeKind.timeout_abort
    timeout: float
    message: str

    def signal(self) -> str:
        return _error_signal(self.message)


class TimeoutContinue(_OutcomeBase):
    """Change was not created in time but the step must not fail."""

    kind: Literal[OutcomeKind.timeout_continue] = OutcomeKind.timeout_continue
    timeout: float
    message: str

    @property
    def is_terminal(self) -> bool:
        return False

    @property
    def is_fatal(self) -> bool:
        return False

    def signal(self) -> str:
        return TIMEOUT_CONTINUE_MARKER


class TransportError(_OutcomeBase):
    """HTTP level failure: no response, error status or unreadable body.

    `details` is only set for a 400 carrying a business error message, where
    it is surfaced verbatim. `diagnostic` is technical context for logs and is
    never part of the signal.
    """

    kind: Literal[OutcomeKind.transport_error] = OutcomeKind.transport_error
    code: int = 500
    details: Any = None
    diagnostic: Optional[str] = None

    def signal(self) -> str:
        if self.details is not None:
            return _error_signal(self.details)
        return str(self.code)


Outcome = Annotated[
    Union[
        Success,
        Pending,
        Stopped,
        Failed,
        TimeoutAbort,
        TimeoutContinue,
        TransportError,
    ],
    Field(discriminator="kind"),
]
