"""PollRunner: repeats change status polls until the gate can decide.

Main loop:
1. Poll once through ChangePoller
2. Stop on a terminal outcome, or on TimeoutContinue (step must not fail)
3. Thread the latest change snapshot into the next PollContext
4. Sleep `poll_interval`, unless the overall `poll_timeout` would be exceeded
"""

from __future__ import annotations

import asyncio
import json
import time
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel

from changegate.core import settings
from changegate.core.config import ChangeGateConfig
from changegate.core.interfaces.logging import LoggingPort
from changegate.core.managers.change_poller import ChangePoller
from changegate.core.models.change import PollContext, PollRequest
from changegate.core.models.outcome import (
    Failed,
    Outcome,
    Pending,
    Stopped,
    Success,
    TimeoutAbort,
    TimeoutContinue,
    TransportError,
)
from changegate.core.utils.durations import format_seconds

TRANSPORT_ERROR_MESSAGES = {
    400: "Bad Request. A bad request was sent to the change status API.",
    401: "The user credentials are incorrect.",
    403: "Forbidden. The user is not an admin or does not have the DevOps role.",
    404: "Not found. The requested change status endpoint was not found.",
    500: "Internal server error. An unexpected error occurred while processing the request.",
}


class RunResult(BaseModel):
    """Final outcome of a polling run.

    Attributes:
        outcome: Last outcome returned by the poller
        polls: Number of polls issued
        timed_out: True when the overall polling budget ran out before a decision
    """

    outcome: Outcome
    polls: int
    timed_out: bool = False

    model_config = {"frozen": True}

    @property
    def passed(self) -> bool:
        """Whether the CI step should succeed."""
        if self.timed_out:
            return False
        return isinstance(self.outcome, (Success, TimeoutContinue))


def describe_outcome(result: RunResult, poll_timeout: float) -> str:
    """Human-readable step message for the final outcome."""
    outcome = result.outcome
    if result.timed_out:
        return f"Timeout after {format_seconds(poll_timeout)} seconds waiting for the change decision."
    if isinstance(outcome, Success):
        return "Change is approved."
    if isinstance(outcome, TimeoutContinue):
        return outcome.message
    if isinstance(outcome, TimeoutAbort):
        return outcome.message
    if isinstance(outcome, Stopped):
        return "Change has been created but the change is either rejected or cancelled."
    if isinstance(outcome, Failed):
        if outcome.code is not None:
            return f"Change is in an unexpected state: {outcome.state!r}."
        if outcome.details is None:
            return "Change failed."
        return f"Change failed: {outcome.details}"
    if isinstance(outcome, TransportError):
        if isinstance(outcome.details, str):
            return outcome.details
        if outcome.details is not None:
            return json.dumps(outcome.details)
        return TRANSPORT_ERROR_MESSAGES.get(outcome.code, f"Unexpected HTTP status {outcome.code}.")
    # Pending only surfaces here when the budget check above did not trigger
    return f"Change is still pending: {outcome.signal()}"


class PollRunner:
    def __init__(
        self,
        poller: ChangePoller,
        config: ChangeGateConfig,
        logger: Optional[LoggingPort] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._poller = poller
        self.config = config
        self._logger = logger or settings.logger
        self._sleep = sleep
        self._monotonic = monotonic

    async def run(
        self, request: PollRequest, context: Optional[PollContext] = None
    ) -> RunResult:
        context = context or self.config.initial_context()
        started = self._monotonic()
        polls = 0

        while True:
            outcome = await self._poller.poll(request, context)
            polls += 1

            if outcome.is_terminal or isinstance(outcome, TimeoutContinue):
                self._logger.debug(f"[run] stopping after {polls} polls kind={outcome.kind}")
                return RunResult(outcome=outcome, polls=polls)

            if isinstance(outcome, Pending):
                context = context.advance(outcome.details)

            elapsed = self._monotonic() - started
            if elapsed + self.config.poll_interval > self.config.poll_timeout:
                self._logger.warning(
                    f"[run] polling budget exhausted elapsed={elapsed:.1f}s limit={self.config.poll_timeout}s"
                )
                return RunResult(outcome=outcome, polls=polls, timed_out=True)

            await self._sleep(self.config.poll_interval)
