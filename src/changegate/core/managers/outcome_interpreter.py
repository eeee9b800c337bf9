"""OutcomeInterpreter: turns one changeStatus HTTP result into an Outcome.

Evaluation order:
1. Transport classification (missing response, disallowed or error status).
2. Read `result.details` from the body (unreadable body -> 500).
3. Change creation timeout, only while the change record does not exist yet.
4. Publish change number / sys_id outputs whenever present.
5. Resolve the change state against the HTTP status (201 = not yet
   implementable, 200 = approved).

Every path returns a value; nothing is raised for expected outcomes.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from changegate.core import settings
from changegate.core.interfaces.console import ConsolePort
from changegate.core.interfaces.logging import LoggingPort
from changegate.core.interfaces.output_sink import (
    CHANGE_REQUEST_NUMBER,
    CHANGE_REQUEST_SYS_ID,
    OutputSinkPort,
)
from changegate.core.models.change import ChangeDetails, PollContext
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
from changegate.core.utils.change_diff import is_change_details_changed
from changegate.core.utils.durations import format_seconds

ALLOWED_STATUS_CODES = frozenset({200, 201, 400, 401, 403, 404, 500})
BARE_CLIENT_ERRORS = frozenset({401, 403, 404})

STATE_PENDING_DECISION = "pending_decision"
FAILED_STATES = frozenset({"failed", "error"})
STOPPED_STATES = frozenset({"rejected", "canceled_by_user"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OutcomeInterpreter:
    """Interprets changeStatus responses against the caller's PollContext.

    Attributes:
        output_sink: Receives change-request-number / change-request-sys-id
        console: Human-facing lines on change snapshots and timeouts
        clock: Returns the current aware datetime (injectable for tests)
    """

    def __init__(
        self,
        output_sink: OutputSinkPort,
        console: ConsolePort,
        logger: Optional[LoggingPort] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._outputs = output_sink
        self._console = console
        self._logger = logger or settings.logger
        self._clock = clock

    def interpret(
        self, response: Optional[Dict[str, Any]], context: PollContext
    ) -> Outcome:
        """Map one HTTP result (None when no response arrived) to an Outcome."""
        if response is None:
            self._logger.debug("[poll] no response received")
            return TransportError(code=500, diagnostic="no response received")

        transport_error = self.classify_transport(response)
        if transport_error is not None:
            return transport_error

        self._logger.debug("[poll] polling started to fetch change info")

        details = self._read_change_details(response.get("body"))
        if details is None:
            return TransportError(
                code=500,
                diagnostic="Could not read change status details from API response",
            )

        if not details:
            timed_out = self._check_creation_timeout(context)
            if timed_out is not None:
                return timed_out

        self._emit_outputs(details)
        return self._resolve_state(response["status"], details, context)

    def classify_transport(self, response: Dict[str, Any]) -> Optional[TransportError]:
        """Return a TransportError for anything but a 200/201 response."""
        status = response.get("status")
        if status in (200, 201):
            return None

        self._logger.debug(
            "[poll] error response status=%s body=%s", status, response.get("body")
        )

        if status not in ALLOWED_STATUS_CODES or status == 500:
            return TransportError(code=500, diagnostic=f"upstream status {status}")

        if status in BARE_CLIENT_ERRORS:
            return TransportError(code=status)

        # 400: surface the business error message as sent, when there is one
        error_message = self._business_error_message(response.get("body"))
        if error_message:
            return TransportError(code=400, details=error_message)
        return TransportError(code=400)

    def _business_error_message(self, body: Any) -> Any:
        if not isinstance(body, dict):
            return None
        result = body.get("result")
        if not isinstance(result, dict):
            return None
        return result.get("errorMessage")

    def _read_change_details(self, body: Any) -> Optional[ChangeDetails]:
        if not isinstance(body, dict):
            self._logger.error("[poll] response body is not a JSON object")
            return None
        result = body.get("result")
        if not isinstance(result, dict):
            self._logger.error("[poll] response body has no 'result' object")
            return None
        details = result.get("details")
        if not isinstance(details, dict):
            self._logger.error("[poll] response result has no 'details' object")
            return None
        return details

    def _check_creation_timeout(self, context: PollContext) -> Optional[Outcome]:
        """Apply the change creation timeout while the change does not exist."""
        elapsed = (self._clock() - context.change_creation_start_time).total_seconds()
        if elapsed <= context.change_creation_timeout:
            return None

        timeout = format_seconds(context.change_creation_timeout)
        if context.abort_on_change_creation_failure:
            message = (
                f"Timeout after {timeout} seconds. Workflow execution is aborted "
                "since abortOnChangeCreationFailure flag is true"
            )
            self._logger.warning("[poll] change creation timed out elapsed=%ss; aborting", elapsed)
            return TimeoutAbort(timeout=context.change_creation_timeout, message=message)

        message = (
            f"Timeout occurred after {timeout} seconds but pipeline will continue "
            "since abortOnChangeCreationFailure flag is false"
        )
        self._console.warn(message)
        return TimeoutContinue(timeout=context.change_creation_timeout, message=message)

    def _emit_outputs(self, details: ChangeDetails) -> None:
        if details.get("number"):
            self._outputs.set_output(CHANGE_REQUEST_NUMBER, str(details["number"]))
        if details.get("sys_id"):
            self._outputs.set_output(CHANGE_REQUEST_SYS_ID, str(details["sys_id"]))

    def _report_if_changed(self, details: ChangeDetails, context: PollContext) -> None:
        if is_change_details_changed(context.prev_poll_change_details, details):
            self._console.highlight(json.dumps(details))

    def _resolve_state(
        self, status: int, details: ChangeDetails, context: PollContext
    ) -> Outcome:
        state = details.get("status")
        if not isinstance(state, str):
            state = None if state is None else json.dumps(state)

        if status == 200:
            self._report_if_changed(details, context)
            self._console.plain("****Change is Approved.")
            return Success(details=details)

        # 201: change not created yet, or created and not yet approved
        if state == STATE_PENDING_DECISION:
            self._report_if_changed(details, context)
            return Pending(details=details)

        if state in FAILED_STATES:
            # An absent remote message stays absent in the signal
            if "details" not in details:
                return Failed(state=state)
            return Failed(state=state, details=details["details"])

        if state in STOPPED_STATES:
            self._report_if_changed(details, context)
            return Stopped(code=202, state=state, details=details)

        if not details:
            # Change not created yet and creation timeout not reached
            return Pending(details=details)

        self._logger.debug("[poll] unexpected change state=%s", state)
        return Failed(code=201, state=state)
