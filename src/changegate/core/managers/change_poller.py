"""ChangePoller: one changeStatus request/response cycle.

Build the authenticated request, send it exactly once, and let the
OutcomeInterpreter decide what the caller does next. Retries and sleeping
between polls belong to the caller.
"""

from __future__ import annotations

import json
from typing import Optional

from changegate.core import settings
from changegate.core.exceptions import NoResponseError
from changegate.core.interfaces.http_client import HttpClientPort
from changegate.core.interfaces.logging import LoggingPort
from changegate.core.managers.outcome_interpreter import OutcomeInterpreter
from changegate.core.managers.request_builder import build_change_status_request
from changegate.core.models.change import PollContext, PollRequest
from changegate.core.models.outcome import Outcome


class ChangePoller:
    def __init__(
        self,
        http_client: HttpClientPort,
        interpreter: OutcomeInterpreter,
        logger: Optional[LoggingPort] = None,
        request_timeout: Optional[float] = None,
    ) -> None:
        self._http = http_client
        self._interpreter = interpreter
        self._logger = logger or settings.logger
        self._request_timeout = request_timeout

    async def poll(self, request: PollRequest, context: PollContext) -> Outcome:
        change_request = build_change_status_request(request)

        self._logger.debug("Endpoint URL: %s", change_request.url)
        self._logger.debug("HTTP Headers: %s", json.dumps(change_request.redacted_headers()))
        self._logger.debug("Parameters:")
        self._logger.debug("  pipelineName: %s", request.pipeline_name)
        self._logger.debug("  buildNumber: %s", request.run_id)
        self._logger.debug("  attemptNumber: %s", request.run_attempt)
        self._logger.debug("  jobname: %s", request.job_name)

        try:
            response = await self._http.get(
                change_request.url,
                headers=change_request.headers,
                timeout=self._request_timeout,
            )
        except NoResponseError as exc:
            self._logger.debug("[poll] %s diagnostic=%s", exc.message, exc.diagnostic)
            response = None

        outcome = self._interpreter.interpret(response, context)
        self._logger.debug("[poll] outcome kind=%s signal=%s", outcome.kind, outcome.signal())
        return outcome
