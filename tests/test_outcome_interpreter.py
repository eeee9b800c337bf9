"""Unit tests for OutcomeInterpreter.

Covers transport classification, unreadable bodies, the change creation
timeout policy, output emission and the 201/200 state branches.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from changegate.adapters.output_sink_inmemory import InMemoryOutputSink
from changegate.core.interfaces.output_sink import (
    CHANGE_REQUEST_NUMBER,
    CHANGE_REQUEST_SYS_ID,
)
from changegate.core.managers.outcome_interpreter import OutcomeInterpreter
from changegate.core.models.change import PollContext
from changegate.core.models.outcome import (
    Failed,
    Pending,
    Stopped,
    Success,
    TimeoutAbort,
    TimeoutContinue,
    TransportError,
)

START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


# --- Test Fixtures ---

class RecordingConsole:
    def __init__(self):
        self.highlighted = []
        self.warnings = []
        self.lines = []

    def highlight(self, msg):
        self.highlighted.append(msg)

    def warn(self, msg):
        self.warnings.append(msg)

    def plain(self, msg):
        self.lines.append(msg)


class RecordingLogger:
    def __init__(self):
        self.records = []

    def info(self, msg, *args):
        self.records.append(("info", msg % args if args else msg))

    def warning(self, msg, *args):
        self.records.append(("warning", msg % args if args else msg))

    def error(self, msg, *args):
        self.records.append(("error", msg % args if args else msg))

    def debug(self, msg, *args):
        self.records.append(("debug", msg % args if args else msg))


@pytest.fixture
def sink():
    return InMemoryOutputSink()


@pytest.fixture
def console():
    return RecordingConsole()


def make_interpreter(sink, console, elapsed_seconds=0):
    return OutcomeInterpreter(
        output_sink=sink,
        console=console,
        logger=RecordingLogger(),
        clock=lambda: START + timedelta(seconds=elapsed_seconds),
    )


def make_context(timeout=60, abort=True, prev=None):
    return PollContext(
        change_creation_start_time=START,
        change_creation_timeout=timeout,
        abort_on_change_creation_failure=abort,
        prev_poll_change_details=prev or {},
    )


def response(status, details=None, body=None):
    if body is None:
        body = {"result": {"details": details if details is not None else {}}}
    return {"status": status, "headers": {}, "body": body}


# --- Transport classification ---

class TestTransportClassification:
    def test_no_response_is_server_error(self, sink, console):
        outcome = make_interpreter(sink, console).interpret(None, make_context())
        assert isinstance(outcome, TransportError)
        assert outcome.code == 500
        assert outcome.signal() == "500"
        assert sink.outputs == {}

    @pytest.mark.parametrize("status", [302, 405, 418, 502, 503, 504, 500])
    def test_disallowed_or_server_status_is_500(self, sink, console, status):
        details = {"status": "pending_decision", "number": "CHG001"}
        outcome = make_interpreter(sink, console).interpret(
            response(status, details), make_context()
        )
        assert isinstance(outcome, TransportError)
        assert outcome.signal() == "500"
        assert outcome.is_fatal is True
        assert sink.outputs == {}

    def test_400_with_error_message_carries_it(self, sink, console):
        body = {"result": {"errorMessage": "No change request found for this pipeline"}}
        outcome = make_interpreter(sink, console).interpret(
            response(400, body=body), make_context()
        )
        assert isinstance(outcome, TransportError)
        assert outcome.code == 400
        assert outcome.details == "No change request found for this pipeline"
        assert json.loads(outcome.signal()) == {
            "status": "error",
            "details": "No change request found for this pipeline",
        }

    @pytest.mark.parametrize(
        "body",
        [{"result": {}}, {"error": "bad"}, "Bad Request", None, {"result": "oops"}],
    )
    def test_400_without_error_message_is_bare(self, sink, console, body):
        outcome = make_interpreter(sink, console).interpret(
            {"status": 400, "headers": {}, "body": body}, make_context()
        )
        assert outcome.signal() == "400"
        assert outcome.details is None

    @pytest.mark.parametrize("status", [401, 403, 404])
    def test_client_errors_are_bare_codes(self, sink, console, status):
        outcome = make_interpreter(sink, console).interpret(
            response(status, {"number": "CHG001"}), make_context()
        )
        assert isinstance(outcome, TransportError)
        assert outcome.code == status
        assert outcome.signal() == str(status)
        assert sink.outputs == {}

    @pytest.mark.parametrize(
        "error_message",
        [{"code": "E42", "text": "No change found"}, ["first", "second"]],
    )
    def test_400_structured_error_message_is_passed_through(self, sink, console, error_message):
        body = {"result": {"errorMessage": error_message}}
        outcome = make_interpreter(sink, console).interpret(
            response(400, body=body), make_context()
        )
        assert outcome.details == error_message
        assert json.loads(outcome.signal()) == {"status": "error", "details": error_message}


# --- Unreadable bodies ---

class TestMalformedResponse:
    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"result": None},
            {"result": {}},
            {"result": {"details": None}},
            {"result": {"details": "CHG001"}},
            "<html>gateway</html>",
        ],
    )
    def test_missing_result_details_is_500(self, sink, console, body):
        outcome = make_interpreter(sink, console).interpret(
            {"status": 201, "headers": {}, "body": body}, make_context()
        )
        assert isinstance(outcome, TransportError)
        assert outcome.code == 500
        assert outcome.diagnostic
        assert outcome.signal() == "500"


# --- Change creation timeout ---

class TestChangeCreationTimeout:
    def test_abort_when_flag_set(self, sink, console):
        outcome = make_interpreter(sink, console, elapsed_seconds=61).interpret(
            response(201, {}), make_context(timeout=60, abort=True)
        )
        assert isinstance(outcome, TimeoutAbort)
        assert outcome.is_fatal is True
        payload = json.loads(outcome.signal())
        assert payload["status"] == "error"
        assert payload["details"] == (
            "Timeout after 60 seconds. Workflow execution is aborted since "
            "abortOnChangeCreationFailure flag is true"
        )

    def test_continue_when_flag_unset(self, sink, console):
        outcome = make_interpreter(sink, console, elapsed_seconds=61).interpret(
            response(201, {}), make_context(timeout=60, abort=False)
        )
        assert isinstance(outcome, TimeoutContinue)
        assert outcome.is_fatal is False
        assert outcome.is_terminal is False
        assert outcome.signal() == "ChangeCreationFailure_DontFailTheStep"
        assert len(console.warnings) == 1
        assert "60 seconds" in console.warnings[0]

    def test_not_elapsed_keeps_waiting_for_change(self, sink, console):
        outcome = make_interpreter(sink, console, elapsed_seconds=60).interpret(
            response(201, {}), make_context(timeout=60)
        )
        assert isinstance(outcome, Pending)
        assert outcome.details == {}
        assert outcome.is_terminal is False

    def test_timeout_ignored_once_change_exists(self, sink, console):
        details = {"status": "pending_decision", "number": "CHG001"}
        outcome = make_interpreter(sink, console, elapsed_seconds=600).interpret(
            response(201, details), make_context(timeout=60)
        )
        assert isinstance(outcome, Pending)

    def test_timeout_applies_to_200_with_empty_details(self, sink, console):
        outcome = make_interpreter(sink, console, elapsed_seconds=61).interpret(
            response(200, {}), make_context(timeout=60, abort=True)
        )
        assert isinstance(outcome, TimeoutAbort)

    def test_large_timeout_is_rendered_literally(self, sink, console):
        outcome = make_interpreter(sink, console, elapsed_seconds=1000001).interpret(
            response(201, {}), make_context(timeout=1000000, abort=True)
        )
        assert isinstance(outcome, TimeoutAbort)
        details = json.loads(outcome.signal())["details"]
        assert details.startswith("Timeout after 1000000 seconds.")

    def test_start_time_in_other_offset_is_compared_as_instant(self, sink, console):
        context = PollContext(
            change_creation_start_time=START.astimezone(timezone(timedelta(hours=-5))),
            change_creation_timeout=60,
        )
        interpreter = make_interpreter(sink, console, elapsed_seconds=5)
        assert isinstance(interpreter.interpret(response(201, {}), context), Pending)
        interpreter = make_interpreter(sink, console, elapsed_seconds=61)
        assert isinstance(interpreter.interpret(response(201, {}), context), TimeoutAbort)


# --- State resolution ---

class TestPendingDecision:
    def test_outputs_emitted_before_pending(self, sink, console):
        details = {"status": "pending_decision", "number": "CHG001", "sys_id": "abc123"}
        outcome = make_interpreter(sink, console).interpret(
            response(201, details), make_context()
        )
        assert isinstance(outcome, Pending)
        assert outcome.details == details
        assert sink.writes == [
            (CHANGE_REQUEST_NUMBER, "CHG001"),
            (CHANGE_REQUEST_SYS_ID, "abc123"),
        ]

    def test_signal_carries_details(self, sink, console):
        details = {"status": "pending_decision", "number": "CHG001"}
        outcome = make_interpreter(sink, console).interpret(
            response(201, details), make_context()
        )
        assert json.loads(outcome.signal()) == {"statusCode": "201", "details": details}

    def test_changed_snapshot_is_printed(self, sink, console):
        details = {"status": "pending_decision", "number": "CHG001"}
        make_interpreter(sink, console).interpret(response(201, details), make_context())
        assert console.highlighted == [json.dumps(details)]

    def test_unchanged_snapshot_is_not_printed(self, sink, console):
        details = {"status": "pending_decision", "number": "CHG001"}
        make_interpreter(sink, console).interpret(
            response(201, details), make_context(prev=dict(details))
        )
        assert console.highlighted == []
        # outputs do not depend on change detection
        assert sink.outputs[CHANGE_REQUEST_NUMBER] == "CHG001"


class TestTerminalStates:
    @pytest.mark.parametrize("state", ["failed", "error"])
    def test_failed_states_carry_remote_details(self, sink, console, state):
        details = {"status": state, "number": "CHG001", "details": "Change creation failed"}
        outcome = make_interpreter(sink, console).interpret(
            response(201, details), make_context()
        )
        assert isinstance(outcome, Failed)
        assert outcome.is_fatal is True
        assert json.loads(outcome.signal()) == {
            "status": "error",
            "details": "Change creation failed",
        }
        assert sink.outputs[CHANGE_REQUEST_NUMBER] == "CHG001"

    @pytest.mark.parametrize("state", ["rejected", "canceled_by_user"])
    def test_rejected_or_canceled_is_stopped_202(self, sink, console, state):
        details = {"status": state, "number": "CHG001"}
        outcome = make_interpreter(sink, console).interpret(
            response(201, details), make_context()
        )
        assert isinstance(outcome, Stopped)
        assert outcome.signal() == "202"
        assert outcome.is_terminal is True
        assert outcome.is_fatal is False
        assert console.highlighted == [json.dumps(details)]

    @pytest.mark.parametrize("state", ["scheduled", "implement", None])
    def test_unknown_state_is_bare_201(self, sink, console, state):
        details = {"status": state, "number": "CHG001"}
        outcome = make_interpreter(sink, console).interpret(
            response(201, details), make_context()
        )
        assert isinstance(outcome, Failed)
        assert outcome.code == 201
        assert outcome.signal() == "201"

    @pytest.mark.parametrize("state", ["implement", "pending_decision", "rejected", None])
    def test_200_is_success_whatever_the_state(self, sink, console, state):
        details = {"status": state, "number": "CHG001", "sys_id": "abc123"}
        outcome = make_interpreter(sink, console).interpret(
            response(200, details), make_context()
        )
        assert isinstance(outcome, Success)
        assert outcome.signal() == "true"
        assert sink.outputs == {
            CHANGE_REQUEST_NUMBER: "CHG001",
            CHANGE_REQUEST_SYS_ID: "abc123",
        }
        assert console.lines == ["****Change is Approved."]

    def test_200_without_outputs_emits_nothing(self, sink, console):
        outcome = make_interpreter(sink, console).interpret(
            response(200, {"status": "implement"}), make_context()
        )
        assert isinstance(outcome, Success)
        assert sink.outputs == {}

    def test_failed_state_without_remote_message_omits_details(self, sink, console):
        outcome = make_interpreter(sink, console).interpret(
            response(201, {"status": "failed", "number": "CHG001"}), make_context()
        )
        assert isinstance(outcome, Failed)
        assert json.loads(outcome.signal()) == {"status": "error"}

    def test_failed_state_with_null_remote_message_keeps_null(self, sink, console):
        outcome = make_interpreter(sink, console).interpret(
            response(201, {"status": "error", "details": None}), make_context()
        )
        assert json.loads(outcome.signal()) == {"status": "error", "details": None}
