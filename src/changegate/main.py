# main.py
import asyncio
import sys

from changegate.adapters.aiohttp_client_adapter import AioHttpClientAdapter
from changegate.adapters.github_output_adapter import GitHubOutputAdapter
from changegate.adapters.logging_adapter import LoggingAdapter
from changegate.adapters.rich_console_adapter import RichConsoleAdapter
from changegate.core.config import ChangeGateConfig, poll_request_from_app_settings
from changegate.core.exceptions import ChangeGateConfigurationError
from changegate.core.interfaces.logging import LoggingPort
from changegate.core.logging_config import configure_logging, run_id_var
from changegate.core.managers.change_poller import ChangePoller
from changegate.core.managers.outcome_interpreter import OutcomeInterpreter
from changegate.core.managers.poll_runner import PollRunner, RunResult, describe_outcome
from changegate.core.models.change import PollRequest
from changegate.core.settings import app_settings, set_logger


# main lives at the outermost layer (not in core)
# Instantiates all the concrete adapters
# Wires dependencies together
# Runs the gate and turns its result into an exit code

async def run_gate(
    request: PollRequest, config: ChangeGateConfig, logger: LoggingPort
) -> RunResult:
    interpreter = OutcomeInterpreter(
        output_sink=GitHubOutputAdapter(app_settings.GITHUB_OUTPUT),
        console=RichConsoleAdapter(),
        logger=logger,
    )
    async with AioHttpClientAdapter() as http_client:
        poller = ChangePoller(
            http_client,
            interpreter,
            logger=logger,
            request_timeout=config.request_timeout,
        )
        runner = PollRunner(poller, config, logger=logger)
        return await runner.run(request)


def main() -> int:
    # Central logging configuration before any adapter emits
    configure_logging(app_settings.CHANGEGATE_LOG_LEVEL)
    logger = LoggingAdapter("changegate", app_settings.CHANGEGATE_LOG_LEVEL)
    set_logger(logger)
    run_id_var.set(f"{app_settings.GITHUB_RUN_ID or '-'}.{app_settings.GITHUB_RUN_ATTEMPT}")

    if app_settings.CHANGEGATE_LOG_LEVEL.upper() == "DEBUG":
        app_settings.print_settings(logger)

    try:
        request = poll_request_from_app_settings(app_settings)
    except ChangeGateConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc.message)
        return 1

    config = ChangeGateConfig.from_app_settings(app_settings)
    result = asyncio.run(run_gate(request, config, logger))

    message = describe_outcome(result, config.poll_timeout)
    if result.passed:
        logger.info(message)
        return 0

    logger.error(message)
    return 1


if __name__ == "__main__":
    sys.exit(main())
