# Logging adapter for application-wide logging
from changegate.adapters.logging_adapter import LoggingAdapter

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings
from rich import print

from changegate.core.interfaces.logging import LoggingPort

# using pydantic_settings to manage environment variables
# and do automatic type casting in a central place
class GateSettings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore"
    }
    CHANGEGATE_LOG_LEVEL: str = "INFO"
    CHANGEGATE_INSTANCE_URL: str = ""
    CHANGEGATE_TOOL_ID: str = ""
    CHANGEGATE_USERNAME: str = ""
    CHANGEGATE_PASSWORD: SecretStr = SecretStr("")
    CHANGEGATE_TOKEN: SecretStr = SecretStr("")
    CHANGEGATE_JOB_NAME: str = ""
    CHANGEGATE_INTERVAL: int = 100  # seconds between polls
    CHANGEGATE_TIMEOUT: int = 3600  # seconds, overall polling budget
    CHANGEGATE_CHANGE_CREATION_TIMEOUT: int = 3600  # seconds
    CHANGEGATE_ABORT_ON_CHANGE_CREATION_FAILURE: bool = True
    # Per-request HTTP timeout; None lets the adapter default apply
    CHANGEGATE_REQUEST_TIMEOUT: float | None = None

    # Provided by the GitHub Actions runner
    GITHUB_REPOSITORY: str = ""
    GITHUB_WORKFLOW: str = ""
    GITHUB_RUN_ID: str = ""
    GITHUB_RUN_ATTEMPT: str = "1"
    GITHUB_OUTPUT: str | None = None

    def print_settings(self, logger: LoggingPort):
        """Prints the settings for debugging purposes"""
        logger.info("Change gate settings:")
        print(self)

    @field_validator("CHANGEGATE_INSTANCE_URL", mode="before")
    def strip_trailing_slash(cls, value: str) -> str:
        """Ensure CHANGEGATE_INSTANCE_URL has no trailing slash."""
        return str(value).rstrip("/")


app_settings = GateSettings()

logger: LoggingPort = LoggingAdapter("changegate", app_settings.CHANGEGATE_LOG_LEVEL)


def set_logger(new_logger: LoggingPort) -> None:
    """Swap the module-level logger (composition root only)."""
    global logger
    logger = new_logger
