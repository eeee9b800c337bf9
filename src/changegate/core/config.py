"""Configuration models for core domain components.

Pydantic-based configuration consolidating the settings the poll runner
needs, so the composition root can inject them and tests can build custom ones.
"""

from typing import Optional
from pydantic import BaseModel, Field

from changegate.core.exceptions import ChangeGateConfigurationError
from changegate.core.models.change import Credentials, PollContext, PollRequest


class ChangeGateConfig(BaseModel):
    """Configuration for the change gate poll runner.

    Attributes:
        poll_interval: Seconds between change status polls
        poll_timeout: Overall seconds to keep polling before giving up
        change_creation_timeout: Seconds to wait for the change record to appear
        abort_on_change_creation_failure: Fail the step when the change never appears
        request_timeout: Per-request HTTP timeout (None = adapter default)
    """

    poll_interval: float = Field(
        default=100.0,
        gt=0,
        description="Interval in seconds between change status polling requests"
    )

    poll_timeout: float = Field(
        default=3600.0,
        gt=0,
        description="Maximum time in seconds to keep polling for a decision"
    )

    change_creation_timeout: float = Field(
        default=3600.0,
        ge=0,
        description="Maximum time in seconds to wait for the change request to be created"
    )

    abort_on_change_creation_failure: bool = Field(
        default=True,
        description="Fail the step when the change request is not created in time"
    )

    request_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Total timeout in seconds for a single changeStatus request"
    )

    model_config = {
        "frozen": True,  # Immutable after creation for safety
        "extra": "forbid",  # Reject unknown fields
    }

    @classmethod
    def from_app_settings(cls, settings) -> "ChangeGateConfig":
        """Factory method to construct config from GateSettings instance.

        Args:
            settings: GateSettings instance from core.settings

        Returns:
            ChangeGateConfig with values from app settings
        """
        return cls(
            poll_interval=settings.CHANGEGATE_INTERVAL,
            poll_timeout=settings.CHANGEGATE_TIMEOUT,
            change_creation_timeout=settings.CHANGEGATE_CHANGE_CREATION_TIMEOUT,
            abort_on_change_creation_failure=settings.CHANGEGATE_ABORT_ON_CHANGE_CREATION_FAILURE,
            request_timeout=settings.CHANGEGATE_REQUEST_TIMEOUT,
        )

    def initial_context(self) -> PollContext:
        """Context for the first poll; the creation clock starts now."""
        return PollContext(
            change_creation_timeout=self.change_creation_timeout,
            abort_on_change_creation_failure=self.abort_on_change_creation_failure,
        )


def poll_request_from_app_settings(settings) -> PollRequest:
    """Build the PollRequest for this pipeline run from GateSettings.

    Raises:
        ChangeGateConfigurationError: instance URL, tool id, or credentials missing
    """
    missing = [
        name
        for name in ("CHANGEGATE_INSTANCE_URL", "CHANGEGATE_TOOL_ID", "CHANGEGATE_JOB_NAME")
        if not getattr(settings, name)
    ]
    if missing:
        raise ChangeGateConfigurationError(
            f"Missing required settings: {', '.join(missing)}"
        )

    credentials = Credentials(
        username=settings.CHANGEGATE_USERNAME,
        password=settings.CHANGEGATE_PASSWORD,
        token=settings.CHANGEGATE_TOKEN,
    )
    if not credentials.uses_token and not (
        credentials.username and credentials.password.get_secret_value()
    ):
        raise ChangeGateConfigurationError(
            "Either CHANGEGATE_TOKEN or CHANGEGATE_USERNAME and CHANGEGATE_PASSWORD must be set"
        )

    return PollRequest(
        instance_url=settings.CHANGEGATE_INSTANCE_URL,
        tool_id=settings.CHANGEGATE_TOOL_ID,
        credentials=credentials,
        job_name=settings.CHANGEGATE_JOB_NAME,
        repository=settings.GITHUB_REPOSITORY,
        workflow=settings.GITHUB_WORKFLOW,
        run_id=settings.GITHUB_RUN_ID,
        run_attempt=settings.GITHUB_RUN_ATTEMPT,
    )
