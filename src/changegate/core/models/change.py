from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import AwareDatetime, BaseModel, Field, SecretStr

# Open mapping describing the remote change record. Empty until the change
# has been created on the remote side.
ChangeDetails = Dict[str, Any]


class Credentials(BaseModel):
    username: str = ""
    password: SecretStr = SecretStr("")
    token: SecretStr = SecretStr("")

    model_config = {"frozen": True}

    @property
    def uses_token(self) -> bool:
        """Token auth wins whenever a non-empty token is supplied."""
        return self.token.get_secret_value() != ""


class PollRequest(BaseModel):
    """Identifies the change request of one pipeline job run."""

    instance_url: str
    tool_id: str
    credentials: Credentials
    job_name: str
    repository: str
    workflow: str
    run_id: str
    run_attempt: str = "1"

    model_config = {"frozen": True}

    @property
    def pipeline_name(self) -> str:
        return f"{self.repository}/{self.workflow}"


class PollContext(BaseModel):
    """Continuation state the caller threads through successive polls.

    Notes:
    - `change_creation_start_time` is fixed at the first poll and never changes;
      it must be timezone-aware.
    - `prev_poll_change_details` only gates console output; it never affects
      the returned outcome.
    """

    change_creation_start_time: AwareDatetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    change_creation_timeout: float = Field(default=3600, ge=0)
    abort_on_change_creation_failure: bool = True
    prev_poll_change_details: ChangeDetails = Field(default_factory=dict)

    model_config = {"frozen": True}

    def advance(self, details: ChangeDetails) -> "PollContext":
        """Return the context for the next poll with the latest snapshot."""
        return self.model_copy(update={"prev_poll_change_details": dict(details)})
