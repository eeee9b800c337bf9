"""Builds the authenticated changeStatus request for a pipeline job run.

Two endpoint variants exist on the DevOps side:
- v2 accepts a DevOps integration token (`sn_devops.DevOpsToken toolId:token`)
- v1 accepts HTTP basic auth of the integration user
"""

import base64

from changegate.core.models.change import PollRequest
from changegate.core.models.request import ChangeStatusRequest, encode_uri_component

CHANGE_STATUS_PATH = "/api/sn_devops/{version}/devops/orchestration/changeStatus"


def _authorization(request: PollRequest) -> tuple[str, str]:
    """Return (api version, Authorization header value)."""
    credentials = request.credentials
    if credentials.uses_token:
        token = credentials.token.get_secret_value()
        return "v2", f"sn_devops.DevOpsToken {request.tool_id}:{token}"

    basic = f"{credentials.username}:{credentials.password.get_secret_value()}"
    encoded = base64.b64encode(basic.encode("utf-8")).decode("ascii")
    return "v1", f"Basic {encoded}"


def build_change_status_request(request: PollRequest) -> ChangeStatusRequest:
    version, authorization = _authorization(request)
    endpoint = request.instance_url.rstrip("/") + CHANGE_STATUS_PATH.format(version=version)

    params = [
        ("toolId", request.tool_id),
        ("stageName", encode_uri_component(request.job_name)),
        ("pipelineName", encode_uri_component(request.pipeline_name)),
        ("buildNumber", request.run_id),
        ("attemptNumber", request.run_attempt),
    ]
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Authorization": authorization,
    }
    return ChangeStatusRequest(endpoint=endpoint, params=params, headers=headers)
