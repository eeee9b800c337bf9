from typing import Dict, List, Tuple
from urllib.parse import quote

from pydantic import BaseModel

# encodeURIComponent leaves these characters untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    return quote(str(value), safe=_URI_COMPONENT_SAFE)


class ChangeStatusRequest(BaseModel):
    """Descriptor for the changeStatus GET call. Building one has no side effects."""

    endpoint: str
    params: List[Tuple[str, str]]
    headers: Dict[str, str]

    model_config = {"frozen": True}

    @property
    def url(self) -> str:
        """Endpoint with the already-encoded query string appended."""
        query = "&".join(f"{key}={value}" for key, value in self.params)
        return f"{self.endpoint}?{query}"

    def redacted_headers(self) -> Dict[str, str]:
        redacted = dict(self.headers)
        if "Authorization" in redacted:
            scheme = redacted["Authorization"].split(" ", 1)[0]
            redacted["Authorization"] = f"{scheme} ***"
        return redacted
