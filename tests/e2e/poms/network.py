"""Records HTTP responses seen by a simulated browser."""

from dataclasses import dataclass
from typing import List, Optional

import httpx


@dataclass
class RecordedResponse:
    method: str
    path: str
    status_code: int


class ResponseRecorder:
    """Appends every response of an ``httpx.Client`` through its response hook."""

    def __init__(self, http_client: httpx.Client):
        self.responses: List[RecordedResponse] = []
        http_client.event_hooks["response"].append(self._record)

    def _record(self, response: httpx.Response):
        self.responses.append(
            RecordedResponse(response.request.method, response.request.url.path, response.status_code)
        )

    def last(self, method: str, path_prefix: str) -> Optional[RecordedResponse]:
        """Most recent response for a method whose path starts with ``path_prefix``."""
        for recorded in reversed(self.responses):
            if recorded.method == method and recorded.path.startswith(path_prefix):
                return recorded
        return None
