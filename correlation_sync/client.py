"""
Client for the SIEM manager's correlation endpoints.

Both calls are POSTs to https://<hostname><path> with an `x-api-key`
header and a JSON body. Only HTTP 200 counts as success; nothing is retried.
"""

from typing import Any, Dict, Optional

import requests
import urllib3

from .errors import ContractError, ResponseDecodeError, TransportError
from .payloads import LookupPayload, SavePayload

SAVE_URL_PATH = (
    "/api/DpConnection/CallByInterfaceApi/"
    "?interfaceCode=ICSiemManagerCorrelationAct&methodName=AddOrUpdateCorrelation&culture=en"
)
LOOKUP_URL_PATH = (
    "/api/DpConnection/CallByInterfaceApi/"
    "?interfaceCode=ICSiemManagerCorrelationAct&methodName=GetCorrelationList&culture=en"
)

# None: requests waits as long as the transport does.
DEFAULT_TIMEOUT: Optional[float] = None


class CorrelationClient:
    def __init__(
            self,
            hostname: str,
            api_key: str,
            verify_tls: bool = True,
            timeout: Optional[float] = DEFAULT_TIMEOUT,
            session: Optional[requests.Session] = None,
    ) -> None:
        self.hostname = hostname
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "x-api-key": api_key,
                "Content-Type": "application/json",
            }
        )
        self.session.verify = verify_tls
        if not verify_tls:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    @property
    def save_url(self) -> str:
        return f"https://{self.hostname}{SAVE_URL_PATH}"

    @property
    def lookup_url(self) -> str:
        return f"https://{self.hostname}{LOOKUP_URL_PATH}"

    def _post(self, url: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            resp = self.session.post(url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Error sending HTTP request to {url}: {e}") from e

        if resp.status_code != 200:
            raise TransportError(
                f"Error sending HTTP request to {url}: HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ResponseDecodeError(f"Error decoding JSON response from {url}: {e}") from e

        # A JSON null body decodes to an empty object.
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ResponseDecodeError(
                f"Error decoding JSON response from {url}: expected an object, got {type(data).__name__}"
            )
        return data

    def lookup(self, payload: LookupPayload) -> bool:
        """
        Ask the service whether a rule matching `payload.filter` exists.

        Returns True only when the response carries a non-empty `Items`
        list. A missing `Items`, an empty list, or a non-list value all
        mean "not found".
        """
        data = self._post(self.lookup_url, payload.to_dict())
        items = data.get("Items")
        return isinstance(items, list) and len(items) > 0

    def save(self, payload: SavePayload) -> Dict[str, Any]:
        """
        Create or update the correlation and return the decoded response.

        The body must contain a boolean `Status`; its value is not checked.
        """
        data = self._post(self.save_url, payload.to_dict())
        if not isinstance(data.get("Status"), bool):
            raise ContractError("invalid JSON response: missing or invalid 'Status' field")
        return data

    def close(self) -> None:
        self.session.close()
