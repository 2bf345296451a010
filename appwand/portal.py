"""Device portal HTTP transport for appwand."""

import logging
from typing import Any

import httpx

from appwand.config import PortalConfig
from appwand.types import ProcessInfo, parse_process_list

logger = logging.getLogger(__name__)

PROCESSES_API = "api/resourcemanager/processes"
# Any GET makes the portal set its CSRF cookie
CSRF_TOKEN_API = "api/os/machinename"

_CSRF_COOKIE = "CSRF-Token"
_CSRF_HEADER = "X-CSRF-Token"


class RequestFailed(Exception):
    """A device portal request came back with a non-success status."""

    def __init__(self, method: str, url: str, status_code: int, payload: str = ""):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.payload = payload
        message = f"{method} {url} failed with status {status_code}"
        if payload:
            message += f": {payload}"
        super().__init__(message)


class DevicePortal:
    """Async connection to a single device's portal.

    Owns one httpx.AsyncClient; use it as an async context manager or call
    aclose() when done. Payloads are sent as the request query string.
    """

    def __init__(
        self,
        config: PortalConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.address,
            auth=config.auth,
            verify=config.verify_tls,
            timeout=config.timeout,
            transport=transport,
        )
        self._csrf_fetched = False

    async def __aenter__(self) -> "DevicePortal":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self, method: str, api_path: str, payload: str | None = None
    ) -> httpx.Response:
        url = f"{api_path}?{payload}" if payload else api_path

        headers = {}
        if method != "GET":
            # State-changing calls must echo the portal's CSRF cookie
            token = await self._csrf_token()
            if token:
                headers[_CSRF_HEADER] = token

        response = await self._client.request(method, url, headers=headers)
        logger.debug("%s %s -> %s", method, api_path, response.status_code)

        if not response.is_success:
            raise RequestFailed(method, url, response.status_code, response.text)
        return response

    async def _csrf_token(self) -> str | None:
        token = self._client.cookies.get(_CSRF_COOKIE)
        if token or self._csrf_fetched:
            return token

        self._csrf_fetched = True
        response = await self._client.get(CSRF_TOKEN_API)
        logger.debug("GET %s -> %s", CSRF_TOKEN_API, response.status_code)
        return self._client.cookies.get(_CSRF_COOKIE)

    async def get_json(self, api_path: str, payload: str | None = None) -> Any:
        response = await self.request("GET", api_path, payload)
        return response.json()

    async def post(self, api_path: str, payload: str | None = None) -> None:
        await self.request("POST", api_path, payload)

    async def delete(self, api_path: str, payload: str | None = None) -> None:
        await self.request("DELETE", api_path, payload)

    async def get_running_processes(self) -> list[ProcessInfo]:
        """Fetch the device's current process table."""
        return parse_process_list(await self.get_json(PROCESSES_API))
