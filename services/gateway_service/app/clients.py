"""HTTP clients for the gateway to call the directory services."""

from typing import Optional

import httpx
from libs.common.config import get_settings

settings = get_settings()


class ServiceClient:
    """Forwards raw requests to one downstream service.

    ``transport`` is passed straight to ``httpx.AsyncClient``; tests use an
    ``httpx.ASGITransport`` to talk to a service app in-process.
    """

    def __init__(
        self,
        name: str,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def request(
        self,
        method: str,
        path: str,
        content: Optional[bytes] = None,
        headers: Optional[dict] = None,
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        ) as client:
            return await client.request(
                method, path, content=content, headers=headers or {}
            )


clubs_client = ServiceClient("clubs", settings.CLUBS_SERVICE_URL)
members_client = ServiceClient("members", settings.MEMBERS_SERVICE_URL)
equipment_client = ServiceClient("equipment", settings.EQUIPMENT_SERVICE_URL)
