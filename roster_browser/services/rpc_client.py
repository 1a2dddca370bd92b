from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RpcResponse:
    """
    Result of one remote procedure call.

    `error` non-None means the whole call failed and `data` must be ignored.
    """
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RpcClient(ABC):
    """
    Abstract interface for the backend's remote procedure calls.
    """

    @abstractmethod
    def call(self, function: str, params: Optional[Dict[str, Any]] = None) -> RpcResponse:
        pass


class HttpRpcClient(RpcClient):
    """
    PostgREST-style RPC over HTTP: POST {base_url}/rest/v1/rpc/{function}
    with the parameters as a JSON object.

    Transport failures and non-2xx answers are returned as RpcResponse
    errors, never raised.
    """

    RPC_PATH = "/rest/v1/rpc/"

    def __init__(
            self,
            base_url: str,
            api_key: str,
            timeout: float = 30.0,
            transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    def call(self, function: str, params: Optional[Dict[str, Any]] = None) -> RpcResponse:
        try:
            response = self._client.post(f"{self.RPC_PATH}{function}", json=params or {})
        except httpx.HTTPError as e:
            logger.error("RPC transport error", extra={"rpc": function, "error": str(e)})
            return RpcResponse(error=f"{function}: {e}")

        if response.is_error:
            message = _error_message(response)
            logger.error(
                "RPC returned an error",
                extra={"rpc": function, "status_code": response.status_code, "error": message},
            )
            return RpcResponse(error=message)

        if not response.content:
            return RpcResponse(data=None)
        try:
            return RpcResponse(data=response.json())
        except ValueError:
            logger.error("RPC returned invalid JSON", extra={"rpc": function})
            return RpcResponse(error=f"{function}: invalid JSON response")

    def close(self) -> None:
        self._client.close()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}"
