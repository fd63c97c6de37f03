"""
Client for the token validation RPC endpoint, for services that need to check
tokens issued by this one.

  with AuthClient("http://auth:8080") as client:
      if client.validate_token(token):
          user_id = client.get_user_id(token)
"""

import itertools
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class AuthClientError(Exception):
    """Raised when the RPC call fails in transport or returns a JSON-RPC error."""

    def __init__(self, message: str, code: int | None = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class AuthClient:
    """Synchronous JSON-RPC client over httpx."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self._ids = itertools.count(1)

    def __enter__(self) -> "AuthClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _call(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        request = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        try:
            response = self._client.post("/rpc", json=request)
        except httpx.TimeoutException as e:
            raise AuthClientError("Auth service request timed out.") from e
        except httpx.HTTPError as e:
            raise AuthClientError(f"Auth service is unreachable: {e}") from e

        if response.status_code != 200:
            raise AuthClientError(f"Auth service returned status {response.status_code}.")
        try:
            body = response.json()
        except ValueError as e:
            raise AuthClientError("Auth service response is not valid JSON.") from e
        if not isinstance(body, dict):
            raise AuthClientError("Auth service response is not a JSON object.")

        error = body.get("error")
        if error:
            raise AuthClientError(error.get("message", "RPC error"), code=error.get("code"))
        result = body.get("result")
        if not isinstance(result, dict):
            raise AuthClientError("Auth service response has no result.")
        return result

    def validate_token(self, token: str) -> bool:
        """True if the auth service accepts the token."""
        result = self._call("AuthService.ValidateToken", {"token": token})
        if not result.get("valid"):
            logger.debug("Token rejected by auth service", extra={"reason": result.get("error")})
            return False
        return True

    def get_user_id(self, token: str) -> int:
        """User id carried by the token. Raises AuthClientError if the token is invalid."""
        result = self._call("AuthService.GetUserID", {"token": token})
        if result.get("error"):
            raise AuthClientError(result["error"])
        return int(result["user_id"])
