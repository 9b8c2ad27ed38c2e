"""HTTP client for the hosted auth service admin API.

Implements the ``IdentityProvider`` port against the admin user endpoints:

- ``DELETE {base_url}/auth/v1/admin/users/{id}`` removes an identity
- ``GET {base_url}/auth/v1/admin/users/{id}`` probes for one

Both authenticate with the service-role key. A 404 from DELETE means the
identity is already gone, which the cascade treats as success.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from credora.foundation.domain.ports import IdentityRemovalResult

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 10.0
_USERS_PATH = "/auth/v1/admin/users"


class IdentityAdminError(Exception):
    """Raised when the admin API answers a probe with an unexpected status.

    Attributes:
        status_code: HTTP status from the auth service.
    """

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Identity admin request failed: {detail} ({status_code})")


class IdentityAdminClient:
    """Sync HTTP client for identity removal and existence checks.

    If ``client`` is provided it is reused and the caller manages its
    lifecycle; otherwise an internal client is created lazily and released by
    :meth:`close`.

    Args:
        base_url: Auth service base URL (e.g., "https://project.example.co").
        service_role_key: Admin key sent as bearer token and ``apikey`` header.
        timeout: Per-request timeout ceiling in seconds.
        client: Optional shared httpx.Client instance.
    """

    def __init__(
        self,
        base_url: str,
        service_role_key: str,
        timeout: float = _DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._service_role_key = service_role_key
        self._timeout = timeout
        self._external_client = client is not None
        self._client: httpx.Client | None = client

    def remove_identity(
        self, target_id: str, *, timeout: float | None = None
    ) -> IdentityRemovalResult:
        """Delete the identity. Never raises.

        Returns:
            OK on 2xx, NOT_FOUND on 404, ERROR with a reason otherwise
            (including ``"timeout"`` when the request timed out).
        """
        try:
            response = self._get_client().delete(
                self._user_url(target_id),
                headers=self._headers(),
                timeout=self._effective_timeout(timeout),
            )
        except httpx.TimeoutException:
            logger.warning("identity_removal_timeout", extra={"target_id": target_id})
            return IdentityRemovalResult.error("timeout")
        except httpx.HTTPError as exc:
            logger.warning(
                "identity_removal_transport_error",
                extra={"target_id": target_id, "error": str(exc)},
            )
            return IdentityRemovalResult.error(str(exc) or exc.__class__.__name__)

        if response.status_code == 404:
            logger.info("identity_already_absent", extra={"target_id": target_id})
            return IdentityRemovalResult.not_found()
        if response.is_success:
            return IdentityRemovalResult.ok()

        detail = _error_detail(response)
        logger.error(
            "identity_removal_failed",
            extra={"target_id": target_id, "status": response.status_code, "detail": detail},
        )
        return IdentityRemovalResult.error(f"{detail} ({response.status_code})")

    def identity_exists(self, target_id: str) -> bool:
        """Probe for the identity.

        Raises:
            IdentityAdminError: On a status other than 2xx or 404.
            httpx.HTTPError: On transport failure.
        """
        response = self._get_client().get(
            self._user_url(target_id),
            headers=self._headers(),
            timeout=self._timeout,
        )
        if response.status_code == 404:
            return False
        if response.is_success:
            return True
        raise IdentityAdminError(response.status_code, _error_detail(response))

    def close(self) -> None:
        """Close the internal client if this instance owns it."""
        if self._client is not None and not self._external_client:
            self._client.close()
            self._client = None

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client()
        return self._client

    def _user_url(self, target_id: str) -> str:
        return f"{self._base_url}{_USERS_PATH}/{quote(target_id, safe='')}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._service_role_key}",
            "apikey": self._service_role_key,
        }

    def _effective_timeout(self, timeout: float | None) -> float:
        if timeout is None:
            return self._timeout
        return max(min(timeout, self._timeout), 0.001)


def _error_detail(response: httpx.Response) -> str:
    try:
        body: Any = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase
