from __future__ import annotations

import logging
from typing import Any

import httpx


OFFER_SELECT = (
    "*,offer_options(*,scope:offer_scopes(id,name,description,is_extras_scope),offer_option_items(*))"
)


class BackendClient:
    """Thin REST client for the managed backend's table API."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
            headers["Authorization"] = f"Bearer {self._api_key}"
        headers.update(extra or {})
        return headers

    def fetch_offer(self, offer_id: str) -> dict[str, Any] | None:
        response = self._client.get(
            f"{self._base_url}/rest/v1/offers",
            params={"id": f"eq.{offer_id}", "select": OFFER_SELECT},
            headers=self._headers(),
        )
        response.raise_for_status()
        rows = response.json()
        if not rows:
            return None
        return rows[0]

    def update_offer(self, offer_id: str, fields: dict[str, Any]) -> None:
        response = self._client.patch(
            f"{self._base_url}/rest/v1/offers",
            params={"id": f"eq.{offer_id}"},
            json=fields,
            headers=self._headers({"Prefer": "return=minimal"}),
        )
        if response.status_code >= 400:
            self._logger.error(
                "Backend offer update failed",
                extra={"offer_id": offer_id, "status": response.status_code, "error": response.text},
            )
        response.raise_for_status()

    def insert_notification(self, payload: dict[str, Any]) -> None:
        response = self._client.post(
            f"{self._base_url}/rest/v1/notifications",
            json=payload,
            headers=self._headers({"Prefer": "return=minimal"}),
        )
        response.raise_for_status()
