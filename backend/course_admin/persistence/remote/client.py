"""HTTP transport to the backing store + `{success, data, error}` envelope normalization."""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import requests

from course_admin.domain.common.errors import Forbidden, NetworkError, NotFound, StoreError

logger = logging.getLogger(__name__)


def _error_message(body: Any, fallback: str) -> str:
    """Pick the most useful message out of a failure body."""
    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            return ", ".join(str(e) for e in errors)
        for key in ("error", "message"):
            if body.get(key):
                return str(body[key])
    elif isinstance(body, str) and body.strip():
        return body.strip()
    return fallback


class StoreClient:
    """
    Performs one request per call and returns the envelope's `data`, or raises:
      NetworkError: no response at all
      NotFound:     success:false with 404
      Forbidden:    success:false with 401/403, or a write without identity
      StoreError:   any other success:false, or a body that is not an envelope
    The identity token is attached to the request and never stored on the client.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self._base_url = base_url.rstrip("/")
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._call("GET", path, params=params)

    def write(self, method: str, path: str, identity: Optional[str], payload: Optional[Dict[str, Any]] = None) -> Any:
        if not (identity or "").strip():
            raise Forbidden("A caller identity is required for this operation.")
        body = dict(payload or {})
        body["uid"] = identity
        return self._call(method, path, json_body=body)

    def _call(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("Store request %s %s", method, path)
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("Store unreachable for %s %s: %s", method, path, e)
            raise NetworkError(f"Network error - could not reach the store: {e}") from e

        status = response.status_code
        try:
            body = response.json()
        except ValueError:
            logger.warning("Store returned a non-JSON body for %s %s (status %s)", method, path, status)
            raise StoreError(
                _error_message(response.text, f"Store returned an invalid response (status {status})."),
                status=status,
            )

        if not isinstance(body, dict) or "success" not in body:
            raise StoreError(
                _error_message(body, f"Store response is missing the result envelope (status {status})."),
                status=status,
                details=body,
            )

        if body["success"] is True:
            return body.get("data")

        message = _error_message(body, f"Store request failed (status {status}).")
        logger.warning("Store rejected %s %s (status %s): %s", method, path, status, message)
        if status == 404:
            raise NotFound(message, status=status, details=body)
        if status in (401, 403):
            raise Forbidden(message, status=status, details=body)
        raise StoreError(message, status=status, details=body)
