"""Thin HTTP wrapper around the SipSpot REST backend."""
import json
import logging
import threading
from typing import Callable, Optional

import requests
from requests.cookies import RequestsCookieJar

from config import API_BASE_URL, API_TIMEOUT

logger = logging.getLogger(__name__)

# (filename, content, content_type)
UploadFile = tuple[str, bytes, str]

_DEFAULT_MESSAGES = {
    400: "Invalid request",
    401: "Please log in first",
    403: "You do not have permission to do that",
    404: "The requested resource does not exist",
    409: "The resource already exists",
    429: "Too many requests, please try again later",
    500: "Internal server error",
}


class ApiError(Exception):
    """Raised when the backend answers with an error status."""

    def __init__(self, message: str, status: Optional[int] = None, data=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data


class NetworkError(ApiError):
    """Raised when no response was received (connection failure, timeout)."""


def error_message(status: int, body) -> str:
    """Pick the server-provided message or a per-status default."""
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return _DEFAULT_MESSAGES.get(status, f"Request failed ({status})")


def _clean_params(params: Optional[dict]) -> Optional[dict]:
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None and v != "" and v != []}


def _form_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value)
    return str(value)


class ApiClient:
    """requests.Session based client.

    Each worker thread gets its own ``requests.Session``; all of them share
    one cookie jar so authenticated calls carry the backend's cookies. A
    bearer token is sent as well once one is known. An explicit *session*
    is used as-is for every call.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = API_TIMEOUT,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token = token
        self.on_unauthorized = on_unauthorized
        self._session = session
        self._local = threading.local()
        self.cookies = session.cookies if session is not None else RequestsCookieJar()

    @property
    def session(self) -> requests.Session:
        """The calling thread's session."""
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.cookies = self.cookies
            self._local.session = session
        return session

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, path: str, params: Optional[dict] = None) -> dict:
        return self._request("GET", path, params=_clean_params(params))

    def post(self, path: str, data: Optional[dict] = None) -> dict:
        return self._request("POST", path, json=data if data is not None else {})

    def put(self, path: str, data: Optional[dict] = None, notify_unauthorized: bool = True) -> dict:
        return self._request(
            "PUT", path, json=data if data is not None else {},
            notify_unauthorized=notify_unauthorized,
        )

    def delete(self, path: str) -> dict:
        return self._request("DELETE", path)

    def upload_files(
        self,
        path: str,
        files: list[UploadFile],
        field_name: str = "images",
        data: Optional[dict] = None,
        method: str = "POST",
    ) -> dict:
        """Send *files* plus *data* as multipart/form-data."""
        form = {
            key: _form_value(value)
            for key, value in (data or {}).items()
            if value is not None
        }
        parts = [(field_name, (name, content, ctype)) for name, content, ctype in files]
        return self._request(method, path, data=form, files=parts)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, notify_unauthorized: bool = True, **kwargs) -> dict:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("API request %s %s", method, url)
        try:
            resp = self.session.request(
                method, url, headers=self._headers(), timeout=self.timeout, **kwargs,
            )
        except requests.Timeout as exc:
            logger.error("API timeout %s %s after %ss", method, url, self.timeout)
            raise NetworkError("The server took too long to respond") from exc
        except requests.RequestException as exc:
            logger.error("API network error %s %s: %s", method, url, exc)
            raise NetworkError("Network connection failed, please check your connection") from exc

        if resp.status_code == 204 or not resp.content:
            body = {}
        else:
            try:
                body = resp.json()
            except ValueError:
                body = None

        if resp.status_code >= 400:
            message = error_message(resp.status_code, body)
            logger.warning("API error %s %s -> %d: %s", method, url, resp.status_code, message)
            if resp.status_code == 401 and notify_unauthorized and self.on_unauthorized is not None:
                self.on_unauthorized()
            raise ApiError(message, status=resp.status_code, data=body)

        if not isinstance(body, dict):
            raise ApiError("Invalid response from server", status=resp.status_code)
        logger.debug("API response %s %s -> %d", method, url, resp.status_code)
        return body
