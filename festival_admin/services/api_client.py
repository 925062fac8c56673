"""Async HTTP access to the festival REST API."""
import logging
from typing import Any, Dict, Optional

import httpx

from festival_admin.utils.exceptions import (
    ImageUploadError,
    NetworkError,
    NotFoundError,
    RemoteValidationError,
    ServerError,
)


logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class ApiClient:
    """
    Thin wrapper over ``httpx.AsyncClient`` that maps failures to dashboard errors.

    A fresh ``AsyncClient`` is opened per request so that coroutines can be
    driven by whichever event loop the caller runs. Calls are single-attempt.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: API root, e.g. "http://localhost:5000"
            timeout: Per-request timeout in seconds
            transport: Optional transport (tests inject ``httpx.MockTransport``)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send one request and raise a mapped error for anything but 2xx.

        Args:
            method: HTTP verb
            path: Path relative to the base URL
            **kwargs: Passed through to ``httpx.AsyncClient.request``

        Returns:
            The successful response

        Raises:
            NetworkError: If the request never got a response
            NotFoundError: On 404
            RemoteValidationError: On any other 4xx
            ServerError: On 5xx
        """
        logger.debug("%s %s", method, path)
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError(f"Could not reach the festival API: {e}") from e

        status = response.status_code
        if status < 400:
            return response

        detail = _error_detail(response)
        logger.warning("%s %s returned %s: %s", method, path, status, detail)

        if status == 404:
            raise NotFoundError(f"Not found: {path}", status_code=status)
        if status < 500:
            raise RemoteValidationError(detail or f"Request rejected ({status})", status_code=status)
        raise ServerError(detail or f"Server error ({status})", status_code=status)

    async def get_json(self, path: str) -> Any:
        response = await self.request("GET", path)
        return _decode(response, path)

    async def post_json(self, path: str, payload: Dict[str, Any]) -> Any:
        response = await self.request("POST", path, json=payload)
        return _decode(response, path, allow_empty=True)

    async def put_json(self, path: str, payload: Dict[str, Any]) -> Any:
        response = await self.request("PUT", path, json=payload, headers=JSON_HEADERS)
        return _decode(response, path, allow_empty=True)

    async def delete(self, path: str) -> None:
        await self.request("DELETE", path)

    async def upload_image(self, filename: str, content: bytes, content_type: str = "application/octet-stream") -> str:
        """
        Upload an image and return its public URL.

        Args:
            filename: Original file name
            content: Raw file bytes
            content_type: MIME type of the file

        Returns:
            URL string returned by the API

        Raises:
            NetworkError: If the request never got a response
            ImageUploadError: On any status other than 200, or a body without a URL
        """
        path = "/upload-image"
        logger.debug("POST %s (%s, %d bytes)", path, filename, len(content))
        try:
            async with self._client() as client:
                response = await client.post(path, files={"image": (filename, content, content_type)})
        except httpx.RequestError as e:
            logger.warning("Image upload failed: %s", e)
            raise NetworkError(f"Could not reach the festival API: {e}") from e

        if response.status_code != 200:
            logger.warning("Image upload returned %s", response.status_code)
            raise ImageUploadError("Image upload failed", status_code=response.status_code)

        try:
            url = response.json()["url"]
        except (ValueError, KeyError, TypeError) as e:
            raise ImageUploadError("Image upload response has no URL", status_code=200) from e

        if not isinstance(url, str) or not url:
            raise ImageUploadError("Image upload response has no URL", status_code=200)
        return url


def _decode(response: httpx.Response, path: str, allow_empty: bool = False) -> Any:
    """Decode a JSON body; empty bodies are allowed for writes."""
    if allow_empty and not response.content.strip():
        return None
    try:
        return response.json()
    except ValueError as e:
        logger.warning("Malformed JSON from %s", path)
        raise ServerError(f"Malformed JSON from {path}", status_code=response.status_code) from e


def _error_detail(response: httpx.Response) -> str:
    """Best-effort error text from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()[:200]

    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if body.get(key):
                return str(body[key])
    return ""
