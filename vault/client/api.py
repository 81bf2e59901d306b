from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Callable, Optional

import requests
from requests_toolbelt import MultipartEncoder, MultipartEncoderMonitor

from ..models.pinned_file import PinnedFile

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class VaultApiError(RuntimeError):
    pass


def guess_content_type(path: str | Path) -> str:
    ctype, _ = mimetypes.guess_type(str(path))
    return ctype or ""


class VaultApiClient:
    """
    Talks to a running vault server's /api/files endpoints.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float | None = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        try:
            return resp.json().get("error") or resp.reason
        except (ValueError, AttributeError):
            return resp.reason

    def list_files(self) -> list[PinnedFile]:
        try:
            resp = self.session.get(self._url("/api/files"), timeout=self.timeout)
        except requests.RequestException as exc:
            raise VaultApiError(f"Failed to fetch files: {exc}") from exc
        if not resp.ok:
            raise VaultApiError(f"Failed to fetch files: {resp.status_code} {self._error_message(resp)}")
        try:
            return [PinnedFile.model_validate(item) for item in resp.json()]
        except (TypeError, ValueError) as exc:
            raise VaultApiError(f"Failed to fetch files: unexpected response body ({exc})") from exc

    def upload(self, path: str | Path, content_type: str | None = None, on_progress: ProgressCallback | None = None) -> str:
        """Upload a local file; returns the gateway URL the server hands back."""
        path = Path(path)
        ctype = content_type or guess_content_type(path) or "application/octet-stream"

        with path.open("rb") as fh:
            encoder = MultipartEncoder(fields={"file": (path.name, fh, ctype)})
            body = encoder
            if on_progress is not None:
                body = MultipartEncoderMonitor(encoder, lambda m: on_progress(m.bytes_read, m.len))
            try:
                resp = self.session.post(
                    self._url("/api/files"),
                    data=body,
                    headers={"Content-Type": encoder.content_type},
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                raise VaultApiError(f"Upload failed: {exc}") from exc

        if not resp.ok:
            raise VaultApiError(f"Upload failed: {resp.status_code} {self._error_message(resp)}")
        try:
            url = resp.json()
        except ValueError as exc:
            raise VaultApiError("Upload failed: response is not JSON") from exc
        if not isinstance(url, str):
            raise VaultApiError("Upload failed: response is not a URL string")
        return url
