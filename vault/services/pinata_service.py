from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, BinaryIO

import requests
from requests_toolbelt import MultipartEncoder

from ..config import Settings
from ..models.pinned_file import PinnedFile, gateway_url

logger = logging.getLogger(__name__)

PIN_LIST_PATH = "/data/pinList"
PIN_FILE_PATH = "/pinning/pinFileToIPFS"
UPLOAD_FIELD = "file"
MAX_PAGE_LIMIT = 1000


class ConfigurationError(RuntimeError):
    """Raised when the credential or gateway host is missing."""


class PinataError(RuntimeError):
    """Raised for non-success responses and transport failures from Pinata."""


@dataclass
class PinataClient:
    jwt: str
    gateway_host: str
    session: requests.Session
    api_url: str = "https://api.pinata.cloud"
    page_limit: int = 1000
    timeout: float | None = None
    default_content_type: str = "application/octet-stream"
    default_filename: str = "uploaded-file"
    _headers: dict[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.api_url = self.api_url.rstrip("/")
        # pinList rejects anything above MAX_PAGE_LIMIT
        self.page_limit = max(1, min(self.page_limit, MAX_PAGE_LIMIT))
        self._headers = {"Authorization": f"Bearer {self.jwt}"}

    @classmethod
    def from_settings(cls, settings: Settings, session: requests.Session) -> "PinataClient":
        missing = [name for name in ("PINATA_JWT", "GATEWAY_URL") if not getattr(settings, name)]
        if missing:
            raise ConfigurationError(f"missing required settings: {', '.join(missing)}")
        return cls(
            jwt=settings.PINATA_JWT,
            gateway_host=settings.GATEWAY_URL,
            session=session,
            api_url=settings.PINATA_API_URL,
            page_limit=settings.PINATA_PAGE_LIMIT,
            timeout=settings.PINATA_TIMEOUT_SECONDS,
            default_content_type=settings.DEFAULT_CONTENT_TYPE,
            default_filename=settings.DEFAULT_UPLOAD_FILENAME,
        )

    def access_url(self, content_hash: str) -> str:
        return gateway_url(self.gateway_host, content_hash)

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = self.api_url + path
        headers = dict(self._headers)
        headers.update(kwargs.pop("headers", {}))
        try:
            resp = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise PinataError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code != 200:
            raise PinataError(f"{method} {path} returned {resp.status_code}: {resp.reason}")
        try:
            return resp.json()
        except ValueError as exc:
            raise PinataError(f"{method} {path} returned a non-JSON body") from exc

    def list_pinned(self) -> list[PinnedFile]:
        """
        Fetch every currently pinned entry, walking pinList pages until a short page.
        Order is whatever Pinata returns.
        """
        files: list[PinnedFile] = []
        offset = 0
        while True:
            data = self._request(
                "GET",
                PIN_LIST_PATH,
                params={"status": "pinned", "pageLimit": self.page_limit, "pageOffset": offset},
            )
            try:
                rows = data.get("rows") or []
                files.extend(PinnedFile.from_pin_row(row, self.gateway_host) for row in rows)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                raise PinataError(f"unexpected pinList response: {exc}") from exc
            if not rows or len(rows) < self.page_limit:
                break
            offset += len(rows)
        logger.debug("Listed %d pinned files", len(files))
        return files

    def pin_file(self, stream: BinaryIO, filename: str | None = None, content_type: str | None = None) -> str:
        """Forward ``stream`` as a multipart upload and return the assigned CID."""
        encoder = MultipartEncoder(
            fields={
                UPLOAD_FIELD: (
                    filename or self.default_filename,
                    stream,
                    content_type or self.default_content_type,
                )
            }
        )
        data = self._request(
            "POST",
            PIN_FILE_PATH,
            data=encoder,
            headers={"Content-Type": encoder.content_type},
        )
        cid = data.get("IpfsHash") if isinstance(data, dict) else None
        if not cid:
            raise PinataError("pinFileToIPFS response has no IpfsHash")
        logger.info("Pinned %s as %s", filename or self.default_filename, cid)
        return cid
