from __future__ import annotations
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def gateway_url(gateway_host: str, content_hash: str) -> str:
    return f"https://{gateway_host}/ipfs/{content_hash}"


class PinnedFile(BaseModel):
    """A pin record as exposed to the browser; ``access_url`` is derived from the gateway host."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    content_hash: str = Field(alias="contentHash")
    size_bytes: int = Field(default=0, alias="sizeBytes")
    pinned_at: datetime | None = Field(default=None, alias="pinnedAt")
    access_url: str = Field(alias="accessUrl")

    @classmethod
    def from_pin_row(cls, row: dict[str, Any], gateway_host: str) -> "PinnedFile":
        # pinList rows: id, ipfs_pin_hash, size, name, date_pinned, metadata{name, keyvalues}
        metadata = row.get("metadata") or {}
        content_hash = row["ipfs_pin_hash"]
        return cls(
            id=str(row["id"]),
            name=metadata.get("name") or row.get("name") or "",
            content_hash=content_hash,
            size_bytes=int(row.get("size") or 0),
            pinned_at=row.get("date_pinned"),
            access_url=gateway_url(gateway_host, content_hash),
        )
