"""
Data models for the web3.storage client.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .exceptions import Web3StorageError


PIN_STATUSES = ("queued", "pinning", "pinned", "failed")


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of a call against the upload or status endpoints.

    ``status_code`` is only ever 200 on success; every other outcome leaves it
    as None and carries the typed failure in ``error``. ``response`` holds the
    compact JSON body on any HTTP reply, or the error message when no usable
    reply was received.
    """
    response: str
    status_code: Optional[int] = None
    error: Optional[Web3StorageError] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.status_code == 200 and self.error is None

    def raise_for_error(self) -> None:
        """Raise the captured error, if the call failed."""
        if self.error is not None:
            raise self.error
        if self.status_code != 200:
            raise Web3StorageError(self.response)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"response": self.response}
        if self.status_code is not None:
            d["status_code"] = self.status_code
        return d


@dataclass
class PinStatus:
    """Pin record for a piece of content on one peer set."""
    cid: str
    status: str  # "queued", "pinning", "pinned", "failed"
    created: str = ""
    delegates: List[str] = field(default_factory=list)

    @property
    def is_pinned(self) -> bool:
        return self.status == "pinned"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PinStatus":
        return cls(
            cid=data.get("cid", ""),
            status=data.get("status", ""),
            created=data.get("created", ""),
            delegates=list(data.get("delegates") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cid": self.cid,
            "status": self.status,
            "created": self.created,
            "delegates": list(self.delegates),
        }


@dataclass
class FileMetadata:
    """Metadata the service reports for an uploaded file."""
    name: str
    size: int
    cid: str
    created: str
    type: str
    pins: List[PinStatus] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileMetadata":
        return cls(
            name=data.get("name", ""),
            size=data.get("size", 0) or 0,
            cid=data.get("cid", ""),
            created=data.get("created", ""),
            type=data.get("type", ""),
            pins=[PinStatus.from_dict(p) for p in data.get("pins") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "cid": self.cid,
            "created": self.created,
            "type": self.type,
            "pins": [p.to_dict() for p in self.pins],
        }
