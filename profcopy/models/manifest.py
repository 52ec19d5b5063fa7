"""
Manifest records used for selective-copy bookkeeping.

- ManifestItem: One named item inside a data file
- ProfileManifest: Snapshot of the named items per data type in a profile
- PendingCleanup: Items to delete from a profile after the host restarts

The JSON keys produced by ``to_dict`` are a persisted contract shared with the
post-restart cleanup step and must not change. Timestamps are written as
ISO-8601 text. Reading also accepts the ``/Date(ms)/`` form used by .NET
DataContract JSON, so records written by the host-side tooling load too.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

# /Date(1709296200000)/ or /Date(1709296200000+0100)/; the offset is informational
_DOTNET_DATE_PATTERN = re.compile(r"^/Date\((-?\d+)(?:[+-]\d{4})?\)/$")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 or ``/Date(ms)/`` timestamp into a naive local datetime.

    Raises:
        ValueError: If ``value`` is in neither form.
    """
    match = _DOTNET_DATE_PATTERN.match(value)
    if match:
        return datetime.fromtimestamp(int(match.group(1)) / 1000)
    return datetime.fromisoformat(value)


@dataclass
class ManifestItem:
    """A named item inside a data file."""
    name: str
    group: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "group": self.group}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManifestItem":
        return cls(name=data["name"], group=data.get("group"))


@dataclass
class ProfileManifest:
    """Snapshot of one profile's enumerable items at generation time."""
    profile_name: str
    database_path: str
    generated_at: datetime
    data_types: Dict[str, List[ManifestItem]] = field(default_factory=dict)

    def item_names(self, manifest_key: str) -> List[str]:
        """Names of all items recorded under ``manifest_key``, in manifest order."""
        return [item.name for item in self.data_types.get(manifest_key, [])]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profileName": self.profile_name,
            "databasePath": self.database_path,
            "generatedAt": self.generated_at.isoformat(),
            "dataTypes": {
                key: [item.to_dict() for item in items]
                for key, items in self.data_types.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProfileManifest":
        """Build a manifest from its JSON form.

        Raises:
            KeyError: If a required key is missing.
            ValueError: If ``generatedAt`` is not a recognised timestamp.
        """
        return cls(
            profile_name=data["profileName"],
            database_path=data["databasePath"],
            generated_at=parse_timestamp(data["generatedAt"]),
            data_types={
                key: [ManifestItem.from_dict(item) for item in items]
                for key, items in (data.get("dataTypes") or {}).items()
            },
        )


@dataclass
class PendingCleanup:
    """Persisted intent to delete items once the host application restarts."""
    profile_name: str
    database_path: str
    created_at: datetime
    items_to_delete: Dict[str, List[str]] = field(default_factory=dict)  # key -> names

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profileName": self.profile_name,
            "databasePath": self.database_path,
            "createdAt": self.created_at.isoformat(),
            "itemsToDelete": {key: list(names) for key, names in self.items_to_delete.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PendingCleanup":
        return cls(
            profile_name=data["profileName"],
            database_path=data["databasePath"],
            created_at=parse_timestamp(data["createdAt"]),
            items_to_delete={
                key: list(names)
                for key, names in (data.get("itemsToDelete") or {}).items()
            },
        )
