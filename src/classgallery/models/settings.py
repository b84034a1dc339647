"""Media host credentials shared by every user of the portal."""

from dataclasses import dataclass
from datetime import UTC, datetime

SETTINGS_KEY = "cloudinary"


@dataclass(frozen=True)
class StorageCredentials:
    """Destination account and unsigned upload policy on the media host."""

    cloud_name: str
    upload_preset: str

    def is_complete(self) -> bool:
        return bool(self.cloud_name and self.upload_preset)

    def to_row(self) -> dict:
        """Row for the ``settings`` table."""
        return {
            "key": SETTINGS_KEY,
            "cloud_name": self.cloud_name,
            "upload_preset": self.upload_preset,
            "updated_at": datetime.now(UTC).isoformat(),
        }

    @classmethod
    def from_row(cls, row: dict | None) -> "StorageCredentials | None":
        if not row:
            return None
        credentials = cls(cloud_name=row.get("cloud_name") or "", upload_preset=row.get("upload_preset") or "")
        return credentials if credentials.is_complete() else None
