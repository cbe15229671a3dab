"""Data models for the remote versions manifest."""

from pydantic import BaseModel, ConfigDict, field_validator
from typing import Dict, List


class VersionRecord(BaseModel):
    """One installable PHP build: where to get it and what it must hash to."""

    model_config = ConfigDict(frozen=True)

    version: str
    url: str
    sha256: str


class Manifest(BaseModel):
    model_config = ConfigDict(frozen=True)

    versions: List[VersionRecord]

    @field_validator("versions")
    @classmethod
    def _unique_versions(cls, records: List[VersionRecord]) -> List[VersionRecord]:
        seen = set()
        for record in records:
            if record.version in seen:
                raise ValueError(f"duplicate version '{record.version}'")
            seen.add(record.version)
        return records

    def version_ids(self) -> List[str]:
        return [record.version for record in self.versions]


class ManifestSource(BaseModel):
    """A named place to fetch versions.json from."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    headers: Dict[str, str] = {}
