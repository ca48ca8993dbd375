"""Effective configuration for a run."""

import hashlib
import json

from pydantic import BaseModel, ConfigDict

from src.config.schemas.search import SearchConfig


class EffectiveConfig(BaseModel):
    """Validated configuration plus provenance for a run.

    Immutable once created; command line overrides produce a new
    instance through ``with_search``.

    Attributes:
        search: Validated search configuration.
        source_path: Resolved path of the file it was loaded from.
        file_checksum: SHA-256 checksum of that file.
        run_id: Unique identifier for the run.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    search: SearchConfig
    source_path: str
    file_checksum: str
    run_id: str

    def with_search(self, search: SearchConfig) -> "EffectiveConfig":
        """Copy with a replaced search configuration."""
        return self.model_copy(update={"search": search})

    def to_normalized_json(self) -> str:
        """Convert the search configuration to normalized JSON.

        Repeated calls produce identical output.

        Returns:
            JSON string with sorted keys.
        """
        data = self.search.model_dump(mode="json")
        return json.dumps(data, sort_keys=True, separators=(",", ":"))

    def compute_checksum(self) -> str:
        """Compute SHA-256 checksum of the normalized search configuration.

        Returns:
            Hex-encoded SHA-256 checksum.
        """
        normalized = self.to_normalized_json()
        return hashlib.sha256(normalized.encode("utf-8")).hexdigest()

    def summary(self) -> dict[str, object]:
        """Get a summary of the effective configuration.

        Returns:
            Dictionary with summary information.
        """
        search = self.search
        return {
            "run_id": self.run_id,
            "source_path": self.source_path,
            "mode": search.mode.value,
            "pos_origin": search.pos_origin.value,
            "max_dist": search.max_dist,
            "max_entries": search.max_entries,
            "categories": [c.value for c in search.freshness.enabled_categories()],
            "config_checksum": self.compute_checksum(),
            "file_checksum": self.file_checksum,
        }
