"""Persist and load CLI source profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from teambalance.config import default_data_dir, get_source, iter_sources
from teambalance.ingest.players import SourcePaths


class ProfileError(ValueError):
    """Raised when a source profile cannot be read."""


@dataclass
class SourceProfile:
    data_dir: Optional[str] = None
    filenames: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "SourceProfile":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ProfileError(f"Unable to read source profile {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ProfileError(f"Source profile {path} must contain a JSON object")
        filenames = data.get("filenames", {})
        if not isinstance(filenames, dict):
            raise ProfileError(f"'filenames' in {path} must be an object")
        for key in filenames:
            try:
                get_source(key)
            except KeyError as exc:
                raise ProfileError(f"Unknown source {key!r} in {path}") from exc
        data_dir = data.get("data_dir")
        return cls(
            data_dir=str(data_dir) if data_dir is not None else None,
            filenames={key.lower(): str(value) for key, value in filenames.items()},
        )

    def dumps(self) -> str:
        payload = {
            "data_dir": self.data_dir,
            "filenames": self.filenames,
        }
        return json.dumps(payload, indent=2)

    def save(self, path: Path) -> None:
        path.write_text(self.dumps(), encoding="utf-8")

    def resolve(
        self,
        data_dir: Optional[Path] = None,
        overrides: Optional[Mapping[str, Path]] = None,
    ) -> SourcePaths:
        """Build source paths; explicit arguments win over the profile."""

        if data_dir is not None:
            base = Path(data_dir)
        elif self.data_dir:
            base = Path(self.data_dir)
        else:
            base = default_data_dir()
        overrides = overrides or {}
        paths: Dict[str, Path] = {}
        for spec in iter_sources():
            if overrides.get(spec.key) is not None:
                paths[spec.key] = Path(overrides[spec.key])
            else:
                paths[spec.key] = base / self.filenames.get(spec.key, spec.filename)
        return SourcePaths(**paths)
