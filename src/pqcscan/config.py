"""Configuration loading helpers for the scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any, Dict, List


CONFIG_FILENAME = ".pqcscanrc.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "ignore": [],
    "include_tests": True,
    "deep": False,
    "max_files": 2000,
}


@dataclass(slots=True)
class ScannerConfig:
    """Represents the flattened scanner configuration."""

    project_root: Path
    ignore: list[str] = field(default_factory=list)
    include_tests: bool = True
    deep: bool = False
    max_files: int = 2000

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_root": str(self.project_root),
            "ignore": list(self.ignore),
            "include_tests": self.include_tests,
            "deep": self.deep,
            "max_files": self.max_files,
        }


def _read_json_file(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return data


def _config_files(root: Path, explicit: Path | None) -> List[Path]:
    candidates = [root / CONFIG_FILENAME]
    if explicit is not None:
        candidates.append(explicit if explicit.is_absolute() else root / explicit)
    return [path for path in candidates if path.exists()]


def load_config(
    project_root: Path,
    config_path: Path | None = None,
    overrides: Dict[str, Any] | None = None,
) -> ScannerConfig:
    """Settings from defaults, then the rc file, then ``config_path``, then ``overrides``.

    Later sources replace whole keys; there is no nested merging.
    """

    root = project_root.expanduser().resolve()
    settings: Dict[str, Any] = dict(DEFAULT_CONFIG)
    for path in _config_files(root, config_path):
        settings.update(_read_json_file(path))
    settings.update(overrides or {})
    return ScannerConfig(
        project_root=root,
        ignore=list(settings["ignore"]),
        include_tests=bool(settings["include_tests"]),
        deep=bool(settings["deep"]),
        max_files=int(settings["max_files"]),
    )
