"""Project-level driver: discover Go files, parse them, and run the matcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatch
import logging
from pathlib import Path
from typing import Dict, List

from .config import ScannerConfig
from .errors import PqcScanError
from .golang import iter_source_files, parse_file
from .matcher import Diagnostic, analyze

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanError:
    path: Path
    message: str

    def to_dict(self) -> Dict[str, object]:
        return {"path": str(self.path), "message": self.message}


@dataclass(slots=True)
class ScanResult:
    project_root: Path
    files_scanned: int = 0
    diagnostics: List[Diagnostic] = field(default_factory=list)
    errors: List[ScanError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "projectRoot": str(self.project_root),
            "filesScanned": self.files_scanned,
            "diagnostics": [diagnostic.to_dict() for diagnostic in self.diagnostics],
            "errors": [error.to_dict() for error in self.errors],
        }


def _is_ignored(path: Path, root: Path, patterns: List[str]) -> bool:
    relative = path.relative_to(root).as_posix()
    for pattern in patterns:
        if fnmatch(relative, pattern):
            return True
        # A bare directory name ("vendor", "vendor/") excludes everything below it.
        prefix = pattern.rstrip("/")
        if relative == prefix or relative.startswith(prefix + "/"):
            return True
    return False


def candidate_files(config: ScannerConfig) -> List[Path]:
    root = config.project_root
    files: List[Path] = []
    for path in iter_source_files(root):
        if _is_ignored(path, root, config.ignore):
            logger.debug("ignoring %s", path)
            continue
        if not config.include_tests and path.name.endswith("_test.go"):
            continue
        if len(files) >= config.max_files:
            logger.warning("file limit of %d reached; remaining files are not scanned", config.max_files)
            break
        files.append(path)
    return files


def _scan_file(path: Path, deep: bool) -> List[Diagnostic] | None:
    source_file = parse_file(path)
    if source_file.is_external_test:
        logger.debug("skipping external test package %s in %s", source_file.package, path)
        return None
    return analyze(source_file, deep=deep)


def scan_project(config: ScannerConfig) -> ScanResult:
    """Analyze every Go file under the configured root, one file at a time."""

    result = ScanResult(project_root=config.project_root)
    for path in candidate_files(config):
        try:
            diagnostics = _scan_file(path, config.deep)
        except OSError as exc:
            logger.warning("could not read %s: %s", path, exc)
            result.errors.append(ScanError(path, str(exc)))
            continue
        except PqcScanError as exc:
            logger.warning("%s: %s", path, exc)
            result.errors.append(ScanError(path, str(exc)))
            continue
        except RecursionError:
            logger.warning("%s: syntax tree nested too deeply to analyze", path)
            result.errors.append(ScanError(path, "syntax tree nested too deeply to analyze"))
            continue
        if diagnostics is None:
            continue
        logger.debug("%s: %d diagnostic(s)", path, len(diagnostics))
        result.files_scanned += 1
        result.diagnostics.extend(diagnostics)
    return result
