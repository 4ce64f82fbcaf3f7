"""Report renderers for the CLI output."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Dict, List

from .taxonomy import FUNCTION_RULE_ID, Category


SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"
SARIF_VERSION = "2.1.0"
TOOL_NAME = "pqcscan"

RULE_DESCRIPTIONS = {
    Category.ELLIPTIC_CURVE.rule_id: "Import of an elliptic-curve cryptography package",
    Category.INTEGER_FACTORIZATION.rule_id: "Import of an integer-factorization cryptography package",
    Category.KEY_EXCHANGE.rule_id: "Import of a quantum-vulnerable key exchange package",
    FUNCTION_RULE_ID: "Call to a quantum-vulnerable cryptographic function",
}
RULE_LEVELS = {
    Category.ELLIPTIC_CURVE.rule_id: "warning",
    Category.INTEGER_FACTORIZATION.rule_id: "warning",
    Category.KEY_EXCHANGE.rule_id: "warning",
    FUNCTION_RULE_ID: "error",
}


def render_json(report: Dict[str, object]) -> str:
    return json.dumps(report, indent=2)


def _relative_uri(path: str, project_root: str | None) -> str:
    if project_root:
        try:
            return Path(path).relative_to(project_root).as_posix()
        except ValueError:
            pass
    return Path(path).as_posix()


def _sarif_location(path: str, line: int, column: int) -> Dict[str, object]:
    return {
        "physicalLocation": {
            "artifactLocation": {"uri": path},
            "region": {"startLine": line, "startColumn": column},
        }
    }


def _sarif_rules() -> List[Dict[str, object]]:
    return [
        {
            "id": rule_id,
            "shortDescription": {"text": description},
            "defaultConfiguration": {"level": RULE_LEVELS[rule_id]},
        }
        for rule_id, description in RULE_DESCRIPTIONS.items()
    ]


def render_sarif(report: Dict[str, object]) -> str:
    project_root = report.get("projectRoot")
    results: List[Dict[str, object]] = []
    for diagnostic in report.get("diagnostics", []):
        rule_id = diagnostic.get("ruleId")
        results.append(
            {
                "ruleId": rule_id,
                "level": RULE_LEVELS.get(rule_id, "warning"),
                "message": {"text": diagnostic.get("message")},
                "locations": [
                    _sarif_location(
                        _relative_uri(diagnostic.get("path"), project_root),
                        diagnostic.get("line"),
                        diagnostic.get("column"),
                    )
                ],
            }
        )
    errors = report.get("errors", [])
    sarif = {
        "$schema": SARIF_SCHEMA,
        "version": SARIF_VERSION,
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": TOOL_NAME,
                        "rules": _sarif_rules(),
                    }
                },
                "results": results,
                "invocations": [
                    {
                        "executionSuccessful": not errors,
                        "toolExecutionNotifications": [
                            {
                                "level": "error",
                                "message": {"text": error.get("message")},
                                "locations": [
                                    {
                                        "physicalLocation": {
                                            "artifactLocation": {
                                                "uri": _relative_uri(error.get("path"), project_root)
                                            }
                                        }
                                    }
                                ],
                            }
                            for error in errors
                        ],
                    }
                ],
            }
        ],
    }
    return json.dumps(sarif, indent=2)


def render_human(report: Dict[str, object]) -> str:
    project_root = report.get("projectRoot")
    diagnostics = report.get("diagnostics", [])
    errors = report.get("errors", [])
    lines = []
    lines.append(f"Project: {project_root}")
    lines.append(f"Files Scanned: {report.get('filesScanned', 0)}")
    lines.append(f"Diagnostics: {len(diagnostics)}")
    for diagnostic in diagnostics:
        location = _relative_uri(diagnostic.get("path"), project_root)
        lines.append(f"{location}:{diagnostic.get('line')}:{diagnostic.get('column')}: {diagnostic.get('message')}")
    if errors:
        lines.append(f"Errors: {len(errors)}")
        for error in errors:
            lines.append(f"  - {_relative_uri(error.get('path'), project_root)}: {error.get('message')}")
    return "\n".join(lines)


def render_csv(report: Dict[str, object]) -> str:
    project_root = report.get("projectRoot")
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["path", "line", "column", "rule", "message"])
    for diagnostic in report.get("diagnostics", []):
        writer.writerow(
            [
                _relative_uri(diagnostic.get("path"), project_root),
                diagnostic.get("line"),
                diagnostic.get("column"),
                diagnostic.get("ruleId"),
                diagnostic.get("message"),
            ]
        )
    return buffer.getvalue().rstrip("\n")
