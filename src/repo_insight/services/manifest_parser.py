"""Parse ``package.json`` bodies into :class:`PackageManifest`."""

from __future__ import annotations

import json
from typing import Any

from repo_insight.domain.entities import PackageManifest
from repo_insight.domain.exceptions import ManifestParseError


def _dependency_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    # Non-string specs (workspace objects etc.) keep their name with an empty range.
    return {str(name): spec if isinstance(spec, str) else "" for name, spec in value.items()}


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def parse_package_json(path: str, text: str) -> PackageManifest:
    """Parse *text* or raise :class:`ManifestParseError`."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(f"{path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ManifestParseError(f"{path} does not contain a JSON object")

    return PackageManifest(
        path=path,
        name=_optional_str(data.get("name")),
        version=_optional_str(data.get("version")),
        dependencies=_dependency_map(data.get("dependencies")),
        dev_dependencies=_dependency_map(data.get("devDependencies")),
        raw=data,
    )
