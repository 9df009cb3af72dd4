from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from lambdaserve.domain.errors import ManifestParseError
from lambdaserve.domain.models import PackageManifest

MANIFEST_NAME = "package.json"

SERVER_DEPENDENCIES = {
    "express": "^4.18.2",
}

SERVER_DEV_DEPENDENCIES = {
    "@types/express": "^4.17.21",
    "@types/aws-lambda": "^8.10.102",
    "typescript": "^5.3.3",
    "@types/node": "20.11.19",
}


def merge_dependencies(
    primary: Optional[Mapping[str, Any]],
    secondary: Optional[Mapping[str, Any]],
) -> dict[str, Any]:
    """Shallow merge; keys in primary win. Either side may be None."""
    out = dict(secondary or {})
    out.update(primary or {})
    return out


def parse_manifest(text: str) -> PackageManifest:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"{MANIFEST_NAME} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ManifestParseError(f"{MANIFEST_NAME} must contain a JSON object")
    try:
        return PackageManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestParseError(f"{MANIFEST_NAME} has malformed dependency maps: {e}") from e


def load_manifest(project_dir: Path) -> tuple[PackageManifest, list[str]]:
    """
    Read project_dir/package.json if present.
    Missing or unparsable manifests count as "no existing dependencies";
    the second element carries a warning in the unparsable case.
    """
    path = Path(project_dir) / MANIFEST_NAME
    if not path.is_file():
        return PackageManifest(), []
    try:
        return parse_manifest(path.read_text(encoding="utf-8")), []
    except (ManifestParseError, UnicodeDecodeError) as e:
        return PackageManifest(), [f"Ignoring existing {MANIFEST_NAME}: {e}"]


def generate_package(existing: Optional[PackageManifest] = None, typescript: bool = True) -> str:
    existing = existing or PackageManifest()

    scripts = {"start": "node dist/server.js", "build": "tsc"} if typescript else {"start": "node server.js"}
    payload: dict = {
        "name": "server",
        "version": "1.0.0",
        "description": "Express server created by lambdaserve",
        "main": "dist/server.js" if typescript else "server.js",
        "scripts": scripts,
        "dependencies": merge_dependencies(existing.dependencies, SERVER_DEPENDENCIES),
    }
    if typescript:
        payload["devDependencies"] = merge_dependencies(
            existing.dev_dependencies, SERVER_DEV_DEPENDENCIES
        )
    elif existing.dev_dependencies:
        payload["devDependencies"] = dict(existing.dev_dependencies)
    payload["author"] = ""
    payload["license"] = "ISC"
    return json.dumps(payload, indent=2) + "\n"


def has_server_dependency(manifest: PackageManifest) -> bool:
    return "express" in (manifest.dependencies or {})
