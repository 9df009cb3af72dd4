from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lambdaserve.repo.ignore import DEFAULT_EXCLUDES

DEFAULT_PORT = 8080
DEFAULT_OUT_DIR = "server"


class ConvertConfig(BaseModel):
    """Everything one `convert` run needs, read once from argv/cwd."""

    model_config = ConfigDict(frozen=True)

    cwd: Path
    handler_paths: list[str] = Field(min_length=1)
    out_dir: Path = Path(DEFAULT_OUT_DIR)
    excludes: frozenset[str] = DEFAULT_EXCLUDES
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)

    @field_validator("out_dir")
    @classmethod
    def _out_dir_not_empty(cls, v: Path) -> Path:
        if str(v) in ("", "."):
            raise ValueError("out_dir must name a new directory")
        return v

    def resolved_out_dir(self) -> Path:
        return self.out_dir if self.out_dir.is_absolute() else self.cwd / self.out_dir


class InPlaceConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    cwd: Path
    handler_path: str
    route_name: str = Field(min_length=1)
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)


class PackageManifest(BaseModel):
    """The parts of an existing package.json that get merged."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    # version specs are kept verbatim, non-string values included
    dependencies: Optional[dict[str, Any]] = None
    dev_dependencies: Optional[dict[str, Any]] = Field(None, alias="devDependencies")
