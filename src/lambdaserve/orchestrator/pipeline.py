from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from lambdaserve.codegen.artifacts import (
    DOCKERFILE_NAME,
    DOCKERIGNORE_NAME,
    TSCONFIG_NAME,
    generate_dockerfile,
    generate_dockerignore,
    generate_tsconfig,
)
from lambdaserve.codegen.manifest import (
    MANIFEST_NAME,
    generate_package,
    has_server_dependency,
    load_manifest,
)
from lambdaserve.codegen.server import generate_inplace_server_code, generate_server_code
from lambdaserve.domain.errors import DirectoryExistsError, InvalidHandlerError, MissingFileError
from lambdaserve.domain.models import ConvertConfig, InPlaceConfig
from lambdaserve.handlers.resolver import HandlerRef, clean_route_name, resolve, validate_routes
from lambdaserve.repo.stager import copy_tree

SERVER_ENTRYPOINTS = ("server.ts", "server.js")


@dataclass(frozen=True)
class ConvertResult:
    handlers: list[HandlerRef]
    out_dir: Path
    written: list[Path]
    warnings: list[str] = field(default_factory=list)
    mode: str = "staged"  # "staged" | "inplace"


def plan_routes(cwd: Path, handler_paths: Iterable[str]) -> list[HandlerRef]:
    """Resolve + validate handlers and check they exist. No writes."""
    handlers = validate_routes(resolve(p) for p in handler_paths)
    _require_files(cwd, handlers)
    return handlers


def _require_files(cwd: Path, handlers: Iterable[HandlerRef]) -> None:
    for h in handlers:
        if not (cwd / h.path_name).is_file():
            raise MissingFileError(h.path_name)


def _refuse_unstaged_handlers(handlers: Iterable[HandlerRef], excludes: Iterable[str]) -> None:
    # a handler under an excluded name would be required by server.ts but never copied
    excluded = frozenset(excludes)
    for h in handlers:
        hit = [part for part in h.path_name.split("/") if part in excluded]
        if hit:
            raise InvalidHandlerError(
                f"Handler {h.path_name} lives under excluded name '{hit[0]}' and would not be staged"
            )


def _refuse_existing_entrypoint(directory: Path) -> None:
    for name in SERVER_ENTRYPOINTS:
        if (directory / name).exists():
            raise DirectoryExistsError(directory / name)


def _write(path: Path, text: str, written: list[Path]) -> None:
    path.write_text(text, encoding="utf-8")
    written.append(path)


def run_convert(config: ConvertConfig) -> ConvertResult:
    cwd = config.cwd.resolve()
    out_dir = config.resolved_out_dir()

    # every check happens before the first write
    handlers = plan_routes(cwd, config.handler_paths)
    _refuse_unstaged_handlers(handlers, config.excludes)
    _refuse_existing_entrypoint(cwd)
    if out_dir.exists():
        raise DirectoryExistsError(out_dir)

    existing, warnings = load_manifest(cwd)

    copy_tree(cwd, out_dir, config.excludes)

    written: list[Path] = []
    _write(out_dir / "server.ts", generate_server_code(handlers, port=config.port), written)
    _write(out_dir / DOCKERFILE_NAME, generate_dockerfile(port=config.port), written)
    _write(out_dir / DOCKERIGNORE_NAME, generate_dockerignore(), written)
    _write(out_dir / MANIFEST_NAME, generate_package(existing), written)
    _write(out_dir / TSCONFIG_NAME, generate_tsconfig(), written)

    return ConvertResult(
        handlers=handlers,
        out_dir=out_dir,
        written=written,
        warnings=warnings,
        mode="staged",
    )


def run_inplace(config: InPlaceConfig) -> ConvertResult:
    """
    Single-handler conversion that writes next to the handler instead of staging.
    An existing package.json is never rewritten.
    """
    cwd = config.cwd.resolve()
    # the route is given explicitly, so only the file has to exist
    handler = resolve(config.handler_path)
    _require_files(cwd, [handler])
    route_name = clean_route_name(config.route_name)
    _refuse_existing_entrypoint(cwd)

    typescript = handler.path_name.endswith(".ts")
    warnings: list[str] = []
    written: list[Path] = []

    server_name = "server.ts" if typescript else "server.js"
    _write(
        cwd / server_name,
        generate_inplace_server_code(handler, route_name, typescript, port=config.port),
        written,
    )
    _write(cwd / DOCKERFILE_NAME, generate_dockerfile(port=config.port, typescript=typescript), written)

    if (cwd / MANIFEST_NAME).exists():
        existing, warnings = load_manifest(cwd)
        if not warnings and not has_server_dependency(existing):
            warnings.append(f"{MANIFEST_NAME} exists but does not list 'express'; add it before building")
    else:
        _write(cwd / MANIFEST_NAME, generate_package(typescript=typescript), written)

    if typescript:
        _write(cwd / TSCONFIG_NAME, generate_tsconfig(), written)

    return ConvertResult(
        handlers=[handler],
        out_dir=cwd,
        written=written,
        warnings=warnings,
        mode="inplace",
    )
