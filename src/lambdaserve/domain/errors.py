from __future__ import annotations

from pathlib import Path


class LambdaServeError(Exception):
    """Base class for every failure that aborts a conversion run."""


class MissingFileError(LambdaServeError):
    def __init__(self, path: Path | str):
        self.path = str(path)
        super().__init__(f"Handler file does not exist: {self.path}")


class DirectoryExistsError(LambdaServeError):
    """Output directory or server entrypoint is already present."""

    def __init__(self, path: Path | str):
        self.path = str(path)
        super().__init__(f"Refusing to overwrite existing path: {self.path}")


class CopyFailure(LambdaServeError):
    def __init__(self, src: Path | str, dest: Path | str):
        self.src = str(src)
        self.dest = str(dest)
        super().__init__(f"Could not copy directory {self.src} -> {self.dest}")


class InvalidHandlerError(LambdaServeError):
    pass


class DuplicateRouteError(InvalidHandlerError):
    def __init__(self, route_name: str, paths: list[str]):
        self.route_name = route_name
        self.paths = paths
        super().__init__(
            f"Route '/{route_name}' is produced by more than one handler: {', '.join(paths)}"
        )


class ManifestParseError(LambdaServeError):
    """Existing package.json could not be read as a dependency manifest."""
