import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5327
DEFAULT_API_DIR = "api"
WATCHED_EXTENSIONS = frozenset(
    {"html", "css", "js", "json", "svg", "png", "jpg", "jpeg"}
)


@dataclass(frozen=True)
class ServeConfig:
    """Server settings, fixed once the app is created."""

    root: str = field(default_factory=os.getcwd)
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    watch: bool = True
    watched_extensions: FrozenSet[str] = WATCHED_EXTENSIONS
    cors_origin: Optional[str] = None
    spa: bool = False
    api_dir: Optional[str] = DEFAULT_API_DIR

    @property
    def root_path(self) -> Path:
        return Path(self.root).resolve()

    @property
    def api_prefix(self) -> Optional[str]:
        """URL prefix of the API namespace, e.g. ``/api``."""
        if not self.api_dir:
            return None
        name = self.api_dir.replace(os.sep, "/").strip("/")
        return "/" + name if name else None

    @property
    def api_root(self) -> Optional[Path]:
        prefix = self.api_prefix
        if prefix is None:
            return None
        return self.root_path / prefix.lstrip("/")

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"
