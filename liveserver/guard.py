"""Map request paths onto the served directory without escaping it."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union
from urllib.parse import unquote

logger = logging.getLogger(__name__)

FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Safe:
    path: Path


@dataclass(frozen=True)
class Rejected:
    reason: str = FORBIDDEN


ResolvedPath = Union[Safe, Rejected]


def _suspicious(decoded: str) -> bool:
    if "\0" in decoded:
        return True
    return ".." in decoded.replace("\\", "/").split("/")


def _within(target: Path, root: Path) -> bool:
    return target == root or root in target.parents


def guard(request_path: str, root) -> ResolvedPath:
    """Resolve ``request_path`` (still URL-encoded) against ``root``.

    Raises ``FileNotFoundError`` when the entry does not exist; a missing file
    is answered with 404, not treated as an attack.
    """
    decoded = unquote(request_path)
    if _suspicious(decoded):
        logger.warning("Blocked suspicious path: %r", decoded)
        return Rejected()

    base = Path(root).resolve(strict=True)
    try:
        target = (base / decoded.lstrip("/")).resolve(strict=True)
    except NotADirectoryError as exc:
        # "/file.txt/more" walks through a regular file
        raise FileNotFoundError(str(exc)) from exc

    if not _within(target, base):
        logger.warning("Blocked path escaping the served root: %r", decoded)
        return Rejected()
    return Safe(target)
