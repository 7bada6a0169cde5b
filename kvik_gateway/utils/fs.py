# kvik_gateway/utils/fs.py
from __future__ import annotations

import logging
import os
import shutil
from typing import Optional

log = logging.getLogger("kvik.fs")


def is_within(root: str, path: str) -> bool:
    """True when ``path`` resolves strictly inside ``root``."""
    root_r = os.path.realpath(root)
    path_r = os.path.realpath(path)
    if path_r == root_r:
        return False
    return os.path.commonpath([root_r, path_r]) == root_r


def safe_join(root: str, relative: str) -> Optional[str]:
    """Join ``relative`` under ``root``; None if the result would escape it."""
    candidate = os.path.join(root, relative.lstrip("/"))
    if not is_within(root, candidate):
        return None
    return os.path.realpath(candidate)


def wipe_directory(target: str, root: str) -> bool:
    """Recursively delete ``target``, refusing anything outside ``root``.

    Returns False when there was nothing to delete.
    """
    if not is_within(root, target):
        raise ValueError(f"refusing to delete {target!r}: not inside {root!r}")
    if not os.path.exists(target):
        return False
    log.warning("clearing cache directory %s", target)
    shutil.rmtree(target)
    return True
