"""Small helpers with no FastAPI dependency."""

from .fs import is_within, safe_join, wipe_directory

__all__ = ["is_within", "safe_join", "wipe_directory"]
