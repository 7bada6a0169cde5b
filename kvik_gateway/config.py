# kvik_gateway/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

import httpx


def _env(env: Mapping[str, str], name: str, default: str = "") -> str:
    return env.get(name, default)


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    try:
        return float(env.get(name, str(default)))
    except Exception:
        return default


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(env.get(name, str(default)))
    except Exception:
        return default


@dataclass(frozen=True)
class Settings:
    """Process-wide, read-only configuration.

    Built once at startup (``Settings.from_env()``) and hung on
    ``app.state.settings``; handlers get it through ``get_settings``.
    """
    datastore_url: str = "http://127.0.0.1:8888/"
    datastore_timeout: float = 25.0
    datastore_connect_timeout: float = 4.0
    datastore_fallback_body: str = "Datastore unavailable :("

    kegg_base_url: str = "https://rest.kegg.jp"
    kegg_organism: str = "hsa"
    kegg_timeout: float = 15.0

    cache_dir: str = "cache"
    public_dir: str = "public"
    workdir: str = field(default_factory=os.getcwd)

    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080
    app_title: str = "Kvik Pathway Gateway"
    app_version: str = "1.0.0"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            datastore_url=_env(env, "DATASTORE_URL", cls.datastore_url),
            datastore_timeout=_float_env(env, "DATASTORE_TIMEOUT_SECONDS", cls.datastore_timeout),
            datastore_connect_timeout=_float_env(
                env, "DATASTORE_CONNECT_TIMEOUT_SECONDS", cls.datastore_connect_timeout
            ),
            datastore_fallback_body=_env(env, "DATASTORE_FALLBACK_BODY", cls.datastore_fallback_body),
            kegg_base_url=_env(env, "KEGG_BASE_URL", cls.kegg_base_url),
            kegg_organism=_env(env, "KEGG_ORGANISM", cls.kegg_organism).strip().lower(),
            kegg_timeout=_float_env(env, "KEGG_TIMEOUT_SECONDS", cls.kegg_timeout),
            cache_dir=_env(env, "CACHE_DIR", cls.cache_dir),
            public_dir=_env(env, "PUBLIC_DIR", cls.public_dir),
            cors_allow_origins=[o.strip() for o in _env(env, "CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()],
            log_level=_env(env, "LOG_LEVEL", cls.log_level).upper(),
            host=_env(env, "HOST", cls.host),
            port=_int_env(env, "PORT", cls.port),
            app_title=_env(env, "APP_TITLE", cls.app_title),
            app_version=_env(env, "APP_VERSION", cls.app_version),
        )

    @property
    def datastore_timeouts(self) -> httpx.Timeout:
        return httpx.Timeout(self.datastore_timeout, connect=self.datastore_connect_timeout)

    def resolve(self, path: str) -> str:
        """Absolute path for a configured directory, relative to ``workdir``."""
        return os.path.abspath(os.path.join(self.workdir, path))
