from __future__ import annotations

from fastapi import Request

from .clients.kegg import ReferenceLibrary
from .config import Settings
from .proxy import UpstreamClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upstream(request: Request) -> UpstreamClient:
    return request.app.state.upstream


def get_library(request: Request) -> ReferenceLibrary:
    return request.app.state.library
