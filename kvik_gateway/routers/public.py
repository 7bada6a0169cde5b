# kvik_gateway/routers/public.py
from __future__ import annotations

import os

from fastapi import Depends, HTTPException
from fastapi.responses import FileResponse, PlainTextResponse

from ..config import Settings
from ..deps import get_settings
from ..utils.fs import safe_join, wipe_directory


def public_file(filepath: str, settings: Settings = Depends(get_settings)) -> FileResponse:
    path = safe_join(settings.resolve(settings.public_dir), filepath)
    if path is None or not os.path.isfile(path):
        raise HTTPException(status_code=404, detail=f"No such public file: {filepath}")
    return FileResponse(path)


def reset_cache(settings: Settings = Depends(get_settings)) -> PlainTextResponse:
    try:
        wipe_directory(settings.resolve(settings.cache_dir), settings.workdir)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return PlainTextResponse("ok")
