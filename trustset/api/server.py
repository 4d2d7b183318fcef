from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from trustset import __version__
from trustset.api.middleware import AccessLogMiddleware, RequestIdMiddleware
from trustset.api.models import HealthOut, ManifestInfoOut
from trustset.config import Settings
from trustset.core.processing import process_manifest_store
from trustset.core.readers import ManifestReader, TagReader
from trustset.utils.json_safe import to_jsonable

log = logging.getLogger("trustset.api")


def create_app(
    *,
    settings: Optional[Settings] = None,
    reader: Optional[ManifestReader] = None,
    tag_reader: Optional[TagReader] = None,
) -> FastAPI:
    """Create the FastAPI app.

    reader / tag_reader override the default collaborators (c2pa-python and
    Pillow).
    """

    cfg = settings or Settings.from_env()

    # Logging: safe defaults (no request bodies), can be configured by host app.
    log.setLevel(cfg.log_level)

    app = FastAPI(title="trustset API", version=__version__)
    app.state.cfg = cfg

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(AccessLogMiddleware)

    async def _read_upload(upload: UploadFile) -> bytes:
        """Read an upload into memory, bounded by max_upload_bytes.

        Security notes:
        - Reads in chunks and fails with 413 before exceeding the limit.

        """

        chunks = []
        total = 0
        while True:
            chunk = await upload.read(1024 * 1024)
            if not chunk:
                break
            total += len(chunk)
            if total > cfg.max_upload_bytes:
                raise HTTPException(status_code=413, detail="upload_too_large")
            chunks.append(chunk)
        if total == 0:
            raise HTTPException(status_code=400, detail="empty_upload")
        return b"".join(chunks)

    @app.get("/health", response_model=HealthOut)
    def health() -> HealthOut:
        return HealthOut(ok=True, version=__version__)

    @app.post("/indicator-set")
    async def indicator_set_endpoint(file: UploadFile = File(...)) -> JSONResponse:
        """Return the JPEG Trust indicator set of an uploaded file.

        Unsupported formats yield 415.
        """

        data = await _read_upload(file)
        info = await process_manifest_store(data, True, reader=reader, tag_reader=tag_reader)
        if info.get("indicatorSet") is None:
            raise HTTPException(
                status_code=415 if info.get("fileFormat") == "unknown" else 422,
                detail=info.get("error") or "no_indicator_set",
            )
        return JSONResponse(to_jsonable(info["indicatorSet"]))

    @app.post("/manifests", response_model=ManifestInfoOut)
    async def manifests_endpoint(
        file: UploadFile = File(...),
        as_indicator_set: bool = Form(default=False),
    ) -> ManifestInfoOut:
        """Return the C2PA processing record of an uploaded file."""

        data = await _read_upload(file)
        info = await process_manifest_store(
            data, bool(as_indicator_set), reader=reader, tag_reader=tag_reader
        )
        return ManifestInfoOut(**to_jsonable(info))

    return app
