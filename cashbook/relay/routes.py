"""
Upload Relay Route

POST /upload-receipt accepts one multipart file field named ``file``,
stores its bytes under ``receipt-<epoch ms>.<ext>`` and answers with the
object's public URL.

    200 {"publicUrl": "..."}
    400 {"error": "No file"}                 no file part; storage untouched
    500 {"error": "<storage message>"}       storage rejected the write
    500 {"error": "Upload failed"}           anything else; logged, not echoed
"""

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from cashbook.models.receipt import DEFAULT_CONTENT_TYPE
from cashbook.services.platform.interface import StorageError
from cashbook.services.receipts import receipt_key


logger = structlog.get_logger(__name__)

router = APIRouter()

FILE_FIELD = "file"
NO_FILE = "No file"
UPLOAD_FAILED = "Upload failed"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/upload-receipt")
async def upload_receipt(request: Request):
    state = request.app.state
    try:
        form = await request.form()
        upload = form.get(FILE_FIELD)
        if not isinstance(upload, UploadFile):
            return _error(400, NO_FILE)
        
        key = receipt_key(upload.filename)
        data = await upload.read()
        content_type = upload.content_type or DEFAULT_CONTENT_TYPE
        
        try:
            # Storage clients are blocking; keep the event loop free for
            # other uploads.
            path = await run_in_threadpool(
                state.storage.store_object,
                state.bucket,
                key,
                data,
                content_type,
            )
        except StorageError as e:
            state.audit_logger.log_receipt_upload_failed(key, e.message)
            return _error(500, e.message)
        
        public_url = state.storage.public_url(state.bucket, path)
        state.audit_logger.log_receipt_uploaded(key, len(data), public_url)
        return {"publicUrl": public_url}
    except Exception:
        logger.exception("receipt_upload_failed", path=request.url.path)
        return _error(500, UPLOAD_FAILED)
