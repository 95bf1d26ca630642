from functools import lru_cache

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from core.logging import get_logger
from services.upload_service import UploadDocumentService

router = APIRouter()

logger = get_logger(__name__)

@lru_cache()
def get_upload_service() -> UploadDocumentService:
    return UploadDocumentService()

@router.post("/upload-document-to-loxo", response_class=PlainTextResponse)
async def upload_document_to_loxo(
    request: Request,
    upload_service: UploadDocumentService = Depends(get_upload_service)
):
    logger.info("Processing upload-document-to-loxo request")

    body = await request.body()

    # The pipeline makes blocking HTTP calls
    result = await run_in_threadpool(upload_service.handle, body, dict(request.query_params))

    return PlainTextResponse(result.message, status_code=result.status_code)
