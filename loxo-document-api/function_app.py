import azure.functions as func

from core.logging import get_logger
from services.upload_service import UploadDocumentService

app = func.FunctionApp(http_auth_level=func.AuthLevel.FUNCTION)

upload_service = UploadDocumentService()

logger = get_logger(__name__)

@app.route(route="upload-document-to-loxo", methods=["POST"])
def upload_document_to_loxo(req: func.HttpRequest) -> func.HttpResponse:
    logger.info("Processing upload-document-to-loxo request")

    result = upload_service.handle(req.get_body(), dict(req.params))

    return func.HttpResponse(result.message, status_code=result.status_code, mimetype="text/plain")
