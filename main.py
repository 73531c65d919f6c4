from datetime import datetime, timezone
from typing import Optional
from fastapi import FastAPI, File, UploadFile, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from config import settings
from models.resume_models import AnalysisResult, ApiResponse
from services.errors import InternalFault, MissingFile, MultipleFiles, ResumeProcessingError
from services.request_limits import RequestSizeLimitMiddleware
from services.resume_service import ResumeService
import logging


app = FastAPI(title="ResumeLens ATS API", version="1.0.0")

# Request size guard, runs before multipart parsing
app.add_middleware(
    RequestSizeLimitMiddleware,
    max_body_bytes=settings.MAX_REQUEST_BYTES,
    max_upload_bytes=settings.MAX_UPLOAD_BYTES,
)

# CORS middleware (outermost, so 413s still carry CORS headers)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Initialize services
resume_service = ResumeService()


def success_response(analysis: AnalysisResult) -> JSONResponse:
    body = ApiResponse(success=True, data=analysis)
    return JSONResponse(status_code=200, content=body.to_json())


def error_response(error: ResumeProcessingError) -> JSONResponse:
    body = ApiResponse(success=False, message=error.message)
    return JSONResponse(status_code=error.status_code, content=body.to_json())


@app.exception_handler(ResumeProcessingError)
async def processing_error_handler(request: Request, exc: ResumeProcessingError):
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected request to {request.url.path}: {exc.errors()}")
    return error_response(MissingFile())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    body = ApiResponse(success=False, message=str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body.to_json())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}", exc_info=exc)
    return error_response(InternalFault())


@app.get("/")
async def root():
    return {"message": "ResumeLens ATS API is working"}

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": "resumelens-backend",
        "time": datetime.now(timezone.utc).isoformat(),
    }

@app.post("/analyze")
async def analyze_resume(request: Request, file: Optional[UploadFile] = File(None)):
    """
    Upload and analyze a resume file (PDF or TXT, form field ``file``)
    """
    try:
        if file is None:
            raise MissingFile()

        form = await request.form()
        if len(form.getlist("file")) > 1:
            raise MultipleFiles()

        analysis = await resume_service.analyze_upload(file)
        return success_response(analysis)

    except ResumeProcessingError as e:
        logger.warning(f"Resume rejected ({type(e).__name__}): {e.message}")
        return error_response(e)
    except Exception:
        logger.exception("Unexpected error processing resume")
        return error_response(InternalFault())
    finally:
        if file is not None:
            await file.close()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
