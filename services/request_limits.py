import logging
from typing import Optional

from fastapi.responses import JSONResponse

from models.resume_models import ApiResponse
from services.errors import PayloadTooLarge

logger = logging.getLogger(__name__)


class RequestTooLarge(Exception):
    pass


def _declared_length(scope) -> Optional[int]:
    for name, value in scope.get("headers", []):
        if name == b"content-length":
            try:
                return int(value)
            except ValueError:
                return None
    return None


class RequestSizeLimitMiddleware:
    """
    Reject request bodies over ``max_body_bytes`` before the form is parsed.

    A declared Content-Length over the cap is refused without reading the body.
    Bodies without one are counted as they stream in and cut off at the cap;
    whatever the app had prepared by then is discarded in favour of the 413.
    """

    def __init__(self, app, max_body_bytes: int, max_upload_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes
        self.max_upload_bytes = max_upload_bytes

    def too_large_response(self) -> JSONResponse:
        error = PayloadTooLarge.for_limit(self.max_upload_bytes)
        body = ApiResponse(success=False, message=error.message)
        return JSONResponse(status_code=error.status_code, content=body.to_json())

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = _declared_length(scope)
        if declared is not None and declared > self.max_body_bytes:
            logger.warning(f"Refusing {scope['path']}: Content-Length {declared} exceeds {self.max_body_bytes}")
            await self.too_large_response()(scope, receive, send)
            return

        received = 0
        exceeded = False
        response_started = False

        async def limited_receive():
            nonlocal received, exceeded
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    exceeded = True
                    raise RequestTooLarge()
            return message

        async def guarded_send(message):
            nonlocal response_started
            if exceeded:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except Exception:
            # Body-parsing errors caused by the cut-off are replaced by the 413 below
            if not exceeded:
                raise

        if exceeded and not response_started:
            logger.warning(f"Refusing {scope['path']}: streamed body exceeded {self.max_body_bytes} bytes")
            await self.too_large_response()(scope, receive, send)
