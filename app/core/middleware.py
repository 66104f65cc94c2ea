from fastapi import Request, Response
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable
import time
import structlog
import uuid


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey",
}


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Answer preflight requests and add CORS headers to all responses"""
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Browser preflight: never reaches the routes, whatever the path
        if request.method == "OPTIONS":
            return PlainTextResponse("ok", headers=CORS_HEADERS)
        
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        
        return response


class AuditLogMiddleware(BaseHTTPMiddleware):
    """Bind a request id to the log context and record each request's outcome"""
    
    def __init__(self, app):
        super().__init__(app)
        self.logger = structlog.get_logger("audit")
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            self.logger.error(
                "Request failed",
                error=str(e),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                exc_info=True,
            )
            raise
        
        self.logger.info(
            "Request handled",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            client_ip=request.client.host if request.client else None,
        )
        response.headers["X-Request-ID"] = request_id
        return response
