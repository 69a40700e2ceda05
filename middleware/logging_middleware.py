"""
Request logging middleware for RiskCast API
"""
import time
import uuid

import structlog

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = b"x-request-id"


class LoggingMiddleware:
    """ASGI middleware that logs every HTTP request with its timing"""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                process_time = time.time() - start_time
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER, request_id.encode()))
                message["headers"] = headers

                logger.info(
                    "HTTP Request",
                    request_id=request_id,
                    method=scope.get("method", "UNKNOWN"),
                    path=scope.get("path", "UNKNOWN"),
                    query_string=scope.get("query_string", b"").decode(),
                    status_code=message.get("status", 0),
                    process_time_ms=round(process_time * 1000, 2)
                )

            await send(message)

        await self.app(scope, receive, send_wrapper)


def setup_logging_middleware(app):
    """Setup logging middleware for the application"""
    app.add_middleware(LoggingMiddleware)
    return app
