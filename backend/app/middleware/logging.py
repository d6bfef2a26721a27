import json
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("oddsfeed.access")


def _route_template(request: Request) -> str | None:
    # set by the router once a route matched; shared with this middleware's scope
    route = request.scope.get("route")
    return getattr(route, "path", None)


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for the odds API.

    Emits one JSON line per request with the matched route template and the
    event type being served, so upstream-heavy routes can be grouped per
    sport. The request id is echoed back as ``X-Request-ID``.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        started = time.perf_counter()

        response: Response = await call_next(request)

        path_params = request.scope.get("path_params") or {}
        entry = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "route": _route_template(request),
            "event_type_id": path_params.get("event_type_id"),
            "query_keys": sorted(request.query_params.keys()),
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        }

        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(level, json.dumps(entry))

        response.headers["X-Request-ID"] = request_id
        return response


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
