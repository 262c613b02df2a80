from __future__ import annotations

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from examflow.api.errors import unhandled_error_handler

DEFAULT_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"
ALLOW_METHODS = "GET, POST, OPTIONS"


class PermissiveCORSMiddleware(BaseHTTPMiddleware):
    """Answer every OPTIONS with an empty 200 and put CORS headers on all responses.

    Added last so it wraps ``CORSMiddleware`` and the exception middleware;
    errors that escape the handlers leave here as a JSON 500.
    """

    def __init__(self, app, origins: list[str]):
        super().__init__(app)
        self.origins = origins

    def cors_headers(self, request: Request) -> dict[str, str]:
        headers = {
            "Access-Control-Allow-Headers": request.headers.get("access-control-request-headers")
            or DEFAULT_ALLOW_HEADERS,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
        }
        if "*" in self.origins:
            headers["Access-Control-Allow-Origin"] = "*"
        elif request.headers.get("origin") in self.origins:
            headers["Access-Control-Allow-Origin"] = request.headers["origin"]
        return headers

    async def dispatch(self, request: Request, call_next):
        headers = self.cors_headers(request)
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)

        try:
            response: Response = await call_next(request)
        except Exception as exc:
            response = await unhandled_error_handler(request, exc)

        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response
