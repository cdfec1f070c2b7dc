from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from liirat_api.core.responses import CORS_HEADERS


class CORSMiddleware(BaseHTTPMiddleware):
    """Applies the same CORS headers to every route.

    Any OPTIONS request is answered here with 200 and an empty body, whether
    or not it is a browser preflight.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        response = await call_next(request)
        for key, value in CORS_HEADERS.items():
            response.headers[key] = value
        return response
