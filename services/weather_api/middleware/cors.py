"""
CORS configuration.

The proxy is called straight from the browser UI, so origins are wide open and
every weather response carries the headers below, errors included.
Preflights always get an empty 200 with the same headers, whatever the browser
asks for.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers
from starlette.responses import Response

from services.weather_api.config import settings

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


class PermissiveCORSMiddleware(CORSMiddleware):
    """CORSMiddleware whose preflight answer is an empty body plus CORS_HEADERS."""

    def preflight_response(self, request_headers: Headers) -> Response:
        return Response(status_code=200, headers=CORS_HEADERS)


def setup_cors(app: FastAPI) -> None:
    app.add_middleware(
        PermissiveCORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "X-Client-Info", "Apikey", "Content-Type", "X-Request-ID"],
        max_age=600,
    )
