"""
Weather endpoint — POST /weather (also served at POST /)

Body:     {"city"?: str, "lat"?: number, "lon"?: number,
           "type"?: "current" | "forecast" | "air_quality"}
Success:  the OpenWeatherMap payload with "cached": bool merged in
Error:    {"error": str, "code"?: upstream cod}, status 400 / upstream / 500

OPTIONS answers with an empty body and the CORS headers only.
"""

import logging

from fastapi import APIRouter, Request, Response
from starlette.responses import JSONResponse

from services.weather_api.middleware.cors import CORS_HEADERS
from services.weather_api.weather.errors import WeatherAPIError
from services.weather_api.weather.query import WeatherQuery

logger = logging.getLogger(__name__)

router = APIRouter(tags=["weather"])

INTERNAL_ERROR_MESSAGE = "Internal server error"


@router.options("/weather")
@router.options("/")
async def weather_preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("/weather")
@router.post("/")
async def get_weather(request: Request) -> JSONResponse:
    service = request.app.state.weather_service

    try:
        query = WeatherQuery.from_body(await request.json())
        result = await service.handle(query)
    except WeatherAPIError as exc:
        return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=CORS_HEADERS)
    except Exception:
        logger.exception("Unhandled error in weather endpoint")
        return JSONResponse(
            status_code=500,
            content={"error": INTERNAL_ERROR_MESSAGE},
            headers=CORS_HEADERS,
        )

    return JSONResponse(content=result.to_body(), headers=CORS_HEADERS)
