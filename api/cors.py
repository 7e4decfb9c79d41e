"""CORS handling for the public signup endpoint."""

from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers
from starlette.responses import PlainTextResponse, Response

from config import Settings


def allowed_origin(settings: Settings, origin: str | None) -> str | None:
    """
    Value for Access-Control-Allow-Origin.

    ``*`` when every origin is allowed, otherwise the request origin if it is
    listed, otherwise None (header omitted).
    """
    if "*" in settings.CORS_ALLOW_ORIGINS:
        return "*"
    if origin and origin in settings.CORS_ALLOW_ORIGINS:
        return origin
    return None


def cors_headers(settings: Settings, origin: str | None = None) -> dict[str, str]:
    """CORS headers sent with the plain OPTIONS response."""
    headers = {
        "Access-Control-Allow-Headers": ", ".join(settings.CORS_ALLOW_HEADERS),
        "Access-Control-Allow-Methods": ", ".join(settings.CORS_ALLOW_METHODS),
    }
    allow_origin = allowed_origin(settings, origin)
    if allow_origin:
        headers["Access-Control-Allow-Origin"] = allow_origin
    if allow_origin != "*":
        headers["Vary"] = "Origin"
    return headers


class PermissiveCORSMiddleware(CORSMiddleware):
    """
    CORSMiddleware whose pre-flight always answers 200 ``ok``.

    Starlette rejects pre-flights asking for unlisted methods or headers
    with a 400; here they get the configured allow-lists instead and the
    browser decides.
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        headers = dict(self.preflight_headers)
        origin = request_headers.get("origin")
        if not self.allow_all_origins:
            if origin and self.is_allowed_origin(origin):
                headers["Access-Control-Allow-Origin"] = origin
            else:
                headers.pop("Access-Control-Allow-Origin", None)
        return PlainTextResponse("ok", status_code=200, headers=headers)
