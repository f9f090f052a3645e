# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""FastAPI application exposing the proxy operations over HTTP."""

from __future__ import annotations

import datetime as _dt
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..client import BynderProxyClient
from ..core.config import ProxyConfig
from ..core.errors import (
    InvalidParameterError,
    NotFoundError,
    ProxyError,
    UpstreamRequestError,
)
from ..export import XLSX_CONTENT_TYPE
from ..utils.flatten import METAPROPERTY_PREFIX
from .responses import error_response, pagination_meta, success_response

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1")
_FALSE_VALUES = ("false", "0")

ROUTE_CATALOGUE = [
    {
        "path": "/api/media/list",
        "method": "GET",
        "description": "Get all media as JSON",
        "parameters": {
            "query": {
                "limit": {"type": "number", "description": "Maximum number of media items to retrieve", "default": 100, "max": 1000, "required": False},
                "page": {"type": "number", "description": "Page number, in pages of `limit` items", "default": 1, "required": False},
                "type": {"type": "string", "description": "Filter by media type (image, video, document, audio, 3d)", "required": False},
                "orderBy": {"type": "string", "description": "Sort order, e.g. 'dateCreated desc'", "required": False},
                "orientation": {"type": "string", "description": "Filter by orientation (portrait, landscape, square)", "required": False},
                "limitedUsage": {"type": "boolean", "description": "Filter by limited usage status", "required": False},
                "property_<name>": {"type": "string", "description": "Filter by metaproperty option", "required": False},
            }
        },
    },
    {
        "path": "/api/media/:id",
        "method": "GET",
        "description": "Get a single media item by ID",
        "parameters": {"path": {"id": {"type": "string", "description": "Bynder media ID", "required": True}}},
    },
    {
        "path": "/api/media/exportAllMedia",
        "method": "GET",
        "description": "Export all media to XLSX file",
        "parameters": {
            "query": {
                "limit": {"type": "number", "description": "Maximum number of media items to export", "default": 1000, "required": False},
                "filename": {"type": "string", "description": "Custom filename for the export", "required": False},
            }
        },
    },
    {
        "path": "/api/media/download/:filename",
        "method": "GET",
        "description": "Download exported XLSX file",
        "parameters": {"path": {"filename": {"type": "string", "description": "Filename of the export to download", "required": True}}},
    },
    {
        "path": "/api/media/exportMetaProperties",
        "method": "GET",
        "description": "Export all meta-properties and their options to XLSX file",
        "parameters": {"query": {"filename": {"type": "string", "description": "Custom filename for the export", "required": False}}},
    },
    {
        "path": "/api/media/metaproperties",
        "method": "GET",
        "description": "Get the meta-properties used by a sample of media items",
        "parameters": {
            "query": {"limit": {"type": "number", "description": "Media items to sample", "default": 100, "required": False}}
        },
    },
    {
        "path": "/api/metaproperties/list",
        "method": "GET",
        "description": "Get all metaproperties from Bynder",
        "parameters": {
            "query": {
                "options": {"type": "number", "description": "Include options (1) or not (0)", "default": 1, "required": False},
                "count": {"type": "number", "description": "Include counts (1) or not (0)", "default": 1, "required": False},
            }
        },
    },
    {
        "path": "/api/content_access/metaproperties/list",
        "method": "GET",
        "description": "Get all metaproperties via the content access API",
        "parameters": {},
    },
    {
        "path": "/api/content_access/metaproperties/:id",
        "method": "GET",
        "description": "Get a metaproperty by ID via the content access API",
        "parameters": {"path": {"id": {"type": "string", "description": "Metaproperty ID", "required": True}}},
    },
    {
        "path": "/api/routes",
        "method": "GET",
        "description": "Get information about all available API routes",
        "parameters": {},
    },
]


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """``"true"``/``"1"`` and ``"false"``/``"0"`` (any case); anything else is "not specified"."""
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def media_filters(request: Request, **named: Any) -> Dict[str, Any]:
    """
    Collect Bynder media filters from named query values and ``property_*`` parameters.

    ``None`` and empty values are left out.
    """
    filters: Dict[str, Any] = {k: v for k, v in named.items() if v is not None and v != ""}
    for key, value in request.query_params.items():
        if key.startswith(METAPROPERTY_PREFIX) and value != "":
            filters[key] = value
    return filters


def _json(body: Dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=body, status_code=status_code)


def create_app(client: Optional[BynderProxyClient] = None, config: Optional[ProxyConfig] = None) -> FastAPI:
    """
    Build the application around a client.

    This is the composition root: it selects the upstream (through the
    client's configuration) and creates the export directory once.

    :param client: Client to serve; built from ``config`` when omitted.
    :param config: Configuration used when ``client`` is omitted. Defaults to
        :meth:`ProxyConfig.from_env`.
    """
    if client is None:
        client = BynderProxyClient(config or ProxyConfig.from_env())
    config = client.config
    client.store.ensure()

    app = FastAPI(title="Bynder Proxy", version=__version__)
    app.state.client = client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    def fail(exc: BaseException, code: str, default_message: str, status_code: int = 500) -> JSONResponse:
        if isinstance(exc, InvalidParameterError):
            code, status_code = "INVALID_PARAMETER", 400
        body, status = error_response(
            str(exc) or default_message,
            code,
            status_code,
            exc,
            production=config.production,
        )
        return _json(body, status)

    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    @app.on_event("shutdown")
    def _close_client() -> None:
        client.close()

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            body, status = error_response(f"Route {request.method} {request.url.path} not found", "ROUTE_NOT_FOUND", 404)
        else:
            body, status = error_response(str(exc.detail), "HTTP_ERROR", exc.status_code)
        return _json(body, status)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        body, status = error_response("Invalid request parameters", "INVALID_PARAMETER", 400)
        body["error"]["details"] = {"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]}
        return _json(body, status)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        code = exc.code.upper() if isinstance(exc, ProxyError) else "INTERNAL_SERVER_ERROR"
        body, status = error_response(
            str(exc) or "An unexpected error occurred",
            code,
            getattr(exc, "status_code", None) or 500,
            exc,
            production=config.production,
        )
        return _json(body, status)

    @app.get("/")
    def root() -> Dict[str, Any]:
        return {
            "success": True,
            "message": "API is running",
            "version": __version__,
            "timestamp": _dt.datetime.now(_dt.timezone.utc).isoformat(),
        }

    @app.get("/api/routes")
    def list_routes() -> JSONResponse:
        return _json(success_response(ROUTE_CATALOGUE, "API routes retrieved successfully"))

    # ----------------------------- Media ---------------------------------
    @app.get("/api/media/list")
    def list_media(
        request: Request,
        limit: int = Query(default=100, ge=0),
        page: int = Query(default=1, ge=1),
        type: Optional[str] = None,
        orderBy: Optional[str] = None,
        orientation: Optional[str] = None,
        limitedUsage: Optional[str] = None,
        limited: Optional[str] = None,
    ) -> JSONResponse:
        logger.info("Media list request: %s", dict(request.query_params))
        filters = media_filters(
            request,
            type=type,
            orderBy=orderBy,
            orientation=orientation,
            limited=parse_bool(limitedUsage if limitedUsage is not None else limited),
        )
        try:
            items = client.media.list(limit, filters, page=page)
        except Exception as exc:
            logger.exception("Error getting media list")
            return fail(exc, "MEDIA_LIST_ERROR", "Failed to retrieve media data")
        capped = min(limit, config.list_max_limit)
        return _json(
            success_response(
                items,
                "Media items retrieved successfully",
                pagination_meta(page, capped, len(items)),
            )
        )

    @app.get("/api/media/exportAllMedia")
    def export_all_media(
        request: Request,
        limit: Optional[int] = Query(default=None, ge=0),
        filename: Optional[str] = None,
        type: Optional[str] = None,
        orderBy: Optional[str] = None,
        orientation: Optional[str] = None,
        limited: Optional[str] = None,
        limitedUsage: Optional[str] = None,
    ) -> JSONResponse:
        filters = media_filters(
            request,
            type=type,
            orderBy=orderBy,
            orientation=orientation,
            limited=parse_bool(limited if limited is not None else limitedUsage),
        )
        try:
            result = client.media.export(limit, filters, filename=filename or None)
        except Exception as exc:
            logger.exception("Error exporting media")
            return fail(exc, "MEDIA_EXPORT_ERROR", "Failed to export media data")
        if result is None:
            return _json(success_response(None, "No media items found to export"), 404)
        return _json(success_response(result.to_dict(), "Media export completed successfully"))

    @app.get("/api/media/download/{filename}")
    def download_export(filename: str):
        try:
            path = client.store.resolve_download(filename)
        except NotFoundError as exc:
            body, status = error_response(str(exc), "FILE_NOT_FOUND", 404)
            return _json(body, status)
        return FileResponse(
            path,
            media_type=XLSX_CONTENT_TYPE,
            filename=path.name,
            content_disposition_type="attachment",
        )

    @app.get("/api/media/exportMetaProperties")
    def export_metaproperties(filename: Optional[str] = None) -> JSONResponse:
        try:
            result = client.metaproperties.export(filename=filename or None)
        except Exception as exc:
            logger.exception("Error exporting meta-properties")
            return fail(exc, "META_PROPERTY_EXPORT_ERROR", "Failed to export meta-property data")
        if result is None:
            return _json(success_response(None, "No meta-properties found to export"), 404)
        return _json(success_response(result.to_dict(), "Meta-properties export completed successfully"))

    @app.get("/api/media/metaproperties")
    def media_metaproperties(
        request: Request,
        limit: Optional[int] = Query(default=None, ge=0),
        type: Optional[str] = None,
        orientation: Optional[str] = None,
        limitedUsage: Optional[str] = None,
    ) -> JSONResponse:
        filters = media_filters(request, type=type, orientation=orientation, limited=parse_bool(limitedUsage))
        try:
            summary = client.metaproperties.from_media(limit, filters)
        except Exception as exc:
            logger.exception("Error getting meta-properties")
            return fail(exc, "META_PROPERTY_LIST_ERROR", "Failed to retrieve meta-property data")
        if summary is None:
            return _json(success_response(None, "No media items found to extract meta-properties"), 404)
        return _json(success_response(summary, "Meta-properties retrieved successfully"))

    @app.get("/api/media/{media_id}")
    def get_media(media_id: str) -> JSONResponse:
        try:
            item = client.media.get(media_id)
        except NotFoundError as exc:
            return fail(exc, "MEDIA_NOT_FOUND", "Media item not found", 404)
        except UpstreamRequestError as exc:
            logger.error("Bynder API error: %s", exc)
            return fail(exc, "BYNDER_API_ERROR", "Error retrieving media from Bynder", exc.status_code or 500)
        except Exception as exc:
            logger.exception("Error getting media by ID")
            return fail(exc, "MEDIA_FETCH_ERROR", "Failed to retrieve media data")
        return _json(success_response(item, "Media item retrieved successfully"))

    # ----------------------------- Metaproperties ------------------------
    @app.get("/api/metaproperties/list")
    def list_metaproperties(options: Optional[str] = None, count: Optional[str] = None) -> JSONResponse:
        include_options = parse_bool(options)
        include_count = parse_bool(count)
        try:
            result = client.metaproperties.list(
                options=True if include_options is None else include_options,
                count=True if include_count is None else include_count,
            )
        except Exception as exc:
            logger.exception("Error getting metaproperties")
            return fail(exc, "METAPROPERTY_LIST_ERROR", "Failed to retrieve metaproperties")
        return _json(success_response(result, "Metaproperties retrieved successfully"))

    @app.get("/api/content_access/metaproperties/list")
    def content_access_list(request: Request) -> JSONResponse:
        try:
            data = client.metaproperties.content_access_list(dict(request.query_params))
        except Exception as exc:
            logger.exception("Error getting content access metaproperties")
            return fail(exc, "CONTENT_ACCESS_METAPROPERTY_LIST_ERROR", "Failed to retrieve content access metaproperties")
        return _json(success_response(data, "Content access metaproperties retrieved successfully"))

    @app.get("/api/content_access/metaproperties/{metaproperty_id}")
    def content_access_get(metaproperty_id: str, request: Request) -> JSONResponse:
        try:
            data = client.metaproperties.content_access_get(metaproperty_id, dict(request.query_params))
        except NotFoundError as exc:
            return fail(exc, "CONTENT_ACCESS_METAPROPERTY_GET_ERROR", "Metaproperty not found", 404)
        except Exception as exc:
            logger.exception("Error getting content access metaproperty")
            return fail(exc, "CONTENT_ACCESS_METAPROPERTY_GET_ERROR", "Failed to retrieve content access metaproperty")
        return _json(success_response(data, "Content access metaproperty retrieved successfully"))

    return app


def run() -> None:
    """Entry point: load ``.env``, configure logging and serve with uvicorn."""
    import uvicorn
    from dotenv import load_dotenv

    load_dotenv()
    config = ProxyConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    if not config.has_credentials and not config.use_mock_data:
        logger.warning("BYNDER_CLIENT_ID/BYNDER_CLIENT_SECRET are not set; calls to Bynder will fail.")
    app = create_app(config=config)
    logger.info("Server is running at http://%s:%s", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port)


__all__ = ["ROUTE_CATALOGUE", "create_app", "media_filters", "parse_bool", "run"]
