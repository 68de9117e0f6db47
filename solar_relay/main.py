"""FusionSolar relay API.

Proxies the FusionSolar thirdData endpoints for the dashboard: the login
route captures the session token from the upstream response headers, and the
generic route forwards any endpoint with a caller-supplied token.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from .config import settings
from .fusionsolar_client import (
    FusionSolarClient,
    close_fusionsolar_client,
    get_fusionsolar_client,
)
from .models import ConnectivityInfo, ErrorResponse, HealthStatus

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Vendor failCodes worth calling out in the logs
FAIL_CODE_RATE_LIMIT = 407
FAIL_CODE_INVALID_STATION_CODES = 20010

# Create FastAPI app
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Relay for the Huawei FusionSolar northbound API",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
if settings.is_production:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_origin_regex=r".*railway\.app.*",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"{request.method} {request.url.path}")
    return await call_next(request)


def _iso_now() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@app.get("/health", response_model=HealthStatus, tags=["Info"])
async def health():
    """Check relay health status."""
    return HealthStatus(
        status="healthy",
        timestamp=_iso_now(),
        environment=settings.environment,
        port=settings.port,
    )


@app.get("/test", response_model=ConnectivityInfo, tags=["Info"])
async def connectivity_test():
    """Confirm the relay is reachable."""
    return ConnectivityInfo(environment=settings.environment, timestamp=_iso_now())


# =============================================================================
# FusionSolar Proxy Endpoints
# =============================================================================

@app.post("/api/huawei/login", tags=["FusionSolar"])
async def login(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    client: FusionSolarClient = Depends(get_fusionsolar_client),
):
    """Log in upstream and return the body with the session token attached."""
    payload = payload or {}
    user_name = payload.get("userName")
    system_code = payload.get("systemCode")

    logger.info(f"Login attempt for user: {user_name}")

    if not user_name or not system_code:
        return _error(400, "Username and system code are required")

    try:
        response = await client.post(
            "login", {"userName": user_name, "systemCode": system_code}
        )

        if not response.ok:
            logger.error(f"Login API responded with error: {response.status} {response.reason}")
            return _error(
                response.status,
                f"Login API error: {response.status} {response.reason}",
            )

        data = response.data
        if not isinstance(data, dict):
            logger.warning("Login API returned a non-object body, passing it through")
            return JSONResponse(content=data)

        logger.info(f"Login API Response success: {data.get('success')}")

        xsrf_token = response.extract_xsrf_token()
        if xsrf_token:
            data["xsrfToken"] = xsrf_token
            logger.info("XSRF token extracted successfully")
        else:
            logger.warning("No XSRF token found in response headers")
            logger.info(f"Available headers: {sorted(set(response.headers.keys()))}")

        return data

    except Exception as e:
        logger.error(f"Login proxy error: {e}")
        return _error(500, "Login proxy server error", details=str(e))


@app.post("/api/huawei/{endpoint}", tags=["FusionSolar"])
async def proxy(
    endpoint: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    client: FusionSolarClient = Depends(get_fusionsolar_client),
):
    """Forward a thirdData endpoint using the caller's session token."""
    body = dict(payload or {})
    xsrf_token = body.pop("xsrfToken", None)

    logger.info(f"Endpoint: {endpoint}")
    logger.info(f"XSRF Token: {'Present' if xsrf_token else 'Missing'}")
    logger.debug(f"Request body: {body}")

    if not xsrf_token:
        return _error(400, "XSRF token is required")

    if endpoint == "getStationRealKpi":
        station_codes = body.get("stationCodes")
        if not isinstance(station_codes, str) or not station_codes.strip():
            return _error(400, "stationCodes parameter is required and cannot be empty")
        logger.info(f"Station codes to query: {station_codes}")

    try:
        response = await client.post(endpoint, body, xsrf_token=xsrf_token)

        if not response.ok:
            logger.error(f"API responded with error: {response.status} {response.reason}")
            return _error(
                response.status,
                f"API error: {response.status} {response.reason}",
            )

        data = response.data
        if isinstance(data, dict):
            logger.info(f"API Response success: {data.get('success')}")
            if not data.get("success"):
                fail_code = data.get("failCode")
                if fail_code == FAIL_CODE_RATE_LIMIT:
                    logger.warning("Rate limit hit - ACCESS_FREQUENCY_IS_TOO_HIGH")
                elif fail_code == FAIL_CODE_INVALID_STATION_CODES:
                    logger.warning("Invalid station codes provided")

        return JSONResponse(content=data)

    except Exception as e:
        logger.error(f"Proxy error: {e}")
        return _error(500, "Proxy server error", details=str(e))


# =============================================================================
# Single-page App
# =============================================================================

@app.get("/{full_path:path}", include_in_schema=False)
async def serve_frontend(full_path: str):
    """Serve the built frontend; unknown paths get index.html."""
    if not settings.is_production:
        raise HTTPException(status_code=404, detail="Not Found")

    build_dir = Path(settings.static_dir).resolve()
    index_path = build_dir / "index.html"

    if full_path:
        candidate = (build_dir / full_path).resolve()
        if candidate.is_relative_to(build_dir) and candidate.is_file():
            return FileResponse(candidate)

    if not index_path.is_file():
        raise HTTPException(status_code=404, detail="Frontend build not found")

    logger.debug(f"Serving index.html from: {index_path}")
    return FileResponse(index_path)


# =============================================================================
# Startup/Shutdown
# =============================================================================

@app.on_event("startup")
async def startup():
    """Run on startup."""
    logger.info(f"Starting {settings.api_title} v{settings.api_version}")
    logger.info(f"Server running on port {settings.port}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Health check: http://localhost:{settings.port}/health")
    logger.info(f"Test endpoint: http://localhost:{settings.port}/test")
    logger.info("Available API endpoints:")
    logger.info("  POST /api/huawei/login - Login to Huawei FusionSolar")
    logger.info("  POST /api/huawei/getStationList - Get list of solar plants")
    logger.info("  POST /api/huawei/getStationRealKpi - Get real-time plant data")
    if settings.is_production:
        logger.info(f"Serving frontend from {settings.static_dir}/")


@app.on_event("shutdown")
async def shutdown():
    """Run on shutdown."""
    logger.info("Shutting down relay")
    await close_fusionsolar_client()


def run():
    """Console entry point."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
