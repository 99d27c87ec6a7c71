# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Instantiate the FastAPI app.
* Register CORS middleware and the request-log middleware.
* Mount the feature routers (auth, admin, vaults, categories, items,
  permissions, generator).
* Translate ``VaultShareError`` into JSON responses of the form
  ``{"detail": "...", "error": "<kind>"}``.
* Expose a /health endpoint for container liveness checks.

Production note
---------------
CORS allow_origins is set to localhost only.  In a production deployment
this must be changed to the exact frontend origin.
"""

import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from auth.router import router as auth_router
from admin.router import router as admin_router
from vaults.router import router as vaults_router
from categories.router import router as categories_router
from items.router import router as items_router
from permissions.router import router as permissions_router
from generator.router import router as generator_router
from core.errors import DataIntegrityError, VaultShareError
from core.logger import logger
from core.security import get_client_ip

app = FastAPI(title="VaultShare", version="1.0.0")

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:8000"],
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Bodies are never echoed – they carry plaintext secrets.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            get_client_ip(request),
            response.status_code,
            elapsed_ms,
        )
        return response


app.add_middleware(_RequestLogMiddleware)


# ---------------------------------------------------------------------------
# Domain errors → HTTP
# ---------------------------------------------------------------------------


@app.exception_handler(VaultShareError)
async def _vaultshare_error_handler(request: Request, exc: VaultShareError) -> JSONResponse:
    if isinstance(exc, DataIntegrityError):
        # Stored ciphertext is unreadable: an operator has to look at this
        logger.error("%s %s | %s: %s", request.method, request.url.path, exc.kind, exc.detail)
    else:
        logger.warning("%s %s | %s: %s", request.method, request.url.path, exc.kind, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.kind},
    )


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(vaults_router)
app.include_router(categories_router)
app.include_router(items_router)
app.include_router(permissions_router)
app.include_router(generator_router)

# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@app.on_event("startup")
async def _on_startup():
    logger.info("VaultShare service starting up")


@app.on_event("shutdown")
async def _on_shutdown():
    logger.info("VaultShare service shutting down")


@app.get("/health")
def health():
    return {"status": "ok"}
