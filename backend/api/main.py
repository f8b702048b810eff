# backend/api/main.py
from __future__ import annotations

import os
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import RedirectResponse


log = logging.getLogger("uvicorn.error")

# --- Load .env early so os.getenv works everywhere ---
from dotenv import load_dotenv
load_dotenv()  # loads backend/api/.env if present

from db.store import StorageError
from services.route_gate import ADMIN_PATH, FORM_PATH, RouteGateMiddleware
from services.validation import ReportValidationError

# Optional global API prefix (e.g., "/api")
_API_PREFIX = os.getenv("API_PREFIX", "").strip()
if _API_PREFIX:
    if not _API_PREFIX.startswith("/"):
        _API_PREFIX = "/" + _API_PREFIX
    # avoid trailing slash so paths look like /api/reports (not //reports)
    _API_PREFIX = _API_PREFIX.rstrip("/")

app = FastAPI(
    title="Call Center Incident Log API",
    version="1.0.0",
    description="Backend for the election call-center log (submission, dashboard, print, export).",
)

# ---------------- CORS ----------------
# Prefer explicit origins via CORS_ORIGINS="https://app.example.com,https://staging.example.com"
# For local dev we allow any localhost/127.0.0.1 on any port.
cors_env = os.getenv("CORS_ORIGINS")
cors_kwargs = dict(allow_methods=["*"], allow_headers=["*"])

if cors_env:
    allow_origins = [o.strip() for o in cors_env.split(",") if o.strip()]
    cors_kwargs.update(
        allow_origins=allow_origins,
        allow_credentials=True,   # the route gate reads the session cookie
    )
else:
    cors_kwargs.update(
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
    )

app.add_middleware(CORSMiddleware, **cors_kwargs)
log.info("CORS configured: %s", cors_kwargs)

# Admin pages need the session cookie, otherwise back to the form
app.add_middleware(
    RouteGateMiddleware,
    admin_path=f"{_API_PREFIX}{ADMIN_PATH}",
    form_path=f"{_API_PREFIX}{FORM_PATH}",
)

# ---------------- Error envelope: {"error": message} ----------------
@app.exception_handler(ReportValidationError)
async def report_validation_handler(request: Request, exc: ReportValidationError):
    return JSONResponse(status_code=400, content={"error": "Validation failed", "fields": exc.by_field()})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        fields.setdefault(".".join(loc) or "request", []).append(err.get("msg", "Invalid value"))
    return JSONResponse(status_code=400, content={"error": "Validation failed", "fields": fields})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    log.error("Store error on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=500, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Unexpected error"})

# ---------------- Routers ----------------
from routes.report import router as report_router
app.include_router(report_router, prefix=_API_PREFIX)

# ---------------- Meta/utility ----------------
@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    # Visiting the root opens Swagger UI
    return RedirectResponse(url="/docs")

@app.get(f"{_API_PREFIX}{FORM_PATH}", include_in_schema=False)
def form_page() -> RedirectResponse:
    return RedirectResponse(url=f"{_API_PREFIX}/reports/options")

@app.get(f"{_API_PREFIX}{ADMIN_PATH}", include_in_schema=False)
def admin_page() -> RedirectResponse:
    return RedirectResponse(url=f"{_API_PREFIX}/reports/dashboard")

@app.get(f"{_API_PREFIX or ''}/health", tags=["meta"])
def health():
    return {"status": "ok", "prefix": _API_PREFIX or ""}

# ---------------- Local dev entrypoint ----------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
