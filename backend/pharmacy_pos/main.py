"""
Pharmacy POS backend.

ARCHITECTURE:
- REST API (/store, /medicines, /inventory, /sales, /reports): store-scoped
  reads and single-record edits for the owner dashboard
- Function endpoints (/functions/v1/process-sale, /functions/v1/process-bulk-inventory):
  the two multi-row writes, each one database transaction
- Identity: bearer JWT from the external identity provider; `sub` owns the store

SAFETY MODEL:
- Store ownership is checked on every write, from the token, never the body
- A sale either commits completely or leaves no trace
- Stock never goes negative, even under concurrent checkouts
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware

from pharmacy_pos.api.routes import inventory, medicines, reports, sales, stores
from pharmacy_pos.api.routes import process_bulk_inventory, process_sale
from pharmacy_pos.core.config import settings
from pharmacy_pos.core.exceptions import register_exception_handlers
from pharmacy_pos.db.init_db import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

FUNCTIONS_PREFIX = "/functions/v1"


class RestCORSMiddleware:
    """
    CORSMiddleware for the REST surface only.

    The function endpoints answer any origin and carry their own CORS policy
    (see functions_app), so requests under FUNCTIONS_PREFIX pass straight through.
    """

    def __init__(self, app, **options):
        self.app = app
        self.cors = CORSMiddleware(app, **options)

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["path"].startswith(FUNCTIONS_PREFIX + "/"):
            await self.app(scope, receive, send)
            return
        await self.cors(scope, receive, send)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database...")
    init_db()
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="Pharmacy POS API",
    description="Store setup, inventory, billing and reports for independent pharmacies.",
    version="0.1.0",
    lifespan=lifespan,
)

# SECURITY: Trust only configured hosts
app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

# SECURITY: Restrict CORS to specific methods and headers (not wildcards)
app.add_middleware(
    RestCORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
        "Origin",
    ],
    max_age=600,
    expose_headers=["Content-Type", "Content-Disposition"],
)


@app.middleware("http")
async def add_security_headers(request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


register_exception_handlers(app)

app.include_router(stores.router, prefix="/store", tags=["store"])
app.include_router(medicines.router, prefix="/medicines", tags=["medicines"])
app.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
app.include_router(sales.router, prefix="/sales", tags=["sales"])
app.include_router(reports.router, prefix="/reports", tags=["reports"])


# Function endpoints: browser-called, any origin, POST only
functions_app = FastAPI(title="Pharmacy POS functions", docs_url=None, redoc_url=None, openapi_url=None)
functions_app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FUNCTION_CORS_ORIGINS,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)
register_exception_handlers(functions_app)
functions_app.include_router(process_sale.router, tags=["functions"])
functions_app.include_router(process_bulk_inventory.router, tags=["functions"])

app.mount(FUNCTIONS_PREFIX, functions_app)


@app.get("/health")
def health():
    return {"status": "ok"}
