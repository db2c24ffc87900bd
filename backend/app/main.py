from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.middleware.exceptions import register_exception_handlers
from app.routers import health, property_settings, refrigeration, temp_logs

app = FastAPI(
    title="KitchenOps",
    description="Kitchen compliance: food temperature logs, blast-chill tracking & EHO records",
    version="0.1.0",
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
# Public
app.include_router(health.router)

# Property-scoped (require an active membership)
app.include_router(temp_logs.router, prefix="/api/temp-logs", tags=["temp-logs"])
app.include_router(property_settings.router, prefix="/api/property-settings", tags=["settings"])
app.include_router(refrigeration.router, prefix="/api/refrigeration", tags=["refrigeration"])
