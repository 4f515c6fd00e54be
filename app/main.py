# app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.middleware import RequestIdMiddleware
from app.db import init_db
from app.config import settings

from app.routers import settings as settings_router
from app.routers import discounts, pricing, checkout

logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

app = FastAPI(title="Storefront Pricing API", version="1.0.0")

@app.on_event("startup")
def startup():
    init_db()

# Middlewares
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Fee schedule and discount rules (store)
app.include_router(settings_router.router)
app.include_router(discounts.router)

# Pricing used by every storefront surface
app.include_router(pricing.router)
app.include_router(checkout.router)

@app.get("/healthz")
def healthz():
    return {"ok": True}
