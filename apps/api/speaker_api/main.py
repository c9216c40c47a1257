import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from speaker_api.core.config import settings
from speaker_api.routers.vibe_rules import router as vibe_rules_router
from speaker_api.routers.recommendations import router as recommendations_router
from speaker_api.routers.settings import router as settings_router

logging.basicConfig(level=settings.log_level.upper())

app = FastAPI(title="Speaker Vibes API")

# Comma-separated list, e.g.:
# CORS_ORIGINS="http://localhost:5173,http://127.0.0.1:5173,https://vibes.example.com"
allow_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]

# Safe fallback for local dev if env var not set
if not allow_origins:
  allow_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
  ]

app.add_middleware(
  CORSMiddleware,
  allow_origins=allow_origins,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)

app.include_router(vibe_rules_router, prefix="/vibe-time-rules", tags=["vibe-time-rules"])
app.include_router(recommendations_router, prefix="/recommendations", tags=["recommendations"])
app.include_router(settings_router, tags=["settings"])

@app.get("/health")
def health():
  return {"status": "ok"}
