from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import documents, report, research
from app.config import settings
from app.services import logger as log_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_service.log_event("startup", "CRE research service starting", ai_provider=settings.ai_provider)
    yield
    log_service.log_event("shutdown", "CRE research service stopping")


app = FastAPI(
    title="CRE Research Agent",
    description="Commercial real estate research aggregator with cited AI synthesis",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(research.router)
app.include_router(documents.router)
app.include_router(report.router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "cre-research"}
