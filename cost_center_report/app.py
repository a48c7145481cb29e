import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cost_center_report.application import close_report_service
from cost_center_report.routes import config, dataset, export, upload


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_report_service()


def create_app() -> FastAPI:
    app = FastAPI(title="Cost Center Report API", version="0.1.0", lifespan=lifespan)

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(upload.router, prefix="/api")
    app.include_router(dataset.router, prefix="/api")
    app.include_router(export.router, prefix="/api")
    app.include_router(config.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Cost Center Report API",
                "docs": "/docs",
                "health": "/api/config",
            }
        )

    return app


app = create_app()
