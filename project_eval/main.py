from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from project_eval.config import settings
from project_eval.core.logging import configure_logging

# IMPORT ROUTERS
from project_eval.routers.health import router as health_router
from project_eval.routers.rubric import router as rubric_router
from project_eval.routers.evaluations import router as evaluations_router
from project_eval.routers.evaluations import validation_exception_handler

configure_logging()


# SWAGGER UI - tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Rubric"},
    {"name": "Evaluations"},
]

# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=f"{settings.APP_NAME} API",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

# REGISTER EXCEPTION HANDLERS
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# REGISTER ROUTERS (order matches _OPENAPI_TAGS / Swagger UI display order)
app.include_router(health_router)       # Health
app.include_router(rubric_router)       # Rubric
app.include_router(evaluations_router)  # Evaluations


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    return {
        "service": f"{settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": "running"
    }


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "project_eval.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
