from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from storefront.core.config import settings
from storefront.core.database import create_db_and_tables, close_db
from storefront.core.exceptions import FieldError, RequestValidationFailed, StoreError
from storefront.core.logging import setup_logging
from storefront.middleware.logging_middleware import LoggingMiddleware
from storefront.controllers import product_controller

logger = setup_logging()

INTERNAL_SERVER_ERROR = "Internal Server Error"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup", environment=settings.environment)
    try:
        await create_db_and_tables()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    logger.info("Application shutdown")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title="Storefront API",
    description="Products, product images and product reviews",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.environment == "local" else None,
    redoc_url="/redoc" if settings.environment == "local" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)

app.include_router(product_controller.router, prefix=settings.api_prefix)

# Uploaded product images are served back under their generated names
app.mount(
    settings.static_url_path,
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="images",
)


@app.get("/")
async def root():
    return {
        "message": "Storefront API is running",
        "version": "1.0.0",
        "environment": settings.environment,
        "docs_url": "/docs" if settings.environment == "local" else "Documentation disabled in production"
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "environment": settings.environment,
    }


def _validation_response(errors) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"errors": jsonable_encoder(errors)},
    )


@app.exception_handler(RequestValidationFailed)
async def request_validation_failed_handler(request, exc):
    logger.info(
        "Request validation failed",
        fields=[e.param for e in exc.errors],
        path=request.url.path,
        method=request.method
    )
    return _validation_response(exc.errors)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request, exc):
    errors = []
    for error in exc.errors():
        loc = error.get("loc", ())
        errors.append(FieldError(
            param=".".join(str(part) for part in loc[1:]) or str(loc[0] if loc else ""),
            msg=error.get("msg", "Invalid value"),
            value=error.get("input"),
            location=str(loc[0]) if loc else "body",
        ))
    logger.info(
        "Malformed request",
        fields=[e.param for e in errors],
        path=request.url.path,
        method=request.method
    )
    return _validation_response(errors)


@app.exception_handler(StoreError)
async def store_error_handler(request, exc):
    logger.error(
        "Store Error",
        error=str(exc),
        cause=str(exc.__cause__) if exc.__cause__ else None,
        path=request.url.path,
        method=request.method
    )
    return PlainTextResponse(INTERNAL_SERVER_ERROR, status_code=500)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc):
    logger.warning(
        "HTTP Exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "message": exc.detail,
            "success": False,
            "status_code": exc.status_code
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    logger.error(
        "Unhandled Exception",
        error=str(exc),
        path=request.url.path,
        method=request.method
    )
    return PlainTextResponse(INTERNAL_SERVER_ERROR, status_code=500)


if __name__ == "__main__":
    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "local",
        log_config=None
    )
