from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bengkel_api.db import close_document_store
from bengkel_api.logging_config import logger
from bengkel_api.routes.cart_route import router as cart_router
from bengkel_api.routes.history_route import router as history_router
from bengkel_api.routes.stock_route import router as stock_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_document_store()


app = FastAPI(
    title="Bengkel API",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    logger.warning(
        "Rejected malformed request body",
        extra={"path": request.url.path, "errors": exc.errors()},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Format data tidak valid."},
    )


app.include_router(stock_router)
app.include_router(cart_router)
app.include_router(history_router)
