# app/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.routes import router as api_router
from app.errors import GenerationError, SeoEngineError

logger = logging.getLogger(__name__)

app = FastAPI(title="SEO Core Engine")

app.include_router(api_router, prefix="/api")


@app.exception_handler(SeoEngineError)
async def seo_engine_error_handler(request: Request, exc: SeoEngineError) -> JSONResponse:
    if isinstance(exc, GenerationError):
        logger.warning("[api] generation error path=%s message=%s", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
