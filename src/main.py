import sys
import logging
from datetime import datetime

from src.config.settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy import text

from src.database import SessionLocal
from src.routers import referral_codes
from src.schemas import APIErrorContent, APIErrorResponse
from src.exceptions import APIError, BusinessError
from src.services.referral_code_service import referral_code_service
from src.config.referral_codes import default_referral_codes

app = FastAPI(
    title="Referral Codes API - Swagger UI",
    default_response_class=JSONResponse,
)

@app.get("/health")
async def health_check():
    db = SessionLocal()
    try:
        result = db.execute(text("SELECT 1 AS result")).first()
        db_status = "healthy" if result else "unhealthy"
    finally:
        db.close()

    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "database": db_status,
            "version": settings.VERSION
        }
    )

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["POST", "GET", "PUT", "DELETE", "PATCH"],
    allow_headers=["*"],
)

# Подключаем роутеры
app.include_router(referral_codes.router)


def seed_default_referral_codes() -> list[str]:
    """Создание дефолтных реферальных кодов при старте"""
    session = SessionLocal()
    try:
        created = referral_code_service.seed_defaults(session)
    finally:
        session.close()

    logger.info("Default referral codes initialized successfully")
    if created:
        logger.info(f"Created referral codes: {', '.join(created)}")
    logger.info("Available referral codes:")
    for default_code in default_referral_codes:
        logger.info(f"   - {default_code.code} ({default_code.owner_name})")
    return created


@app.on_event("startup")
async def startup_event():
    if settings.SEED_DEFAULT_REFERRAL_CODES:
        seed_default_referral_codes()

@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    return JSONResponse(
        status_code=exc.status_code,
        content=APIErrorResponse(
            error=APIErrorContent(
                code=exc.code,
                message=exc.message,
                details=exc.details
            )
        ).model_dump()
    )

@app.exception_handler(BusinessError)
async def business_error_handler(request: Request, exc: BusinessError):
    return JSONResponse(
        status_code=400,
        content=APIErrorResponse(
            error=APIErrorContent(
                code=exc.code,
                message=exc.message,
                details=exc.details
            )
        ).model_dump()
    )

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=APIErrorResponse(
            error=APIErrorContent(
                code="http_error",
                message=str(exc.detail),
                details=None
            )
        ).model_dump()
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder(APIErrorResponse(
            error=APIErrorContent(
                code="validation_error",
                message="Validation error",
                details=exc.errors()
            )
        ).model_dump())
    )

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=APIErrorResponse(
            error=APIErrorContent(
                code="internal_error",
                message="Internal server error",
                details=str(exc) if settings.DEBUG else None
            )
        ).model_dump()
    )

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting server at {settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
