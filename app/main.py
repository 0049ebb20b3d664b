from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from app.api.films import router as films_router
from app.api.users import router as users_router
from app.api.reference import mpa_router, genre_router
from app.core import config
from app.core.database import init_db
from app.core.logging_config import setup_logging
from app.core.middleware import RequestLoggingMiddleware, TraceIDMiddleware
from app.exception.base_exception import BaseCustomException
from app.exception.envelope_handlers import (
    custom_exception_handler,
    global_exception_handler_envelope,
    http_exception_handler,
    validation_exception_handler,
)

logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 관계형 백엔드일 때만 테이블 생성 + 참조 데이터 시드 (이미 있으면 건너뜀)
    if config.STORAGE_BACKEND == "db":
        init_db()
    logger.info(f"Filmorate started with storage backend '{config.STORAGE_BACKEND}'")
    yield


app = FastAPI(title="Filmorate", lifespan=lifespan)

# 나중에 추가한 미들웨어가 바깥쪽에서 실행되므로 TraceID를 마지막에 등록
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(TraceIDMiddleware)


@app.get("/ping")
def ping():
    return {"ok": True}


# API 라우터 포함
app.include_router(films_router)
app.include_router(users_router)
app.include_router(mpa_router)
app.include_router(genre_router)

# 커스텀 예외 핸들러는 라우터 포함 이후에 추가
app.add_exception_handler(BaseCustomException, custom_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler_envelope)

# 로깅 설정(콘솔 + 일자별 파일 로테이션, JSON 포맷)
setup_logging()
