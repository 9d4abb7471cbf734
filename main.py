from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings

# ✅ 로깅 설정 (LOG_LEVEL 환경변수)
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# HTTP 라이브러리 디버그 로그 비활성화
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)


# ✅ 미들웨어 임포트
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ DB 초기화
from database.db import init_db

# ✅ 라우터 임포트
from routers import (
    announcements, assignments, attendance, classes, dashboard,
    student_classes, subjects, submissions, users,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 서버 기동 시 테이블 생성 (이미 있으면 그대로)
    init_db()
    yield


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# ✅ CORS 설정 (프론트엔드 연동, CORS_ORIGINS 환경변수)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ 요청 지연 측정 미들웨어 (응답 헤더 X-Latency-Ms 추가)
app.add_middleware(TimingMiddleware)

# ✅ 전역 에러 핸들러 등록 ({"error", "code"} JSON 포맷)
add_error_handlers(app)

# ✅ /v1 프리픽스 라우터 등록
app.include_router(users.router,            prefix="/v1")
app.include_router(classes.router,          prefix="/v1")
app.include_router(subjects.router,         prefix="/v1")
app.include_router(assignments.router,      prefix="/v1")
app.include_router(submissions.router,      prefix="/v1")
app.include_router(attendance.router,       prefix="/v1")   # ✅ QR 스캔 출결 포함
app.include_router(announcements.router,    prefix="/v1")
app.include_router(student_classes.router,  prefix="/v1")
app.include_router(dashboard.router,        prefix="/v1")


# ✅ 헬스체크 엔드포인트
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


# ✅ 루트 엔드포인트
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} - 학교 관리 / QR 출결 API"}
