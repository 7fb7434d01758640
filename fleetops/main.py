# fleetops/main.py

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from fleetops import API_PREFIX
from fleetops.core.config import settings
from fleetops.core.database import engine, get_session

# 모든 모델을 먼저 임포트하여 매퍼 구성이 완료되도록 합니다.
from fleetops.domains import models  # noqa: F401

from fleetops.domains.agr.routers import router as agr_router
from fleetops.domains.ers.routers import router as ers_router
from fleetops.domains.pm.routers import router as pm_router


# -- 로깅 설정 --
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG_MODE else settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """애플리케이션 종료 시 데이터베이스 연결 풀을 정리합니다."""
    logger.info("%s 시작 (env=%s)", settings.APP_NAME, settings.APP_ENV)
    yield
    await engine.dispose()
    logger.info("데이터베이스 연결 풀 종료 완료.")


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# -- CORS 미들웨어 설정 --
# 프로덕션에서는 allow_origins를 실제 프론트엔드 도메인으로 제한해야 합니다.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],  # 내보내기 파일명
)

# -- 도메인 라우터 포함 --
app.include_router(agr_router, prefix=f"{API_PREFIX}/agr", tags=["Agreement Management (계약 관리)"])
app.include_router(ers_router, prefix=f"{API_PREFIX}/ers", tags=["Emergency Roadside Service (긴급 출동 관리)"])
app.include_router(pm_router, prefix=f"{API_PREFIX}/pm", tags=["Preventive Maintenance (예방 정비 관리)"])


@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """API의 시작점을 알리고 문서 링크를 제공합니다."""
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """데이터베이스에 select 1을 실행하여 서비스 상태를 확인합니다."""
    try:
        result = await session.exec(select(1))
        if result.first():
            return {"status": "ok", "database_connection": "successful"}
    except SQLAlchemyError as e:
        logger.error("Health check failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database health check failed: No result from test query"
    )


# -- Uvicorn 서버 직접 실행 (개발용) --
# if __name__ == "__main__":
#     import uvicorn
#     uvicorn.run("fleetops.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
