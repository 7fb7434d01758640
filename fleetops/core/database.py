# fleetops/core/database.py

"""
데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLAlchemy 비동기 엔진(asyncpg)을 설정합니다.
- 요청 단위 비동기 세션을 제공하는 제너레이터를 정의합니다.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetops.core.config import settings


# 엔진 생성은 지연 연결이므로 임포트 시점에 DB 접속을 시도하지 않습니다.
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL.get_secret_value(),
    echo=settings.DEBUG_MODE,  # 디버그 모드일 때만 SQL 출력
    future=True,
    pool_recycle=3600,
    pool_size=10,
    max_overflow=20
)

AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    요청마다 새 세션을 만들고, 요청 처리 후 자동으로 닫습니다.
    목록/내보내기는 읽기 전용이므로 커밋하지 않습니다.
    """
    async with AsyncSessionLocal() as session:
        yield session
