# fleetops/core/dependencies.py

"""
FastAPI 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 (get_db_session).
- 목록 쿼리 파라미터를 보정된 PageWindow로 변환 (get_page_window).
"""

from typing import AsyncGenerator, Optional

from fastapi import Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetops.core.database import get_session
from fleetops.core.pagination import PageWindow


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """fleetops.core.database.get_session을 래핑한 세션 의존성입니다."""
    async for session in get_session():
        yield session


def get_page_window(
    page: Optional[int] = Query(None, description="1부터 시작하는 페이지 번호 (1 미만은 1로 보정)"),
    per_page: Optional[int] = Query(None, description="페이지 크기 (최소값 미만은 최소값으로 보정)"),
) -> PageWindow:
    # 범위를 벗어난 값은 422 대신 보정
    return PageWindow.clamp(page, per_page)
