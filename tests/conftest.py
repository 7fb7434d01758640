# tests/conftest.py

from typing import AsyncGenerator, Callable, Generator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# fleetops.main을 임포트하여 FastAPI 앱 인스턴스에 접근합니다.
from fleetops.main import app as main_app


# --- HTTP 클라이언트 픽스처 ---
# 목록/내보내기 라우터는 TreeFetcher 의존성만 교체하면 DB 없이 동작하므로
# 테스트 데이터베이스를 만들지 않습니다.
@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """인증 없이 앱을 호출하는 AsyncClient. 테스트 종료 시 의존성 오버라이드를 원래대로 되돌립니다."""
    original_overrides = main_app.dependency_overrides.copy()
    transport = ASGITransport(app=main_app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        main_app.dependency_overrides = original_overrides


@pytest.fixture(scope="function")
def override_dependency() -> Generator[Callable, None, None]:
    """
    `override_dependency(get_xxx_fetcher, fetcher)` 형태로 의존성을 고정 객체로 교체합니다.
    테스트가 끝나면 교체한 의존성을 제거합니다.
    """
    overridden = []

    def _override(dependency: Callable, value) -> None:
        main_app.dependency_overrides[dependency] = lambda: value
        overridden.append(dependency)

    yield _override

    for dependency in overridden:
        main_app.dependency_overrides.pop(dependency, None)
