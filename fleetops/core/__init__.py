# fleetops/core/__init__.py

"""
애플리케이션 전반에서 사용하는 핵심 구성 요소 패키지입니다.

- `config.py`: 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 비동기 엔진 및 세션 관리 (SQLModel / AsyncSQLAlchemy).
- `dependencies.py`: FastAPI 공통 의존성 (DB 세션, 페이지 창).
- `exceptions.py`: 목록 구성 오류.
- `sorting.py`: 정렬 허용 목록, SortSpec 해석, pushdown 분류.
- `flatten.py`: 중첩 트리 평탄화 엔진.
- `pagination.py`: 하이브리드 페이지네이션 코디네이터.
- `crud_base.py`: 트리 조회 CRUD 기본 클래스와 SQL 조회 어댑터.
- `schemas.py`: 공용 응답/컬럼 정의 스키마.
"""

# 패키지 메타데이터
__title__ = "FleetOps Core"
__description__ = "Core components: settings, database, listing engine."
__version__ = "0.1.0"
__all__ = []
