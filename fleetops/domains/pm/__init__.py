# fleetops/domains/pm/__init__.py

"""
'pm' 도메인 패키지입니다.

PostgreSQL 'pm' 스키마의 예방 정비(Preventive Maintenance) 일정과 정비 이벤트를 다룹니다.
일정 1건이 목록 1행이며, 최근 완료 이벤트와 다음 예정 이벤트는 이벤트 컬렉션에서 계산합니다.

주요 서브모듈:
- `models.py`: 'pm' 스키마의 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 목록 행, 필터, 상태별 집계, 내보내기 요청 Pydantic 모델.
- `crud.py`: 트리 조회, DB 필터 조건, 상태별 집계 쿼리.
- `listings.py`: 정렬 허용 목록과 평탄화 계획.
- `routers.py`: 목록/내보내기 API 엔드포인트.
"""

# 패키지 메타데이터
__title__ = "FleetOps PM Domain"
__description__ = "Preventive maintenance schedules with derived last/next events."
__version__ = "0.1.0"
__all__ = []
