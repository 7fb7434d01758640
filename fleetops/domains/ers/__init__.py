# fleetops/domains/ers/__init__.py

"""
'ers' 도메인 패키지입니다.

PostgreSQL 'ers' 스키마의 긴급 출동 서비스(Emergency Roadside Service) 기록을 다룹니다.
기록 1건이 목록 1행이므로 메모리 정렬이 필요 없는 요청은 DB 페이지네이션을 사용합니다.

주요 서브모듈:
- `models.py`: 'ers' 스키마의 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 목록 행, 필터, 내보내기 요청 Pydantic 모델.
- `crud.py`: 트리 조회 및 DB 필터 조건 구성.
- `listings.py`: 정렬 허용 목록과 평탄화 계획.
- `routers.py`: 목록/내보내기 API 엔드포인트.
"""

# 패키지 메타데이터
__title__ = "FleetOps ERS Domain"
__description__ = "Emergency roadside service records with parts used."
__version__ = "0.1.0"
__all__ = []
