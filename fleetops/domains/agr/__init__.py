# fleetops/domains/agr/__init__.py

"""
'agr' 도메인 패키지입니다.

PostgreSQL 'agr' 스키마의 리스/렌탈 스케줄 계약과 그 하위 구조
(라인 아이템 -> 장비 유형 할당 -> 장비 배정)를 다룹니다.
계약 하나가 장비 배정 수만큼의 평탄 행으로 펼쳐지는 대표적인 fan-out 목록입니다.

주요 서브모듈:
- `models.py`: 'agr' 스키마의 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 목록 행, 필터, 내보내기 요청, 상세 응답 Pydantic 모델.
- `crud.py`: 트리 조회 및 DB 필터 조건 구성.
- `listings.py`: 정렬 허용 목록, 평탄화 계획, 후처리 필터.
- `routers.py`: 목록/내보내기/상세 API 엔드포인트.
"""

# 패키지 메타데이터
__title__ = "FleetOps Agreement Domain"
__description__ = "Lease and rental schedule agreements flattened per equipment assignment."
__version__ = "0.1.0"
__all__ = []
