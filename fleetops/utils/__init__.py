# fleetops/utils/__init__.py

"""
특정 비즈니스 도메인에 속하지 않는 범용 유틸리티 패키지입니다.

주요 서브모듈:
- `excel.py`: 평탄 행 목록을 xlsx 워크북으로 렌더링하고 다운로드 응답을 만듭니다.
- `params.py`: 쿼리 문자열 파라미터 파싱 헬퍼.
"""

# 패키지 메타데이터
__title__ = "FleetOps Utilities"
__description__ = "Reusable helpers for exports and request parameters."
__version__ = "0.1.0"
__all__ = []
