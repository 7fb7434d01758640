# tests/__init__.py

"""
FleetOps API의 테스트 스위트 패키지입니다.

주요 구성:
- `core/`: 정렬 해석, 평탄화, 하이브리드 페이지네이션, 트리 조회 쿼리 테스트.
- `utils/`: 엑셀 내보내기 어댑터, 파라미터 파싱 테스트.
- `domains/`: 계약(agr), ERS, PM 목록/내보내기 API 테스트.
- `factories.py`: DB 없이 사용하는 엔티티 트리 팩토리와 TreeFetcher 대역.
- `conftest.py`: HTTP 클라이언트와 의존성 오버라이드 픽스처.
"""

__title__ = "FleetOps API Tests"
__description__ = "Test suite for the FleetOps listing and export API."
__version__ = "0.1.0"
__all__ = []
