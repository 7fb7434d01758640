# tests/domains/__init__.py

"""
도메인별 API 테스트 패키지입니다.

- `test_agr_n.py`: 리스/렌탈 계약 목록, 내보내기, 계약 상세.
- `test_ers_n.py`: ERS 기록 목록, 내보내기.
- `test_pm_n.py`: PM 일정 목록(상태별 집계 포함), 내보내기.
"""

__all__ = []
