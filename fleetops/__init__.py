# fleetops/__init__.py

"""
FleetOps FastAPI 애플리케이션의 메인 패키지입니다.

공통 설정, 데이터베이스 연결, 목록 엔진을 담는 core 서브패키지와
각 비즈니스 도메인(fleet, agr, ers, pm)을 대표하는 domains 서브패키지로 구성됩니다.
"""

APP_NAME = "FleetOps API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Fleet & asset management API backend."
__all__ = []
