# fleetops/core/exceptions.py

"""
목록(listing) 구성 단계에서 발생하는 프로그래머 오류를 정의하는 모듈입니다.

클라이언트 입력 오류(정렬 문자열, page/per_page)는 여기서 다루지 않습니다.
그런 값은 조용히 무시되거나 보정됩니다.
"""


class ListingConfigurationError(ValueError):
    """
    정렬 허용 목록, 평탄화 계획, 후처리 필터 등의 정적 구성이 잘못되었을 때 발생합니다.
    모듈 로드 시점(또는 최초 호출 시점)에 드러나야 하며 기본값으로 대체하지 않습니다.
    """
