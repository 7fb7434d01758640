# fleetops/utils/params.py

import logging
from typing import List, Optional

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


def parse_id_list(raw: Optional[str]) -> Optional[List[int]]:
    """
    "1,2,3" 또는 "[1,2,3]" 형태의 ID 목록 문자열을 정수 리스트로 변환합니다.
    값이 없거나 "all"이면 None(필터 없음)을 반환하고, 숫자가 아닌 토큰은 무시합니다.
    """
    if raw is None or not raw.strip() or raw.strip().lower() == "all":
        return None
    text = raw.strip()
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1]
    ids = []
    for token in text.split(","):
        token = token.strip().strip("\"'").strip()
        if token.isdigit():
            ids.append(int(token))
    return ids


def require_account_ids(raw: Optional[str]) -> List[int]:
    """account_ids가 없거나 유효한 ID가 하나도 없으면 400을 반환합니다."""
    if raw is None or not raw.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="account_ids is required")
    account_ids = parse_id_list(raw)
    if not account_ids:
        logger.warning("Listing rejected: no valid account_ids in %r", raw)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid account_ids provided")
    return account_ids
