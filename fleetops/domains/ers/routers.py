# fleetops/domains/ers/routers.py

"""
'ers' 도메인의 API 엔드포인트를 정의하는 모듈입니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetops.core.crud_base import SQLTreeFetcher
from fleetops.core.dependencies import get_db_session, get_page_window
from fleetops.core.pagination import PageWindow, TreeFetcher, flatten_all, paginate
from fleetops.core.schemas import PaginatedResponse
from fleetops.utils.excel import build_workbook, export_filename, resolve_export_columns, xlsx_response

from . import crud as ers_crud
from . import listings as ers_listings
from . import schemas as ers_schemas


router = APIRouter(
    tags=["Emergency Roadside Service (긴급 출동 관리)"],
    responses={404: {"description": "Not found"}},
)


def get_ers_fetcher(db: AsyncSession = Depends(get_db_session)) -> TreeFetcher:
    return SQLTreeFetcher(ers_crud.ers, db)


@router.get("/records", response_model=PaginatedResponse[ers_schemas.ErsRow], summary="ERS 기록 목록 조회")
async def read_ers_records(
    params: ers_schemas.ErsFilterParams = Depends(),
    sort: Optional[str] = Query(None, description="예: 'driver_name:asc,created_at:desc'"),
    window: PageWindow = Depends(get_page_window),
    fetcher: TreeFetcher = Depends(get_ers_fetcher),
):
    """
    ERS 기록을 페이지 단위로 조회합니다.
    - `event_type` 정렬이 없으면 DB에서 offset/limit으로 페이지를 가져옵니다.
    """
    listing = ers_listings.ERS_RECORDS
    result = await paginate(
        listing,
        fetcher,
        ers_crud.ers.build_conditions(params),
        listing.resolve(sort),
        window,
    )
    return {"data": result.rows, "meta": result.meta()}


@router.post("/records/export", summary="ERS 기록 엑셀 내보내기")
async def export_ers_records(
    export_request: ers_schemas.ErsExportRequest,
    fetcher: TreeFetcher = Depends(get_ers_fetcher),
):
    listing = ers_listings.ERS_RECORDS
    columns = resolve_export_columns(export_request.columns, ers_schemas.ErsRow, ers_listings.DEFAULT_ERS_COLUMNS)
    excluded_ids = () if export_request.download_all else export_request.excluded_ids
    rows = await flatten_all(
        listing,
        fetcher,
        ers_crud.ers.build_conditions(export_request.filters, excluded_ids),
        listing.resolve(export_request.sort),
    )
    content = build_workbook(rows, columns, sheet_name=listing.name, date_fields=ers_listings.ERS_DATE_FIELDS)
    return xlsx_response(content, export_filename(listing.name))
