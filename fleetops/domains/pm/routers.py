# fleetops/domains/pm/routers.py

"""
'pm' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

PM 일정 목록은 계정 범위가 반드시 필요하며, 상태별 집계(counts)를 함께 반환합니다.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetops.core.dependencies import get_db_session, get_page_window
from fleetops.core.pagination import PageWindow, flatten_all, paginate
from fleetops.utils.excel import build_workbook, export_filename, resolve_export_columns, xlsx_response
from fleetops.utils.params import require_account_ids

from . import crud as pm_crud
from . import listings as pm_listings
from . import schemas as pm_schemas


router = APIRouter(
    tags=["Preventive Maintenance (예방 정비 관리)"],
    responses={404: {"description": "Not found"}},
)


def get_pm_fetcher(db: AsyncSession = Depends(get_db_session)) -> pm_crud.PMScheduleFetcher:
    return pm_crud.PMScheduleFetcher(pm_crud.pm_schedule, db)


@router.get("/schedules", response_model=pm_schemas.PMScheduleListResponse, summary="계정별 PM 일정 목록 조회")
async def read_pm_schedules(
    params: pm_schemas.PMFilterParams = Depends(),
    sort: Optional[str] = Query(None, description="예: 'next_event_due_date:asc'"),
    window: PageWindow = Depends(get_page_window),
    fetcher: pm_crud.PMScheduleFetcher = Depends(get_pm_fetcher),
):
    """
    계정 범위의 PM 일정을 페이지 단위로 조회하고 상태별 집계를 함께 반환합니다.
    - total_units: 필터에 맞는 전체 일정 수
    - units_coming_due / units_overdue: 예정 이벤트 기준
    - units_recently_completed: 최근 30일 이내 완료 이벤트 기준
    """
    account_ids = require_account_ids(params.account_ids)
    conditions = pm_crud.pm_schedule.build_conditions(params, account_ids)
    listing = pm_listings.PM_SCHEDULES
    result = await paginate(listing, fetcher, conditions, listing.resolve(sort), window)
    counts = await fetcher.counts(conditions, date.today())
    return {"data": result.rows, "meta": result.meta(), "counts": counts}


@router.post("/schedules/export", summary="PM 일정 엑셀 내보내기")
async def export_pm_schedules(
    export_request: pm_schemas.PMExportRequest,
    fetcher: pm_crud.PMScheduleFetcher = Depends(get_pm_fetcher),
):
    account_ids = require_account_ids(export_request.filters.account_ids)
    columns = resolve_export_columns(export_request.columns, pm_schemas.PMScheduleRow, pm_listings.DEFAULT_PM_COLUMNS)
    excluded_ids = () if export_request.download_all else export_request.excluded_ids
    conditions = pm_crud.pm_schedule.build_conditions(export_request.filters, account_ids, excluded_ids)
    listing = pm_listings.PM_SCHEDULES
    rows = await flatten_all(listing, fetcher, conditions, listing.resolve(export_request.sort))
    content = build_workbook(rows, columns, sheet_name=listing.name, date_fields=pm_listings.PM_DATE_FIELDS)
    return xlsx_response(content, export_filename(listing.name))
