# fleetops/domains/agr/routers.py

"""
'agr' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

리스/렌탈 계약 목록(페이지네이션), 엑셀 내보내기, 계약 상세 조회를 제공합니다.
목록과 내보내기는 같은 평탄화/정렬 경로를 공유하므로 같은 필터와 정렬이면 행 순서가 같습니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetops.core.crud_base import SQLTreeFetcher
from fleetops.core.dependencies import get_db_session, get_page_window
from fleetops.core.pagination import Listing, PageWindow, TreeFetcher, flatten_all, paginate
from fleetops.core.schemas import PaginatedResponse
from fleetops.utils.excel import build_workbook, export_filename, resolve_export_columns, xlsx_response
from fleetops.utils.params import parse_id_list, require_account_ids

from . import crud as agr_crud
from . import listings as agr_listings
from . import schemas as agr_schemas


router = APIRouter(
    tags=["Agreement Management (계약 관리)"],
    responses={404: {"description": "Not found"}},
)


def get_agreement_fetcher(db: AsyncSession = Depends(get_db_session)) -> TreeFetcher:
    """계약 트리 조회 협력자 (테스트에서 dependency_overrides로 교체)."""
    return SQLTreeFetcher(agr_crud.schedule_agreement, db)


async def _list_agreements(
    listing: Listing,
    contract_panel_type: str,
    params: agr_schemas.AgreementFilterParams,
    sort: Optional[str],
    window: PageWindow,
    fetcher: TreeFetcher,
) -> dict:
    require_account_ids(params.account_ids)
    conditions = agr_crud.schedule_agreement.build_conditions(params, contract_panel_type)
    result = await paginate(
        listing,
        fetcher,
        conditions,
        listing.resolve(sort),
        window,
        agr_listings.build_post_fetch_filters(params),
    )
    return {"data": result.rows, "meta": result.meta()}


async def _export_agreements(
    listing: Listing,
    contract_panel_type: str,
    export_request: agr_schemas.AgreementExportRequest,
    fetcher: TreeFetcher,
):
    require_account_ids(export_request.filters.account_ids)
    columns = resolve_export_columns(
        export_request.columns, agr_schemas.AgreementRow, agr_listings.DEFAULT_AGREEMENT_COLUMNS
    )
    conditions = agr_crud.schedule_agreement.build_conditions(export_request.filters, contract_panel_type)
    post_fetch_filters = agr_listings.build_post_fetch_filters(
        export_request.filters,
        excluded_equipment_ids=export_request.excluded_equipment_ids,
        download_all=export_request.download_all,
    )
    rows = await flatten_all(listing, fetcher, conditions, listing.resolve(export_request.sort), post_fetch_filters)
    content = build_workbook(
        rows,
        columns,
        sheet_name=listing.name,
        date_fields=agr_listings.AGREEMENT_DATE_FIELDS,
    )
    return xlsx_response(content, export_filename(listing.name))


#  =============================================================================
#  1. 리스 계약
#  =============================================================================
@router.get("/lease-agreements", response_model=PaginatedResponse[agr_schemas.AgreementRow], summary="리스 계약 목록 조회")
async def read_lease_agreements(
    params: agr_schemas.AgreementFilterParams = Depends(),
    sort: Optional[str] = Query(None, description="예: 'account_number:asc,start_date:desc'"),
    window: PageWindow = Depends(get_page_window),
    fetcher: TreeFetcher = Depends(get_agreement_fetcher),
):
    """
    리스 계약을 장비 배정 단위 행으로 펼쳐 페이지 단위로 조회합니다.
    - 알 수 없는 정렬 필드는 무시되며, 정렬이 없으면 계약 ID 내림차순입니다.
    """
    return await _list_agreements(
        agr_listings.LEASE_AGREEMENTS, agr_crud.CONTRACT_TYPE_LEASE, params, sort, window, fetcher
    )


@router.post("/lease-agreements/export", summary="리스 계약 엑셀 내보내기")
async def export_lease_agreements(
    export_request: agr_schemas.AgreementExportRequest,
    fetcher: TreeFetcher = Depends(get_agreement_fetcher),
):
    return await _export_agreements(
        agr_listings.LEASE_AGREEMENTS, agr_crud.CONTRACT_TYPE_LEASE, export_request, fetcher
    )


#  =============================================================================
#  2. 렌탈 계약
#  =============================================================================
@router.get("/rental-agreements", response_model=PaginatedResponse[agr_schemas.AgreementRow], summary="렌탈 계약 목록 조회")
async def read_rental_agreements(
    params: agr_schemas.AgreementFilterParams = Depends(),
    sort: Optional[str] = Query(None, description="예: 'unit_number:asc'"),
    window: PageWindow = Depends(get_page_window),
    fetcher: TreeFetcher = Depends(get_agreement_fetcher),
):
    return await _list_agreements(
        agr_listings.RENTAL_AGREEMENTS, agr_crud.CONTRACT_TYPE_RENTAL, params, sort, window, fetcher
    )


@router.post("/rental-agreements/export", summary="렌탈 계약 엑셀 내보내기")
async def export_rental_agreements(
    export_request: agr_schemas.AgreementExportRequest,
    fetcher: TreeFetcher = Depends(get_agreement_fetcher),
):
    return await _export_agreements(
        agr_listings.RENTAL_AGREEMENTS, agr_crud.CONTRACT_TYPE_RENTAL, export_request, fetcher
    )


#  =============================================================================
#  3. 계약 상세
#  =============================================================================
@router.get("/agreements/{agreement_id}", response_model=agr_schemas.AgreementDetailResponse, summary="계약 상세 조회")
async def read_agreement_detail(
    agreement_id: int,
    account_ids: Optional[str] = Query(None, description="쉼표로 구분한 계정 ID 목록"),
    fetcher: SQLTreeFetcher = Depends(get_agreement_fetcher),
):
    """
    계약 하나를 라인 아이템/할당/배정 트리로 조회합니다.
    배정이 없는 할당과 빈 라인 아이템은 응답에서 제외됩니다.
    """
    agreement = await fetcher.get(agreement_id)
    if agreement is None:
        raise HTTPException(status_code=404, detail="Agreement not found")
    return agr_listings.build_agreement_detail(agreement, parse_id_list(account_ids))
