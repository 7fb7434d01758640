# tests/domains/test_agr_n.py

"""
'agr' 도메인 (리스/렌탈 계약) API 엔드포인트에 대한 테스트 모듈입니다.
계약 트리 조회 협력자를 FakeTreeFetcher로 교체하여 DB 없이 실행합니다.
"""

import io
from datetime import date

import pytest
from httpx import AsyncClient
from openpyxl import load_workbook

from fleetops.domains.agr.routers import get_agreement_fetcher
from tests.factories import (
    FakeTreeFetcher,
    make_account,
    make_agreement,
    make_allocation,
    make_assignment,
    make_equipment,
    make_line_item,
)

LEASE_URL = "/api/v1/agr/lease-agreements"
RENTAL_URL = "/api/v1/agr/rental-agreements"
ACCOUNTS = {"account_ids": "10,20"}


@pytest.fixture(name="agreement_fetcher")
def agreement_fetcher_fixture(override_dependency) -> FakeTreeFetcher:
    """
    계약 3건:
    - 1: 라인 아이템 2개 (배정 2건 / 배정 없는 할당)
    - 2: 라인 아이템 1개 (Globex 할당 배정 3건)
    - 3: 라인 아이템 없음 (행 0개)
    """
    acme = make_account(10, "ACC-100", "Acme Logistics")
    globex = make_account(20, "ACC-200", "Globex")
    agreement_1 = make_agreement(1, [
        make_line_item(11, [
            make_allocation(111, acme, [
                make_assignment(1111, make_equipment(501, "T-500", "Tractor")),
                make_assignment(1112, make_equipment(502, "T-100", "Trailer")),
            ]),
        ]),
        make_line_item(12, [make_allocation(121, acme, [])]),
    ])
    agreement_2 = make_agreement(2, [
        make_line_item(21, [
            make_allocation(211, globex, [
                make_assignment(2111, make_equipment(601, "G-300", "Reefer")),
                make_assignment(2112, make_equipment(602, "T-200", "Tractor")),
                make_assignment(2113, make_equipment(603, "G-100", "Dry Van")),
            ]),
        ]),
    ], schedule_type="RENTAL", effective_date=date(2025, 1, 1))
    agreement_3 = make_agreement(3, [])

    fetcher = FakeTreeFetcher([agreement_1, agreement_2, agreement_3])
    override_dependency(get_agreement_fetcher, fetcher)
    return fetcher


def _units(response) -> list:
    return [row["unit_number"] for row in response.json()["data"]]


@pytest.mark.asyncio
class TestAgreementListing:
    """계약 목록 (페이지네이션) 테스트"""

    async def test_default_sort(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        """(성공) 정렬이 없으면 계약 ID 내림차순, 계약 안에서는 선언 순서입니다."""
        response = await client.get(LEASE_URL, params=ACCOUNTS)

        assert response.status_code == 200
        body = response.json()
        assert _units(response) == ["G-300", "T-200", "G-100", "T-500", "T-100"]
        assert body["meta"] == {"total": 5, "page": 1, "per_page": 10, "total_pages": 1}

    async def test_rows_carry_ancestor_attributes(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        response = await client.get(LEASE_URL, params={**ACCOUNTS, "sort": "schedule_agreement_id:asc", "per_page": 2})

        rows = response.json()["data"]
        assert [row["schedule_agreement_ref"] for row in rows] == ["SA-0001", "SA-0001"]
        assert [row["line_item_id"] for row in rows] == [11, 11]
        assert {row["account_name"] for row in rows} == {"Acme Logistics"}
        assert response.json()["meta"]["total"] == 5

    async def test_deferred_sort_across_pages(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        """(성공) 유닛 번호 정렬은 계약 경계를 넘어 전체 행 기준으로 정렬됩니다."""
        page_1 = await client.get(LEASE_URL, params={**ACCOUNTS, "sort": "unit_number:asc", "page": 1, "per_page": 2})
        page_2 = await client.get(LEASE_URL, params={**ACCOUNTS, "sort": "unit_number:asc", "page": 2, "per_page": 2})
        page_3 = await client.get(LEASE_URL, params={**ACCOUNTS, "sort": "unit_number:asc", "page": 3, "per_page": 2})

        assert _units(page_1) == ["G-100", "G-300"]
        assert _units(page_2) == ["T-100", "T-200"]
        assert _units(page_3) == ["T-500"]
        assert page_3.json()["meta"] == {"total": 5, "page": 3, "per_page": 2, "total_pages": 3}

    async def test_multi_field_sort(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        response = await client.get(LEASE_URL, params={**ACCOUNTS, "sort": "account_number:desc,unit_number:desc"})

        assert _units(response) == ["T-200", "G-300", "G-100", "T-500", "T-100"]

    async def test_database_sort_field_stays_primary(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        """(성공) DB 정렬 필드 뒤의 메모리 정렬 필드는 시작일이 같은 행 안에서만 순서를 정합니다."""
        response = await client.get(LEASE_URL, params={**ACCOUNTS, "sort": "start_date:desc,unit_number:asc"})

        assert _units(response) == ["G-100", "G-300", "T-200", "T-100", "T-500"]
        assert [row["start_date"] for row in response.json()["data"]] == ["2025-01-01"] * 3 + ["2024-01-01"] * 2

    async def test_unknown_sort_field_is_ignored(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        """(성공) 허용 목록에 없는 정렬 필드는 오류 없이 무시됩니다."""
        response = await client.get(LEASE_URL, params={**ACCOUNTS, "sort": "password:asc;drop,unit_number:sideways"})

        assert response.status_code == 200
        assert _units(response) == ["G-100", "G-300", "T-100", "T-200", "T-500"]

    async def test_out_of_range_paging_is_clamped(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        response = await client.get(LEASE_URL, params={**ACCOUNTS, "page": 0, "per_page": -5})

        assert response.status_code == 200
        assert response.json()["meta"] == {"total": 5, "page": 1, "per_page": 1, "total_pages": 5}
        assert len(response.json()["data"]) == 1

    async def test_page_past_end(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        response = await client.get(LEASE_URL, params={**ACCOUNTS, "page": 9})

        assert response.json()["data"] == []
        assert response.json()["meta"]["total"] == 5

    async def test_account_number_filter_excludes_rows(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        """(성공) 계정 번호 필터는 할당 레벨에서 적용되어 total에도 반영됩니다."""
        response = await client.get(LEASE_URL, params={**ACCOUNTS, "account_number": "acc-200"})

        assert _units(response) == ["G-300", "T-200", "G-100"]
        assert response.json()["meta"]["total"] == 3

    async def test_unit_number_filter_is_case_sensitive(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        upper = await client.get(LEASE_URL, params={**ACCOUNTS, "unit_number": "T-"})
        lower = await client.get(LEASE_URL, params={**ACCOUNTS, "unit_number": "t-"})

        assert _units(upper) == ["T-200", "T-500", "T-100"]
        assert lower.json()["meta"]["total"] == 0

    async def test_account_ids_filter(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        response = await client.get(LEASE_URL, params={"account_ids": "10"})

        assert _units(response) == ["T-500", "T-100"]

    async def test_account_ids_json_array(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        response = await client.get(LEASE_URL, params={"account_ids": "[10]"})

        assert response.status_code == 200
        assert _units(response) == ["T-500", "T-100"]

    @pytest.mark.parametrize("url", [LEASE_URL, RENTAL_URL])
    async def test_requires_account_ids(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher, url):
        """(실패) account_ids가 없으면 다른 계정의 계약까지 보여주지 않고 400입니다."""
        response = await client.get(url)

        assert response.status_code == 400
        assert response.json()["detail"] == "account_ids is required"
        assert agreement_fetcher.fetch_calls == []

    async def test_rejects_invalid_account_ids(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        response = await client.get(LEASE_URL, params={"account_ids": "abc, ,"})

        assert response.status_code == 400
        assert response.json()["detail"] == "No valid account_ids provided"

    async def test_rental_listing_shares_engine(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        response = await client.get(RENTAL_URL, params={**ACCOUNTS, "sort": "unit_number:desc", "per_page": 3})

        assert response.status_code == 200
        assert _units(response) == ["T-500", "T-200", "T-100"]
        assert response.json()["meta"]["total_pages"] == 2


@pytest.mark.asyncio
class TestAgreementExport:
    """계약 엑셀 내보내기 테스트"""

    async def test_export_matches_listing_order(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        """(성공) 같은 정렬이면 내보내기 행 순서는 목록 페이지를 이어 붙인 순서와 같습니다."""
        listed = []
        for page in (1, 2, 3):
            response = await client.get(LEASE_URL, params={**ACCOUNTS, "sort": "unit_number:desc", "page": page, "per_page": 2})
            listed.extend(_units(response))

        response = await client.post(f"{LEASE_URL}/export", json={"filters": ACCOUNTS, "sort": "unit_number:desc"})

        assert response.status_code == 200
        assert response.headers["content-disposition"].startswith('attachment; filename="lease_agreements_')
        sheet = load_workbook(io.BytesIO(response.content)).active
        header = [cell.value for cell in sheet[1]]
        unit_column = header.index("Unit #")
        exported = [row[unit_column] for row in sheet.iter_rows(min_row=2, values_only=True)]
        assert exported == listed
        assert [row[0] for row in sheet.iter_rows(min_row=2, values_only=True)] == [1, 2, 3, 4, 5]

    async def test_export_custom_columns(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        payload = {
            "filters": ACCOUNTS,
            "sort": "unit_number:asc",
            "columns": [{"label": "Unit", "field": "unit_number"}, {"label": "Account", "field": "account_name"}],
        }

        response = await client.post(f"{LEASE_URL}/export", json=payload)

        sheet = load_workbook(io.BytesIO(response.content)).active
        values = list(sheet.iter_rows(values_only=True))
        assert values[0] == ("Unit", "Account")
        assert values[1] == ("G-100", "Globex")
        assert len(values) == 6

    async def test_export_excludes_selected_equipment(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        payload = {
            "filters": ACCOUNTS,
            "excluded_equipment_ids": [601, 501],
            "columns": [{"label": "Unit", "field": "unit_number"}],
        }

        response = await client.post(f"{LEASE_URL}/export", json=payload)

        sheet = load_workbook(io.BytesIO(response.content)).active
        assert [row[0] for row in sheet.iter_rows(min_row=2, values_only=True)] == ["T-200", "G-100", "T-100"]

    async def test_download_all_ignores_exclusions(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        payload = {"filters": ACCOUNTS, "download_all": True, "excluded_equipment_ids": [601, 501]}

        response = await client.post(f"{RENTAL_URL}/export", json=payload)

        sheet = load_workbook(io.BytesIO(response.content)).active
        assert sheet.max_row == 6
        assert response.headers["content-disposition"].startswith('attachment; filename="rental_agreements_')

    async def test_export_unknown_column(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        """(실패) 행에 없는 컬럼 필드는 400입니다."""
        payload = {"filters": ACCOUNTS, "columns": [{"label": "X", "field": "not_a_field"}]}

        response = await client.post(f"{LEASE_URL}/export", json=payload)

        assert response.status_code == 400
        assert "not_a_field" in response.json()["detail"]

    @pytest.mark.parametrize("url", [LEASE_URL, RENTAL_URL])
    async def test_export_requires_account_ids(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher, url):
        response = await client.post(f"{url}/export", json={"sort": "unit_number:desc"})

        assert response.status_code == 400
        assert response.json()["detail"] == "account_ids is required"


@pytest.mark.asyncio
class TestAgreementDetail:
    """계약 상세 조회 테스트"""

    async def test_detail_prunes_empty_branches(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        """(성공) 배정 없는 할당과 빈 라인 아이템은 상세에서 제외됩니다."""
        response = await client.get("/api/v1/agr/agreements/1")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == 1
        assert body["contract_panel_type"] == "L"
        assert [line_item["id"] for line_item in body["line_items"]] == [11]
        allocation = body["line_items"][0]["allocations"][0]
        assert allocation["account_number"] == "ACC-100"
        assert [assignment["unit_number"] for assignment in allocation["assignments"]] == ["T-500", "T-100"]

    async def test_detail_account_scope(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        response = await client.get("/api/v1/agr/agreements/2", params={"account_ids": "10"})

        assert response.status_code == 200
        assert response.json()["line_items"] == []

    async def test_detail_not_found(self, client: AsyncClient, agreement_fetcher: FakeTreeFetcher):
        """(실패) 없는 계약은 404입니다."""
        response = await client.get("/api/v1/agr/agreements/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Agreement not found"
