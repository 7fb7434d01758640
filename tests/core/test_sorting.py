# tests/core/test_sorting.py

"""
정렬 문자열 해석(resolve_sort)과 pushdown 분류(classify_pushdown)에 대한 단위 테스트 모듈입니다.
"""

import pytest

from fleetops.core.exceptions import ListingConfigurationError
from fleetops.core.sorting import (
    Column,
    Deferred,
    Expansion,
    SortAllowList,
    SortDirection,
    SortEntry,
    classify_pushdown,
    resolve_sort,
)
from fleetops.domains.agr.listings import AGREEMENT_SORT_FIELDS
from fleetops.domains.agr.models import ScheduleAgreement
from fleetops.domains.ers.listings import ERS_SORT_FIELDS


@pytest.fixture(name="allow_list")
def allow_list_fixture() -> SortAllowList:
    return SortAllowList(
        {
            "id": Column("id"),
            "ref": Column("schedule_agreement_ref"),
            "facility": Column("facility.facility_code"),
            "driver_name": Expansion.of("driver_first_name", "driver_last_name"),
            "unit_number": Deferred(),
            "account": Deferred("account_number"),
        },
        default_field="id",
    )


class TestResolveSort:
    def test_empty_sort_returns_default_desc(self, allow_list: SortAllowList):
        """(성공) 빈 문자열은 (기본 필드, desc) 하나로 해석됩니다."""
        spec = resolve_sort("", allow_list, "id")

        assert spec == (SortEntry("id", Column("id"), SortDirection.DESC),)

    def test_none_sort_returns_default_desc(self, allow_list: SortAllowList):
        spec = resolve_sort(None, allow_list)

        assert [(entry.field, entry.direction) for entry in spec] == [("id", SortDirection.DESC)]

    @pytest.mark.parametrize("sort", [
        "nope:asc",
        "nope",
        ",,,",
        ":desc",
        "  ",
        "nope:asc,other:desc",
        "drop table:asc",
    ])
    def test_unknown_tokens_never_raise(self, allow_list: SortAllowList, sort: str):
        """(성공) 허용 목록에 없는 토큰만 있으면 기본 정렬로 대체되고 예외가 없습니다."""
        spec = resolve_sort(sort, allow_list)

        assert len(spec) == 1
        assert spec[0].field == "id"
        assert spec[0].direction is SortDirection.DESC

    def test_preserves_client_order_and_drops_unknown(self, allow_list: SortAllowList):
        spec = resolve_sort("unit_number:desc,bogus:asc,ref:asc", allow_list)

        assert [(entry.field, entry.direction) for entry in spec] == [
            ("unit_number", SortDirection.DESC),
            ("ref", SortDirection.ASC),
        ]

    def test_invalid_direction_defaults_to_asc(self, allow_list: SortAllowList):
        spec = resolve_sort("ref:sideways,facility,id:DESC", allow_list)

        assert [entry.direction for entry in spec] == [SortDirection.ASC, SortDirection.ASC, SortDirection.DESC]

    def test_duplicate_field_keeps_first_occurrence(self, allow_list: SortAllowList):
        spec = resolve_sort("ref:desc,ref:asc", allow_list)

        assert len(spec) == 1
        assert spec[0].direction is SortDirection.DESC

    def test_whitespace_is_trimmed(self, allow_list: SortAllowList):
        spec = resolve_sort(" ref : desc , facility:asc ", allow_list)

        assert [(entry.field, entry.direction) for entry in spec] == [
            ("ref", SortDirection.DESC),
            ("facility", SortDirection.ASC),
        ]

    def test_expansion_emits_one_entry_per_column(self, allow_list: SortAllowList):
        """(성공) Expansion 필드는 같은 방향의 컬럼 항목 여러 개로 펼쳐집니다."""
        spec = resolve_sort("driver_name:desc", allow_list)

        assert [entry.target for entry in spec] == [Column("driver_first_name"), Column("driver_last_name")]
        assert all(entry.direction is SortDirection.DESC for entry in spec)
        assert all(entry.field == "driver_name" for entry in spec)

    def test_deferred_row_field(self, allow_list: SortAllowList):
        spec = resolve_sort("account:asc,unit_number:asc", allow_list)

        assert [entry.row_field for entry in spec] == ["account_number", "unit_number"]

    def test_default_field_override(self, allow_list: SortAllowList):
        spec = resolve_sort("", allow_list, "ref")

        assert spec == (SortEntry("ref", Column("schedule_agreement_ref"), SortDirection.DESC),)


class TestSortAllowList:
    def test_default_field_must_exist(self):
        """(실패) 기본 정렬 필드가 허용 목록에 없으면 구성 오류입니다."""
        with pytest.raises(ListingConfigurationError):
            SortAllowList({"ref": Column("schedule_agreement_ref")}, default_field="id")

    def test_default_field_must_be_column(self):
        with pytest.raises(ListingConfigurationError):
            SortAllowList({"id": Deferred()}, default_field="id")

    def test_column_path_is_split(self):
        column = Column("facility.facility_code")

        assert column.path == ("facility", "facility_code")
        assert column.dotted == "facility.facility_code"

    @pytest.mark.parametrize("path", ["", "facility.", ".id", "a..b"])
    def test_invalid_column_path(self, path: str):
        with pytest.raises(ListingConfigurationError):
            Column(path)

    def test_expansion_needs_two_columns(self):
        with pytest.raises(ListingConfigurationError):
            Expansion.of("driver_first_name")

    def test_bind_accepts_many_to_one_path(self):
        allow_list = SortAllowList(
            {"id": Column("id"), "facility": Column("facility.facility_code")},
        ).bind(ScheduleAgreement)

        assert "facility" in allow_list

    def test_bind_rejects_one_to_many_path(self):
        """(실패) 일대다 관계를 거치는 컬럼 경로는 DB 정렬 대상이 될 수 없습니다."""
        allow_list = SortAllowList({"id": Column("id"), "rate": Column("line_items.rate")})

        with pytest.raises(ListingConfigurationError, match="one-to-many"):
            allow_list.bind(ScheduleAgreement)

    def test_bind_rejects_unknown_column(self):
        allow_list = SortAllowList({"id": Column("id"), "bogus": Column("facility.bogus")})

        with pytest.raises(ListingConfigurationError, match="no column"):
            allow_list.bind(ScheduleAgreement)

    def test_bind_rejects_unknown_relationship(self):
        allow_list = SortAllowList({"id": Column("id"), "bogus": Column("owner.name")})

        with pytest.raises(ListingConfigurationError, match="no relationship"):
            allow_list.bind(ScheduleAgreement)

    def test_domain_allow_lists_are_read_only(self):
        with pytest.raises(TypeError):
            AGREEMENT_SORT_FIELDS.fields["status"] = Deferred()


class TestClassifyPushdown:
    def test_splits_without_reordering(self, allow_list: SortAllowList):
        spec = resolve_sort("unit_number:asc,ref:desc,account:desc,facility:asc", allow_list)

        plan = classify_pushdown(spec, allow_list)

        assert [entry.field for entry in plan.db_spec] == ["ref", "facility"]
        assert [entry.field for entry in plan.deferred_spec] == ["unit_number", "account"]
        assert plan.has_deferred

    def test_only_deferred_falls_back_to_primary_key(self, allow_list: SortAllowList):
        """(성공) DB 정렬 항목이 없으면 기본키 오름차순으로 DB 순서를 고정합니다."""
        plan = classify_pushdown(resolve_sort("unit_number:desc", allow_list), allow_list)

        assert plan.db_spec == ()
        assert plan.db_order == (SortEntry("id", Column("id"), SortDirection.ASC),)

    def test_db_only(self, allow_list: SortAllowList):
        plan = classify_pushdown(resolve_sort("ref:asc", allow_list), allow_list)

        assert not plan.has_deferred
        assert plan.db_order == plan.db_spec

    def test_rejects_undeclared_entry(self, allow_list: SortAllowList):
        """(실패) 허용 목록을 거치지 않은 항목은 구성 오류입니다."""
        forged = (SortEntry("secret", Column("secret_column")),)

        with pytest.raises(ListingConfigurationError):
            classify_pushdown(forged, allow_list)

    def test_rejects_mismatched_target(self, allow_list: SortAllowList):
        forged = (SortEntry("ref", Column("status")),)

        with pytest.raises(ListingConfigurationError):
            classify_pushdown(forged, allow_list)

    def test_rejects_column_for_deferred_field(self, allow_list: SortAllowList):
        forged = (SortEntry("unit_number", Column("unit_number")),)

        with pytest.raises(ListingConfigurationError):
            classify_pushdown(forged, allow_list)


class TestDomainAllowLists:
    def test_agreement_default(self):
        spec = resolve_sort(None, AGREEMENT_SORT_FIELDS)

        assert spec[0].field == "schedule_agreement_id"
        assert spec[0].direction is SortDirection.DESC

    def test_agreement_account_number_is_deferred(self):
        plan = classify_pushdown(resolve_sort("account_number:asc", AGREEMENT_SORT_FIELDS), AGREEMENT_SORT_FIELDS)

        assert plan.has_deferred
        assert plan.db_spec == ()

    def test_ers_driver_name_expands(self):
        spec = resolve_sort("driver_name:asc", ERS_SORT_FIELDS)

        assert [entry.target.dotted for entry in spec] == ["driver_first_name", "driver_last_name"]
