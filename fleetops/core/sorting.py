# fleetops/core/sorting.py

"""
클라이언트 정렬 문자열을 해석하는 모듈입니다.

- 목록(listing)마다 정적인 정렬 허용 목록(SortAllowList)을 선언합니다.
  각 항목은 `Column`(DB 컬럼 경로), `Expansion`(여러 컬럼으로 확장),
  `Deferred`(평탄화 후 메모리에서 정렬) 중 하나입니다.
- `resolve_sort`는 "field:direction,field:direction" 형식의 문자열을
  순서가 보존된 SortSpec(SortEntry 튜플)으로 바꿉니다.
- `classify_pushdown`은 SortSpec을 DB 정렬 부분과 메모리 정렬 부분으로
  순서를 바꾸지 않고 나눕니다.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple, Union

from sqlalchemy import inspect as sa_inspect

from fleetops.core.exceptions import ListingConfigurationError

logger = logging.getLogger(__name__)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "SortDirection":
        """대소문자 구분 없이 'desc'만 내림차순으로 보고, 나머지는 모두 오름차순입니다."""
        if raw and raw.strip().lower() == cls.DESC.value:
            return cls.DESC
        return cls.ASC


# =============================================================================
# 1. 허용 목록 항목 (tagged union)
# =============================================================================
@dataclass(frozen=True)
class Column:
    """루트 모델 기준의 컬럼 경로. 'facility.facility_code'처럼 다대일 관계를 거칠 수 있습니다."""
    path: Tuple[str, ...]

    def __post_init__(self):
        path = tuple(self.path.split(".")) if isinstance(self.path, str) else tuple(self.path)
        if not path or any(not segment for segment in path):
            raise ListingConfigurationError(f"Invalid column path: {self.path!r}")
        object.__setattr__(self, "path", path)

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


@dataclass(frozen=True)
class Expansion:
    """하나의 논리 필드를 같은 방향의 여러 컬럼으로 펼칩니다 (예: name -> first_name, last_name)."""
    columns: Tuple[Column, ...]

    def __post_init__(self):
        if len(self.columns) < 2:
            raise ListingConfigurationError("Expansion requires at least two columns.")

    @classmethod
    def of(cls, *paths: str) -> "Expansion":
        return cls(tuple(Column(path) for path in paths))


@dataclass(frozen=True)
class Deferred:
    """
    DB에서 정렬할 수 없는 필드입니다. 평탄화된 행(FlatRow)의 `row_field` 값으로 정렬합니다.
    `row_field`가 없으면 클라이언트 필드 이름을 그대로 사용합니다.
    """
    row_field: Optional[str] = None


SortTarget = Union[Column, Expansion, Deferred]


@dataclass(frozen=True)
class SortEntry:
    field: str
    target: Union[Column, Deferred]
    direction: SortDirection = SortDirection.ASC

    @property
    def is_deferred(self) -> bool:
        return isinstance(self.target, Deferred)

    @property
    def row_field(self) -> str:
        if isinstance(self.target, Deferred) and self.target.row_field:
            return self.target.row_field
        return self.field


SortSpec = Tuple[SortEntry, ...]


# =============================================================================
# 2. 정렬 허용 목록
# =============================================================================
class SortAllowList:
    """
    목록 하나에 대한 불변 정렬 구성표입니다.

    생성 시점에 기본 정렬 필드가 존재하고 DB 정렬 가능한 `Column`인지 검사합니다.
    `bind(model)`은 모든 컬럼 경로가 ORM 모델에서 다대일 관계만 거쳐
    실제 컬럼에 도달하는지 확인합니다.
    """

    def __init__(
        self,
        fields: Mapping[str, SortTarget],
        default_field: str = "id",
        primary_key: str = "id",
    ):
        for name, target in fields.items():
            if not isinstance(target, (Column, Expansion, Deferred)):
                raise ListingConfigurationError(f"Sort field '{name}' has unsupported target {target!r}.")
        if default_field not in fields:
            raise ListingConfigurationError(f"Default sort field '{default_field}' is not in the allow-list.")
        if not isinstance(fields[default_field], Column):
            raise ListingConfigurationError(f"Default sort field '{default_field}' must be a database column.")

        self._fields = MappingProxyType(dict(fields))
        self.default_field = default_field
        self.primary_key = Column(primary_key)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def get(self, name: str) -> Optional[SortTarget]:
        return self._fields.get(name)

    @property
    def fields(self) -> Mapping[str, SortTarget]:
        return self._fields

    def default_entry(self, default_field: Optional[str] = None) -> SortEntry:
        name = default_field or self.default_field
        target = self._fields.get(name)
        if not isinstance(target, Column):
            raise ListingConfigurationError(f"Default sort field '{name}' must be a database column in the allow-list.")
        return SortEntry(name, target, SortDirection.DESC)

    def fallback_entry(self) -> SortEntry:
        """DB 정렬 항목이 하나도 없을 때 사용하는 자연 순서(기본키 오름차순)."""
        return SortEntry(self.primary_key.dotted, self.primary_key, SortDirection.ASC)

    def columns(self) -> Iterator[Tuple[str, Column]]:
        for name, target in self._fields.items():
            if isinstance(target, Column):
                yield name, target
            elif isinstance(target, Expansion):
                for column in target.columns:
                    yield name, column

    def bind(self, model) -> "SortAllowList":
        """모든 컬럼 경로를 ORM 매퍼 기준으로 검증하고 자기 자신을 반환합니다."""
        for name, column in [("<primary_key>", self.primary_key), *self.columns()]:
            _check_column_path(model, name, column)
        return self


def column_value(node, path: Tuple[str, ...]):
    """루트 객체에서 다대일 관계 경로를 따라 컬럼 값을 읽습니다. 중간 관계가 없으면 None."""
    for name in path:
        if node is None:
            return None
        node = getattr(node, name)
    return node


def _check_column_path(model, name: str, column: Column) -> None:
    mapper = sa_inspect(model)
    *relations, attribute = column.path
    for relation in relations:
        if relation not in mapper.relationships:
            raise ListingConfigurationError(
                f"Sort field '{name}': '{mapper.class_.__name__}' has no relationship '{relation}'."
            )
        prop = mapper.relationships[relation]
        if prop.uselist:
            raise ListingConfigurationError(
                f"Sort field '{name}': relationship '{relation}' is one-to-many and cannot be ordered by."
            )
        mapper = prop.mapper
    if attribute not in mapper.column_attrs:
        raise ListingConfigurationError(
            f"Sort field '{name}': '{mapper.class_.__name__}' has no column '{attribute}'."
        )


# =============================================================================
# 3. SortSpec 해석
# =============================================================================
def resolve_sort(
    sort: Optional[str],
    allow_list: SortAllowList,
    default_field: Optional[str] = None,
) -> SortSpec:
    """
    정렬 문자열을 SortSpec으로 변환합니다.

    - 토큰은 ','로 나누고, 각 토큰은 'field:direction' 형식입니다.
    - 필드가 비었거나 허용 목록에 없는 토큰은 버립니다 (오류 아님).
    - 같은 필드가 두 번 나오면 처음 것만 사용합니다.
    - 해석된 항목이 없으면 (기본 필드, desc) 하나를 반환합니다.
    """
    entries = []
    seen = set()
    for token in (sort or "").split(","):
        name, _, raw_direction = token.strip().partition(":")
        name = name.strip()
        if not name:
            continue
        target = allow_list.get(name)
        if target is None:
            logger.debug("Dropping unknown sort field %r", name)
            continue
        if name in seen:
            logger.debug("Dropping duplicate sort field %r", name)
            continue
        seen.add(name)

        direction = SortDirection.parse(raw_direction)
        if isinstance(target, Expansion):
            entries.extend(SortEntry(name, column, direction) for column in target.columns)
        else:
            entries.append(SortEntry(name, target, direction))

    if not entries:
        return (allow_list.default_entry(default_field),)
    return tuple(entries)


# =============================================================================
# 4. Pushdown 분류
# =============================================================================
@dataclass(frozen=True)
class PushdownPlan:
    db_spec: SortSpec
    deferred_spec: SortSpec
    fallback: SortEntry
    sort_spec: SortSpec = ()

    @property
    def has_deferred(self) -> bool:
        return bool(self.deferred_spec)

    @property
    def db_order(self) -> SortSpec:
        """DB에 전달할 정렬. DB 정렬 항목이 없으면 기본키 오름차순으로 페이지 경계를 고정합니다."""
        return self.db_spec or (self.fallback,)


def classify_pushdown(spec: SortSpec, allow_list: SortAllowList) -> PushdownPlan:
    """SortSpec을 순서 변경 없이 DB 정렬과 메모리 정렬로 나눕니다."""
    db_entries = []
    deferred_entries = []
    for entry in spec:
        _check_entry(entry, allow_list)
        if entry.is_deferred:
            deferred_entries.append(entry)
        else:
            db_entries.append(entry)
    return PushdownPlan(tuple(db_entries), tuple(deferred_entries), allow_list.fallback_entry(), tuple(spec))


def _check_entry(entry: SortEntry, allow_list: SortAllowList) -> None:
    declared = allow_list.get(entry.field)
    if declared is None:
        raise ListingConfigurationError(f"Sort field '{entry.field}' is not declared in the allow-list.")
    if isinstance(declared, Expansion):
        valid = entry.target in declared.columns
    elif isinstance(declared, Deferred):
        valid = entry.is_deferred
    else:
        valid = entry.target == declared
    if not valid:
        raise ListingConfigurationError(
            f"Sort entry for '{entry.field}' does not match its allow-list declaration."
        )
