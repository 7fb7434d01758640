# fleetops/core/flatten.py

"""
중첩된 엔티티 트리(예: 계약 -> 라인 아이템 -> 할당 -> 장비 배정)를
표/엑셀용 평탄 행(FlatRow) 목록으로 펼치는 모듈입니다.

- 트리는 읽기 전용 입력이며 절대 수정하지 않습니다.
- 말단(leaf) 노드 하나가 행 하나가 되고, 모든 조상의 속성이 병합됩니다.
- 후처리 필터(PostFetchFilter)는 병합된 행이 아니라 자신이 지정한 레벨의 노드에 적용됩니다.
- 살아남은 자식이 없는 노드는 행을 만들지 않습니다 (빈 placeholder 행 없음).
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from fleetops.core.exceptions import ListingConfigurationError

FlatRow = Dict[str, Any]
Projection = Callable[[Any], Mapping[str, Any]]
ChildAccessor = Callable[[Any], Optional[Iterable[Any]]]
NodePredicate = Callable[[Any], bool]


@dataclass(frozen=True)
class Level:
    """
    평탄화 계획의 한 단계.
    `project`는 노드에서 행 필드를 뽑고, `children`은 다음 레벨 노드들을 선언 순서대로 돌려줍니다.
    말단 레벨은 `children`이 없어야 합니다.
    """
    name: str
    project: Projection
    children: Optional[ChildAccessor] = None


@dataclass(frozen=True)
class PostFetchFilter:
    level: str
    predicate: NodePredicate
    description: str = ""


class FlattenPlan:
    """루트에서 말단까지 순서가 정해진 레벨 목록입니다."""

    def __init__(self, *levels: Level):
        if not levels:
            raise ListingConfigurationError("Flatten plan needs at least one level.")
        names = [level.name for level in levels]
        if len(set(names)) != len(names):
            raise ListingConfigurationError(f"Duplicate level names in flatten plan: {names}")
        for level in levels[:-1]:
            if level.children is None:
                raise ListingConfigurationError(f"Level '{level.name}' must declare a child accessor.")
        if levels[-1].children is not None:
            raise ListingConfigurationError(f"Leaf level '{levels[-1].name}' cannot declare children.")

        self.levels: Tuple[Level, ...] = tuple(levels)
        self._depth = {name: depth for depth, name in enumerate(names)}

    @property
    def root(self) -> Level:
        return self.levels[0]

    @property
    def leaf(self) -> Level:
        return self.levels[-1]

    @property
    def fans_out(self) -> bool:
        return len(self.levels) > 1

    def depth_of(self, level_name: str) -> int:
        try:
            return self._depth[level_name]
        except KeyError:
            raise ListingConfigurationError(f"Unknown flatten level '{level_name}'.") from None

    def filters_by_depth(self, filters: Sequence[PostFetchFilter]) -> Dict[int, Tuple[NodePredicate, ...]]:
        grouped: Dict[int, List[NodePredicate]] = {}
        for post_filter in filters:
            grouped.setdefault(self.depth_of(post_filter.level), []).append(post_filter.predicate)
        return {depth: tuple(predicates) for depth, predicates in grouped.items()}


def _passes(node: Any, predicates: Tuple[NodePredicate, ...]) -> bool:
    return all(predicate(node) for predicate in predicates)


def flatten(
    roots: Iterable[Any],
    plan: FlattenPlan,
    post_fetch_filters: Sequence[PostFetchFilter] = (),
) -> List[FlatRow]:
    """
    루트 목록을 깊이 우선으로 순회하여 평탄 행 목록을 만듭니다.

    명시적 스택을 사용하며, 자식은 역순으로 쌓아 선언 순서대로 꺼내지도록 합니다.
    같은 입력과 필터에 대해 행 순서는 항상 같습니다.
    """
    by_depth = plan.filters_by_depth(post_fetch_filters)
    leaf_depth = len(plan.levels) - 1
    rows: List[FlatRow] = []

    for root in roots:
        if not _passes(root, by_depth.get(0, ())):
            continue

        stack: List[Tuple[Any, int, Mapping[str, Any]]] = [(root, 0, {})]
        while stack:
            node, depth, inherited = stack.pop()
            level = plan.levels[depth]
            merged = {**inherited, **level.project(node)}

            if depth == leaf_depth:
                rows.append(merged)
                continue

            child_filters = by_depth.get(depth + 1, ())
            children = [child for child in (level.children(node) or ()) if _passes(child, child_filters)]
            if not children:
                # 살아남은 자식이 없는 노드는 행 0개
                continue
            for child in reversed(children):
                stack.append((child, depth + 1, merged))

    return rows
