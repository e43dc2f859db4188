"""선언적 조회 조건(Predicate) 모듈.

조건은 실행 가능한 함수가 아니라 작은 표현식 트리로 표현됩니다. 덕분에
SqlAlchemy 저장소는 조건을 SQL ``WHERE`` 절로 변환하고, 메모리 저장소는
같은 조건을 직접 평가할 수 있습니다. ::

    from fastrepo.query import attr

    repo.find(attr("nome") == "TESTE")
    repo.find(attr("nome").contains("TES") & (attr("id") > 10))

두 저장소가 같은 결과를 내도록 의미를 고정합니다.

- ``contains`` 와 ``startswith`` 는 대소문자를 구분하지 않습니다.
- 값이 없는(``None``) 속성을 ``None`` 이 아닌 값과 비교하면 ``!=`` 만 참이고 나머지는
  모두 거짓입니다. SQL 의 ``NULL`` 도 같은 규칙으로 변환되므로 ``~`` 로 뒤집어도 결과가
  같습니다.
"""
from __future__ import annotations

import abc
import operator
from dataclasses import dataclass
from typing import Any, Callable, Sequence, Type

from sqlalchemy import and_, false, inspect, not_, or_
from sqlalchemy.exc import NoInspectionAvailable

from fastrepo.core import FastRepoError


def _compare(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    """``None`` 과의 대소 비교는 거짓으로 취급합니다."""

    def wrapper(left: Any, right: Any) -> bool:
        if left is None or right is None:
            return False
        return op(left, right)

    return wrapper


OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": operator.eq,
    "ne": operator.ne,
    "lt": _compare(operator.lt),
    "le": _compare(operator.le),
    "gt": _compare(operator.gt),
    "ge": _compare(operator.ge),
    "contains": lambda left, right: left is not None and right.lower() in left.lower(),
    "startswith": lambda left, right: (
        left is not None and left.lower().startswith(right.lower())
    ),
    "in": lambda left, right: left is not None and left in right,
    "is": lambda left, right: left is right,
}


def _column(entity_class: Type, name: str) -> Any:
    try:
        mapper = inspect(entity_class)
    except NoInspectionAvailable as e:
        raise FastRepoError(f"{entity_class.__name__} is not mapped") from e
    if name not in mapper.attrs:
        raise FastRepoError(f"{entity_class.__name__} has no attribute {name!r}")
    return getattr(entity_class, name)


class Predicate(abc.ABC):
    """모든 조회 조건 노드의 기본 클래스."""

    @abc.abstractmethod
    def evaluate(self, entity: Any) -> bool:
        """메모리 상의 엔티티에 대해 조건을 평가합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def to_clause(self, entity_class: Type) -> Any:
        """SqlAlchemy 컬럼 표현식으로 변환합니다."""
        raise NotImplementedError

    def __and__(self, other: Predicate) -> Predicate:
        return And((self, other))

    def __or__(self, other: Predicate) -> Predicate:
        return Or((self, other))

    def __invert__(self) -> Predicate:
        return Not(self)


@dataclass(frozen=True)
class Compare(Predicate):
    name: str
    op: str
    value: Any

    def evaluate(self, entity: Any) -> bool:
        if not hasattr(entity, self.name):
            raise FastRepoError(
                f"{type(entity).__name__} has no attribute {self.name!r}"
            )
        return bool(OPERATORS[self.op](getattr(entity, self.name), self.value))

    def to_clause(self, entity_class: Type) -> Any:
        column = _column(entity_class, self.name)
        if self.op == "is":
            return column.is_(self.value)
        if self.value is None:
            if self.op in ("eq", "ne"):
                # IS NULL / IS NOT NULL
                return getattr(operator, self.op)(column, None)
            return false()
        if self.op == "ne":
            return or_(column != self.value, column.is_(None))
        return and_(column.is_not(None), self._compare(column))

    def _compare(self, column: Any) -> Any:
        if self.op == "contains":
            return column.icontains(self.value, autoescape=True)
        if self.op == "startswith":
            return column.istartswith(self.value, autoescape=True)
        if self.op == "in":
            return column.in_(list(self.value))
        return getattr(operator, self.op)(column, self.value)


@dataclass(frozen=True)
class And(Predicate):
    items: Sequence[Predicate]

    def evaluate(self, entity: Any) -> bool:
        return all(it.evaluate(entity) for it in self.items)

    def to_clause(self, entity_class: Type) -> Any:
        return and_(*(it.to_clause(entity_class) for it in self.items))


@dataclass(frozen=True)
class Or(Predicate):
    items: Sequence[Predicate]

    def evaluate(self, entity: Any) -> bool:
        return any(it.evaluate(entity) for it in self.items)

    def to_clause(self, entity_class: Type) -> Any:
        return or_(*(it.to_clause(entity_class) for it in self.items))


@dataclass(frozen=True)
class Not(Predicate):
    item: Predicate

    def evaluate(self, entity: Any) -> bool:
        return not self.item.evaluate(entity)

    def to_clause(self, entity_class: Type) -> Any:
        return not_(self.item.to_clause(entity_class))


class Attr:
    """엔티티 속성 참조. 비교 연산자가 :class:`Compare` 노드를 만듭니다."""

    __hash__ = None  # type: ignore

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"attr({self.name!r})"

    def __eq__(self, value: Any) -> Predicate:  # type: ignore[override]
        return Compare(self.name, "eq", value)

    def __ne__(self, value: Any) -> Predicate:  # type: ignore[override]
        return Compare(self.name, "ne", value)

    def __lt__(self, value: Any) -> Predicate:
        return Compare(self.name, "lt", value)

    def __le__(self, value: Any) -> Predicate:
        return Compare(self.name, "le", value)

    def __gt__(self, value: Any) -> Predicate:
        return Compare(self.name, "gt", value)

    def __ge__(self, value: Any) -> Predicate:
        return Compare(self.name, "ge", value)

    def contains(self, value: str) -> Predicate:
        return Compare(self.name, "contains", value)

    def startswith(self, value: str) -> Predicate:
        return Compare(self.name, "startswith", value)

    def in_(self, values: Sequence[Any]) -> Predicate:
        return Compare(self.name, "in", tuple(values))

    def is_(self, value: Any) -> Predicate:
        return Compare(self.name, "is", value)


def attr(name: str) -> Attr:
    """속성 이름으로 :class:`Attr` 참조를 만듭니다."""
    return Attr(name)
