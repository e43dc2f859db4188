from __future__ import annotations

import abc
from contextlib import AbstractContextManager, ContextDecorator
from typing import (
    Any,
    Generic,
    Iterator,
    List,
    Literal,
    Optional,
    Protocol,
    Type,
    TypeVar,
)


class Entity(Protocol):
    """Entity 프로토콜 명세."""

    id: Any  # PK 컬럼으로 id 라는 필드를 제공해야 합니다.


E = TypeVar("E", bound=Entity)


class AbstractPredicate(Protocol):
    """선언적 조회 조건 프로토콜. 구현은 :mod:`fastrepo.query` 를 참고하세요."""

    def evaluate(self, entity: Any) -> bool:
        ...

    def to_clause(self, entity_class: Type) -> Any:
        ...


class AbstractEntitySet(Generic[E], abc.ABC):
    """영속성 컨텍스트 안에서 특정 엔티티 타입의 저장소를 가리키는 핸들입니다.

    모든 변경은 스테이징만 되며 :meth:`AbstractUnitOfWork.commit` 전에는
    저장소에 반영되지 않습니다.
    """

    entity_class: Type[E]

    @abc.abstractmethod
    def add(self, item: E) -> None:
        """새 엔티티 추가를 스테이징합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def merge(self, item: E) -> E:
        """식별자 기준 upsert 를 스테이징합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def remove(self, item: E) -> None:
        """엔티티 삭제를 스테이징합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def find(self, id: Any) -> Optional[E]:
        """식별자로 엔티티를 조회합니다. 없으면 ``None``."""
        raise NotImplementedError

    @abc.abstractmethod
    def filter(self, predicate: AbstractPredicate) -> List[E]:
        """조건을 만족하는 엔티티를 식별자 순으로 조회합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def all(self) -> List[E]:
        """모든 엔티티를 식별자 순으로 조회합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def is_tracked(self, item: E) -> bool:
        """`item` 이 현재 컨텍스트에서 로드되었거나 스테이징된 객체인지 여부."""
        raise NotImplementedError

    def __iter__(self) -> Iterator[E]:
        return iter(self.all())


class AbstractUnitOfWork(abc.ABC):
    """커밋만 노출하는 좁은 UnitOfWork 인터페이스입니다.

    서비스 레이어는 이 인터페이스로만 커밋을 호출합니다.
    """

    @abc.abstractmethod
    def commit(self) -> int:
        """스테이징된 모든 변경을 원자적으로 반영하고 영향받은 레코드 수를 리턴합니다."""
        raise NotImplementedError


class AbstractContext(AbstractUnitOfWork, AbstractContextManager["AbstractContext"]):
    """영속성 컨텍스트의 추상 인터페이스입니다.

    하나의 스코프 안에서 모든 레포지터리가 같은 인스턴스를 공유합니다.
    """

    @property
    @abc.abstractmethod
    def closed(self) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def set(self, entity_class: Type[E]) -> AbstractEntitySet[E]:
        """`entity_class` 타입의 엔티티 저장소 핸들을 리턴합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self) -> None:
        """커밋되지 않은 변경을 버립니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def close(self) -> None:
        """연결을 반환합니다. 이후 다른 작업은 :class:`InvalidStateError` 가 됩니다."""
        raise NotImplementedError

    def __enter__(self) -> AbstractContext:
        """``with`` 블록에 진입했을때 실행되는 메소드입니다."""
        return self

    def __exit__(self, *args: Any) -> None:
        """``with`` 블록에서 빠져나갈 때 실행되는 메소드입니다."""
        try:
            if not self.closed:
                self.rollback()  # commit() 안되었을때 변경을 롤백합니다.
        finally:
            self.close()


class AbstractRepository(Generic[E], abc.ABC, ContextDecorator):
    """Repository 패턴의 추상 인터페이스 입니다."""

    entity_class: Type[E]

    def __enter__(self) -> AbstractRepository[E]:
        """`module`:contextmanager`의 필수 인터페이스 구현."""
        return self

    def __exit__(
        self, typ: Any = None, value: Any = None, traceback: Any = None
    ) -> Literal[False]:
        self.close()
        return False

    def close(self) -> None:
        """레포지터리와 연결된 저장소 객체를 종료합니다."""
        return

    @abc.abstractmethod
    def add(self, item: E) -> None:
        """레포지터리에 :class:`E` 객체 추가를 스테이징합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def update(self, item: E) -> None:
        """식별자 기준으로 :class:`E` 객체를 덮어쓰거나 새로 추가합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def delete(self, id: Any) -> None:
        """식별자에 해당하는 객체 삭제를 스테이징합니다. 없으면 아무것도 하지 않습니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def get(self, id: Any) -> Optional[E]:
        """식별자에 해당하는 :class:`E` 객체를 조회합니다.

        못 찾을 경우 ``None`` 을 리턴합니다.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def all(self) -> List[E]:
        """모든 객체 리스트를 조회합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def find(self, predicate: AbstractPredicate) -> List[E]:
        """조건을 만족하는 객체 리스트를 조회합니다."""
        raise NotImplementedError
