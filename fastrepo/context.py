"""영속성 컨텍스트(Persistence Context) 모듈.

SqlAlchemy 세션 하나를 소유하며, 엔티티 타입마다 :class:`SqlAlchemyEntitySet` 핸들을
제공합니다. 레포지터리를 통해 등록된 변경은 :meth:`SqlAlchemyContext.commit` 이 호출될
때까지 세션에 스테이징만 되고, 커밋은 하나의 트랜잭션으로 처리됩니다.

주의:

    이 모듈은 별도의 잠금을 제공하지 않습니다. 컨텍스트를 싱글톤으로 등록해
    동시에 여러 스코프에서 쓰기 작업을 하는 것은 저장소가 트랜잭션을 직렬화하지
    않는 한 안전하지 않습니다.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator, List, Optional, Type, TypeVar

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from fastrepo.core import (
    AbstractContext,
    AbstractEntitySet,
    AbstractPredicate,
    Entity,
    InvalidStateError,
    PersistenceError,
    get_logger,
)
from fastrepo.orm import SessionMaker, init_db

E = TypeVar("E", bound=Entity)

logger = get_logger("fastrepo.context")


@contextmanager
def persistence_errors(action: str) -> Generator[None, None, None]:
    """SqlAlchemy 예외를 :class:`PersistenceError` 로 변환합니다."""
    try:
        yield
    except SQLAlchemyError as e:
        raise PersistenceError(f"{action} failed: {e}") from e


class SqlAlchemyEntitySet(AbstractEntitySet[E]):
    """:class:`SqlAlchemyContext` 의 세션에 위임하는 엔티티 저장소 핸들."""

    def __init__(self, entity_class: Type[E], context: SqlAlchemyContext):
        self.entity_class = entity_class
        self.context = context

    def __repr__(self) -> str:
        return f"SqlAlchemyEntitySet[{self.entity_class.__name__}]"

    @property
    def session(self) -> Session:
        return self.context.session

    def _select(self) -> Select:
        primary_key = inspect(self.entity_class).primary_key
        return select(self.entity_class).order_by(*primary_key)

    def add(self, item: E) -> None:
        with persistence_errors(f"add {self.entity_class.__name__}"):
            self.session.add(item)

    def merge(self, item: E) -> E:
        with persistence_errors(f"merge {self.entity_class.__name__}"):
            return self.session.merge(item)

    def remove(self, item: E) -> None:
        session = self.session
        if item in session.new:
            # 아직 저장소에 없는 객체는 스테이징만 취소합니다.
            session.expunge(item)
        else:
            session.delete(item)

    def find(self, id: Any) -> Optional[E]:
        with persistence_errors(f"find {self.entity_class.__name__}"):
            return self.session.get(self.entity_class, id)

    def filter(self, predicate: AbstractPredicate) -> List[E]:
        stmt = self._select().where(predicate.to_clause(self.entity_class))
        with persistence_errors(f"filter {self.entity_class.__name__}"):
            return list(self.session.scalars(stmt))

    def all(self) -> List[E]:
        with persistence_errors(f"list {self.entity_class.__name__}"):
            return list(self.session.scalars(self._select()))

    def is_tracked(self, item: E) -> bool:
        return item in self.session


class SqlAlchemyContext(AbstractContext):
    """``SqlAlchemy`` 세션을 이용한 영속성 컨텍스트 구현입니다."""

    def __init__(self, get_session: Optional[SessionMaker] = None) -> None:
        """세션을 열고 컨텍스트를 초기화합니다.

        Args:
            get_session: 세션 팩토리. 없으면 :func:`fastrepo.orm.init_db` 의 기본 팩토리를 씁니다.
        """
        self.get_session = get_session or init_db()
        self._session: Optional[Session] = self.get_session()
        self._sets: dict[type, SqlAlchemyEntitySet] = {}
        logger.debug("context opened: %r", self)

    def __repr__(self) -> str:
        return f"SqlAlchemyContext[{id(self):#x}]"

    @property
    def closed(self) -> bool:
        return self._session is None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise InvalidStateError(f"{self!r} is already closed")
        return self._session

    def set(self, entity_class: Type[E]) -> SqlAlchemyEntitySet[E]:
        if self.closed:
            raise InvalidStateError(f"{self!r} is already closed")
        if entity_class not in self._sets:
            self._sets[entity_class] = SqlAlchemyEntitySet(entity_class, self)
        return self._sets[entity_class]

    def pending_count(self) -> int:
        """커밋시 반영될 추가/변경/삭제 레코드 수."""
        session = self.session
        dirty = sum(1 for it in session.dirty if session.is_modified(it))
        return len(session.new) + dirty + len(session.deleted)

    def commit(self) -> int:
        """세션을 커밋합니다.

        Raises:
            PersistenceError: 저장소가 트랜잭션을 거부한 경우. 세션은 롤백되어 어떤 변경도 남지 않습니다.
        """
        session = self.session
        count = self.pending_count()
        try:
            session.commit()
        except SQLAlchemyError as e:
            logger.exception("commit failed, rolling back %d staged records", count)
            session.rollback()
            raise PersistenceError(f"commit failed: {e}") from e

        logger.debug("committed %d records", count)
        return count

    def rollback(self) -> None:
        """세션을 롤백합니다."""
        self.session.rollback()

    def close(self) -> None:
        """세션을 close합니다. 두 번째 호출부터는 아무 일도 하지 않습니다."""
        if self._session is None:
            return
        session, self._session = self._session, None
        self._sets.clear()
        session.close()
        logger.debug("context closed: %r", self)
