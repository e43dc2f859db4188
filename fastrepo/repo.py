"""레포지터리 패턴 구현."""
from __future__ import annotations

from typing import Any, List, Optional, Type, TypeVar

from fastrepo.context import SqlAlchemyContext
from fastrepo.core import (
    AbstractContext,
    AbstractEntitySet,
    AbstractPredicate,
    AbstractRepository,
    Entity,
    InvalidStateError,
    ValidationError,
)
from fastrepo.domain import validate
from fastrepo.orm import SessionMaker

E = TypeVar("E", bound=Entity)


class Repository(AbstractRepository[E]):
    """영속성 컨텍스트에 위임하는 :class:`AbstractRepository` 기본 구현입니다.

    엔티티 타입마다 하나씩 만들어지며, 같은 스코프의 레포지터리들은 같은
    :class:`AbstractContext` 를 공유합니다. 엔티티별 레포지터리는 이 클래스를 상속하고
    :meth:`find` 조건으로 조회 메소드를 추가합니다.
    """

    def __init__(
        self,
        entity_class: Type[E],
        context: Optional[AbstractContext] = None,
        get_session: Optional[SessionMaker] = None,
    ):
        """임의의 엔티티 E 를 받아 E에대한 Repostiory를 초기화합니다.

        `context` 가 없으면 `get_session` 으로 새 :class:`SqlAlchemyContext` 를 만들고
        직접 소유합니다. `get_session` 도 없으면 :func:`fastrepo.orm.init_db` 의 기본 DB를
        쓰므로, 설정된 앱의 DB를 쓰려면 ``config.get_session()`` 을 넘겨야 합니다.
        """
        super().__init__()
        self.entity_class = entity_class
        self.context: AbstractContext
        self._closed = False
        if not context:
            self.context = SqlAlchemyContext(get_session)
            self.owns_context = True
        else:
            self.context = context
            self.owns_context = False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}[{self.entity_class.__name__}]"

    def __enter__(self) -> Repository[E]:
        """`module`:contextmanager`의 필수 인터페이스 구현."""
        return self

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def items(self) -> AbstractEntitySet[E]:
        if self._closed:
            raise InvalidStateError(f"{self!r} is already closed")
        return self.context.set(self.entity_class)

    def close(self) -> None:
        """레포지터리를 닫습니다.

        직접 만든 컨텍스트만 반환합니다. 공유받은 컨텍스트는 스코프가 관리합니다.
        """
        if self._closed:
            return
        self._closed = True
        if self.owns_context:
            self.context.close()

    def add(self, item: E) -> None:
        items = self.items
        validate(item)
        if getattr(item, "id", None) is not None and not items.is_tracked(item):
            raise ValidationError(
                f"{self.entity_class.__name__} already has an identity: {item.id!r}"
            )
        items.add(item)

    def update(self, item: E) -> None:
        items = self.items
        validate(item)
        items.merge(item)

    def delete(self, id: Any) -> None:
        items = self.items
        item = items.find(id)
        if item is None:
            return
        items.remove(item)

    def get(self, id: Any) -> Optional[E]:
        return self.items.find(id)

    def all(self) -> List[E]:
        return self.items.all()

    def find(self, predicate: AbstractPredicate) -> List[E]:
        return self.items.filter(predicate)
