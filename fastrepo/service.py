"""서비스 레이어 기본 구현.

유스케이스 하나는 다음 순서로 실행됩니다.

1. 애플리케이션 모델을 엔티티로 변환합니다.
2. 레포지터리 작업을 스테이징합니다.
3. 공유된 UnitOfWork 를 **한 번만** 커밋합니다.
4. 결과 엔티티를 애플리케이션 모델로 변환합니다.

서비스는 커밋 실패를 잡지 않으며 재시도하지도 않습니다.
"""
from __future__ import annotations

from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from fastrepo.core import (
    AbstractPredicate,
    AbstractRepository,
    AbstractUnitOfWork,
    Entity,
)
from fastrepo.mapper import Mapper

E = TypeVar("E", bound=Entity)
M = TypeVar("M", bound=BaseModel)


class CrudService(Generic[E, M]):
    """엔티티 `E` 와 애플리케이션 모델 `M` 에 대한 CRUD 유스케이스."""

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        repo: AbstractRepository[E],
        mapper: Mapper,
        model_class: Type[M],
    ):
        self.uow = uow
        self.repo = repo
        self.mapper = mapper
        self.model_class = model_class

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}[{self.repo!r}]"

    def to_entity(self, model: M) -> E:
        return self.mapper.map(model, self.repo.entity_class)  # type: ignore

    def to_model(self, entity: Optional[E]) -> Optional[M]:
        return self.mapper.map(entity, self.model_class)

    def to_models(self, entities: List[E]) -> List[M]:
        return self.mapper.map_all(entities, self.model_class)

    def add(self, model: M) -> int:
        """모델을 새 엔티티로 추가하고 커밋된 레코드 수를 리턴합니다."""
        self.repo.add(self.to_entity(model))
        return self.uow.commit()

    def update(self, model: M) -> int:
        self.repo.update(self.to_entity(model))
        return self.uow.commit()

    def delete(self, model: M) -> int:
        entity = self.to_entity(model)
        self.repo.delete(entity.id)
        return self.uow.commit()

    def get(self, id: Any) -> Optional[M]:
        return self.to_model(self.repo.get(id))

    def all(self) -> List[M]:
        return self.to_models(self.repo.all())

    def find(self, predicate: AbstractPredicate) -> List[M]:
        return self.to_models(self.repo.find(predicate))

    def close(self) -> None:
        """레포지터리를 반환합니다. 공유 컨텍스트는 레포지터리가 소유한 경우에만 닫힙니다."""
        self.repo.close()
