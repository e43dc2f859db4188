"""FastRepo App Configuration."""

from sqlalchemy.orm import registry

from fastrepo.config import FastRepo
from fastrepo.container import Container
from fastrepo.core import AbstractContext, AbstractUnitOfWork
from fastrepo.mapper import Mapper


class Config(FastRepo):
    """여기에 변경할 설정을 추가합니다.

    설정 가능한 모든 항목들은 `FastRepo` 클래스 정의를 참고하세요.
    """

    def init_mappers(self, mapper_registry: registry) -> None:
        from tests.app.adapters.orm import init_mappers

        init_mappers(mapper_registry)

    def register(self, container: Container) -> None:
        from tests.app.adapters.repos import PersonRepository
        from tests.app.domain.models import Person
        from tests.app.mapping import make_mapper
        from tests.app.services.person import PersonService

        container.register_singleton(Mapper, lambda r: make_mapper())
        container.register(
            PersonRepository,
            lambda r: PersonRepository(Person, r.get(AbstractContext)),
        )
        container.register(
            PersonService,
            lambda r: PersonService(
                r.get(AbstractUnitOfWork), r.get(PersonRepository), r.get(Mapper)
            ),
        )

    def get_db_url(self) -> str:
        """DB 접속 정보."""
        return "sqlite://"
