"""FastRepo - 제네릭 레포지터리와 UnitOfWork 기반 데이터 접근 라이브러리."""
from fastrepo.config import Config, FastRepo  # noqa
from fastrepo.container import Container, Lifestyle, Registration, Scope  # noqa
from fastrepo.context import SqlAlchemyContext  # noqa
from fastrepo.mapper import Mapper, Profile  # noqa
from fastrepo.query import attr  # noqa
from fastrepo.repo import Repository  # noqa
from fastrepo.service import CrudService  # noqa

__version__ = "0.1"
