# pylint: disable=redefined-outer-name, protected-access
"""pytest 에서 사용될 전역 Fixture들을 정의합니다."""
from __future__ import annotations

from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from fastrepo.container import Container
from fastrepo.context import SqlAlchemyContext
from fastrepo.orm import (
    SessionMaker,
    clear_mappers,
    make_sessionmaker,
    reset_db,
    start_mappers,
)
from tests.app.adapters.orm import init_mappers
from tests.app.config import Config


def memory_sessionmaker() -> SessionMaker:
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    clear_mappers()
    mapper_registry = start_mappers(use_exist=False, init_hooks=[init_mappers])
    mapper_registry.metadata.create_all(engine)
    return make_sessionmaker(engine)


@pytest.fixture
def get_session() -> Generator[SessionMaker, None, None]:
    """:class:`.Session` 팩토리 메소드를 리턴하는 픽스쳐 입니다.

    매번 새로운 인메모리 DB 를 만들고, 테스트가 끝나면 ORM 매핑을 지웁니다.
    """
    yield memory_sessionmaker()
    reset_db()
    clear_mappers()


@pytest.fixture
def session(get_session: SessionMaker) -> Generator[Session, None, None]:
    """컨텍스트와 별개로 DB 상태를 확인하기 위한 :class:`.Session` 픽스처."""
    session = get_session()
    yield session
    session.close()


@pytest.fixture
def context(get_session: SessionMaker) -> Generator[SqlAlchemyContext, None, None]:
    with SqlAlchemyContext(get_session) as ctx:
        yield ctx


@pytest.fixture
def app_config() -> Generator[Config, None, None]:
    clear_mappers()
    yield Config(name="app", title="Test APP")
    clear_mappers()


@pytest.fixture
def container(app_config: Config) -> Generator[Container, None, None]:
    container = app_config.container
    yield container
    container.close()
