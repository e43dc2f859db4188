"""ORM 어댑터 모듈.

도메인 엔티티는 SqlAlchemy 에 의존하지 않는 일반 클래스이며, 테이블 매핑은
``init_hooks`` 로 전달된 함수들이 :class:`~sqlalchemy.orm.registry` 에 명령형으로 등록합니다.
"""
from __future__ import annotations

from typing import Any, Callable, Optional, Type, cast

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import clear_mappers as _clear_mappers
from sqlalchemy.orm import registry, sessionmaker
from sqlalchemy.orm.session import Session
from sqlalchemy.pool import Pool

from fastrepo.core import get_logger

SessionMaker = Callable[[], Session]
"""Session 팩토리 타입."""
MapperHook = Callable[[registry], Any]
"""엔티티 클래스를 테이블에 매핑하는 함수 타입."""

mapper_registry: Optional[registry] = None

_get_session: Optional[SessionMaker] = None  # pylint: disable=invalid-name

logger = get_logger("fastrepo.orm")


def make_sessionmaker(engine: Engine) -> SessionMaker:
    """스테이징된 변경이 커밋 전까지 저장소에 전달되지 않도록 ``autoflush`` 를 끈 팩토리."""
    return cast(
        SessionMaker, sessionmaker(engine, autoflush=False, expire_on_commit=False)
    )


def init_db(
    db_url: Optional[str] = None,
    drop_all: bool = False,
    show_log: bool = False,
    init_hooks: Optional[list[MapperHook]] = None,
    connect_args: Optional[dict[str, Any]] = None,
    poolclass: Optional[Type[Pool]] = None,
) -> SessionMaker:
    """DB 엔진을 초기화 하고 세션 팩토리를 리턴합니다.

    한 번 만들어진 팩토리는 :func:`reset_db` 전까지 재사용됩니다.
    """
    global _get_session

    if _get_session:
        return _get_session

    reg = start_mappers(init_hooks=init_hooks)

    engine = init_engine(
        reg.metadata,
        db_url or "sqlite://",
        connect_args=connect_args,
        poolclass=poolclass,
        drop_all=drop_all,
        show_log=show_log,
    )
    _get_session = make_sessionmaker(engine)
    return _get_session


def reset_db() -> None:
    """캐시된 세션 팩토리를 버립니다."""
    global _get_session
    _get_session = None


def start_mappers(
    use_exist: bool = True, init_hooks: Optional[list[MapperHook]] = None
) -> registry:
    """도메인 객체들을 SqlAlchemy ORM 매퍼에 등록합니다."""
    global mapper_registry  # pylint: disable=global-statement,invalid-name
    if use_exist and mapper_registry:
        return mapper_registry

    mapper_registry = registry(metadata=MetaData())

    # 사용자 매핑 함수 추가.
    for hook in init_hooks or []:
        hook(mapper_registry)

    return mapper_registry


def clear_mappers() -> None:
    """ORM 매핑을 초기화 합니다."""
    global mapper_registry
    _clear_mappers()
    mapper_registry = None


def init_engine(
    meta: MetaData,
    url: str,
    connect_args: Optional[dict[str, Any]] = None,
    poolclass: Optional[Type[Pool]] = None,
    show_log: bool = False,
    isolation_level: Optional[str] = None,
    drop_all: bool = False,
) -> Engine:
    """ORM Engine을 초기화 하고 매핑된 테이블을 생성합니다."""
    kwargs: dict[str, Any] = dict(connect_args=connect_args or {}, echo=show_log)
    if poolclass:
        kwargs["poolclass"] = poolclass
    if isolation_level:
        kwargs["isolation_level"] = isolation_level

    engine = create_engine(url, **kwargs)

    if drop_all:
        meta.drop_all(engine)

    meta.create_all(engine)
    logger.debug("engine ready: %s (%d tables)", engine.url, len(meta.tables))

    return engine
