"""기본 환경 설정."""

from __future__ import annotations

import importlib
import os
import sys
from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Type, cast

from sqlalchemy.orm import registry
from sqlalchemy.pool import Pool, StaticPool

from fastrepo.container import Container, Lifestyle, Registration
from fastrepo.context import SqlAlchemyContext
from fastrepo.core import AbstractContext, AbstractRepository, AbstractUnitOfWork
from fastrepo.orm import SessionMaker, init_engine, make_sessionmaker, start_mappers
from fastrepo.repo import Repository


@dataclass
class FastRepoSetupConfig:
    name: str
    title: Optional[str] = None
    module_name: Optional[str] = None


def load_setupcfg(path: Path) -> Optional[FastRepoSetupConfig]:
    if (path / "setup.cfg").exists():
        # 현재 경로에 "setup.cfg" 파일이 있다면 [fastrepo] 섹션에서
        # name, module 등의 정보를 읽습니다.
        config = ConfigParser()
        config.read(path / "setup.cfg")
        if "fastrepo" in config:
            return FastRepoSetupConfig(**config["fastrepo"])
    return None


@dataclass
class FastRepo:
    """FastRepo App 설정.

    하위 클래스에서 ``get_db_url``, ``init_mappers``, ``register`` 등을 재정의합니다.
    """

    name: str
    title: str = "FastRepo"
    module_name: Optional[str] = None

    context_lifestyle = Lifestyle.SCOPED
    """영속성 컨텍스트의 생명주기. ``SINGLETON`` 이면 프로세스 전체가 하나의 컨텍스트를 공유합니다."""

    _get_session: Optional[SessionMaker] = field(default=None, init=False, repr=False)

    @staticmethod
    def load_from_config(path: Path = Path(".")) -> FastRepo:
        """`setup.cfg` 와 `<module>/config.py` 를 읽어 설정을 로드한다."""
        cfg = load_setupcfg(path)
        name = path.absolute().name
        title = name
        module_name = name

        if cfg:
            name = cfg.name
            module_name = cfg.module_name or name
            title = cfg.title or title

        kwargs = dict(name=name, title=title, module_name=module_name)
        module_path = path / Path(module_name.replace(".", "/"))

        if (module_path / "config.py").exists():
            abs_path = str(path.absolute())
            if abs_path not in sys.path:
                sys.path.insert(0, abs_path)

            conf_module = importlib.import_module(f"{module_name}.config")
            config = cast(Type[FastRepo], getattr(conf_module, "Config"))
            # config.py 파일이 발견되면 이 설정을 로드합니다.
            return config(**kwargs)

        return FastRepo(**kwargs)

    def get_db_url(self) -> str:
        """SqlAlchemy 에서 사용 가능한 형식의 DB URL을 리턴합니다.

        다음처럼 OS 환경변수를 이용할 수도 있씁니다. ::

            db_host = os.environ.get("DB_HOST", "localhost")
            db_user = os.environ.get("DB_USER", "postgres")
            db_pass = os.environ.get("DB_PASS", "password")
            db_name = os.environ.get("DB_NAME", db_user)
            return f"postgresql://{db_user}:{db_pass}@{db_host}/{db_name}"
        """
        return os.environ.get("FASTREPO_DB_URL", "sqlite://")

    def get_db_connect_args(self) -> dict[str, Any]:
        """Get db connection arguments for SQLAlchemy's engine creation.

        Example:
            For SQLite dbs, it could be: ::

                {'check_same_thread': False}
        """
        if self.get_db_url().startswith("sqlite"):
            return {"check_same_thread": False}
        return {}

    def get_db_poolclass(self) -> Optional[Type[Pool]]:
        """Get db poolclass arguemnt for SQLAlchemy's engine creation.

        Returns:
            A pool class

        """
        return StaticPool

    def init_mappers(self, mapper_registry: registry) -> None:
        """엔티티 클래스를 테이블에 매핑합니다."""
        return

    def register(self, container: Container) -> None:
        """앱 고유의 레포지터리와 서비스를 등록합니다."""
        return

    def get_session(self) -> SessionMaker:
        """설정으로 엔진을 만들고 세션 팩토리를 리턴합니다. 팩토리는 재사용됩니다."""
        if not self._get_session:
            engine = init_engine(
                start_mappers(init_hooks=[self.init_mappers]).metadata,
                self.get_db_url(),
                connect_args=self.get_db_connect_args(),
                poolclass=self.get_db_poolclass(),
            )
            self._get_session = make_sessionmaker(engine)
        return self._get_session

    @property
    def container(self) -> Container:
        """새 :class:`Container` 를 구성합니다.

        영속성 컨텍스트는 `AbstractUnitOfWork` 와 `AbstractContext` 두 인터페이스에
        같은 등록으로 연결되므로, 같은 생명주기 안에서 항상 같은 인스턴스입니다.
        """
        get_session = self.get_session()
        container = Container()

        registration = Registration(
            lambda r: SqlAlchemyContext(get_session), self.context_lifestyle
        )
        container.add_registration(AbstractContext, registration)
        container.add_registration(AbstractUnitOfWork, registration)

        container.register_generic(
            AbstractRepository,
            lambda r, entity_class: Repository(entity_class, r.get(AbstractContext)),
        )

        self.register(container)
        return container


class Config(FastRepo):
    """기본 설정. DB URL 은 ``FASTREPO_DB_URL`` 환경변수로 바꿀 수 있습니다."""
