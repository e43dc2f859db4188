"""``fastrepo`` 로거 설정."""
import logging
import os
from typing import Optional, Union

from uvicorn.logging import DefaultFormatter

LOG_FORMAT = "%(levelprefix)s %(name)s: %(message)s"


def get_logger(name: str, log_level: Optional[Union[int, str]] = None) -> logging.Logger:
    """``uvicorn`` 포맷터를 사용하는 로거를 리턴합니다.

    로그 레벨을 지정하지 않으면 ``FASTREPO_LOG_LEVEL`` 환경변수(기본 ``INFO``)를 따릅니다.
    핸들러는 로거마다 한 번만 추가됩니다.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(log_level or os.environ.get("FASTREPO_LOG_LEVEL", "INFO"))
        ch = logging.StreamHandler()
        ch.setFormatter(DefaultFormatter(fmt=LOG_FORMAT))
        logger.addHandler(ch)

    return logger
