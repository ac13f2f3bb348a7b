"""
logger.py - 로거 팩토리
=========================
모든 모듈에서 같은 형식으로 로그를 남기도록 설정된 로거를 만들어 줍니다.

CLI 화면과 어울리도록 rich의 RichHandler로 출력합니다.
로그 레벨은 Config.LOG_LEVEL (기본 INFO)을 따릅니다.

사용 예시:
    from utils.logger import get_logger
    logger = get_logger(__name__)
    logger.info("청크 저장 완료")
"""

import logging

from rich.logging import RichHandler

from config import Config


def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """
    이름이 붙은 로거를 만들어 반환합니다.

    Args:
        name: 보통 호출하는 모듈의 ``__name__``
        level: 로그 레벨. None이면 Config.LOG_LEVEL을 사용

    Returns:
        설정이 끝난 logging.Logger
    """
    resolved_level = level if level is not None else Config.LOG_LEVEL.upper()
    logger = logging.getLogger(name)

    # 같은 로거에 핸들러가 중복으로 붙지 않도록
    if not logger.handlers:
        logger.setLevel(resolved_level)

        handler = RichHandler(
            level=resolved_level,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(name)s | %(message)s"))
        logger.addHandler(handler)

        # 루트 로거로 전파하면 같은 로그가 두 번 찍힙니다
        logger.propagate = False

    return logger
