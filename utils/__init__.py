"""
utils 패키지
=============
여러 패키지에서 함께 쓰는 보조 모듈(로거 등)을 모아 둡니다.
"""

from utils.logger import get_logger

__all__ = ["get_logger"]
