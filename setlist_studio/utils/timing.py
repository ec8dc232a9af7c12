"""
Setlist Studio Timing Utilities
요청/로딩 시간 측정
"""

import logging
import time
from functools import wraps
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


def timed(func: Callable) -> Callable:
    """실행 시간을 debug 로그로 남기는 데코레이터"""
    @wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        with Timer(func.__qualname__):
            return func(*args, **kwargs)
    return wrapper


class Timer:
    """
    컨텍스트 매니저 타이머

    with 블록 안에서 return/raise 되어도 elapsed는 기록됩니다.
    """

    def __init__(self, name: str = "", log: Optional[logging.Logger] = None):
        self.name = name
        self.elapsed: float = 0.0
        self._log = log or logger

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args) -> None:
        self.elapsed = time.perf_counter() - self._start
        if self.name:
            self._log.debug(f"{self.name} took {self.elapsed * 1000:.2f}ms")
