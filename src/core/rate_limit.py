# src/core/rate_limit.py
from slowapi import Limiter
from slowapi.util import get_remote_address

from src.core.config import get_settings

# Счетчики в памяти процесса, окно фиксированное
limiter = Limiter(key_func=get_remote_address, strategy="fixed-window")


def api_rate_limit() -> str:
    return f"{get_settings().RATE_LIMIT_PER_MINUTE}/minute"


# Один общий счетчик на клиента для всех /api/* маршрутов
api_limit = limiter.shared_limit(api_rate_limit, scope="api")
