from pydantic import BaseModel, Field
from typing import Any, Dict, List
from enum import Enum


class FetchStatus(str, Enum):
    """Исход делегированного вызова Classroom API."""
    OK = "ok"
    NO_CREDENTIAL = "no_credential"


class ClassroomResult(BaseModel):
    """
    Результат адаптера Classroom.
    При NO_CREDENTIAL список всегда пустой: роутер отдает его как 200 [].
    """
    status: FetchStatus
    items: List[Dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def no_credential(cls) -> "ClassroomResult":
        return cls(status=FetchStatus.NO_CREDENTIAL)
