# src/classroom/service.py
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

import httplib2
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build, Resource

from src.auth.service import AuthService
from src.shared.types import ClassroomResult, FetchStatus
from src.users.models import User

logger = logging.getLogger(__name__)


def _to_points(value: Any) -> Optional[Decimal]:
    # через str, чтобы 10.1 не превратилось в 10.0999999...
    return Decimal(str(value)) if value is not None else None


def _format_due_date(item: Dict[str, Any]) -> Optional[str]:
    """Classroom отдает dueDate {year, month, day} и dueTime {hours, minutes} раздельно."""
    due = item.get('dueDate')
    if not due or not due.get('year'):
        return None
    date_part = f"{due['year']:04d}-{due.get('month', 1):02d}-{due.get('day', 1):02d}"
    due_time = item.get('dueTime')
    if due_time:
        return f"{date_part}T{due_time.get('hours', 0):02d}:{due_time.get('minutes', 0):02d}:00Z"
    return date_part


class GoogleClassroomService:
    """
    Обертка над Google Classroom API v1 для одного access token.
    Транспорт ограничен таймаутом, чтобы запрос к Google не висел бесконечно.
    """

    def __init__(self, access_token: str, timeout: float):
        if not access_token:
            raise ValueError("An access token is required to initialize GoogleClassroomService")
        creds = Credentials(token=access_token)
        authorized_http = AuthorizedHttp(creds, http=httplib2.Http(timeout=timeout))
        # cache_discovery=False: файловый кэш discovery не нужен долгоживущему процессу
        self.service: Resource = build('classroom', 'v1', http=authorized_http, cache_discovery=False)

    def list_active_courses(self) -> List[Dict[str, Any]]:
        """
        Raises:
            HttpError: В случае ошибки от Classroom API.
        """
        courses: List[Dict[str, Any]] = []
        page_token = None
        while True:
            result = self.service.courses().list(courseStates=['ACTIVE'], pageToken=page_token).execute()
            courses.extend(self._parse_course(c) for c in result.get('courses', []))
            page_token = result.get('nextPageToken')
            if not page_token:
                break
        logger.info(f"Fetched {len(courses)} active courses")
        return courses

    def list_coursework(self, course_id: str) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        page_token = None
        while True:
            result = self.service.courses().courseWork().list(courseId=course_id, pageToken=page_token).execute()
            items.extend(self._parse_coursework(w) for w in result.get('courseWork', []))
            page_token = result.get('nextPageToken')
            if not page_token:
                break
        logger.info(f"Fetched {len(items)} coursework items for course {course_id}")
        return items

    @staticmethod
    def _parse_course(item: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": item.get('id'),
            "name": item.get('name'),
            "section": item.get('section'),
            "courseState": item.get('courseState'),
        }

    @staticmethod
    def _parse_coursework(item: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": item.get('id'),
            "title": item.get('title'),
            "description": item.get('description'),
            "dueDate": _format_due_date(item),
            "maxPoints": _to_points(item.get('maxPoints')),
        }


class ClassroomAdapter:
    """
    Переводит учетные данные пользователя в живые данные Classroom.

    Перед каждым вызовом токен обновляется через AuthService. Если получить
    access token не удалось, возвращается ClassroomResult со статусом
    NO_CREDENTIAL и пустым списком, а не ошибка.
    """

    def __init__(self, auth_service: AuthService, timeout: float,
                 service_factory: Callable[[str, float], GoogleClassroomService] = GoogleClassroomService):
        self.auth_service = auth_service
        self.timeout = timeout
        self.service_factory = service_factory

    def _service_for(self, user: User) -> Optional[GoogleClassroomService]:
        access_token = self.auth_service.ensure_access_token(user)
        if not access_token:
            return None
        return self.service_factory(access_token, self.timeout)

    def list_courses(self, user: User) -> ClassroomResult:
        service = self._service_for(user)
        if service is None:
            return ClassroomResult.no_credential()
        return ClassroomResult(status=FetchStatus.OK, items=service.list_active_courses())

    def list_coursework(self, user: User, course_id: str) -> ClassroomResult:
        service = self._service_for(user)
        if service is None:
            return ClassroomResult.no_credential()
        return ClassroomResult(status=FetchStatus.OK, items=service.list_coursework(course_id))
