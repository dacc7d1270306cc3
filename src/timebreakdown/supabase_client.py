"""Read-only Supabase (PostgREST) client for time breakdown data retrieval."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .config import Config
from .errors import ApiError, AuthenticationError, DataValidationError
from .models import DeletedVideoLog, Message, Submission

logger = logging.getLogger(__name__)

_SUBMISSION_SELECT = (
    "id,artist_id,project_name,"
    "artists(id,name),"
    "messages(id,created_at,is_admin,user_id)"
)


class SupabaseClient:
    """Small, typed client for the tables behind the time breakdown.

    Failures surface as ``ApiError``; retrying is left to the caller.
    """

    _PAGE_SIZE = 1000

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize an authenticated PostgREST client.

        Args:
            config: Validated runtime configuration including URL and API key.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._config = config
        self._timeout_seconds = timeout_seconds
        self._base_url = f"{config.supabase_url}/rest/v1"

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "apikey": config.api_key,
                "Authorization": f"Bearer {config.api_key}",
            }
        )

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from a table path below ``rest/v1``."""
        return f"{self._base_url}/{path.lstrip('/')}"

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Execute a GET request and return the JSON row list.

        Raises:
            AuthenticationError: If the backend rejects the API key (401/403).
            ApiError: If the request fails, returns HTTP >= 400, or does not
                return a JSON list.
        """
        url = self._build_url(path)

        try:
            response = self._session.get(url, params=dict(params or {}), timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise ApiError(f"Supabase request failed: GET {url}") from exc

        status_code = response.status_code
        if status_code in (401, 403):
            raise AuthenticationError(f"Supabase rejected the API key: GET {url} returned {status_code}")

        if status_code >= 400:
            raise ApiError(f"Supabase API request failed: GET {url} returned {status_code} - {response.text}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError(f"Supabase API returned invalid JSON: GET {url}") from exc

        if not isinstance(payload, list):
            raise ApiError(f"Supabase API returned unexpected payload shape: GET {url}")

        logger.debug("Fetched rows", extra={"path": path, "rows": len(payload)})
        return payload

    def _get_all(self, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Fetch every row of a query using ``limit``/``offset`` pagination."""
        rows: List[Dict[str, Any]] = []
        offset = 0

        while True:
            page_params = dict(params)
            page_params["limit"] = self._PAGE_SIZE
            page_params["offset"] = offset

            page = self._get_json(path, params=page_params)
            rows.extend(page)

            if len(page) < self._PAGE_SIZE:
                break

            offset += self._PAGE_SIZE

        return rows

    def list_submissions(self) -> List[Submission]:
        """List every submission with its artist and message history.

        Message timestamps are passed through unparsed; they are validated
        during normalization.

        Raises:
            DataValidationError: If a submission row lacks its id or artist id.
        """
        submissions: List[Submission] = []

        for item in self._get_all("submissions", {"select": _SUBMISSION_SELECT, "order": "id"}):
            submission_id = item.get("id")
            artist_id = item.get("artist_id")
            if submission_id is None or artist_id is None:
                raise DataValidationError(
                    f"Submission payload is missing required fields: payload={item}"
                )

            artist = item.get("artists") or {}
            messages = [
                Message(
                    id=str(message.get("id")),
                    createdAt=message.get("created_at"),
                    isAdmin=bool(message.get("is_admin")),
                    userId=str(message["user_id"]) if message.get("user_id") else None,
                )
                for message in item.get("messages") or []
            ]

            submissions.append(
                Submission(
                    id=str(submission_id),
                    artistId=str(artist_id),
                    artistName=artist.get("name"),
                    projectName=item.get("project_name"),
                    messages=messages,
                )
            )

        return submissions

    def list_messages(self, submission_id: str) -> List[Message]:
        """List the full message history of one submission, oldest first.

        Raises:
            DataValidationError: If a message row lacks its id.
        """
        messages: List[Message] = []

        rows = self._get_all(
            "messages",
            {
                "select": "id,created_at,is_admin,user_id,text",
                "submission_id": f"eq.{submission_id}",
                "order": "created_at.asc,id.asc",
            },
        )
        for item in rows:
            message_id = item.get("id")
            if message_id is None:
                raise DataValidationError(
                    f"Message payload is missing its id: submission_id={submission_id}, payload={item}"
                )

            messages.append(
                Message(
                    id=str(message_id),
                    createdAt=item.get("created_at"),
                    isAdmin=bool(item.get("is_admin")),
                    userId=str(item["user_id"]) if item.get("user_id") else None,
                    text=item.get("text"),
                )
            )

        logger.debug("Fetched message history", extra={"submission_id": submission_id, "messages": len(messages)})
        return messages

    def list_profiles(self) -> Dict[str, str]:
        """Return staff display names keyed by profile id."""
        names: Dict[str, str] = {}

        for item in self._get_all("profiles", {"select": "id,name", "order": "id"}):
            profile_id = item.get("id")
            name = item.get("name")
            if profile_id and name:
                names[str(profile_id)] = str(name)

        return names

    def list_deleted_video_logs(self) -> List[DeletedVideoLog]:
        """List ``video_deleted`` log entries; entries without an artist id are ignored."""
        logs: List[DeletedVideoLog] = []

        rows = self._get_all(
            "whatsapp_logs",
            {"select": "id,type,metadata", "type": "eq.video_deleted", "order": "id"},
        )
        for item in rows:
            metadata = item.get("metadata")
            if not isinstance(metadata, dict):
                continue

            artist_id = metadata.get("artist_id")
            if not artist_id:
                continue

            logs.append(DeletedVideoLog(artistId=str(artist_id), artistName=metadata.get("artist_name")))

        return logs
