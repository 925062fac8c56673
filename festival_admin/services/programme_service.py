"""Remote CRUD operations for programmes."""
import logging
from datetime import tzinfo
from typing import Any, Dict, List, Optional

from festival_admin.models.programme import Programme
from festival_admin.services.api_client import ApiClient
from festival_admin.utils.exceptions import ServerError


logger = logging.getLogger(__name__)

PROGRAMMES_PATH = "/programmes"
PROGRAMMES_QUERY_KEY = "programmes"


def _is_record(data: Any) -> bool:
    return isinstance(data, dict) and bool(data.get("_id") or data.get("id"))


class ProgrammeService:
    """One call per CRUD verb against /programmes."""

    def __init__(self, client: ApiClient, tz: tzinfo):
        self.client = client
        self.tz = tz

    def _parse(self, data: Any) -> Programme:
        if not isinstance(data, dict):
            raise ServerError("Unexpected programme payload from API")
        try:
            return Programme.from_dict(data, self.tz)
        except ValueError as e:
            raise ServerError(f"Invalid programme from API: {e}") from e

    async def list(self) -> List[Programme]:
        """
        Fetch all programmes.

        Returns:
            List[Programme]: Programmes in the order the API returns them

        Raises:
            NetworkError: If the API cannot be reached
            ServerError: On 5xx or a malformed body
        """
        data = await self.client.get_json(PROGRAMMES_PATH)
        if not isinstance(data, list):
            raise ServerError("Expected a list of programmes")
        programmes = [self._parse(item) for item in data]
        logger.debug("Fetched %d programmes", len(programmes))
        return programmes

    async def get_by_id(self, programme_id: str) -> Programme:
        """
        Fetch one programme.

        Raises:
            NotFoundError: If the programme doesn't exist
        """
        data = await self.client.get_json(f"{PROGRAMMES_PATH}/{programme_id}")
        return self._parse(data)

    async def create(self, payload: Dict[str, Any]) -> Optional[Programme]:
        """
        Create a programme; the API assigns its ID.

        Args:
            payload: Programme fields without ID

        Returns:
            Programme: The persisted programme, or None when the API only
            acknowledged the write without echoing the record

        Raises:
            RemoteValidationError: If the API rejects the payload
            ServerError: On 5xx
        """
        data = await self.client.post_json(PROGRAMMES_PATH, payload)
        if not _is_record(data):
            logger.info("Programme created; API returned no record: %r", data)
            return None
        programme = self._parse(data)
        logger.info("Created programme %s", programme.id)
        return programme

    async def update(self, programme_id: str, payload: Dict[str, Any]) -> Programme:
        """
        Replace a programme's mutable fields.

        Raises:
            NotFoundError: If the programme doesn't exist
            RemoteValidationError: If the API rejects the payload
        """
        data = await self.client.put_json(f"{PROGRAMMES_PATH}/{programme_id}", payload)
        if not isinstance(data, dict) or not data.get("name"):
            data = {**payload, "_id": programme_id}
        programme = self._parse(data)
        logger.info("Updated programme %s", programme_id)
        return programme

    async def delete(self, programme_id: str) -> None:
        """
        Delete a programme.

        Raises:
            NotFoundError: If the programme is already gone
        """
        await self.client.delete(f"{PROGRAMMES_PATH}/{programme_id}")
        logger.info("Deleted programme %s", programme_id)
