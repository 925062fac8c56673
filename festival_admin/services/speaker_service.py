"""Remote CRUD operations for speakers."""
import logging
from typing import Any, Dict, List, Optional

from festival_admin.models.speaker import Speaker
from festival_admin.services.api_client import ApiClient
from festival_admin.utils.exceptions import ServerError


logger = logging.getLogger(__name__)

SPEAKERS_PATH = "/speakers"
SPEAKERS_QUERY_KEY = "speakers"


def _is_record(data: Any) -> bool:
    return isinstance(data, dict) and bool(data.get("id") or data.get("_id"))


class SpeakerService:
    """One call per CRUD verb against /speakers, plus the image upload."""

    def __init__(self, client: ApiClient):
        self.client = client

    @staticmethod
    def _parse(data: Any) -> Speaker:
        if not isinstance(data, dict):
            raise ServerError("Unexpected speaker payload from API")
        try:
            return Speaker.from_dict(data)
        except ValueError as e:
            raise ServerError(f"Invalid speaker from API: {e}") from e

    async def list(self) -> List[Speaker]:
        """
        Fetch all speakers.

        Returns:
            List[Speaker]: Speakers in the order the API returns them
        """
        data = await self.client.get_json(SPEAKERS_PATH)
        if not isinstance(data, list):
            raise ServerError("Expected a list of speakers")
        return [self._parse(item) for item in data]

    async def get_by_id(self, speaker_id: str) -> Speaker:
        data = await self.client.get_json(f"{SPEAKERS_PATH}/{speaker_id}")
        return self._parse(data)

    async def create(self, payload: Dict[str, Any]) -> Optional[Speaker]:
        """Create a speaker; None when the API acknowledges without a record."""
        data = await self.client.post_json(SPEAKERS_PATH, payload)
        if not _is_record(data):
            logger.info("Speaker created; API returned no record: %r", data)
            return None
        speaker = self._parse(data)
        logger.info("Created speaker %s", speaker.id)
        return speaker

    async def update(self, speaker_id: str, payload: Dict[str, Any]) -> Speaker:
        data = await self.client.put_json(f"{SPEAKERS_PATH}/{speaker_id}", payload)
        if not isinstance(data, dict) or not data.get("name"):
            data = {**payload, "id": speaker_id}
        speaker = self._parse(data)
        logger.info("Updated speaker %s", speaker_id)
        return speaker

    async def delete(self, speaker_id: str) -> None:
        await self.client.delete(f"{SPEAKERS_PATH}/{speaker_id}")
        logger.info("Deleted speaker %s", speaker_id)

    async def upload_image(self, filename: str, content: bytes, content_type: str = "application/octet-stream") -> str:
        """
        Upload a speaker photo.

        Returns:
            str: Public URL of the stored image

        Raises:
            ImageUploadError: If the upload endpoint does not answer with 200
        """
        url = await self.client.upload_image(filename, content, content_type)
        logger.info("Uploaded speaker image %s", filename)
        return url
