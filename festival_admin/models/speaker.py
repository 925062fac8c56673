"""Speaker data model."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Speaker:
    """Speaker associated with one or more programmes."""

    id: str
    name: str
    bio: str
    programmes: List[str] = field(default_factory=list)
    image_url: Optional[str] = None
    priority: int = 0

    def __post_init__(self):
        """Validate speaker data after initialization."""
        if not self.id or not str(self.id).strip():
            raise ValueError("Speaker ID cannot be empty")

    @property
    def display_name(self) -> str:
        return self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Speaker":
        """Build a Speaker from an API record (``id`` or ``_id``)."""
        try:
            speaker_id = data.get("id") or data["_id"]
            return cls(
                id=str(speaker_id),
                name=data["name"],
                bio=data.get("bio", ""),
                programmes=[str(p) for p in data.get("programmes", [])],
                image_url=data.get("imageUrl") or None,
                priority=int(data.get("priority") or 0),
            )
        except KeyError as e:
            raise ValueError(f"Missing required speaker field: {e.args[0]}") from e
        except TypeError as e:
            raise ValueError(f"Malformed speaker record: {e}") from e


@dataclass
class SpeakerDraft:
    """Unsaved speaker form values."""

    name: str = ""
    bio: str = ""
    programmes: List[str] = field(default_factory=list)
    image_url: str = ""
    priority: int = 0

    @classmethod
    def from_speaker(cls, speaker: Speaker) -> "SpeakerDraft":
        return cls(
            name=speaker.name,
            bio=speaker.bio,
            programmes=list(speaker.programmes),
            image_url=speaker.image_url or "",
            priority=speaker.priority,
        )

    def as_form_values(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "bio": self.bio,
            "programmes": list(self.programmes),
            "imageUrl": self.image_url,
            "priority": self.priority,
        }

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for POST/PUT /speakers."""
        payload = self.as_form_values()
        if not self.image_url:
            payload.pop("imageUrl")
        return payload
