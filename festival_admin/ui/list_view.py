"""
Rendering-independent state and flows behind the Programmes and Speakers pages.

``ListViewState`` is the per-page state: the cached collection, search term,
selected entity, open surface and draft. ``ResourceListView`` wires that state
to the shared query cache and to one mutation coordinator per write verb.
"""
import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from enum import Enum
from typing import Any, Dict, List, Optional

from festival_admin.models.programme import Programme, ProgrammeDraft
from festival_admin.models.speaker import Speaker, SpeakerDraft
from festival_admin.services.mutation import Failure, MutationCoordinator, MutationResult, Success
from festival_admin.services.notifications import NotificationCenter
from festival_admin.services.programme_service import PROGRAMMES_QUERY_KEY, ProgrammeService
from festival_admin.services.query_cache import QueryCache
from festival_admin.services.speaker_service import SPEAKERS_QUERY_KEY, SpeakerService
from festival_admin.utils.config import EndBeforeStartPolicy
from festival_admin.utils.exceptions import ApiError, ScheduleError, ValidationError
from festival_admin.utils.validation import (
    normalize_search_term,
    validate_programme_draft,
    validate_speaker_draft,
)


logger = logging.getLogger(__name__)


class Surface(Enum):
    """Which modal or drawer is open."""

    NONE = "none"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


@dataclass
class ListViewState:
    """
    Per-page view state.

    Every open/close bumps ``generation`` so that a write settling after its
    surface went away can tell it is stale.
    """

    items: List[Any] = field(default_factory=list)
    loaded: bool = False
    load_error: Optional[str] = None
    search_term: str = ""
    selected: Optional[Any] = None
    surface: Surface = Surface.NONE
    draft: Optional[Any] = None
    field_errors: Dict[str, str] = field(default_factory=dict)
    generation: int = 0

    def set_search(self, term: str) -> None:
        self.search_term = term or ""

    def open_create(self, draft: Any) -> None:
        self.generation += 1
        self.surface = Surface.CREATE
        self.selected = None
        self.draft = draft
        self.field_errors = {}

    def open_edit(self, entity: Any, draft: Any) -> None:
        self.generation += 1
        self.surface = Surface.EDIT
        self.selected = entity
        self.draft = draft
        self.field_errors = {}

    def open_delete(self, entity: Any) -> None:
        self.generation += 1
        self.surface = Surface.DELETE
        self.selected = entity
        self.draft = None
        self.field_errors = {}

    def close(self) -> None:
        self.generation += 1
        self.surface = Surface.NONE
        self.selected = None
        self.draft = None
        self.field_errors = {}


def matches_search(entity: Any, term: str) -> bool:
    """Case-insensitive substring match against ID and display name."""
    needle = normalize_search_term(term)
    if not needle:
        return True
    name = (getattr(entity, "display_name", "") or "").lower()
    entity_id = str(getattr(entity, "id", "")).lower()
    return needle in name or needle in entity_id


class ResourceListView:
    """Flows shared by the programme and speaker pages."""

    query_key = ""
    label = ""

    def __init__(self, service: Any, cache: QueryCache, notifications: NotificationCenter):
        self.service = service
        self.cache = cache
        self.notifications = notifications
        self.state = ListViewState()
        title = self.label.capitalize()

        self.create_mutation = MutationCoordinator(
            f"create-{self.label}",
            service.create,
            cache,
            notifications,
            invalidate_keys=[self.query_key],
            success_message=f"New {title} Created!",
        )
        self.update_mutation = MutationCoordinator(
            f"update-{self.label}",
            service.update,
            cache,
            notifications,
            invalidate_keys=[self.query_key],
            success_message=f"{title} Updated Successfully!",
        )
        self.delete_mutation = MutationCoordinator(
            f"delete-{self.label}",
            service.delete,
            cache,
            notifications,
            invalidate_keys=[self.query_key],
            success_message=f"{title} Deleted Successfully!",
        )

    # Hooks for subclasses

    def empty_draft(self) -> Any:
        raise NotImplementedError

    def draft_from(self, entity: Any) -> Any:
        raise NotImplementedError

    def validate(self, draft: Any) -> Dict[str, str]:
        raise NotImplementedError

    def build_payload(self, draft: Any) -> Dict[str, Any]:
        raise NotImplementedError

    def order(self, items: List[Any]) -> List[Any]:
        return list(items)

    # Reads

    async def refresh(self) -> List[Any]:
        """
        Read the collection through the cache into the view state.

        Fetch failures are kept on the state instead of propagating.
        """
        try:
            items = await self.cache.read(self.query_key, self.service.list)
        except ApiError as error:
            logger.warning("Could not load %s: %s", self.query_key, error)
            self.state.load_error = f"Error fetching {self.query_key}"
            return self.state.items

        self.state.items = list(items)
        self.state.loaded = True
        self.state.load_error = None
        return self.state.items

    def visible_items(self) -> List[Any]:
        """Items matching the search term, in display order."""
        term = self.state.search_term
        return self.order([item for item in self.state.items if matches_search(item, term)])

    @property
    def is_busy(self) -> bool:
        return any(
            m.is_in_flight
            for m in (self.create_mutation, self.update_mutation, self.delete_mutation)
        )

    # Surface transitions

    def set_search(self, term: str) -> None:
        self.state.set_search(term)

    def open_create(self) -> None:
        self.state.open_create(self.empty_draft())

    def open_edit(self, entity: Any) -> None:
        self.state.open_edit(entity, self.draft_from(entity))

    def open_delete(self, entity: Any) -> None:
        self.state.open_delete(entity)

    def close(self) -> None:
        self.state.close()

    # Writes

    async def submit(self) -> Optional[MutationResult]:
        """
        Validate the open draft and send it as a create or update.

        Returns:
            The mutation result, or None when validation blocked the submit

        Raises:
            ValueError: If no create/edit surface is open
        """
        state = self.state
        if state.surface not in (Surface.CREATE, Surface.EDIT) or state.draft is None:
            raise ValueError("No create or edit form is open")

        errors = self.validate(state.draft)
        payload = None
        if not errors:
            try:
                payload = self.build_payload(state.draft)
            except ValidationError as error:
                errors = error.field_errors
        if errors:
            state.field_errors = errors
            return None

        state.field_errors = {}
        generation = state.generation
        if state.surface is Surface.CREATE:
            result = await self.create_mutation.run(payload)
        else:
            result = await self.update_mutation.run(state.selected.id, payload)

        self._settle_surface(generation, result)
        return result

    async def confirm_delete(self) -> MutationResult:
        """
        Delete the selected entity after the user confirmed.

        Raises:
            ValueError: If the delete confirmation is not open
        """
        state = self.state
        if state.surface is not Surface.DELETE or state.selected is None:
            raise ValueError("Delete must be confirmed first")

        generation = state.generation
        result = await self.delete_mutation.run(state.selected.id)
        self._settle_surface(generation, result)
        return result

    def _settle_surface(self, generation: int, result: MutationResult) -> None:
        if generation != self.state.generation:
            logger.info("Ignoring %s result for a closed %s form", type(result).__name__, self.label)
            return
        if isinstance(result, Success):
            self.state.close()
        elif isinstance(result, Failure):
            logger.debug("Keeping %s form open after %s", self.label, result.kind.value)


class ProgrammeListView(ResourceListView):
    """Programme page flows; drafts go through the scheduling normalizer."""

    query_key = PROGRAMMES_QUERY_KEY
    label = "programme"

    def __init__(
        self,
        service: ProgrammeService,
        cache: QueryCache,
        notifications: NotificationCenter,
        tz: tzinfo,
        policy: EndBeforeStartPolicy = EndBeforeStartPolicy.REJECT,
    ):
        super().__init__(service, cache, notifications)
        self.tz = tz
        self.policy = policy

    def empty_draft(self) -> ProgrammeDraft:
        return ProgrammeDraft()

    def draft_from(self, entity: Programme) -> ProgrammeDraft:
        return ProgrammeDraft.from_programme(entity, self.tz)

    def validate(self, draft: ProgrammeDraft) -> Dict[str, str]:
        return validate_programme_draft(draft.as_form_values())

    def build_payload(self, draft: ProgrammeDraft) -> Dict[str, Any]:
        try:
            return draft.to_payload(self.tz, self.policy)
        except ScheduleError as error:
            raise ValidationError({"end_datetime": "End time must be after start time"}) from error


class SpeakerListView(ResourceListView):
    """Speaker page flows, including programme choices and image upload."""

    query_key = SPEAKERS_QUERY_KEY
    label = "speaker"

    def __init__(
        self,
        service: SpeakerService,
        cache: QueryCache,
        notifications: NotificationCenter,
        programme_service: ProgrammeService,
    ):
        super().__init__(service, cache, notifications)
        self.programme_service = programme_service
        self.uploading = False

    def empty_draft(self) -> SpeakerDraft:
        return SpeakerDraft()

    def draft_from(self, entity: Speaker) -> SpeakerDraft:
        return SpeakerDraft.from_speaker(entity)

    def validate(self, draft: SpeakerDraft) -> Dict[str, str]:
        return validate_speaker_draft(draft.as_form_values())

    def build_payload(self, draft: SpeakerDraft) -> Dict[str, Any]:
        return draft.to_payload()

    def order(self, items: List[Speaker]) -> List[Speaker]:
        return sorted(items, key=lambda s: s.priority)

    async def programme_choices(self) -> Dict[str, str]:
        """
        Programme IDs mapped to "Day N - Name" labels for the multiselect.

        Returns an empty mapping if programmes cannot be loaded.
        """
        try:
            programmes = await self.cache.read(PROGRAMMES_QUERY_KEY, self.programme_service.list)
        except ApiError as error:
            logger.warning("Could not load programme choices: %s", error)
            return {}
        return {p.id: p.choice_label for p in programmes}

    async def upload_image(self, filename: str, content: bytes, content_type: str = "application/octet-stream") -> Optional[str]:
        """
        Upload a photo and store its URL on the open draft.

        Returns:
            The image URL, or None if the upload failed (draft left unchanged)
        """
        draft = self.state.draft
        generation = self.state.generation
        self.uploading = True
        try:
            url = await self.service.upload_image(filename, content, content_type)
        except ApiError as error:
            logger.warning("Speaker image upload failed: %s", error)
            self.notifications.error("Image upload failed")
            return None
        finally:
            self.uploading = False

        if draft is not None and generation == self.state.generation:
            draft.image_url = url
        return url
