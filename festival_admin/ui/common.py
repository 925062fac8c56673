"""Shared wiring and feedback helpers for the dashboard pages."""
import logging
import traceback

import streamlit as st

from festival_admin.services.api_client import ApiClient
from festival_admin.services.notifications import ERROR, NotificationCenter
from festival_admin.services.programme_service import ProgrammeService
from festival_admin.services.query_cache import QueryCache
from festival_admin.services.speaker_service import SpeakerService
from festival_admin.ui.list_view import ProgrammeListView, SpeakerListView
from festival_admin.utils.config import get_settings


logger = logging.getLogger(__name__)

NOTIFICATIONS_KEY = "notification_center"
PROGRAMME_VIEW_KEY = "programme_list_view"
SPEAKER_VIEW_KEY = "speaker_list_view"


@st.cache_resource
def get_query_cache() -> QueryCache:
    """Process-wide query cache shared by every browser session."""
    return QueryCache()


@st.cache_resource
def get_api_client() -> ApiClient:
    settings = get_settings()
    return ApiClient(settings.api_base_url, timeout=settings.request_timeout)


def get_notifications() -> NotificationCenter:
    if NOTIFICATIONS_KEY not in st.session_state:
        st.session_state[NOTIFICATIONS_KEY] = NotificationCenter()
    return st.session_state[NOTIFICATIONS_KEY]


def _programme_service() -> ProgrammeService:
    return ProgrammeService(get_api_client(), get_settings().timezone)


def get_programme_view() -> ProgrammeListView:
    """Programme page state for the current browser session."""
    if PROGRAMME_VIEW_KEY not in st.session_state:
        settings = get_settings()
        st.session_state[PROGRAMME_VIEW_KEY] = ProgrammeListView(
            _programme_service(),
            get_query_cache(),
            get_notifications(),
            tz=settings.timezone,
            policy=settings.end_before_start,
        )
    return st.session_state[PROGRAMME_VIEW_KEY]


def get_speaker_view() -> SpeakerListView:
    """Speaker page state for the current browser session."""
    if SPEAKER_VIEW_KEY not in st.session_state:
        st.session_state[SPEAKER_VIEW_KEY] = SpeakerListView(
            SpeakerService(get_api_client()),
            get_query_cache(),
            get_notifications(),
            programme_service=_programme_service(),
        )
    return st.session_state[SPEAKER_VIEW_KEY]


def render_notifications() -> None:
    """Show and clear queued notifications."""
    for notification in get_notifications().drain():
        text = f"**{notification.title}** {notification.message}"
        if notification.level == ERROR:
            st.error(f"❌ {text}")
        else:
            st.success(f"✅ {text}")


def render_field_error(field_errors: dict, field_name: str) -> None:
    message = field_errors.get(field_name)
    if message:
        st.caption(f":red[{message}]")


def show_page_exception(error: Exception, context: str) -> None:
    """Display error details in UI and log full traceback."""
    logger.exception("Dashboard error during %s", context)

    st.error(f"❌ {context} failed: {error}")
    with st.expander("🔍 Error details"):
        st.code("".join(traceback.format_exception(type(error), error, error.__traceback__)))
