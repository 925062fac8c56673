"""
Festival admin dashboard entry point.

Run with: streamlit run app.py
"""
import logging

import streamlit as st

from festival_admin.ui.programmes_page import render_programmes_page
from festival_admin.ui.sidebar import render_sidebar
from festival_admin.ui.speakers_page import render_speakers_page
from festival_admin.utils.config import get_settings

logger = logging.getLogger(__name__)


st.set_page_config(
    page_title="Festival Admin Dashboard",
    page_icon="🎫",
    layout="wide",
    initial_sidebar_state="expanded"
)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def initialize_session_state():
    """Initialize default session state values."""
    if "current_page" not in st.session_state:
        st.session_state.current_page = "programmes"

    # Direct links: ?page=speakers
    if "url_params_processed" not in st.session_state:
        page = st.query_params.get("page")
        if page in ("programmes", "speakers"):
            st.session_state.current_page = page
        st.session_state.url_params_processed = True


def apply_custom_css():
    """Apply custom CSS styles."""
    st.markdown("""
        <style>
        /* Sidebar */
        [data-testid="stSidebar"] {
            background-color: #1c1c1f;
        }

        /* Hide default Streamlit chrome */
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}

        /* Buttons */
        .stButton > button {
            border-radius: 8px;
            font-weight: 600;
        }

        .stButton > button[kind="primary"] {
            background: #2d2f38;
            color: white;
            border: none;
        }

        /* Feedback banners */
        .stSuccess {
            border-left: 4px solid #10b981;
            border-radius: 8px;
        }

        .stError {
            border-left: 4px solid #ef4444;
            border-radius: 8px;
        }
        </style>
    """, unsafe_allow_html=True)


def render_current_page():
    """Render the page selected in the sidebar."""
    try:
        if st.session_state.current_page == "programmes":
            render_programmes_page()

        elif st.session_state.current_page == "speakers":
            render_speakers_page()

        else:
            st.error(f"Unknown page: {st.session_state.current_page}")
            if st.button("Back to programmes"):
                st.session_state.current_page = "programmes"
                st.rerun()

    except Exception as e:
        # Error boundary
        logger.exception("Unhandled exception while rendering page")
        st.error("Something went wrong, please try again later")

        with st.expander("🔍 Error details"):
            st.code(str(e))

        if st.button("Back to programmes"):
            st.session_state.current_page = "programmes"
            st.rerun()


def main():
    """Application entry point."""
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        initialize_session_state()
        apply_custom_css()
        render_sidebar(settings.festival_title)
        render_current_page()
    except Exception as e:
        logger.exception("Unhandled exception during app execution")
        st.error("The application hit an error, please refresh the page")
        st.code(str(e))

        if st.button("🔄 Refresh"):
            st.session_state.clear()
            st.rerun()


if __name__ == "__main__":
    main()
