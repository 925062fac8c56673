"""Sidebar navigation between dashboard pages."""
import streamlit as st

from festival_admin.ui.html_utils import html_block


PAGES = [
    ("programmes", "🎫 Programmes"),
    ("speakers", "👤 Speakers"),
]


def render_sidebar(festival_title: str) -> None:
    """Render festival title and page links; updates ``current_page``."""
    with st.sidebar:
        st.markdown(
            html_block(
                f"""
                <div style="margin-bottom: 16px;">
                <div style="color: #ffffff; font-size: 24px; font-weight: 700;">{festival_title}</div>
                <div style="color: rgba(255, 255, 255, 0.85);">Admin Dashboard</div>
                </div>
                """
            ),
            unsafe_allow_html=True,
        )

        for page, label in PAGES:
            is_active = st.session_state.get("current_page") == page
            if st.button(label, key=f"nav_{page}", width="stretch", type="primary" if is_active else "secondary"):
                st.session_state.current_page = page
                st.rerun()
