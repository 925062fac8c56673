"""Speakers page: cards, search, create/edit forms with image upload, delete confirmation."""
import streamlit as st

from festival_admin.models.speaker import Speaker
from festival_admin.ui.common import (
    get_speaker_view,
    render_field_error,
    render_notifications,
    show_page_exception,
)
from festival_admin.ui.html_utils import render_speaker_avatar
from festival_admin.ui.list_view import SpeakerListView, Surface
from festival_admin.utils.async_utils import run_async


ALLOWED_IMAGE_TYPES = ["png", "jpg", "jpeg", "gif", "webp"]


def speaker_caption(speaker: Speaker, programme_labels: dict) -> str:
    """Secondary line under a speaker's name: priority and programme labels."""
    labels = [programme_labels.get(pid, pid) for pid in speaker.programmes]
    caption = f"Priority {speaker.priority}"
    if labels:
        caption += " · " + ", ".join(labels)
    return caption


def render_speakers_page() -> None:
    """Render the speakers page."""
    view = get_speaker_view()
    render_notifications()

    st.markdown("## Speakers")

    term = st.text_input(
        "Search",
        value=view.state.search_term,
        placeholder="Search by speaker name or id",
        key="speaker_search",
        label_visibility="collapsed",
    )
    view.set_search(term)

    if st.button("➕ Add New Speaker", type="primary", disabled=view.is_busy):
        view.open_create()

    run_async(view.refresh)
    programme_labels = run_async(view.programme_choices)

    if view.state.load_error and not view.state.loaded:
        st.error(view.state.load_error)
    elif not view.state.loaded:
        st.info("Loading speakers...")
    else:
        _render_cards(view, programme_labels)

    if view.state.surface in (Surface.CREATE, Surface.EDIT):
        title = "Create New Speaker" if view.state.surface is Surface.CREATE else "Edit Speaker"
        _render_speaker_form(view, title, programme_labels)
    elif view.state.surface is Surface.DELETE:
        _render_delete_confirmation(view)


def _render_cards(view: SpeakerListView, programme_labels: dict) -> None:
    speakers = view.visible_items()
    if not speakers:
        st.caption("No speakers match your search.")
        return

    for speaker in speakers:
        with st.container(border=True):
            photo_col, text_col, action_col = st.columns([1, 4, 1.4])
            with photo_col:
                st.markdown(render_speaker_avatar(speaker.image_url or "", speaker.name, size=80),
                            unsafe_allow_html=True)
            with text_col:
                st.markdown(f"**{speaker.name}**")
                st.caption(speaker_caption(speaker, programme_labels))
            with action_col:
                if st.button("Edit", key=f"speaker_edit_{speaker.id}", width="stretch", disabled=view.is_busy):
                    view.open_edit(speaker)
                if st.button("Delete", key=f"speaker_delete_{speaker.id}", width="stretch", disabled=view.is_busy):
                    view.open_delete(speaker)


def _render_image_upload(view: SpeakerListView, prefix: str) -> None:
    draft = view.state.draft

    uploaded = st.file_uploader(
        "Speaker Image",
        type=ALLOWED_IMAGE_TYPES,
        key=f"{prefix}_image",
        disabled=view.is_busy,
    )
    if uploaded is not None and st.button("⬆️ Upload Image", key=f"{prefix}_upload", disabled=view.uploading):
        run_async(lambda: view.upload_image(
            uploaded.name, uploaded.getvalue(), uploaded.type or "application/octet-stream"
        ))
        st.rerun()

    if draft.image_url:
        st.image(draft.image_url, caption="Image preview", width=100)


def _render_speaker_form(view: SpeakerListView, title: str, programme_labels: dict) -> None:
    state = view.state
    draft = state.draft
    errors = state.field_errors
    busy = view.is_busy
    prefix = f"speaker_form_{state.generation}"

    st.markdown(f"### {title}")
    _render_image_upload(view, prefix)

    options = list(programme_labels.keys())
    # Keep references to programmes the cache doesn't know yet
    options += [pid for pid in draft.programmes if pid not in programme_labels]

    with st.form(prefix, clear_on_submit=False):
        name = st.text_input("Name", value=draft.name, key=f"{prefix}_name", disabled=busy)
        render_field_error(errors, "name")

        bio = st.text_area("Bio", value=draft.bio, key=f"{prefix}_bio", disabled=busy)
        render_field_error(errors, "bio")

        programmes = st.multiselect(
            "Programmes",
            options=options,
            default=draft.programmes,
            format_func=lambda pid: programme_labels.get(pid, pid),
            key=f"{prefix}_programmes",
            disabled=busy,
        )
        render_field_error(errors, "programmes")

        priority = st.number_input("Priority", value=int(draft.priority), step=1, key=f"{prefix}_priority",
                                   disabled=busy, help="Lower numbers are listed first")
        render_field_error(errors, "priority")
        render_field_error(errors, "imageUrl")

        submit_label = "Create Speaker" if state.surface is Surface.CREATE else "Update Speaker"
        submit_col, cancel_col = st.columns(2)
        with submit_col:
            submit = st.form_submit_button(submit_label, type="primary", width="stretch", disabled=busy)
        with cancel_col:
            cancel = st.form_submit_button("Cancel", width="stretch", disabled=busy)

    if cancel:
        view.close()
        st.rerun()

    if submit:
        draft.name = name
        draft.bio = bio
        draft.programmes = list(programmes)
        draft.priority = int(priority)
        try:
            run_async(view.submit)
        except Exception as error:
            show_page_exception(error, "Saving speaker")
            return
        st.rerun()


def _render_delete_confirmation(view: SpeakerListView) -> None:
    speaker = view.state.selected
    st.markdown("### Delete Speaker")
    st.warning(f"⚠️ Are you sure you want to delete this speaker? ({speaker.name})")

    cancel_col, delete_col = st.columns(2)
    with cancel_col:
        if st.button("Cancel", key="speaker_delete_cancel", width="stretch", disabled=view.is_busy):
            view.close()
            st.rerun()
    with delete_col:
        if st.button("Delete", key="speaker_delete_confirm", type="primary", width="stretch",
                     disabled=view.is_busy):
            try:
                run_async(view.confirm_delete)
            except Exception as error:
                show_page_exception(error, "Deleting speaker")
                return
            st.rerun()
