"""Programmes page: table, search, create/edit forms and delete confirmation."""
from typing import Dict

import streamlit as st

from festival_admin.models.programme import Programme
from festival_admin.ui.common import (
    get_programme_view,
    render_field_error,
    render_notifications,
    show_page_exception,
)
from festival_admin.ui.list_view import ProgrammeListView, Surface
from festival_admin.utils.async_utils import run_async
from festival_admin.utils.date_utils import format_display_date, to_local_time_string


TABLE_COLUMNS = [1.4, 2.2, 1.2, 1, 1, 1.2]


def format_programme_row(programme: Programme, view: ProgrammeListView) -> Dict[str, str]:
    """Cell texts for one table row."""
    return {
        "id": programme.id,
        "name": programme.name,
        "date": format_display_date(programme.date),
        "start": to_local_time_string(programme.start_datetime, view.tz),
        "end": to_local_time_string(programme.end_datetime, view.tz),
    }


def render_programmes_page() -> None:
    """Render the programmes page."""
    view = get_programme_view()
    render_notifications()

    st.markdown("## Programmes")

    search_col, action_col = st.columns([3, 1])
    with search_col:
        term = st.text_input(
            "Search",
            value=view.state.search_term,
            placeholder="Search by programme name or ID",
            key="programme_search",
            label_visibility="collapsed",
        )
        view.set_search(term)
    with action_col:
        if st.button("➕ Create New Programme", type="primary", width="stretch", disabled=view.is_busy):
            view.open_create()

    run_async(view.refresh)

    if view.state.load_error and not view.state.loaded:
        st.error(view.state.load_error)
    elif not view.state.loaded:
        st.info("Loading programmes...")
    else:
        if view.state.load_error:
            st.warning(f"⚠️ {view.state.load_error}; showing the last loaded list")
        _render_table(view)

    if view.state.surface is Surface.CREATE:
        _render_programme_form(view, "Create Programme")
    elif view.state.surface is Surface.EDIT:
        _render_programme_form(view, "Edit Programme")
    elif view.state.surface is Surface.DELETE:
        _render_delete_confirmation(view)


def _render_table(view: ProgrammeListView) -> None:
    header = st.columns(TABLE_COLUMNS)
    for col, title in zip(header, ["ID", "Name", "Date", "Start Time", "End Time", "Actions"]):
        col.markdown(f"**{title}**")

    programmes = view.visible_items()
    if not programmes:
        st.caption("No programmes match your search.")
        return

    for programme in programmes:
        row = format_programme_row(programme, view)
        cols = st.columns(TABLE_COLUMNS)
        cols[0].caption(row["id"])
        cols[1].write(row["name"])
        cols[2].write(row["date"])
        cols[3].write(row["start"])
        cols[4].write(row["end"])
        with cols[5]:
            edit_col, delete_col = st.columns(2)
            if edit_col.button("✏️", key=f"programme_edit_{programme.id}", disabled=view.is_busy):
                view.open_edit(programme)
            if delete_col.button("🗑️", key=f"programme_delete_{programme.id}", disabled=view.is_busy):
                view.open_delete(programme)


def _render_programme_form(view: ProgrammeListView, title: str) -> None:
    state = view.state
    draft = state.draft
    errors = state.field_errors
    busy = view.is_busy
    prefix = f"programme_form_{state.generation}"

    st.markdown(f"### {title}")
    with st.form(prefix, clear_on_submit=False):
        name = st.text_input("Programme Name", value=draft.name, key=f"{prefix}_name", disabled=busy)
        render_field_error(errors, "name")

        day_number = st.number_input(
            "Day Number", value=int(draft.day_number), step=1, key=f"{prefix}_day", disabled=busy
        )
        render_field_error(errors, "day_number")

        picked_date = st.date_input("Date", value=draft.date, key=f"{prefix}_date", disabled=busy)
        render_field_error(errors, "date")

        time_cols = st.columns(2)
        with time_cols[0]:
            start_time = st.text_input(
                "Start Time", value=draft.start_time, placeholder="HH:MM", key=f"{prefix}_start", disabled=busy
            )
            render_field_error(errors, "start_datetime")
        with time_cols[1]:
            end_time = st.text_input(
                "End Time", value=draft.end_time, placeholder="HH:MM", key=f"{prefix}_end", disabled=busy
            )
            render_field_error(errors, "end_datetime")

        venue = st.text_input("Venue", value=draft.venue, key=f"{prefix}_venue", disabled=busy)
        render_field_error(errors, "venue")

        submit_col, cancel_col = st.columns(2)
        with submit_col:
            submit = st.form_submit_button("💾 Save", type="primary", width="stretch", disabled=busy)
        with cancel_col:
            cancel = st.form_submit_button("Cancel", width="stretch", disabled=busy)

    if cancel:
        view.close()
        st.rerun()

    if submit:
        draft.name = name
        draft.day_number = int(day_number)
        draft.date = picked_date
        draft.start_time = start_time.strip()
        draft.end_time = end_time.strip()
        draft.venue = venue
        try:
            run_async(view.submit)
        except Exception as error:
            show_page_exception(error, "Saving programme")
            return
        st.rerun()


def _render_delete_confirmation(view: ProgrammeListView) -> None:
    programme = view.state.selected
    st.markdown("### Confirm Deletion")
    st.warning(f"⚠️ Are you sure you want to delete this programme? ({programme.name})")

    cancel_col, delete_col = st.columns(2)
    with cancel_col:
        if st.button("Cancel", key="programme_delete_cancel", width="stretch", disabled=view.is_busy):
            view.close()
            st.rerun()
    with delete_col:
        if st.button("🗑️ Delete", key="programme_delete_confirm", type="primary", width="stretch",
                     disabled=view.is_busy):
            try:
                run_async(view.confirm_delete)
            except Exception as error:
                show_page_exception(error, "Deleting programme")
                return
            st.rerun()
