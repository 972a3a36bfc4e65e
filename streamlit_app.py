import streamlit as st
import requests

from csvcompare import app_state
from csvcompare.app_state import AppState, FIRST, SECOND
from csvcompare.config import settings
from csvcompare.errors import CompareError, SchemaMismatchError
from csvcompare.table_loader import load_table
from utils import (differences_frame, differing_mask, row_diff_from_dict,
                   summary_header, summary_lines)

st.set_page_config(layout="wide", page_title="CSV Comparison Tool")

st.title("CSV Comparison Tool")

if "state" not in st.session_state:
    st.session_state.state = AppState()
    st.session_state.uploads = {FIRST: None, SECOND: None}
    st.session_state.content = {FIRST: None, SECOND: None}

# Sidebar: choose mode
st.sidebar.header("Mode & Backend")
use_backend = st.sidebar.checkbox("Compare with backend service", value=False)
backend_url = st.sidebar.text_input("Backend base URL", value=settings.backend_url)


def handle_upload(slot, uploaded):
    """Load a newly selected file into its slot."""
    key = (uploaded.name, uploaded.size) if uploaded is not None else None
    if key == st.session_state.uploads[slot]:
        return
    st.session_state.uploads[slot] = key

    state = st.session_state.state
    if uploaded is None:
        st.session_state.content[slot] = None
        st.session_state.state = app_state.on_slot_cleared(state, slot)
        return

    content = uploaded.getvalue()
    state, token = app_state.begin_load(state, slot)
    try:
        result = load_table(content, uploaded.name)
    except CompareError as e:
        result = e
    st.session_state.content[slot] = content if not isinstance(result, CompareError) else None
    st.session_state.state = app_state.on_file_loaded(state, slot, token, result)


def compare_via_backend(state):
    state, token = app_state.begin_compare(state)
    files = {
        "file1": (state.first.source_name, st.session_state.content[FIRST], "text/csv"),
        "file2": (state.second.source_name, st.session_state.content[SECOND], "text/csv"),
    }
    try:
        response = requests.post(f"{backend_url}/compare", files=files, timeout=60)
    except requests.RequestException as e:
        return app_state.on_compare_finished(state, token, CompareError(f"Backend unavailable: {e}"))

    if response.status_code == 409:
        detail = response.json().get("detail", {})
        error = SchemaMismatchError(detail.get("only_in_first"), detail.get("only_in_second"))
        return app_state.on_compare_finished(state, token, error)
    if response.status_code != 200:
        detail = response.json().get("detail", response.text)
        return app_state.on_compare_finished(state, token, CompareError(str(detail)))

    rows = [row_diff_from_dict(row) for row in response.json()["differences"]]
    return app_state.on_compare_finished(state, token, rows)


upload_cols = st.columns(2)
for slot, label, column in [(FIRST, "Original CSV", upload_cols[0]), (SECOND, "Comparison CSV", upload_cols[1])]:
    with column:
        uploaded = st.file_uploader(label, type=["csv"], key=f"upload_{slot}")
        handle_upload(slot, uploaded)
        table = st.session_state.state.table(slot)
        if table is not None:
            st.caption(f"**{table.source_name}** • {table.row_count} rows • {table.column_count} columns")

state = st.session_state.state
if st.button("Compare Files", disabled=not app_state.can_compare(state), use_container_width=True):
    if use_backend:
        state = compare_via_backend(state)
    else:
        state = app_state.on_compare_requested(state)
    st.session_state.state = state

if state.error:
    st.error(state.error)
if state.info:
    st.info(state.info)

if app_state.has_current_results(state):
    title_col, toggle_col = st.columns([4, 1])
    title_col.subheader("Quick Difference Summary" if state.show_summary else "Detailed Comparison")
    if toggle_col.button(f"Show {'Full Comparison' if state.show_summary else 'Summary'}"):
        state = app_state.on_view_toggled(state)
        st.session_state.state = state
        st.rerun()

    differences = list(state.differences)
    if state.show_summary:
        st.text(summary_header(differences, state.first.source_name, state.second.source_name))
        st.code("\n".join(summary_lines(differences)), language=None)
    else:
        headers = list(state.first.headers)
        frame = differences_frame(differences, headers)
        mask = differing_mask(differences, headers)
        styles = mask.replace({True: "background-color: #fef2f2", False: ""})
        st.dataframe(frame.style.apply(lambda _: styles, axis=None), hide_index=True)
else:
    if state.first is None or state.second is None:
        st.info("Please upload both CSV files to compare.")
