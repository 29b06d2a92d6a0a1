"""
PrepDrill - German Preposition & Case Trainer

Streamlit application drilling verb + preposition + case combinations.
Progress is kept per dataset in ~/.prepdrill/progress.db.

Usage:
    streamlit run app.py
"""

import logging

import streamlit as st

from prepdrill.classroom import (
    DatasetLoadError,
    DatasetLoader,
    PreferencesStore,
    ProgressStore,
    SessionController,
    SessionState,
    SQLiteKeyValueStore,
    load_catalog,
)
from prepdrill.schemas import Guess, Level, QuizMode
from prepdrill.utils import load_settings, setup_logging
from prepdrill.viewer import (
    get_drill_css,
    render_answer_reveal,
    render_item_card,
    render_progress_table,
    render_score,
)


logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

MODE_LABELS = {
    QuizMode.BOTH: "Preposition + Case",
    QuizMode.PREPOSITION_ONLY: "Preposition only",
    QuizMode.CASE_ONLY: "Case only",
}

LEVEL_LABELS = {
    Level.MULTIPLE_CHOICE: "Multiple Choice",
    Level.TEXT_INPUT: "Text Input",
}

LANGUAGES = {"en": "English", "fr": "Français", "es": "Español"}

st.set_page_config(
    page_title="PrepDrill",
    page_icon="🇩🇪",
    layout="centered",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "controller" in st.session_state:
        return

    settings = load_settings()
    setup_logging(settings.log_level)

    try:
        catalog = load_catalog(settings.catalog_path)
    except FileNotFoundError as e:
        logger.warning(str(e))
        catalog = []

    backend = SQLiteKeyValueStore(settings.progress_db)
    controller = SessionController(
        ProgressStore(backend),
        PreferencesStore(backend),
        loader=DatasetLoader(settings.data_dir),
        catalog=catalog,
    )
    st.session_state.catalog = catalog
    st.session_state.controller = controller
    st.session_state.requested_dataset = None

    if catalog:
        known_ids = [entry.id for entry in catalog]
        saved_id = controller.preferences.get_dataset_id()
        open_dataset(saved_id if saved_id in known_ids else known_ids[0])


def open_dataset(dataset_id: str) -> bool:
    """Load a dataset. A failure leaves the controller in LOAD_FAILED for the main view."""
    st.session_state.requested_dataset = dataset_id
    try:
        st.session_state.controller.select_dataset(dataset_id)
    except DatasetLoadError:
        return False
    return True


# -----------------------------------------------------------------------------
# Sidebar: Settings & Progress
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with dataset, mode, level and language settings."""
    controller = st.session_state.controller
    catalog = st.session_state.catalog

    st.sidebar.title("PrepDrill")

    if catalog:
        ids = [entry.id for entry in catalog]
        labels = {entry.id: entry.label for entry in catalog}
        current = st.session_state.requested_dataset
        chosen = st.sidebar.selectbox(
            "Dataset",
            ids,
            index=ids.index(current) if current in ids else 0,
            format_func=labels.get,
        )
        if chosen != st.session_state.requested_dataset:
            open_dataset(chosen)
            st.rerun()
        if controller.state == SessionState.LOAD_FAILED and st.sidebar.button("Retry"):
            open_dataset(chosen)
            st.rerun()

    st.sidebar.divider()
    st.sidebar.subheader("Settings")

    modes = list(MODE_LABELS)
    mode = st.sidebar.radio(
        "Mode",
        modes,
        index=modes.index(controller.config.mode),
        format_func=MODE_LABELS.get,
    )
    if mode != controller.config.mode:
        controller.change_mode(mode)
        st.rerun()

    levels = list(LEVEL_LABELS)
    level = st.sidebar.radio(
        "Level",
        levels,
        index=levels.index(controller.config.level),
        format_func=LEVEL_LABELS.get,
        horizontal=True,
    )
    if level != controller.config.level:
        controller.change_level(level)
        st.rerun()

    codes = list(LANGUAGES)
    language = st.sidebar.selectbox(
        "Translation language",
        codes,
        index=codes.index(controller.language) if controller.language in codes else 0,
        format_func=LANGUAGES.get,
    )
    if language != controller.language:
        controller.change_language(language)
        st.rerun()

    if controller.is_loaded:
        st.sidebar.divider()
        total = controller.total_count
        st.sidebar.markdown(f"**Learned:** {controller.learned_count}/{total}")
        st.sidebar.progress(controller.learned_count / total if total else 0.0)
        if controller.progress_store.degraded:
            st.sidebar.warning("Progress cannot be saved; it will be lost on reload.")


# -----------------------------------------------------------------------------
# Main Content: Drill
# -----------------------------------------------------------------------------

def render_drill_view():
    """Render the current round."""
    controller = st.session_state.controller
    st.markdown(get_drill_css(), unsafe_allow_html=True)

    if controller.state == SessionState.IDLE:
        st.info("No datasets configured. Add entries to data/datasets.yaml.")
        return

    if controller.state == SessionState.LOAD_FAILED:
        st.error(f"Error: {controller.error.message} ({controller.error.source})")
        return

    if controller.state == SessionState.SESSION_COMPLETE:
        render_completion()
        return

    item = controller.current_item
    st.markdown(render_item_card(item, controller.language), unsafe_allow_html=True)

    if controller.state == SessionState.PRESENTING:
        render_answer_inputs()
    else:
        st.markdown(
            render_answer_reveal(item, controller.guess, controller.last_check, controller.language),
            unsafe_allow_html=True,
        )
        if controller.last_transition and controller.last_transition.newly_learned:
            st.success("Learned!")
        if st.button("Next →", type="primary", use_container_width=True):
            controller.acknowledge_and_advance()
            st.rerun()

    st.markdown(
        render_score(controller.score, controller.learned_count, controller.total_count),
        unsafe_allow_html=True,
    )
    render_overview()


def render_answer_inputs():
    """Render choice buttons or text inputs for the active mode and level."""
    controller = st.session_state.controller
    mode = controller.config.mode
    round_key = f"{controller.dataset_id}_{controller.round_number}"

    if controller.config.level == Level.MULTIPLE_CHOICE:
        if mode != QuizMode.CASE_ONLY:
            st.markdown("**Preposition**")
            cols = st.columns(len(controller.preposition_choices) or 1)
            for col, prep in zip(cols, controller.preposition_choices):
                with col:
                    selected = controller.guess.preposition == prep
                    if st.button(prep, key=f"prep_{round_key}_{prep}",
                                 type="primary" if selected else "secondary",
                                 use_container_width=True):
                        controller.update_guess(preposition=prep)
                        st.rerun()
        if mode != QuizMode.PREPOSITION_ONLY:
            st.markdown("**Case**")
            cols = st.columns(len(controller.case_choices))
            for col, case in zip(cols, controller.case_choices):
                with col:
                    selected = controller.guess.case == case
                    if st.button(case, key=f"case_{round_key}_{case}",
                                 type="primary" if selected else "secondary",
                                 use_container_width=True):
                        controller.update_guess(case=case)
                        st.rerun()
    else:
        with st.form(key=f"answer_{round_key}"):
            prep = ""
            case = ""
            if mode != QuizMode.CASE_ONLY:
                prep = st.text_input("Preposition", key=f"prep_text_{round_key}")
            if mode != QuizMode.PREPOSITION_ONLY:
                case = st.radio("Case", controller.case_choices, horizontal=True, index=None,
                                key=f"case_radio_{round_key}")
            if st.form_submit_button("Guess", type="primary"):
                controller.submit_answer(Guess(preposition=prep, case=case))
                st.rerun()

    if st.button("Give up"):
        controller.give_up()
        st.rerun()


def render_completion():
    """Render the all-learned screen."""
    controller = st.session_state.controller
    st.balloons()
    st.success("All items learned!")
    st.markdown(f"**Score:** {controller.score} / {controller.total_count}")
    if st.button("Restart", type="primary"):
        controller.reset_progress()
        st.rerun()


def render_overview():
    """Render the per-item progress table with the reset action."""
    controller = st.session_state.controller
    with st.expander(f"Learned items ({controller.learned_count}/{controller.total_count})"):
        st.markdown(render_progress_table(controller.progress_overview()), unsafe_allow_html=True)
        confirm = st.checkbox("Yes, reset all progress for this dataset")
        if st.button("Reset all", disabled=not confirm):
            controller.reset_progress()
            st.rerun()


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    render_sidebar()
    render_drill_view()


if __name__ == "__main__":
    main()
