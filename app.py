"""
app.py
======================

EthioLearn AI (Streamlit) entry point.

Features:
- dashboard / study hub / quiz arena / AI tutor / question analyzer
- English and Amharic UI and prompts
- all AI work goes through AIGateway (Google Gemini)

Session flow:
- AppState lives in st.session_state["app_state"]
- the sidebar and the current view return intents
- intents go through ethiolearn.controller handlers
- a new AI request is stored as pending and the script reruns, so the
  triggering control is drawn disabled while the call runs

Prerequisite:
- GEMINI_API_KEY (or API_KEY) in the environment or .env; without it
  every AI feature returns its empty result
"""

from __future__ import annotations

from typing import Any, Callable, Dict

import streamlit as st

from ethiolearn import controller as ctl
from ethiolearn.config import AppConfig
from ethiolearn.controller import AppState
from ethiolearn.gateway import AIGateway, list_models
from ethiolearn.i18n import t
from ethiolearn.logger import configure as configure_logging
from ethiolearn.models import Language, ViewState
from ethiolearn.ui import (
    inject_styles,
    render_analyzer,
    render_dashboard,
    render_quiz_arena,
    render_sidebar,
    render_study_hub,
    render_tutor,
)


# ----------------------------------------------------------------------
#  Session helpers
# ----------------------------------------------------------------------
def get_config() -> AppConfig:
    if "app_config" not in st.session_state:
        cfg = AppConfig.load()
        configure_logging(cfg.log_level)
        st.session_state["app_config"] = cfg
    return st.session_state["app_config"]  # type: ignore[return-value]


def get_gateway(cfg: AppConfig) -> AIGateway:
    if "gateway" not in st.session_state:
        st.session_state["gateway"] = AIGateway.from_config(cfg)
    return st.session_state["gateway"]  # type: ignore[return-value]


def get_available_models(cfg: AppConfig) -> list:
    """Listed once per session; only shown in the settings panel."""
    if "available_models" not in st.session_state:
        st.session_state["available_models"] = list_models() if cfg.is_online else []
    return st.session_state["available_models"]


def get_state(cfg: AppConfig) -> AppState:
    if "app_state" not in st.session_state:
        st.session_state["app_state"] = ctl.initial_state(Language(cfg.default_language))
    return st.session_state["app_state"]  # type: ignore[return-value]


def commit(state: AppState) -> None:
    st.session_state["app_state"] = state
    st.rerun()


# ----------------------------------------------------------------------
#  Per-view dispatch: render, then apply the returned intents
# ----------------------------------------------------------------------
def dashboard_view(state: AppState, cfg: AppConfig) -> AppState:
    intents = render_dashboard(state, cfg.exam_date)
    if intents["plan_request"] is not None:
        goals, weak = intents["plan_request"]
        state = ctl.request_plan(state, goals, weak)
    if intents["toggle_task"] is not None:
        state = ctl.toggle_task(state, intents["toggle_task"])
    return state


def study_hub_view(state: AppState, cfg: AppConfig) -> AppState:
    intents = render_study_hub(state)
    if intents["select"]:
        state = ctl.select_subject(state, intents["select"])
    if intents["back"]:
        state = ctl.clear_subject(state)
    if intents["start_quiz"]:
        state = ctl.request_quiz(state, intents["start_quiz"])
    if intents["ask_tutor"]:
        state = ctl.navigate(state, ViewState.AI_TUTOR)
    return state


def quiz_view(state: AppState, cfg: AppConfig) -> AppState:
    intents = render_quiz_arena(state)
    if intents["answer"] is not None:
        state = ctl.answer_question(state, intents["answer"])
    if intents["next"]:
        state = ctl.next_question(state)
    if intents["exit"]:
        state = ctl.exit_quiz(state)
    return state


def tutor_view(state: AppState, cfg: AppConfig) -> AppState:
    intents = render_tutor(state)
    if intents["send"]:
        state = ctl.request_chat(state, intents["send"])
    return state


def analyzer_view(state: AppState, cfg: AppConfig) -> AppState:
    intents = render_analyzer(state)
    if intents["text"] != state.analysis_text:
        state = ctl.set_analysis_text(state, intents["text"])
    if intents["load_sample"]:
        state = ctl.load_sample_question(state)
    if intents["analyze"]:
        state = ctl.request_analysis(state)
    return state


VIEWS: Dict[ViewState, Callable[[AppState, AppConfig], AppState]] = {
    ViewState.DASHBOARD: dashboard_view,
    ViewState.STUDY_HUB: study_hub_view,
    ViewState.QUIZ: quiz_view,
    ViewState.AI_TUTOR: tutor_view,
    ViewState.ANALYZER: analyzer_view,
}


# ----------------------------------------------------------------------
#  Main
# ----------------------------------------------------------------------
def main() -> None:
    st.set_page_config(
        page_title="EthioLearn AI",
        page_icon="🇪🇹",
        layout="wide",
    )

    cfg = get_config()
    gateway = get_gateway(cfg)
    state = get_state(cfg)

    sidebar: Dict[str, Any] = render_sidebar(state, get_available_models(cfg), cfg.model_name)
    inject_styles(sidebar["theme"])

    if not cfg.is_online:
        st.info(t(state.language, "offline"))

    new_state = state
    if sidebar["language"] is not None:
        new_state = ctl.set_language(new_state, sidebar["language"])
    if sidebar["view"] is not None:
        new_state = ctl.navigate(new_state, sidebar["view"])

    if new_state == state:
        new_state = VIEWS[state.view](state, cfg)

    if state.pending is not None:
        # controls were drawn disabled above; now make the single call
        with st.spinner(t(state.language, "generating")):
            commit(ctl.resolve_pending(state, gateway))

    if new_state != state:
        commit(new_state)


if __name__ == "__main__":
    main()
