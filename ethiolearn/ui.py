"""
ui.py
======================

Streamlit UI components.

Responsibilities:
- global styling (light / dark themes)
- one renderer per view: dashboard, study hub, quiz arena, tutor,
  analyzer, plus the sidebar
- reporting what the user did

Renderers only read AppState. Business logic (gateway calls, stats,
view transitions) belongs to controller.py; every renderer returns a
dict describing the user's intent for app.py to apply.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

from .catalog import SUBJECTS, days_until, get_subject
from .controller import AppState, RequestKind
from .i18n import t
from .models import AnalysisResult, ChatRole, Language, StudyPlan, ViewState

# ----------------------------------------------------------------------
#  Themes
# ----------------------------------------------------------------------
THEMES: Dict[str, Dict[str, str]] = {
    "light": {
        "bg": "#f9fafb",
        "text": "#1f2937",
        "surface": "#ffffff",
        "border": "#e5e7eb",
        "primary": "#078930",  # Ethiopian flag green
        "accent": "#fcdd09",
        "correct": "#16a34a",
        "incorrect": "#dc2626",
    },
    "dark": {
        "bg": "#111827",
        "text": "#f3f4f6",
        "surface": "#1f2937",
        "border": "#374151",
        "primary": "#22c55e",
        "accent": "#facc15",
        "correct": "#4ade80",
        "incorrect": "#f87171",
    },
}

MENU_ICONS: Dict[ViewState, str] = {
    ViewState.DASHBOARD: "📊",
    ViewState.STUDY_HUB: "📚",
    ViewState.QUIZ: "🎮",
    ViewState.AI_TUTOR: "🤖",
    ViewState.ANALYZER: "🔍",
}

LANGUAGE_LABELS = {Language.EN: "English", Language.AM: "አማርኛ"}


def _generate_css(theme: Dict[str, str]) -> str:
    return f"""
    <style>
    .el-card {{
        background: {theme['surface']};
        border: 1px solid {theme['border']};
        border-radius: 16px;
        padding: 1rem 1.2rem;
        margin-bottom: 0.75rem;
    }}
    .el-hero {{
        background: linear-gradient(90deg, {theme['primary']}, #059669);
        color: #ffffff;
        border-radius: 24px;
        padding: 1.5rem 2rem;
        margin-bottom: 1rem;
    }}
    .el-hero h2 {{ color: #ffffff; margin: 0 0 0.3rem 0; }}
    .el-quote {{ font-style: italic; opacity: 0.85; }}
    .el-badge {{
        display: inline-block;
        padding: 0.1rem 0.6rem;
        border-radius: 999px;
        background: {theme['accent']}33;
        border: 1px solid {theme['accent']};
        font-size: 0.8rem;
    }}
    .el-correct {{ color: {theme['correct']}; font-weight: 600; }}
    .el-incorrect {{ color: {theme['incorrect']}; font-weight: 600; }}
    </style>
    """


def inject_styles(theme_key: str = "light") -> None:
    theme = THEMES.get(theme_key, THEMES["light"])
    st.markdown(_generate_css(theme), unsafe_allow_html=True)


def _notice(state: AppState) -> None:
    if state.notice:
        st.warning(t(state.language, state.notice))


# ----------------------------------------------------------------------
#  Sidebar
# ----------------------------------------------------------------------
def render_sidebar(state: AppState, models: Optional[List[str]] = None, model_name: str = "") -> Dict[str, Any]:
    """
    Menu, language toggle and settings.

    Returns:
        {"view": Optional[ViewState], "language": Optional[Language], "theme": str}
    """
    lang = state.language
    selected_view: Optional[ViewState] = None
    selected_language: Optional[Language] = None

    with st.sidebar:
        st.markdown(f"## 🇪🇹 {t(lang, 'app_name')}")
        st.markdown(
            f"<span class='el-badge'>{t(lang, 'level')} {state.stats.level}</span>",
            unsafe_allow_html=True,
        )
        st.write("")

        for view in ViewState:
            label = f"{MENU_ICONS[view]} {t(lang, view.value)}"
            kind = "primary" if view is state.view else "secondary"
            if st.button(label, key=f"menu_{view.value}", type=kind, use_container_width=True):
                selected_view = view

        st.write("---")
        options = list(Language)
        choice = st.radio(
            t(lang, "language"),
            options,
            index=options.index(lang),
            horizontal=True,
            format_func=lambda l: LANGUAGE_LABELS[l],
        )
        if choice is not lang:
            selected_language = choice

        theme = st.radio("Theme", list(THEMES), horizontal=True, key="theme")

        with st.expander(f"⚙️ {t(lang, 'settings')}"):
            st.write(f"Model: `{model_name}`")
            if models:
                st.caption("Available models")
                st.code("\n".join(models), language=None)

    return {"view": selected_view, "language": selected_language, "theme": theme}


# ----------------------------------------------------------------------
#  Dashboard
# ----------------------------------------------------------------------
def plan_minutes_frame(plan: StudyPlan, language: Language) -> pd.DataFrame:
    """Planned and completed minutes per subject."""
    rows = []
    for task in plan.tasks:
        subject = get_subject(task.subject_id)
        rows.append(
            {
                "subject": subject.name(language) if subject else task.subject_id,
                "planned": task.duration_minutes,
                "completed": task.duration_minutes if task.is_completed else 0,
            }
        )
    if not rows:
        return pd.DataFrame(columns=["subject", "planned", "completed"])
    return (
        pd.DataFrame(rows)
        .groupby("subject", as_index=False)
        .sum()
        .sort_values("planned", ascending=False)
    )


def render_dashboard(state: AppState, exam_date: date) -> Dict[str, Any]:
    """
    Returns:
        {"plan_request": Optional[(goals, weak_areas_text)], "toggle_task": Optional[str]}
    """
    lang = state.language
    stats = state.stats
    plan_request = None
    toggled: Optional[str] = None
    generating = state.is_pending(RequestKind.PLAN)

    st.markdown(
        "<div class='el-hero'>"
        f"<h2>{t(lang, 'welcome')}</h2>"
        f"<div class='el-quote'>\"{t(lang, 'daily_quote')}\"</div>"
        "</div>",
        unsafe_allow_html=True,
    )

    c1, c2, c3, c4 = st.columns(4)
    c1.metric(f"🔥 {t(lang, 'streak')}", stats.streak)
    c2.metric(f"⚡ {t(lang, 'xp')}", stats.xp)
    c3.metric(f"🏆 {t(lang, 'level')}", stats.level)
    c4.metric(f"📅 {t(lang, 'exam_countdown')}", days_until(exam_date))

    st.markdown(f"### 📅 {t(lang, 'your_plan')}")
    _notice(state)

    with st.form("plan_form", clear_on_submit=False):
        goals = st.text_input(t(lang, "goals"), value=state.plan.goals if state.plan else "")
        weak = st.text_input(
            t(lang, "weak_areas"),
            value=", ".join(state.plan.weak_areas) if state.plan else "",
        )
        label = t(lang, "generating") if generating else (
            t(lang, "regenerate") if state.plan else t(lang, "create_plan")
        )
        if st.form_submit_button(label, disabled=state.busy) and goals.strip() and weak.strip():
            plan_request = (goals, weak)

    plan = state.plan
    if plan is None or not plan.tasks:
        if not generating and plan is None:
            st.info(t(lang, "no_plan"))
    else:
        for task in plan.tasks:
            subject = get_subject(task.subject_id)
            icon = subject.icon if subject else "📘"
            label = f"{icon} {task.title} · {task.duration_minutes} min · {task.type.value}"
            checked = st.checkbox(
                label,
                value=task.is_completed,
                key=f"task_{task.id}_{task.is_completed}",
                disabled=state.busy,
            )
            if checked != task.is_completed:
                toggled = task.id

        st.caption(t(lang, "minutes_by_subject"))
        st.dataframe(plan_minutes_frame(plan, lang), use_container_width=True, hide_index=True)

    return {"plan_request": plan_request, "toggle_task": toggled}


# ----------------------------------------------------------------------
#  Study hub
# ----------------------------------------------------------------------
def render_study_hub(state: AppState) -> Dict[str, Any]:
    """
    Returns:
        {"select": Optional[str], "back": bool, "start_quiz": Optional[str], "ask_tutor": bool}
    """
    lang = state.language
    result: Dict[str, Any] = {"select": None, "back": False, "start_quiz": None, "ask_tutor": False}
    subject = get_subject(state.selected_subject_id) if state.selected_subject_id else None

    if subject is None:
        st.markdown(f"## {t(lang, 'select_subject')}")
        cols = st.columns(4)
        for i, s in enumerate(SUBJECTS):
            with cols[i % 4]:
                if st.button(f"{s.icon}\n\n{s.name(lang)}", key=f"subject_{s.id}", use_container_width=True):
                    result["select"] = s.id
        return result

    if st.button(t(lang, "back"), key="hub_back"):
        result["back"] = True

    st.markdown(f"## {subject.icon} {subject.name(lang)}")
    _notice(state)

    col_text, col_actions = st.columns([2, 1])
    with col_text:
        # PDF textbooks are not parsed; mocked chapter content
        st.markdown(f"<div class='el-card'>{t(lang, 'textbook_placeholder')}</div>", unsafe_allow_html=True)
    with col_actions:
        st.write(t(lang, "practice_prompt"))
        generating = state.is_pending(RequestKind.QUIZ)
        label = t(lang, "generating") if generating else f"{t(lang, 'start_quiz')} 🚀"
        if st.button(label, key="start_quiz", type="primary", disabled=state.busy, use_container_width=True):
            result["start_quiz"] = subject.id
        if st.button(f"🤖 {t(lang, 'ask_tutor')}", key="ask_tutor", use_container_width=True):
            result["ask_tutor"] = True

    return result


# ----------------------------------------------------------------------
#  Quiz arena
# ----------------------------------------------------------------------
def render_quiz_arena(state: AppState) -> Dict[str, Any]:
    """
    Returns:
        {"answer": Optional[int], "next": bool, "exit": bool}
    """
    lang = state.language
    result: Dict[str, Any] = {"answer": None, "next": False, "exit": False}
    run = state.quiz

    if run is None or not run.questions:
        st.info(t(lang, "no_quiz"))
        return result

    total = len(run.questions)

    if run.finished:
        st.markdown(f"## 🏆 {t(lang, 'quiz_complete')}")
        st.markdown(f"### {t(lang, 'your_score', score=run.score, total=total)}")
        if st.button(t(lang, "back_to_hub"), type="primary"):
            result["exit"] = True
        return result

    q = run.current
    st.caption(t(lang, "question_of", current=run.index + 1, total=total))
    st.progress((run.index + 1) / total)
    st.markdown(f"<div class='el-card'><h4>{q.question}</h4></div>", unsafe_allow_html=True)

    for idx, option in enumerate(q.options):
        prefix = ""
        if run.answered:
            if idx == q.correct_answer:
                prefix = "✅ "
            elif idx == run.selected:
                prefix = "❌ "
        if st.button(
            f"{prefix}{option}",
            key=f"quiz_{run.index}_{idx}",
            disabled=run.answered,
            use_container_width=True,
        ):
            result["answer"] = idx

    if run.answered:
        if q.is_correct(run.selected):
            st.markdown(f"<span class='el-correct'>{t(lang, 'correct')}</span>", unsafe_allow_html=True)
        else:
            st.markdown(f"<span class='el-incorrect'>{t(lang, 'incorrect')}</span>", unsafe_allow_html=True)
        st.info(q.explanation)
        if st.button(t(lang, "continue"), key="quiz_next", type="primary"):
            result["next"] = True

    if st.button(t(lang, "back"), key="quiz_exit"):
        result["exit"] = True

    return result


# ----------------------------------------------------------------------
#  AI tutor
# ----------------------------------------------------------------------
def render_tutor(state: AppState) -> Dict[str, Any]:
    """
    Returns:
        {"send": Optional[str]}
    """
    lang = state.language

    # greeting is display-only; it is not part of the transcript sent to the model
    with st.chat_message("assistant", avatar="🤖"):
        st.write(t(lang, "tutor_greeting"))

    for msg in state.chat:
        role = "user" if msg.role is ChatRole.USER else "assistant"
        with st.chat_message(role, avatar="🧑‍🎓" if role == "user" else "🤖"):
            st.write(msg.text)

    if state.is_pending(RequestKind.CHAT):
        with st.chat_message("assistant", avatar="🤖"):
            st.write(t(lang, "thinking"))

    text = st.chat_input(t(lang, "chat_placeholder"), disabled=state.busy)
    return {"send": text}


# ----------------------------------------------------------------------
#  Question analyzer
# ----------------------------------------------------------------------
def _render_analysis(result: AnalysisResult, lang: Language) -> None:
    st.markdown(f"**{t(lang, 'source')}:** {result.source}")
    c1, c2 = st.columns(2)
    c1.metric(t(lang, "difficulty"), result.difficulty.value)
    c2.metric(t(lang, "success_rate"), f"{result.success_rate:.0f}%")
    st.progress(result.success_rate / 100)
    st.markdown(f"**{t(lang, 'topics')}:** " + ", ".join(result.topics))
    st.markdown(f"**{t(lang, 'similar_questions')}**")
    for q in result.similar_questions:
        st.markdown(f"- {q}")
    st.markdown(f"**{t(lang, 'explanation')}**")
    st.write(result.explanation)


def render_analyzer(state: AppState) -> Dict[str, Any]:
    """
    Returns:
        {"text": str, "load_sample": bool, "analyze": bool}
    """
    lang = state.language
    result: Dict[str, Any] = {"text": state.analysis_text, "load_sample": False, "analyze": False}

    st.markdown(f"## {t(lang, 'analyzer')}")
    col_in, col_out = st.columns(2)

    with col_in:
        result["text"] = st.text_area(t(lang, "upload_question"), value=state.analysis_text, height=200)
        b1, b2 = st.columns([1, 2])
        if b1.button(t(lang, "load_sample"), key="load_sample"):
            result["load_sample"] = True
        analyzing = state.is_pending(RequestKind.ANALYSIS)
        label = t(lang, "analyzing") if analyzing else t(lang, "analyze")
        if b2.button(
            label,
            key="analyze",
            type="primary",
            disabled=state.busy or not result["text"].strip(),
            use_container_width=True,
        ):
            result["analyze"] = True

    with col_out:
        _notice(state)
        if state.analysis is not None:
            _render_analysis(state.analysis, lang)

    return result

