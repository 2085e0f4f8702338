from __future__ import annotations

import streamlit as st

from app.application.api import submit_feedback
from app.domain.catalog import CATEGORIES, CATEGORY_ORDER, RATING_SCALE, overall_emoji
from app.domain.codec import build_share_url
from app.domain.flow import CheckInFlow
from app.infrastructure.config import get_settings
from app.infrastructure.exceptions import CheckInAppError, create_user_friendly_error_message
from app.infrastructure.logging import get_logger
from app.infrastructure.repositories_feedback import FeedbackRepo
from app.ui.components import category_bar, scorecard
from app.ui.state_keys import FEEDBACK_SENT, FLOW, PARTNER_ERROR, SHARE_BASE_URL
from app.utils.comparison_radar import gradient_color, make_checkin_radar

logger = get_logger(__name__)


def get_flow() -> CheckInFlow:
    flow = st.session_state.get(FLOW)
    if flow is None:
        flow = CheckInFlow()
        st.session_state[FLOW] = flow
    return flow


def _partner_token_input(flow: CheckInFlow) -> None:
    with st.expander("💌 Got a link from your partner?"):
        link = st.text_input("Paste their link or code", key="partner_link_input")
        if st.button("Load partner results", key="load_partner"):
            if flow.receive_partner_token(link):
                st.session_state[PARTNER_ERROR] = None
                st.rerun()
            else:
                logger.info("Partner token rejected")
                st.session_state[PARTNER_ERROR] = "That link couldn't be read. Ask your partner to copy it again."
        error = st.session_state.get(PARTNER_ERROR)
        if error:
            st.warning(error)


def _render_welcome(flow: CheckInFlow) -> None:
    if flow.partner_result is not None:
        st.markdown('<p class="eyebrow">Your partner checked in</p>', unsafe_allow_html=True)
        st.header("Now it's your turn")
        st.caption("Fill out your own check-in and see how your answers compare side by side.")
    else:
        st.markdown('<p class="eyebrow">Weekly Check-In</p>', unsafe_allow_html=True)
        st.header("How are we doing?")
        st.caption(
            f"{flow.total_questions} honest questions. Based on Gottman & Terry Real. "
            "Takes 3 minutes. No wrong answers."
        )

    cols = st.columns(len(CATEGORY_ORDER))
    for col, key in zip(cols, CATEGORY_ORDER):
        with col:
            st.markdown(f"{CATEGORIES[key].emoji} {CATEGORIES[key].label}")

    if st.button("Begin Check-In →", type="primary", use_container_width=True):
        flow.start()
        st.rerun()

    _partner_token_input(flow)


def _render_question(flow: CheckInFlow) -> None:
    question = flow.current_question
    category = CATEGORIES[question.category]

    st.markdown(
        f'<p class="eyebrow">{category.emoji} {category.label} · '
        f"{flow.index + 1}/{flow.total_questions}</p>",
        unsafe_allow_html=True,
    )
    st.progress(flow.progress_percent / 100)
    st.subheader(question.text)

    cols = st.columns(len(RATING_SCALE))
    for col, option in zip(cols, RATING_SCALE):
        with col:
            selected = flow.answers.get(question.id) == option.value
            if st.button(
                f"{option.emoji}\n\n{option.label}",
                key=f"q{question.id}_{option.value}",
                type="primary" if selected else "secondary",
                use_container_width=True,
            ):
                flow.answer(option.value)
                st.rerun()

    if flow.index > 0 and st.button("← Back", key="back"):
        flow.back()
        st.rerun()


def _render_feedback_form(overall: int) -> None:
    settings = get_settings()
    if not settings.app.enable_feedback:
        return
    if st.session_state.get(FEEDBACK_SENT):
        st.success("💌 Thank you for the feedback!")
        return

    with st.form("feedback_form"):
        st.markdown("**How useful was this check-in?**")
        enjoyment = st.slider("Usefulness", 1, 5, 3)
        accurate = st.radio(
            "Did your score feel accurate?", ["yes", "somewhat", "no"], horizontal=True
        )
        useful = st.radio("Would you use it again?", ["yes", "maybe", "no"], horizontal=True)
        suggestion = st.text_area("Anything we should change?")
        submitted = st.form_submit_button("Send feedback")

    if submitted:
        repo = FeedbackRepo(settings.feedback.get_data_path(), indent=settings.feedback.indent)
        try:
            submit_feedback(
                repo,
                {
                    "overall_score": overall,
                    "enjoyment": enjoyment,
                    "accurate": accurate,
                    "useful": useful,
                    "suggestion": suggestion,
                },
                max_suggestion_length=settings.feedback.max_suggestion_length,
            )
        except CheckInAppError as exc:
            st.error(create_user_friendly_error_message(exc))
            return
        st.session_state[FEEDBACK_SENT] = True
        st.rerun()


def _render_results(flow: CheckInFlow) -> None:
    result = flow.result
    assert result is not None
    partner = flow.partner_result

    st.markdown('<p class="eyebrow">Your check-in</p>', unsafe_allow_html=True)
    scorecard(
        f"{overall_emoji(result.overall)} {result.overall}/100",
        "overall score",
        bg_hex=gradient_color(result.overall),
    )

    for category_score in result.categories:
        category_bar(category_score)

    if partner is not None:
        st.subheader("Side by side")
        st.plotly_chart(make_checkin_radar(result, partner), use_container_width=True)
        for own_cs, partner_cs in zip(result.categories, partner.categories):
            category_bar(own_cs, prefix="You · ")
            category_bar(partner_cs, prefix="Partner · ")

    focus = flow.focus_category
    st.subheader(f"Focus area: {focus.emoji} {focus.label}")
    st.caption(focus.source)
    for starter in flow.conversation_starters:
        st.markdown(f'<div class="starter">{starter}</div>', unsafe_allow_html=True)

    if partner is None and get_settings().app.enable_partner_compare:
        st.subheader("Invite your partner")
        st.caption("Send them this link. They fill it out, then you see your scores side by side.")
        base_url = st.session_state.get(SHARE_BASE_URL) or get_settings().app.public_base_url
        if base_url:
            st.code(build_share_url(base_url, flow.share_token), language=None)
        else:
            st.code(flow.share_token, language=None)
        _partner_token_input(flow)

    _render_feedback_form(result.overall)

    if st.button("🌸 Start over"):
        flow.restart()
        st.session_state[FEEDBACK_SENT] = False
        st.rerun()


def build_checkin() -> None:
    flow = get_flow()

    if flow.stage == "welcome":
        _render_welcome(flow)
    elif flow.stage == "in_progress":
        _render_question(flow)
    else:
        _render_results(flow)
