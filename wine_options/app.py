from __future__ import annotations

import logging

import streamlit as st

from wine_options.core import engine, scoring
from wine_options.core.errors import GroupFullError, GroupNotFoundError
from wine_options.core.groups import GroupRegistry
from wine_options.core.images import build_preview
from wine_options.core.models import GameState, GameStep, ImageUpload
from wine_options.core.recognizer import DEFAULT_PROCESSING_SECONDS, MockLabelRecognizer

PAGE_TITLE = "Wine Options Game"
SHARE_BASE_URL = "http://localhost:8501"
PROCESSING_SECONDS = DEFAULT_PROCESSING_SECONDS

logging.basicConfig(level=logging.INFO)


@st.cache_resource
def get_group_registry() -> GroupRegistry:
    return GroupRegistry()


@st.cache_resource
def get_recognizer() -> MockLabelRecognizer:
    return MockLabelRecognizer(delay_seconds=PROCESSING_SECONDS)


def render_rounds_step(state: GameState) -> None:
    st.header("Choose Your Challenge")
    st.write("How many rounds would you like to play?")

    one, two = st.columns(2)
    with one:
        st.subheader("1 Round")
        st.caption("Answer every question once.")
        if st.button("Play 1 Round", use_container_width=True):
            engine.select_rounds(state, 1)
            st.rerun()
    with two:
        st.subheader("2 Rounds (Recommended)")
        st.caption(
            "Ideal if you're really testing your tasting skills using a black glass for your "
            "first try! Round two checks your answers against your knowledge when you can see the label!"
        )
        if st.button("Play 2 Rounds", type="primary", use_container_width=True):
            engine.select_rounds(state, 2)
            st.rerun()


def render_glass_step(state: GameState) -> None:
    st.header("What type of glass are you using?")
    st.write("This affects which questions we'll ask you")

    black, clear = st.columns(2)
    with black:
        if st.button("🖤 Black Glass", use_container_width=True):
            engine.select_glass(state, True)
            st.rerun()
    with clear:
        if st.button("🔍 Clear Glass", use_container_width=True):
            engine.select_glass(state, False)
            st.rerun()

    st.info(
        "A black glass hides the wine's colour, so we'll ask about colour too, "
        "while clear glass focuses on other wine characteristics."
    )


def _to_upload(uploaded) -> ImageUpload:
    return ImageUpload(
        name=uploaded.name,
        mime_type=uploaded.type or "",
        size=uploaded.size,
        data=uploaded.getvalue(),
    )


def render_photo_step(state: GameState) -> None:
    st.header("Snap Your Wine Label")
    st.write("Take a photo of the wine you're tasting to start the challenge")

    if state.selected_image is None:
        widget_suffix = f"{state.generation}-{st.session_state.get('photo_attempt', 0)}"
        camera_tab, gallery_tab = st.tabs(["📷 Camera", "🖼️ Gallery"])
        with camera_tab:
            captured = st.camera_input("Take a photo", key=f"camera-{widget_suffix}")
        with gallery_tab:
            chosen = st.file_uploader("Choose a photo", key=f"upload-{widget_suffix}")

        uploaded = captured or chosen
        if uploaded is not None and engine.select_image(state, _to_upload(uploaded)):
            st.rerun()
    else:
        st.image(build_preview(state.selected_image), caption="Wine label preview")
        if st.button("📷 Choose Different Photo"):
            engine.clear_image(state)
            st.session_state.photo_attempt = st.session_state.get("photo_attempt", 0) + 1
            st.rerun()

    if state.error:
        st.error(state.error)

    if state.selected_image is not None and st.button("Start Wine Challenge", type="primary"):
        with st.spinner("Analyzing Wine Label..."):
            started = engine.submit_photo(state, get_recognizer())
        if started:
            st.rerun()
        elif state.error:
            st.error(state.error)


def render_questions_step(state: GameState) -> None:
    question = engine.current_question(state)
    if question is None:
        return

    position = f"Question {state.current_question_index + 1} of {len(state.questions)}"
    if state.rounds_selected == 2:
        position = f"Round {state.current_round} - {position}"
    st.markdown(f"### {position}")

    if state.current_round == 1:
        st.caption("🖤 Black Glass" if state.is_black_glass else "🔍 Clear Glass")
    else:
        st.caption("👁️ Label Revealed")
        if state.is_black_glass:
            st.info("Now that you can see the label, you might want to try your answers again out of a clear glass!")

    st.progress((state.current_question_index + 1) / len(state.questions))
    st.subheader(question.text)

    for index, choice in enumerate(question.choices):
        label = f"{chr(65 + index)}. {choice}"
        if st.button(label, key=f"{question.id}-{state.current_round}-{index}", use_container_width=True):
            engine.submit_answer(state, choice)
            st.toast("Answer recorded!")
            st.rerun()

    if state.current_round == 1:
        if state.is_black_glass:
            st.caption("🖤 Taste the wine without seeing the color")
        else:
            st.caption("🔍 You can see the wine color and clarity")
    else:
        st.caption("👁️ Now you can see the wine label - how did you do?")


def render_results_step(state: GameState) -> None:
    summary = scoring.summarize(state)

    st.header("Game Complete!")
    st.subheader(summary.message)
    st.metric("Score", f"{summary.total}/{summary.max_score}", f"{summary.percentage}% Accuracy")

    if summary.rounds_selected == 2:
        first, second = st.columns(2)
        first.metric("Round 1 (" + ("Black Glass" if state.is_black_glass else "Clear Glass") + ")", summary.round1)
        second.metric("Round 2 (Label Revealed)", summary.round2)
        st.info(summary.round_comparison)

    if state.wine_info is not None:
        wine = state.wine_info
        st.markdown(
            f"**{wine.producer}** {wine.vintage} · {wine.variety} · {wine.region}, {wine.country}"
        )

    st.markdown("#### Share Results")
    st.code(scoring.build_share_text(summary, SHARE_BASE_URL), language=None)

    replay, group = st.columns(2)
    with replay:
        if st.button("Try Another Wine", type="primary", use_container_width=True):
            engine.reset_game_state(state)
            st.session_state.pop("group_code", None)
            st.rerun()
    with group:
        if st.button("Create Group", use_container_width=True):
            engine.open_group(state)
            st.rerun()

    if engine.needs_signup_prompt(state):
        st.info(
            "Want to track your scores? Create an account to save your game history, "
            "get wine recommendations, and unlock more features!"
        )


def render_group_step(state: GameState) -> None:
    registry = get_group_registry()
    summary = scoring.summarize(state)
    player_id = engine.player_key(state)

    st.header("Group Challenge")
    st.write("Create a group challenge or join an existing one")

    with st.form(key="create-group"):
        group_name = st.text_input("Group name", placeholder="Wine Night Crew")
        creator_name = st.text_input("Your name", key="creator-name")
        created = st.form_submit_button("Create Group & Get Code")
    if created:
        try:
            group = registry.create_group(group_name, player_id, creator_name, summary)
        except ValueError as exc:
            st.error(str(exc))
        else:
            st.session_state.group_code = group.code

    with st.form(key="join-group"):
        code = st.text_input("Group code", placeholder="Enter group code")
        player_name = st.text_input("Your name", key="player-name")
        joined = st.form_submit_button("Join Group Challenge")
    if joined:
        try:
            group = registry.join_group(code, player_name, player_id, summary)
        except (GroupNotFoundError, GroupFullError, ValueError) as exc:
            st.error(str(exc))
        else:
            st.session_state.group_code = group.code

    group_code = st.session_state.get("group_code")
    if group_code:
        try:
            group = registry.get_group(group_code)
            members = registry.leaderboard(group_code)
        except GroupNotFoundError as exc:
            st.error(str(exc))
        else:
            st.success(f"Group **{group.name}** · code `{group.code}`")
            rows = [
                {
                    "Player": member.player_name,
                    "Score": f"{member.score.total}/{member.score.max_score}" if member.score else "-",
                }
                for member in members
            ]
            st.table(rows)

    if st.button("← Back to Results"):
        engine.close_group(state)
        st.rerun()


def main() -> None:
    st.set_page_config(page_title=PAGE_TITLE)
    st.title("🎯 Wine Options Game")
    st.caption("Test your wine knowledge with AI-powered challenges")

    if "game_state" not in st.session_state:
        st.session_state.game_state = engine.create_game_state()

    state: GameState = st.session_state.game_state

    if state.step == GameStep.ROUNDS:
        render_rounds_step(state)
    elif state.step == GameStep.GLASS:
        render_glass_step(state)
    elif state.step == GameStep.PHOTO:
        render_photo_step(state)
    elif state.step == GameStep.QUESTIONS:
        render_questions_step(state)
    elif state.step == GameStep.RESULTS:
        render_results_step(state)
    elif state.step == GameStep.GROUP:
        render_group_step(state)


if __name__ == "__main__":
    main()
