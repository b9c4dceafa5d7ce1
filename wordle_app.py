from __future__ import annotations

import logging
import random
from typing import List

import streamlit as st

from src.config import Settings, load_settings

# --- Core game imports ---
from src.core.engine import feedback_rows, keyboard_status, new_game, press_key, share_text, submit_guess
from src.core.errors import GuessNotInDictionary, InvalidGuessLength, WordListUnavailable
from src.core.evaluator import Feedback, KeyboardStatus, feedback_emoji
from src.core.state import DIFFICULTIES, GameState
from src.core.stats import UNATTRIBUTED, win_percentage
from src.core.storage import FileStatisticsStore, StatisticsTracker
from src.core.wordlist import load_word_list, pick_word_length

# --- Generative AI services ---
from src.services.coach import suggest_next_guess  # AI Coach (next word + rationale)
from src.services.hints import llm_hint            # AI hint (with local fallback)
from src.services.review import generate_review    # Post-game AI Review

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("wordle_app")

_COLORS = {"correct": "#6aaa64", "present": "#c9b458", "absent": "#787c7e", "unused": "#d3d6da"}
_KEY_ROWS = ("qwertyuiop", "asdfghjkl", "zxcvbnm")
_SPECIAL_KEYS = {"enter": "Enter", "backspace": "⌫"}


# =======================================
# Rendering (presentation collaborator)
# =======================================

def _tile(letter: str, status: str, width: str = "2.6rem") -> str:
    color = _COLORS[status]
    fg = "#000" if status == "unused" else "#fff"
    return (
        f"<span style='display:inline-block;width:{width};height:2.6rem;line-height:2.6rem;"
        f"margin:2px;text-align:center;font-weight:700;background:{color};color:{fg};"
        f"border-radius:4px'>{letter.upper() or '&nbsp;'}</span>"
    )


def render_feedback(guess: str, feedback: List[Feedback]) -> None:
    """Draw one submitted row."""
    st.markdown("".join(_tile(ch, fb) for ch, fb in zip(guess, feedback)), unsafe_allow_html=True)


def render_keyboard_status(status: KeyboardStatus, disabled: bool = False) -> None:
    """
    Draw the clickable on-screen keyboard.

    Each key carries the best feedback seen for its letter; presses go
    through `_on_key`, which runs before the next script pass.
    """
    for i, row in enumerate(_KEY_ROWS):
        keys = list(row)
        if i == len(_KEY_ROWS) - 1:
            keys = ["enter"] + keys + ["backspace"]
        for col, key in zip(st.columns(len(keys)), keys):
            if key in _SPECIAL_KEYS:
                label = _SPECIAL_KEYS[key]
            elif key in status:
                label = f"{feedback_emoji([status[key]])}{key.upper()}"
            else:
                label = key.upper()
            col.button(label, key=f"key_{key}", on_click=_on_key, args=(key,), disabled=disabled)


def _render_board(game: GameState) -> None:
    for guess, fb in zip(game.guesses, feedback_rows(game)):
        render_feedback(guess, fb)
    remaining = game.max_attempts - game.attempts_used
    if not game.is_over and remaining:
        typed = game.current.ljust(game.word_length)
        st.markdown("".join(_tile(ch.strip(), "unused") for ch in typed), unsafe_allow_html=True)
        remaining -= 1
    empty = "".join(_tile("", "unused") for _ in range(game.word_length))
    for _ in range(remaining):
        st.markdown(empty, unsafe_allow_html=True)


# =======================================
# Session-state helpers & game management
# =======================================

def _settings() -> Settings:
    if "settings" not in st.session_state:
        st.session_state["settings"] = load_settings()
    return st.session_state["settings"]


def _tracker() -> StatisticsTracker:
    """Load persisted statistics once per browser session."""
    if "tracker" not in st.session_state:
        settings = _settings()
        tracker = StatisticsTracker(FileStatisticsStore(settings.stats_dir), settings.max_attempts)
        tracker.load()
        st.session_state["tracker"] = tracker
    return st.session_state["tracker"]


def _reset_round_state() -> None:
    st.session_state["round_counted"] = False
    st.session_state["ai_hint"] = None
    st.session_state["coach_suggestion"] = None
    st.session_state["review_text"] = None
    st.session_state["message"] = None


def _start_new_game(difficulty: str) -> None:
    """Pick a word length for the tier, load its list and start a fresh game."""
    settings = _settings()
    rng = random.SystemRandom()
    length = pick_word_length(difficulty, rng=rng, data_dir=settings.data_dir)
    words = load_word_list(difficulty, length, data_dir=settings.data_dir)
    st.session_state["game"] = new_game(difficulty, words, rng=rng, max_attempts=settings.max_attempts)
    st.session_state["dictionary"] = words
    _reset_round_state()


def _ensure_game(difficulty: str) -> GameState:
    """Ensure there is a valid GameState in session state; create one if missing."""
    if "game" not in st.session_state or not isinstance(st.session_state["game"], GameState):
        _start_new_game(difficulty)
    return st.session_state["game"]


def _on_key(key: str) -> None:
    """Keyboard button callback; a rejected Enter leaves the row as typed."""
    game = st.session_state.get("game")
    if not isinstance(game, GameState):
        return
    try:
        st.session_state["game"] = press_key(game, key, st.session_state["dictionary"])
        st.session_state["message"] = None
    except (InvalidGuessLength, GuessNotInDictionary) as exc:
        st.session_state["message"] = str(exc)


def _record_finished_game(tracker: StatisticsTracker, game: GameState) -> None:
    """Count a finished game exactly once."""
    if game.is_over and not st.session_state.get("round_counted", False):
        tracker.record_game_end(game.difficulty, game.status == "won", game.attempts_used)
        st.session_state["round_counted"] = True


def _render_stats_panel(tracker: StatisticsTracker) -> None:
    s = tracker.record
    st.metric("Played", s.games_played)
    c1, c2 = st.columns(2); c1.metric("Win %", win_percentage(s)); c2.metric("Wins", s.games_won)
    c3, c4 = st.columns(2); c3.metric("Streak", s.current_streak); c4.metric("Max streak", s.max_streak)

    st.caption("Guess distribution")
    for n, count in sorted(s.guess_distribution.items()):
        st.progress(count / max(1, s.games_won), text=f"{n}: {count}")

    st.caption("By difficulty")
    for name in DIFFICULTIES + (UNATTRIBUTED,):
        t = s.difficulty_stats.get(name)
        if t is not None:
            st.write(f"{name.capitalize()}: {t.wins} / {t.total}")
    if not tracker.persisted:
        st.warning("Statistics could not be saved; they are kept for this session only.")


# =========
# The App
# =========

def main() -> None:
    st.set_page_config(page_title="Wordle", page_icon="🟩", layout="centered")
    st.title("🟩 Wordle")

    tracker = _tracker()

    # ---- Sidebar ----
    with st.sidebar:
        st.header("Settings")
        difficulty = st.selectbox("Difficulty", list(DIFFICULTIES), index=1)
        if st.button("🔁 New Game", use_container_width=True):
            _start_new_game(difficulty)
            st.rerun()

    try:
        game: GameState = _ensure_game(difficulty)
    except WordListUnavailable as exc:
        st.error(f"No word list available: {exc}")
        return

    # Record before drawing the stats so the panel includes this game.
    _record_finished_game(tracker, game)
    with st.sidebar:
        with st.expander("📊 Stats", expanded=True):
            _render_stats_panel(tracker)

    # ---- Board ----
    st.subheader(f"{game.difficulty.capitalize()} · {game.word_length} letters")
    st.caption(f"Attempts: {game.attempts_used} / {game.max_attempts}")
    _render_board(game)
    render_keyboard_status(keyboard_status(game), disabled=game.is_over)
    if st.session_state.get("message"):
        st.warning(st.session_state["message"])

    # ---- Hint & Coach section ----
    with st.expander("Need a hint or coaching?"):
        c1, c2 = st.columns(2)
        with c1:
            if st.button("✨ Generate AI Hint"):
                with st.spinner("Thinking..."):
                    st.session_state["ai_hint"] = llm_hint(game.target, settings=_settings())
                st.rerun()
        with c2:
            if st.button("🤖 Coach: Next Guess", disabled=game.is_over):
                with st.spinner("Analyzing remaining words..."):
                    st.session_state["coach_suggestion"] = suggest_next_guess(
                        history=game.guesses,
                        target=game.target,
                        candidates=st.session_state["dictionary"],
                        settings=_settings(),
                    )
                st.rerun()

        st.info(st.session_state.get("ai_hint") or "No AI hint yet.")
        coach = st.session_state.get("coach_suggestion")
        if coach:
            src = "LLM" if coach.used_llm else "local"
            st.success(
                f"Coach suggests: **{coach.word.upper()}**  \n"
                f"{coach.text}  \n"
                f"*Source: {src}, candidates considered: {coach.candidates_considered}*"
            )

    # ---- Whole-word input (alternative to the keyboard) ----
    if not game.is_over:
        with st.form("guess_form", clear_on_submit=True):
            guess_inp = st.text_input(f"Or type a {game.word_length}-letter word:", max_chars=game.word_length)
            if st.form_submit_button("Submit"):
                try:
                    st.session_state["game"] = submit_guess(game, st.session_state["dictionary"], guess_inp)
                    st.session_state["message"] = None
                except (InvalidGuessLength, GuessNotInDictionary) as exc:
                    st.session_state["message"] = str(exc)
                st.rerun()

    # ---- Outcome banner ----
    if game.status == "won":
        st.success("🎉 You Won!")
    elif game.status == "lost":
        st.error(f"Game Over. The word was: **{game.target.upper()}**")

    # ---- Post-game AI Review ----
    if game.is_over:
        st.code(share_text(game), language=None)
        with st.expander("📝 AI Review"):
            if st.button("✨ Generate Review"):
                with st.spinner("Analyzing your round..."):
                    st.session_state["review_text"] = generate_review(
                        history=game.guesses,
                        target=game.target,
                        won=(game.status == "won"),
                        difficulty=game.difficulty,
                        settings=_settings(),
                    )
                st.rerun()
            if st.session_state.get("review_text"):
                st.write(st.session_state["review_text"])

        st.button("Play again", on_click=_start_new_game, args=(difficulty,))


if __name__ == "__main__":
    main()
