from openai import OpenAIError

from src.services import coach, hints, review
from src.services.coach import suggest_next_guess
from src.services.hints import llm_hint
from src.services.review import generate_review

WORDS = {"mango", "tango", "mange", "manga", "grand", "crane", "cat"}


def test_hint_offline_uses_local_fallback(offline_settings):
    assert llm_hint("mango", settings=offline_settings) == "The word has 5 letters and starts with 'M'."


def test_hint_from_llm(online_settings, fake_openai, monkeypatch):
    client = fake_openai(reply="A tropical stone fruit.")
    monkeypatch.setattr(hints, "OpenAI", client)
    assert llm_hint("mango", settings=online_settings) == "A tropical stone fruit."
    assert client.calls[0]["model"] == "test-model"


def test_hint_that_leaks_the_answer_is_replaced(online_settings, fake_openai, monkeypatch):
    monkeypatch.setattr(hints, "OpenAI", fake_openai(reply="It rhymes with tango: MANGO"))
    assert llm_hint("mango", settings=online_settings).startswith("The word has 5 letters")


def test_hint_api_error_falls_back(online_settings, fake_openai, monkeypatch, caplog):
    monkeypatch.setattr(hints, "OpenAI", fake_openai(error=OpenAIError("boom")))
    assert llm_hint("mango", settings=online_settings).startswith("The word has 5 letters")
    assert "Hint request failed" in caplog.text


def test_coach_narrows_to_consistent_words(offline_settings):
    suggestion = suggest_next_guess(["tango"], "mango", WORDS, settings=offline_settings)
    assert suggestion.word == "mango"
    assert suggestion.candidates_considered == 1
    assert suggestion.used_llm is False
    assert "MANGO" in suggestion.text


def test_coach_opening_suggestion(offline_settings):
    suggestion = suggest_next_guess([], "mango", WORDS, settings=offline_settings)
    assert suggestion.word in WORDS - {"cat"}
    assert suggestion.candidates_considered == 6


def test_coach_returns_none_when_nothing_left(offline_settings):
    assert suggest_next_guess(["mango"], "mango", {"mango"}, settings=offline_settings) is None


def test_coach_llm_rationale_hides_target(online_settings, fake_openai, monkeypatch):
    client = fake_openai(reply="Only one word still fits.")
    monkeypatch.setattr(coach, "OpenAI", client)
    suggestion = suggest_next_guess(["grand"], "mango", WORDS, settings=online_settings)
    assert suggestion.used_llm is True
    assert suggestion.text == "Only one word still fits."
    prompt = client.calls[0]["messages"][0]["content"]
    assert "🟨⬛🟨🟨⬛" in prompt


def test_review_offline_win(offline_settings):
    text = generate_review(["grand", "mango"], "mango", won=True, difficulty="easy", settings=offline_settings)
    assert "You won in 2 guesses." in text
    assert "first green letter came on guess 2" in text
    assert "*easy*" in text


def test_review_offline_loss(offline_settings):
    text = generate_review(["crane"], "mango", won=False, settings=offline_settings)
    assert "the word was 'mango'" in text


def test_review_api_error_falls_back(online_settings, fake_openai, monkeypatch):
    monkeypatch.setattr(review, "OpenAI", fake_openai(error=OpenAIError("down")))
    text = generate_review(["mango"], "mango", won=True, settings=online_settings)
    assert text.startswith("**Outcome:** You won in 1 guess.")


def test_review_from_llm_is_capped(online_settings, fake_openai, monkeypatch):
    monkeypatch.setattr(review, "OpenAI", fake_openai(reply="word " * 200))
    text = generate_review(["mango"], "mango", won=True, settings=online_settings)
    assert len(text.split()) == 160
