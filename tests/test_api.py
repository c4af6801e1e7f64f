import random
from pathlib import Path

import pytest

from conftest import DEFINITION_JSON
from leximind.api import (
    AIGateway,
    EmptyResult,
    RequestFailure,
    build_image_prompt,
    select_story_words,
)
from leximind.languages import SupportedLanguage
from leximind.models import ChatMessage

ES = SupportedLanguage.SPANISH
EN = SupportedLanguage.ENGLISH


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

def test_define_word_parses_response(gateway, fake_client):
    fake_client.completions.responses.append(DEFINITION_JSON)

    definition = gateway.define_word("gatto", ES, EN)

    assert definition.word == "gato"
    assert definition.part_of_speech == "sustantivo"
    assert definition.synonyms == ["minino", "felino"]
    call = fake_client.completions.calls[0]
    assert call["response_format"] == {"type": "json_object"}
    assert "gatto" in call["messages"][-1]["content"]
    assert "Spanish" in call["messages"][-1]["content"]


def test_define_word_missing_field_is_request_failure(gateway, fake_client):
    broken = dict(DEFINITION_JSON)
    del broken["phonetic"]
    fake_client.completions.responses.append(broken)
    with pytest.raises(RequestFailure):
        gateway.define_word("gato", ES, EN)


def test_define_word_invalid_json_is_request_failure(gateway, fake_client):
    fake_client.completions.responses.append("{oops")
    with pytest.raises(RequestFailure):
        gateway.define_word("gato", ES, EN)


def test_define_word_empty_response_is_empty_result(gateway, fake_client):
    fake_client.completions.responses.append("")
    with pytest.raises(EmptyResult):
        gateway.define_word("gato", ES, EN)


def test_define_word_service_error_is_request_failure(gateway, fake_client):
    fake_client.completions.responses.append(ConnectionError("offline"))
    with pytest.raises(RequestFailure):
        gateway.define_word("gato", ES, EN)


# ---------------------------------------------------------------------------
# Extra meanings
# ---------------------------------------------------------------------------

def test_extra_meanings_capped_at_three(gateway, fake_client):
    fake_client.completions.responses.append(
        {"meanings": [{"context": f"C{i}", "definition": f"D{i}"} for i in range(5)]}
    )
    meanings = gateway.extra_meanings("gato", ES)
    assert [m.context for m in meanings] == ["C0", "C1", "C2"]


def test_extra_meanings_accepts_bare_list(gateway, fake_client):
    fake_client.completions.responses.append('[{"context": "Idiom", "definition": "dar gato por liebre"}]')
    assert len(gateway.extra_meanings("gato", ES)) == 1


def test_extra_meanings_degrade_to_empty(gateway, fake_client):
    fake_client.completions.responses.append({"meanings": [{"context": "Idiom"}]})
    assert gateway.extra_meanings("gato", ES) == []

    fake_client.completions.responses.append(ConnectionError("offline"))
    assert gateway.extra_meanings("gato", ES) == []


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

def test_build_image_prompt_forbids_text():
    plain = build_image_prompt("gato")
    styled = build_image_prompt("gato", "Real world scenario usage")
    assert "Do NOT include any text" in plain
    assert "Minimalist" in plain
    assert "Context: Real world scenario usage" in styled


def test_generate_image_writes_png(gateway, fake_client, settings):
    path = gateway.generate_image("gato", "Abstract and colorful interpretation")

    assert path is not None
    written = Path(path)
    assert written.parent == settings.images_dir
    assert written.suffix == ".png"
    assert written.name.startswith("gato_")
    assert written.read_bytes().startswith(b"\x89PNG")
    assert fake_client.images.calls[0]["response_format"] == "b64_json"
    assert "Abstract and colorful" in fake_client.images.calls[0]["prompt"]


def test_generate_image_failures_return_none(gateway, fake_client):
    fake_client.images.b64 = "bm90IGFuIGltYWdl"  # "not an image"
    assert gateway.generate_image("gato") is None

    fake_client.images.error = ConnectionError("offline")
    assert gateway.generate_image("gato") is None


# ---------------------------------------------------------------------------
# Stories
# ---------------------------------------------------------------------------

def test_select_story_words_limits_to_eight():
    words = [f"w{i}" for i in range(10)]
    subset = select_story_words(words, rng=random.Random(7))
    assert len(subset) == 8
    assert len(set(subset)) == 8
    assert set(subset) <= set(words)
    assert select_story_words(["a", "b"]) == ["a", "b"]


def test_compose_story_uses_at_most_eight_words(fake_client, settings):
    gateway = AIGateway(fake_client, settings, rng=random.Random(1))
    fake_client.completions.responses.append(
        {"title": "Un día", "content": "El {{w1}} y el {{w2}}.", "wordsUsed": ["w1", "w2"]}
    )
    words = [f"w{i}" for i in range(10)]

    story = gateway.compose_story(words, ES)

    assert story.title == "Un día"
    assert story.words_used == ["w1", "w2"]
    prompt = fake_client.completions.calls[0]["messages"][-1]["content"]
    assert sum(1 for w in words if f"{w}," in prompt or f"{w}." in prompt) == 8


def test_compose_story_without_words(gateway):
    with pytest.raises(EmptyResult):
        gateway.compose_story([], ES)


def test_compose_story_malformed(gateway, fake_client):
    fake_client.completions.responses.append({"title": "No content"})
    with pytest.raises(RequestFailure):
        gateway.compose_story(["gato"], ES)


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------

def test_chat_turn_resends_history(gateway, fake_client):
    fake_client.completions.responses.append("  Sí, es formal.  ")
    history = [ChatMessage(role="user", text="Hola"), ChatMessage(role="assistant", text="¡Hola!")]

    reply = gateway.chat_turn(history, "Is this word formal?", "gato", ES, EN)

    assert reply == "Sí, es formal."
    messages = fake_client.completions.calls[0]["messages"]
    assert messages[0]["role"] == "system"
    assert '"gato"' in messages[0]["content"]
    assert [(m["role"], m["content"]) for m in messages[1:]] == [
        ("user", "Hola"),
        ("assistant", "¡Hola!"),
        ("user", "Is this word formal?"),
    ]
    assert "response_format" not in fake_client.completions.calls[0]


def test_chat_turn_empty_reply(gateway, fake_client):
    fake_client.completions.responses.append(None)
    assert gateway.chat_turn([], "?", "gato", ES, EN) == ""


def test_chat_turn_failure(gateway, fake_client):
    fake_client.completions.responses.append(TimeoutError("slow"))
    with pytest.raises(RequestFailure):
        gateway.chat_turn([], "?", "gato", ES, EN)


# ---------------------------------------------------------------------------
# Speech
# ---------------------------------------------------------------------------

def test_synthesize_speech_plays_pcm(gateway, fake_client, played):
    assert gateway.synthesize_speech("gato")

    call = fake_client.speech.calls[0]
    assert call["input"] == "gato"
    assert call["response_format"] == "pcm"
    samples, rate = played[0]
    assert rate == 24000
    assert samples.size == 3


def test_synthesize_speech_without_audio_is_noop(gateway, fake_client, played):
    fake_client.speech.payload = b""
    assert not gateway.synthesize_speech("gato")
    assert played == []


# ---------------------------------------------------------------------------
# No client configured
# ---------------------------------------------------------------------------

def test_gateway_without_client(settings, played):
    gateway = AIGateway(None, settings, player=lambda s, r: played.append(s))

    assert not gateway.is_available
    with pytest.raises(RequestFailure):
        gateway.define_word("gato", ES, EN)
    with pytest.raises(RequestFailure):
        gateway.chat_turn([], "?", "gato", ES, EN)
    assert gateway.extra_meanings("gato", ES) == []
    assert gateway.generate_image("gato") is None
    assert not gateway.synthesize_speech("gato")
    assert played == []
