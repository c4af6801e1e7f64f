"""
OpenAI-backed services for LexiMind.

This module is the only boundary to the generative-AI service:
- Word definitions (structured JSON)
- "Hidden gems": idioms, trivia and slang beyond the definition
- Illustrations for a word, plus stylistic variations
- Practice stories built from wordbook words
- Chat about the word currently on screen
- Pronunciation audio

Every structured response is validated against `leximind.schemas`; anything
malformed becomes a `RequestFailure`, anything empty an `EmptyResult`.
Image generation, extra meanings and speech never raise: they are
enhancements and degrade to "nothing".
"""

import base64
import io
import json
import os
import random
import re
import tempfile
from typing import Any, Dict, List, Optional, Sequence

from PIL import Image
from pydantic import ValidationError

from .audio import SAMPLE_RATE, SamplePlayer, decode_pcm16, play_samples
from .config import Settings
from .languages import SupportedLanguage
from .logger import Timer, logger
from .models import AdditionalMeaning, ChatMessage, StoryQuiz, WordDefinition
from .schemas import (
    DEFINITION_SCHEMA,
    MEANINGS_SCHEMA,
    STORY_SCHEMA,
    DefinitionPayload,
    MeaningsPayload,
    StoryPayload,
)

MAX_STORY_WORDS = 8


class GenerationError(Exception):
    """Raised when the service cannot produce a usable result."""


class RequestFailure(GenerationError):
    """Network/service error, or a response that does not match its schema."""


class EmptyResult(GenerationError):
    """The service answered but returned nothing usable."""


def select_story_words(
    words: Sequence[str],
    limit: int = MAX_STORY_WORDS,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Random subset of at most `limit` words; fewer words are returned as-is."""
    words = list(words)
    if len(words) <= limit:
        return words
    return (rng or random).sample(words, limit)


def build_image_prompt(word: str, style_context: Optional[str] = None) -> str:
    """Prompt for an illustration that contains no text."""
    base = (
        f'A high-quality artistic illustration of the concept "{word}". '
        "IMPORTANT: Do NOT include any text, letters, labels, or words in the image. "
        "Pure visual representation only."
    )
    if style_context:
        return f"{base} Context: {style_context}. Vivid, distinct visual style."
    return f"{base} Minimalist, solid, clean composition."


def _language_name(language: Any) -> str:
    return language.value if isinstance(language, SupportedLanguage) else str(language)


def _slug(word: str) -> str:
    slug = re.sub(r"[^\w]+", "_", word.lower(), flags=re.UNICODE).strip("_")
    return slug[:32] or "word"


class AIGateway:
    """Request/response wrapper around an OpenAI client.

    `client` may be None (no API key): definitions and stories then fail
    with RequestFailure and the best-effort operations return nothing.
    """

    def __init__(
        self,
        client: Any,
        settings: Settings,
        player: SamplePlayer = play_samples,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.client = client
        self.settings = settings
        self._player = player
        self._rng = rng or random.Random()

    @property
    def is_available(self) -> bool:
        return self.client is not None

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _complete_json(self, purpose: str, messages: List[Dict[str, str]], temperature: float) -> Any:
        """Run a JSON-mode chat completion and return the decoded JSON."""
        if self.client is None:
            raise RequestFailure("OpenAI client not configured")

        endpoint = f"chat.completions.create ({purpose})"
        logger.api_call(endpoint, model=self.settings.chat_model)
        try:
            with Timer() as timer:
                completion = self.client.chat.completions.create(
                    model=self.settings.chat_model,
                    response_format={"type": "json_object"},
                    messages=messages,
                    temperature=temperature,
                )
            raw = completion.choices[0].message.content
        except Exception as e:
            logger.api_error(f"{purpose} request failed: {e}")
            raise RequestFailure(f"{purpose} request failed: {e}") from e
        logger.api_response(endpoint, duration_ms=timer.duration_ms)

        if not raw or not raw.strip():
            raise EmptyResult(f"{purpose}: empty response")
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise RequestFailure(f"{purpose}: response is not valid JSON") from e

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def define_word(
        self,
        word: str,
        explanation_language: SupportedLanguage,
        native_language: SupportedLanguage,
    ) -> WordDefinition:
        """
        Structured definition of `word`.

        Raises:
            RequestFailure: service error or malformed response
            EmptyResult: the service returned nothing
        """
        explain_in = _language_name(explanation_language)
        native = _language_name(native_language)
        logger.api(f"define_word() '{word}' (explain in {explain_in}, native {native})")

        messages = [
            {
                "role": "system",
                "content": "You are a world-class linguist.\n" + DEFINITION_SCHEMA,
            },
            {
                "role": "user",
                "content": (
                    f'Analyze the word "{word}".\n\n'
                    "User context:\n"
                    f"- Native language: {native} (the user speaks this).\n"
                    f"- Explanation language: {explain_in} (the user wants definitions in this language).\n\n"
                    "Provide:\n"
                    "1. The word itself (corrected if misspelled).\n"
                    "2. Phonetic transcription (IPA).\n"
                    f"3. Part of speech (translated into {explain_in}).\n"
                    f"4. A clear, concise definition explained in {explain_in}.\n"
                    "5. A definition in the word's original language.\n"
                    "6. Three distinct example sentences in the original language, each followed "
                    f"by a translation in {native} in parentheses.\n"
                    "7. Five synonyms.\n"
                    f"8. A brief etymology explained in {explain_in}.\n"
                    "9. Vibe check: 1 or 2 short sentences on the typical usage context, tone or "
                    f"social circumstances, in {explain_in}."
                ),
            },
        ]

        data = self._complete_json("definition", messages, temperature=0.3)
        if not data:
            raise EmptyResult(f"No definition returned for '{word}'")
        try:
            definition = DefinitionPayload.model_validate(data).to_model()
        except ValidationError as e:
            logger.api_error(f"Definition response failed validation: {e.error_count()} error(s)")
            raise RequestFailure(f"Malformed definition for '{word}'") from e

        logger.success(f"Definition ready: {definition.word} [{definition.part_of_speech}]")
        return definition

    def extra_meanings(self, word: str, explanation_language: SupportedLanguage) -> List[AdditionalMeaning]:
        """Up to three lesser-known facts about `word`; [] when nothing usable comes back."""
        explain_in = _language_name(explanation_language)
        logger.api(f"extra_meanings() '{word}' (explain in {explain_in})")

        messages = [
            {"role": "system", "content": "You are a curious etymologist and slang expert.\n" + MEANINGS_SCHEMA},
            {
                "role": "user",
                "content": (
                    f'Analyze the word "{word}". Give 3 "hidden gems" or interesting facts about it. '
                    "Do NOT provide standard definitions. Provide 3 distinct items, such as:\n"
                    "1. A common idiom or slang usage.\n"
                    "2. A surprising origin or etymology fact.\n"
                    "3. A specific cultural reference or street nuance.\n\n"
                    f"Explain in {explain_in}. Translate each 'context' label into {explain_in}."
                ),
            },
        ]

        try:
            data = self._complete_json("extra meanings", messages, temperature=0.7)
            if isinstance(data, list):
                items = data
            elif isinstance(data, dict):
                items = data.get("meanings") or []
            else:
                items = []
            meanings = MeaningsPayload.model_validate({"meanings": items}).to_models()
        except (GenerationError, ValidationError) as e:
            logger.warning(f"No extra meanings for '{word}': {e}")
            return []

        logger.success(f"{len(meanings)} extra meaning(s) for '{word}'")
        return meanings

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def generate_image(self, word: str, style_context: Optional[str] = None) -> Optional[str]:
        """
        Illustrate `word` and store the PNG under the data directory.

        Returns:
            Path to the image, or None on any failure. Never raises.
        """
        if self.client is None:
            logger.warning("OpenAI client not available, skipping image generation")
            return None

        prompt = build_image_prompt(word, style_context)
        logger.img_start(prompt)

        try:
            logger.api_call("images.generate", model=self.settings.image_model)
            with Timer() as timer:
                result = self.client.images.generate(
                    model=self.settings.image_model,
                    prompt=prompt,
                    size=self.settings.image_size,
                    quality="standard",
                    response_format="b64_json",
                )
            logger.api_response("images.generate", duration_ms=timer.duration_ms)

            b64_data = getattr(result.data[0], "b64_json", None)
            if not b64_data:
                logger.img_error("Response missing b64_json data")
                return None

            image_bytes = base64.b64decode(b64_data)
            with Image.open(io.BytesIO(image_bytes)) as image:
                image.verify()

            path = self._write_image(word, image_bytes)
            logger.img_complete(path, duration_ms=timer.duration_ms)
            return path

        except Exception as e:
            logger.img_error(f"Image generation failed: {e}")
            return None

    def _write_image(self, word: str, image_bytes: bytes) -> str:
        images_dir = self.settings.images_dir
        images_dir.mkdir(parents=True, exist_ok=True)
        fd, path = tempfile.mkstemp(suffix=".png", prefix=f"{_slug(word)}_", dir=images_dir)
        with os.fdopen(fd, "wb") as f:
            f.write(image_bytes)
        return path

    # ------------------------------------------------------------------
    # Practice stories
    # ------------------------------------------------------------------

    def compose_story(self, words: Sequence[str], explanation_language: SupportedLanguage) -> StoryQuiz:
        """
        Short story using (a random subset of at most 8 of) `words`,
        each occurrence wrapped as {{word}}.

        Raises:
            RequestFailure / EmptyResult
        """
        subset = select_story_words(words, rng=self._rng)
        if not subset:
            raise EmptyResult("No words to build a story from")

        explain_in = _language_name(explanation_language)
        logger.api(f"compose_story() with {len(subset)}/{len(words)} word(s): {', '.join(subset)}")

        messages = [
            {"role": "system", "content": "You write short, vivid stories for language learners.\n" + STORY_SCHEMA},
            {
                "role": "user",
                "content": (
                    "Create a creative, coherent and short story (about 150 words) that includes "
                    f"the following words exactly: {', '.join(subset)}.\n\n"
                    "Whenever one of the requested words (or a grammatical variation of it) appears, "
                    'wrap it in double curly braces. Example: "The {{cat}} sat on the {{mat}}."\n\n'
                    "Write the story in the words' original language, simple enough for learners. "
                    f"The reader's explanation language is {explain_in}."
                ),
            },
        ]

        data = self._complete_json("story", messages, temperature=0.9)
        if not data:
            raise EmptyResult("No story returned")
        try:
            story = StoryPayload.model_validate(data).to_model()
        except ValidationError as e:
            logger.api_error(f"Story response failed validation: {e.error_count()} error(s)")
            raise RequestFailure("Malformed story response") from e

        logger.success(f"Story ready: \"{story.title}\" ({len(story.words_used)} word(s) used)")
        return story

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    def chat_turn(
        self,
        prior_turns: Sequence[ChatMessage],
        new_message: str,
        current_word: str,
        explanation_language: SupportedLanguage,
        native_language: SupportedLanguage,
    ) -> str:
        """
        One chat turn about `current_word`. The whole transcript is resent;
        nothing is kept between calls.

        Returns the reply text ("" if the service had nothing to say).
        Raises RequestFailure on service errors.
        """
        if self.client is None:
            raise RequestFailure("OpenAI client not configured")

        explain_in = _language_name(explanation_language)
        native = _language_name(native_language)
        system = (
            f'You are a helpful dictionary assistant. The user is currently looking at the word "{current_word}".\n'
            "User profile:\n"
            f"- Native language: {native}\n"
            f"- Learning/explanation language: {explain_in}\n\n"
            "Answer their questions about grammar, usage, nuance, or culture related to this word. "
            "Keep answers concise and helpful. "
            f"Ensure all explanations are in {explain_in}, unless the user asks for a translation "
            "to their native language."
        )
        messages = [{"role": "system", "content": system}]
        messages.extend({"role": turn.role, "content": turn.text} for turn in prior_turns)
        messages.append({"role": "user", "content": new_message})

        logger.api_call(f"chat.completions.create (chat, {len(prior_turns)} prior turn(s))",
                        model=self.settings.chat_model)
        try:
            with Timer() as timer:
                completion = self.client.chat.completions.create(
                    model=self.settings.chat_model,
                    messages=messages,
                    temperature=0.7,
                )
            text = completion.choices[0].message.content
        except Exception as e:
            logger.api_error(f"Chat turn failed: {e}")
            raise RequestFailure(f"Chat turn failed: {e}") from e
        logger.api_response("chat.completions.create (chat)", duration_ms=timer.duration_ms)

        return (text or "").strip()

    # ------------------------------------------------------------------
    # Pronunciation
    # ------------------------------------------------------------------

    def synthesize_speech(self, word: str) -> bool:
        """
        Fetch PCM audio for `word` and start playing it.

        Returns True if playback started. No audio, or any failure, is a
        silent no-op.
        """
        if self.client is None:
            logger.warning("OpenAI client not available, skipping pronunciation")
            return False

        logger.api_call("audio.speech.create", model=self.settings.speech_model)
        try:
            with Timer() as timer:
                response = self.client.audio.speech.create(
                    model=self.settings.speech_model,
                    voice=self.settings.speech_voice,
                    input=word,
                    response_format="pcm",
                )
                payload = b"".join(response.iter_bytes())
            logger.api_response("audio.speech.create", duration_ms=timer.duration_ms)
        except Exception as e:
            logger.error(f"Speech synthesis failed: {e}")
            return False

        if not payload:
            logger.audio(f"No audio returned for '{word}'")
            return False

        try:
            samples = decode_pcm16(payload)
            self._player(samples, SAMPLE_RATE)
        except Exception as e:
            logger.error(f"Audio playback failed: {e}")
            return False
        return True
