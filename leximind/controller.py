"""
Top-level orchestration for LexiMind.

`ViewController` owns all application state (current view, languages, the
word session, the wordbook and the practice story) and maps each user action
onto the AI gateway. Work is submitted to a task runner; results come back
on the UI thread and are committed only if they still belong to the current
search. Listeners are notified after every state change so the UI can
re-render.
"""

from enum import Enum
from typing import Any, Callable, List, Optional

from .api import AIGateway
from .languages import DEFAULT_EXPLANATION_LANGUAGE, DEFAULT_NATIVE_LANGUAGE, SupportedLanguage
from .logger import logger
from .models import AdditionalMeaning, ChatMessage, StoryQuiz, WordDefinition
from .session import Feedback, WordSession
from .store import CollectionStore
from .story import StoryBoard, candidate_words

CHAT_FALLBACK_REPLY = "I couldn't answer that at the moment."


class View(str, Enum):
    SEARCH = "search"
    WORDBOOK = "wordbook"


class ViewController:
    def __init__(self, gateway: AIGateway, store: CollectionStore, runner: Any) -> None:
        self.gateway = gateway
        self.store = store
        self.runner = runner

        self.view = View.SEARCH
        self.explanation_language: SupportedLanguage = DEFAULT_EXPLANATION_LANGUAGE
        self.native_language: SupportedLanguage = DEFAULT_NATIVE_LANGUAGE

        self.session = WordSession()
        self._search_generation = 0

        self.story_board: Optional[StoryBoard] = None
        self.loading_story = False
        self.story_error: Optional[str] = None

        self._listeners: List[Callable[[], None]] = []

        self._prune_images()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _prune_images(self) -> None:
        """Drop generated images that are neither saved nor in the current gallery."""
        self.store.prune_images(self.gateway.settings.images_dir, keep=self.session.gallery.images)

    def _release_image(self, image: Optional[str]) -> None:
        if image:
            self.store.release_image(image, keep=self.session.gallery.images)

    def _is_current(self, generation: int) -> bool:
        if generation != self._search_generation:
            logger.debug(f"Discarding stale result from search #{generation} "
                         f"(current #{self._search_generation})")
            return False
        return True

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def current_image(self) -> Optional[str]:
        return self.session.current_image

    @property
    def current_feedback(self) -> Optional[Feedback]:
        return self.session.current_feedback

    @property
    def is_current_saved(self) -> bool:
        definition = self.session.definition
        image = self.current_image
        if definition is None or image is None:
            return False
        return self.store.contains(definition.word, image)

    @property
    def story(self) -> Optional[StoryQuiz]:
        return self.story_board.story if self.story_board else None

    # ------------------------------------------------------------------
    # Views and languages
    # ------------------------------------------------------------------

    def show_view(self, view: View) -> None:
        if view == self.view:
            return
        logger.ui_transition(self.view.value, view.value)
        self.view = view
        self._notify()

    def toggle_wordbook(self) -> None:
        self.show_view(View.SEARCH if self.view == View.WORDBOOK else View.WORDBOOK)

    def set_explanation_language(self, language: SupportedLanguage) -> None:
        logger.ui(f"Explanation language: {language.value}")
        self.explanation_language = language
        self._notify()

    def set_native_language(self, language: SupportedLanguage) -> None:
        logger.ui(f"Native language: {language.value}")
        self.native_language = language
        self._notify()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, query: str) -> bool:
        """
        Start a new search. The previous session is dropped before any
        request is issued; definition and first image load concurrently.
        """
        query = query.strip()
        if not query:
            return False

        self._search_generation += 1
        generation = self._search_generation
        logger.separator(f"Search #{generation}: {query}")

        self.view = View.SEARCH
        self.session = WordSession(
            query=query,
            generation=generation,
            loading_definition=True,
            loading_image=True,
        )
        self._prune_images()
        self._notify()

        explain_in = self.explanation_language
        native = self.native_language
        self.runner.submit(
            "define_word",
            lambda: self.gateway.define_word(query, explain_in, native),
            lambda definition: self._on_definition(generation, definition),
            lambda error: self._on_definition_error(generation, error),
        )
        self.runner.submit(
            "generate_image",
            lambda: self.gateway.generate_image(query),
            lambda image: self._on_first_image(generation, image),
            lambda error: self._on_first_image(generation, None),
        )
        return True

    def _on_definition(self, generation: int, definition: WordDefinition) -> None:
        if not self._is_current(generation):
            return
        self.session.definition = definition
        self.session.loading_definition = False
        self._notify()

    def _on_definition_error(self, generation: int, error: Exception) -> None:
        if not self._is_current(generation):
            return
        logger.error(f"Search failed for '{self.session.query}': {error}")
        self.session.loading_definition = False
        self.session.error = f"Could not find \"{self.session.query}\". Please try again."
        self._notify()

    def _on_first_image(self, generation: int, image: Optional[str]) -> None:
        if not self._is_current(generation):
            self._release_image(image)
            return
        if image:
            self.session.gallery.append(image)
        self.session.loading_image = False
        self._notify()

    # ------------------------------------------------------------------
    # Pronunciation
    # ------------------------------------------------------------------

    def play_pronunciation(self) -> bool:
        session = self.session
        if session.definition is None or session.loading_audio:
            return False
        session.loading_audio = True
        self._notify()

        word = session.definition.word

        def _finish(_: Any = None) -> None:
            session.loading_audio = False
            self._notify()

        self.runner.submit("synthesize_speech", lambda: self.gateway.synthesize_speech(word), _finish, _finish)
        return True

    # ------------------------------------------------------------------
    # Hidden gems
    # ------------------------------------------------------------------

    def reveal_secrets(self) -> bool:
        """Fetch extra meanings once per word session."""
        session = self.session
        if session.definition is None or session.loading_meanings or session.additional_meanings is not None:
            return False
        session.loading_meanings = True
        self._notify()

        generation = session.generation
        word = session.definition.word
        explain_in = self.explanation_language
        self.runner.submit(
            "extra_meanings",
            lambda: self.gateway.extra_meanings(word, explain_in),
            lambda meanings: self._on_meanings(generation, meanings),
            lambda error: self._on_meanings(generation, []),
        )
        return True

    def _on_meanings(self, generation: int, meanings: List[AdditionalMeaning]) -> None:
        if not self._is_current(generation):
            return
        self.session.additional_meanings = list(meanings)
        self.session.loading_meanings = False
        self._notify()

    # ------------------------------------------------------------------
    # Gallery
    # ------------------------------------------------------------------

    def generate_variation(self) -> bool:
        session = self.session
        if session.definition is None or session.loading_variation:
            return False
        session.loading_variation = True
        self._notify()

        generation = session.generation
        word = session.definition.word
        context = session.variation_context()
        logger.ui(f"Generating variation #{len(session.gallery)} ({context})")
        self.runner.submit(
            "generate_variation",
            lambda: self.gateway.generate_image(word, context),
            lambda image: self._on_variation(generation, image),
            lambda error: self._on_variation(generation, None),
        )
        return True

    def _on_variation(self, generation: int, image: Optional[str]) -> None:
        if not self._is_current(generation):
            self._release_image(image)
            return
        if image:
            self.session.gallery.append(image)
        self.session.loading_variation = False
        self._notify()

    def select_image(self, index: int) -> bool:
        if not self.session.gallery.select(index):
            return False
        self._notify()
        return True

    def toggle_feedback(self, value: Feedback) -> Optional[Feedback]:
        if self.current_image is None:
            return None
        result = self.session.toggle_feedback(value)
        logger.ui(f"Image feedback: {result or 'cleared'}")
        self._notify()
        return result

    # ------------------------------------------------------------------
    # Wordbook
    # ------------------------------------------------------------------

    def save_current(self) -> bool:
        definition = self.session.definition
        image = self.current_image
        if definition is None or image is None:
            return False
        item = self.store.save(definition.word, image, definition.definition)
        if item is None:
            return False
        self._notify()
        return True

    def remove_saved(self, item_id: str) -> bool:
        removed = next((item for item in self.store.items if item.id == item_id), None)
        if removed is None or not self.store.remove(item_id):
            return False
        self._release_image(removed.image_url)
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    def open_chat(self) -> None:
        if self.session.definition is None:
            return
        self.session.chat_open = True
        self._notify()

    def close_chat(self) -> None:
        self.session.chat_open = False
        self._notify()

    def send_chat(self, text: str) -> bool:
        """Send one message; refused while a reply is still pending."""
        session = self.session
        text = text.strip()
        if not text or session.definition is None or session.chat_pending:
            return False

        history = list(session.chat_messages)
        session.chat_messages.append(ChatMessage(role="user", text=text))
        session.chat_pending = True
        self._notify()

        generation = session.generation
        word = session.definition.word
        explain_in = self.explanation_language
        native = self.native_language
        self.runner.submit(
            "chat_turn",
            lambda: self.gateway.chat_turn(history, text, word, explain_in, native),
            lambda reply: self._on_chat_reply(generation, reply),
            lambda error: self._on_chat_reply(generation, ""),
        )
        return True

    def _on_chat_reply(self, generation: int, reply: str) -> None:
        if not self._is_current(generation):
            return
        self.session.chat_messages.append(ChatMessage(role="assistant", text=reply or CHAT_FALLBACK_REPLY))
        self.session.chat_pending = False
        self._notify()

    # ------------------------------------------------------------------
    # Practice story
    # ------------------------------------------------------------------

    def generate_story(self) -> bool:
        if len(self.store) == 0 or self.loading_story:
            return False

        self.story_board = None
        self.story_error = None
        self.loading_story = True
        self._notify()

        words = candidate_words(self.store.items)
        explain_in = self.explanation_language
        self.runner.submit(
            "compose_story",
            lambda: self.gateway.compose_story(words, explain_in),
            self._on_story,
            self._on_story_error,
        )
        return True

    def _on_story(self, story: StoryQuiz) -> None:
        self.story_board = StoryBoard(story)
        self.loading_story = False
        self._notify()

    def _on_story_error(self, error: Exception) -> None:
        logger.error(f"Story generation failed: {error}")
        self.story_error = "Could not write a story right now. Please try again."
        self.loading_story = False
        self._notify()

    def dismiss_story(self) -> None:
        self.story_board = None
        self._notify()

    def reveal_blank(self, index: int) -> bool:
        if self.story_board is None or not self.story_board.reveal(index):
            return False
        self._notify()
        return True
