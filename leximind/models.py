import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal


@dataclass(frozen=True)
class WordDefinition:
    """Structured dictionary entry for the searched word."""
    word: str                            # Corrected spelling of the query
    phonetic: str                        # IPA transcription
    part_of_speech: str                  # In the explanation language
    definition: str                      # In the explanation language
    original_definition: str             # In the word's own language
    examples: List[str] = field(default_factory=list)   # Sentence + (native translation)
    synonyms: List[str] = field(default_factory=list)
    etymology: str = ""
    vibes: List[str] = field(default_factory=list)      # Usage context / tone


@dataclass(frozen=True)
class AdditionalMeaning:
    """A "hidden gem": idiom, trivia or slang beyond the core definition."""
    context: str                         # Short label, e.g. "Idiom"
    definition: str


ChatRole = Literal["user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: ChatRole
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class SavedItem:
    """A wordbook entry. Copies what it needs from the session."""
    word: str
    image_url: str                       # Path of the saved illustration
    definition: str                      # Definition snippet
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "word": self.word,
            "imageUrl": self.image_url,
            "definition": self.definition,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedItem":
        return cls(
            id=str(data["id"]),
            word=str(data["word"]),
            image_url=str(data["imageUrl"]),
            definition=str(data.get("definition", "")),
            timestamp=int(data.get("timestamp", 0)),
        )


@dataclass(frozen=True)
class StoryQuiz:
    """Practice story. Content wraps target words as {{word}}."""
    title: str
    content: str
    words_used: List[str] = field(default_factory=list)
