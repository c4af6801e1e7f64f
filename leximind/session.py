"""
State for the word currently under inspection.

A fresh WordSession is allocated for every search, so nothing from a
previous word can leak into the next one. Each session carries the search
generation that created it; results from older generations are discarded
by the controller.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

from .models import AdditionalMeaning, ChatMessage, WordDefinition

Feedback = Literal["like", "dislike"]


@dataclass
class Gallery:
    """Append-only list of image references with one active entry."""
    images: List[str] = field(default_factory=list)
    active_index: int = 0

    @property
    def current(self) -> Optional[str]:
        if 0 <= self.active_index < len(self.images):
            return self.images[self.active_index]
        return None

    def append(self, image: str) -> None:
        """Add an image and make it the active one."""
        self.images.append(image)
        self.active_index = len(self.images) - 1

    def select(self, index: int) -> bool:
        if not 0 <= index < len(self.images):
            return False
        self.active_index = index
        return True

    def __len__(self) -> int:
        return len(self.images)


@dataclass
class WordSession:
    query: str = ""
    generation: int = 0

    definition: Optional[WordDefinition] = None
    gallery: Gallery = field(default_factory=Gallery)
    feedback: Dict[str, Feedback] = field(default_factory=dict)   # image ref -> feedback
    additional_meanings: Optional[List[AdditionalMeaning]] = None
    chat_messages: List[ChatMessage] = field(default_factory=list)
    chat_open: bool = False
    error: Optional[str] = None

    # Loading flags, one per independent operation
    loading_definition: bool = False
    loading_image: bool = False
    loading_variation: bool = False
    loading_meanings: bool = False
    loading_audio: bool = False
    chat_pending: bool = False

    @property
    def current_image(self) -> Optional[str]:
        return self.gallery.current

    @property
    def current_feedback(self) -> Optional[Feedback]:
        image = self.current_image
        return self.feedback.get(image) if image else None

    def toggle_feedback(self, value: Feedback) -> Optional[Feedback]:
        """
        Like/dislike the active image. Repeating the current value clears it;
        the other value replaces it. Returns the resulting feedback.
        """
        image = self.current_image
        if image is None:
            return None
        if self.feedback.get(image) == value:
            del self.feedback[image]
            return None
        self.feedback[image] = value
        return value

    def variation_context(self) -> str:
        """Style hint for the next generated variation."""
        if len(self.gallery) == 1:
            return "Abstract and colorful interpretation"
        return "Real world scenario usage"
