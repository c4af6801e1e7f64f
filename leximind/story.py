"""
Fill-in-the-blank practice stories.

Story content marks practice words as {{word}}. `parse_story` splits it into
literal text and blanks; `StoryBoard` tracks which blanks the learner has
revealed. A revealed blank stays revealed for as long as the story is shown.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Set

from .models import SavedItem, StoryQuiz

BLANK_PATTERN = re.compile(r"(\{\{.*?\}\})")


@dataclass(frozen=True)
class StorySegment:
    text: str
    is_blank: bool = False


def candidate_words(items: Iterable[SavedItem]) -> List[str]:
    """Distinct words across saved items, in order of first appearance."""
    return list(dict.fromkeys(item.word for item in items))


def parse_story(content: str) -> List[StorySegment]:
    segments = []
    for part in BLANK_PATTERN.split(content):
        if not part:
            continue
        if part.startswith("{{") and part.endswith("}}"):
            segments.append(StorySegment(text=part[2:-2], is_blank=True))
        else:
            segments.append(StorySegment(text=part))
    return segments


@dataclass
class StoryBoard:
    story: StoryQuiz
    segments: List[StorySegment] = field(init=False)
    revealed: Set[int] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.segments = parse_story(self.story.content)

    @property
    def blank_indices(self) -> List[int]:
        return [i for i, segment in enumerate(self.segments) if segment.is_blank]

    def reveal(self, index: int) -> bool:
        """Reveal the blank at segment `index`. Returns False if it is not a blank."""
        if not 0 <= index < len(self.segments) or not self.segments[index].is_blank:
            return False
        self.revealed.add(index)
        return True

    def is_revealed(self, index: int) -> bool:
        return index in self.revealed

    @property
    def all_revealed(self) -> bool:
        return all(i in self.revealed for i in self.blank_indices)
