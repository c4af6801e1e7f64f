"""
Response schemas for the generative-AI service.

Each structured response is validated here before anything reaches the rest
of the app. Field names follow the JSON the prompts ask for (camelCase);
`to_model()` converts into the dataclasses in `leximind.models`.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .models import AdditionalMeaning, StoryQuiz, WordDefinition

MAX_ADDITIONAL_MEANINGS = 3


class DefinitionPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    word: str = Field(..., min_length=1)
    phonetic: str
    part_of_speech: str = Field(..., alias="partOfSpeech")
    definition: str = Field(..., min_length=1)
    original_definition: str = Field(..., alias="originalDefinition")
    examples: List[str]
    synonyms: List[str]
    etymology: str
    vibes: List[str]

    def to_model(self) -> WordDefinition:
        return WordDefinition(
            word=self.word.strip(),
            phonetic=self.phonetic.strip(),
            part_of_speech=self.part_of_speech.strip(),
            definition=self.definition.strip(),
            original_definition=self.original_definition.strip(),
            examples=[e.strip() for e in self.examples if e.strip()],
            synonyms=[s.strip() for s in self.synonyms if s.strip()],
            etymology=self.etymology.strip(),
            vibes=[v.strip() for v in self.vibes if v.strip()],
        )


class MeaningPayload(BaseModel):
    context: str = Field(..., min_length=1)
    definition: str = Field(..., min_length=1)


class MeaningsPayload(BaseModel):
    meanings: List[MeaningPayload] = Field(default_factory=list)

    def to_models(self) -> List[AdditionalMeaning]:
        return [
            AdditionalMeaning(context=m.context.strip(), definition=m.definition.strip())
            for m in self.meanings[:MAX_ADDITIONAL_MEANINGS]
        ]


class StoryPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    content: str = Field(..., min_length=1)
    words_used: List[str] = Field(default_factory=list, alias="wordsUsed")

    def to_model(self) -> StoryQuiz:
        return StoryQuiz(title=self.title.strip(), content=self.content, words_used=list(self.words_used))


# Schema documentation embedded in prompts
DEFINITION_SCHEMA = """
Return ONLY a JSON object with exactly these fields:
{
  "word": "the word itself, corrected if misspelled",
  "phonetic": "IPA transcription",
  "partOfSpeech": "part of speech",
  "definition": "clear, concise definition",
  "originalDefinition": "definition in the word's original language",
  "examples": ["three example sentences"],
  "synonyms": ["five synonyms"],
  "etymology": "brief origin of the word",
  "vibes": ["1 or 2 short sentences on usage context or tone"]
}
"""

MEANINGS_SCHEMA = """
Return ONLY a JSON object:
{
  "meanings": [
    {"context": "short label such as Idiom, History, Slang", "definition": "the fact or explanation"}
  ]
}
"""

STORY_SCHEMA = """
Return ONLY a JSON object:
{
  "title": "a creative title for the story",
  "content": "the story text with every requested word wrapped as {{word}}",
  "wordsUsed": ["the requested words that were successfully included"]
}
"""
