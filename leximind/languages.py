"""Languages offered for explanations and as the learner's native language."""

from enum import Enum
from typing import List


class SupportedLanguage(str, Enum):
    """Display/explanation languages. Values are sent verbatim in prompts."""
    ENGLISH = "English"
    SPANISH = "Spanish"
    FRENCH = "French"
    GERMAN = "German"
    CHINESE = "Chinese (Simplified)"
    JAPANESE = "Japanese"
    KOREAN = "Korean"
    HINDI = "Hindi"
    ARABIC = "Arabic"
    PORTUGUESE = "Portuguese"
    RUSSIAN = "Russian"
    ITALIAN = "Italian"

    @classmethod
    def from_string(cls, s: str) -> "SupportedLanguage":
        try:
            return cls(s)
        except ValueError:
            for language in cls:
                if language.name == s.upper():
                    return language
            raise

    @classmethod
    def display_names(cls) -> List[str]:
        return [language.value for language in cls]


DEFAULT_EXPLANATION_LANGUAGE = SupportedLanguage.SPANISH
DEFAULT_NATIVE_LANGUAGE = SupportedLanguage.ENGLISH
