"""Language configurations for WeaR. A configuration maps the closed set of canonical keywords to the spellings used
in one human language, so the same program can be written as

```
var x = 10          var x = 10
print x + 5         cetak x + 5
```

The registry below is populated at import time and is meant to be treated as read-only afterwards.
"""

import json
from dataclasses import dataclass

from wear.core.tokens import KEYWORD_TOKENS
from wear.lang.error import ConfigError

KEYWORDS = tuple(KEYWORD_TOKENS)  # canonical keyword keys, in declaration order


@dataclass(frozen=True)
class LanguageConfig:
    """One keyword localization: a display name, a language code and a canonical key -> spelling mapping."""
    name: str
    code: str
    keywords: dict

    @classmethod
    def from_dict(cls, data):
        """Builds a LanguageConfig from a parsed JSON object, raising a ConfigError if it is malformed."""
        try:
            name, code, keywords = data["name"], data["code"], data["keywords"]
        except (KeyError, TypeError):
            raise ConfigError("language configuration needs 'name', 'code' and 'keywords'")

        if not isinstance(keywords, dict):
            raise ConfigError(f"keywords of language '{code}' must be a mapping")

        missing = [key for key in KEYWORDS if key not in keywords]
        unknown = [key for key in keywords if key not in KEYWORDS]
        if missing or unknown:
            raise ConfigError(f"language '{code}' has missing keywords {missing} and unknown keywords {unknown}")

        for key, spelling in keywords.items():
            if not is_identifier(spelling):
                raise ConfigError(f"spelling {spelling!r} of keyword '{key}' in language '{code}' is not an identifier")

        spellings = list(keywords.values())
        if len(set(spellings)) != len(spellings):
            raise ConfigError(f"language '{code}' spells two keywords the same way")

        return cls(name, code, {key: keywords[key] for key in KEYWORDS})

    def localizer(self):
        return KeywordLocalizer(self)


def is_identifier(spelling):
    """Whether or not spelling would be read as a single identifier by the tokenizer."""
    if not isinstance(spelling, str) or not spelling:
        return False
    if not (spelling[0].isascii() and (spelling[0].isalpha() or spelling[0] == "_")):
        return False
    return all(char.isascii() and (char.isalnum() or char == "_") for char in spelling)


class KeywordLocalizer:
    """Reverse lookup from a localized spelling to its canonical keyword key for one language configuration."""

    def __init__(self, config):
        self.config = config
        self.reversed = {spelling: canonical for canonical, spelling in config.keywords.items()}

    def canonical(self, spelling):
        """Returns the canonical keyword key spelled by spelling, or None if spelling is not a keyword."""
        return self.reversed.get(spelling)

    def token_kind(self, spelling):
        """Returns the keyword TokenType spelled by spelling, or None."""
        canonical = self.canonical(spelling)
        return KEYWORD_TOKENS[canonical] if canonical else None

    def spell(self, canonical):
        """Returns the localized spelling of a canonical keyword key."""
        return self.config.keywords[canonical]


ENGLISH = LanguageConfig.from_dict({
    "name": "English",
    "code": "en",
    "keywords": {key: key for key in KEYWORDS},
})

INDONESIAN = LanguageConfig.from_dict({
    "name": "Indonesian",
    "code": "id",
    "keywords": {
        "var": "var",
        "const": "konstan",
        "function": "fungsi",
        "return": "kembalikan",
        "if": "jika",
        "else": "lainnya",
        "while": "selama",
        "for": "untuk",
        "and": "dan",
        "or": "atau",
        "print": "cetak",
        "true": "benar",
        "false": "salah",
        "null": "kosong",
    },
})

_languages = {
    ENGLISH.code: ENGLISH,
    INDONESIAN.code: INDONESIAN,
}


def get_language(code):
    """Returns the configuration registered under code (case-insensitive)."""
    config = _languages.get(code.lower())
    if config is None:
        available = ", ".join(available_languages())
        raise ConfigError(f"language configuration not found for code '{code}'. Available: {available}")
    return config


def available_languages():
    return list(_languages)


def register_language(config):
    """Registers config under its code, replacing any configuration already registered there."""
    _languages[config.code.lower()] = config


def default_language():
    return ENGLISH


def load_language(path):
    """Reads a language configuration from a JSON file with the same shape as the built-in ones."""
    try:
        with open(path, "r", encoding="utf-8") as file:
            data = json.load(file)
    except OSError:
        raise ConfigError(f"'{path}' could not be opened")
    except ValueError as exc:
        raise ConfigError(f"'{path}' is not valid JSON: {exc}")

    return LanguageConfig.from_dict(data)
