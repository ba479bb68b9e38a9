"""Reference scheme -> vulnerability catalog language mapping."""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from types import MappingProxyType

# Java references (maven / semanticdb) have no catalog language yet, so they
# are left unmapped and never produce candidates.
DEFAULT_SCHEME_LANGUAGES: Mapping[str, str] = MappingProxyType(
    {
        "gomod": "go",
        "npm": "Javascript",
    }
)

SCHEME_LANGUAGES_ENV = "VULNMATCH_SCHEME_LANGUAGES"


class SchemeMapping(Mapping[str, str]):
    """Immutable set of supported ecosystems.

    Usage::

        schemes = SchemeMapping.from_env()
        schemes["gomod"]          # "go"
        list(schemes.conditions())  # [("gomod", "go"), ("npm", "Javascript")]
    """

    def __init__(self, languages: Mapping[str, str] | None = None) -> None:
        source = DEFAULT_SCHEME_LANGUAGES if languages is None else languages
        self._languages = dict(source)

    @classmethod
    def parse(cls, raw: str, base: Mapping[str, str] | None = None) -> SchemeMapping:
        """Overlay ``scheme=language`` pairs (comma separated) on *base*.

        Raises ``ValueError`` on an entry without ``=`` or with an empty side.
        """
        languages = dict(DEFAULT_SCHEME_LANGUAGES if base is None else base)
        for entry in raw.split(","):
            entry = entry.strip()
            if not entry:
                continue
            scheme, sep, language = entry.partition("=")
            scheme, language = scheme.strip(), language.strip()
            if not sep or not scheme or not language:
                raise ValueError(f"invalid scheme mapping entry: {entry!r}")
            languages[scheme] = language
        return cls(languages)

    @classmethod
    def from_env(cls) -> SchemeMapping:
        return cls.parse(os.environ.get(SCHEME_LANGUAGES_ENV, ""))

    def conditions(self) -> list[tuple[str, str]]:
        """``(scheme, language)`` pairs sorted by scheme for a stable query plan."""
        return sorted(self._languages.items())

    def __getitem__(self, scheme: str) -> str:
        return self._languages[scheme]

    def __iter__(self) -> Iterator[str]:
        return iter(self._languages)

    def __len__(self) -> int:
        return len(self._languages)

    def __repr__(self) -> str:
        return f"SchemeMapping({self._languages!r})"
