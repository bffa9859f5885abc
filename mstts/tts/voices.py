"""Voice profile catalog for synthesis configuration.

Responsibilities:
- Hold the fixed language to voice table used by the speech service.
- Resolve a language and optional requested voice to one concrete voice.
"""

from __future__ import annotations

from typing import Iterable

from ..models.datatypes import LanguageVoiceProfile

DEFAULT_LANGUAGE = "en-US"

DEFAULT_VOICE_PROFILES: tuple[LanguageVoiceProfile, ...] = (
    LanguageVoiceProfile(
        language="en-US",
        default_voice="en-US-RyanMultilingualNeural",
        alternative_voices=frozenset(
            {"en-US-JennyMultilingualNeural", "en-US-AndrewMultilingualNeural"}
        ),
    ),
    # The multilingual English voice reads Finnish better than the native ones.
    LanguageVoiceProfile(
        language="fi-FI",
        default_voice="en-US-RyanMultilingualNeural",
        alternative_voices=frozenset(
            {
                "en-US-JennyMultilingualNeural",
                "fi-FI-SelmaNeural",
                "fi-FI-NooraNeural",
                "fi-FI-HarriNeural",
            }
        ),
    ),
    LanguageVoiceProfile(
        language="es-ES",
        default_voice="es-ES-AlvaroNeural",
        alternative_voices=frozenset({"es-ES-ElviraNeural"}),
    ),
    LanguageVoiceProfile(
        language="de-DE",
        default_voice="de-DE-ConradNeural",
        alternative_voices=frozenset({"de-DE-KatjaNeural"}),
    ),
    LanguageVoiceProfile(
        language="fr-FR",
        default_voice="fr-FR-DeniseNeural",
        alternative_voices=frozenset({"fr-FR-HenriNeural"}),
    ),
    LanguageVoiceProfile(
        language="sv-SE",
        default_voice="sv-SE-MattiasNeural",
        alternative_voices=frozenset({"sv-SE-SofieNeural"}),
    ),
)


class VoiceCatalog:
    """Immutable lookup of voice profiles keyed by language code."""

    def __init__(
        self,
        profiles: Iterable[LanguageVoiceProfile] = DEFAULT_VOICE_PROFILES,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        """Index profiles by language and check the fallback language exists."""

        self._profiles: dict[str, LanguageVoiceProfile] = {}
        for profile in profiles:
            if profile.language in self._profiles:
                raise ValueError(f"Duplicate voice profile for language `{profile.language}`.")
            self._profiles[profile.language] = profile
        if default_language not in self._profiles:
            raise ValueError(
                f"Default language `{default_language}` has no voice profile."
            )
        self._default_language = default_language

    @property
    def languages(self) -> tuple[str, ...]:
        """Supported language codes in declaration order."""

        return tuple(self._profiles)

    @property
    def default_language(self) -> str:
        return self._default_language

    def profile(self, language: str) -> LanguageVoiceProfile:
        """Return the profile for a language, or the default language profile."""

        return self._profiles.get(language, self._profiles[self._default_language])

    def resolve_voice(self, language: str, requested_voice: str | None = None) -> str:
        """Resolve the voice to synthesize with.

        Unknown languages fall back to the default language profile, and a
        requested voice outside the profile is replaced by its default voice.
        Neither case raises.
        """

        profile = self.profile(language)
        if requested_voice and profile.allows(requested_voice):
            return requested_voice
        return profile.default_voice

    def example_voices(self) -> tuple[str, ...]:
        """Return the default voice of each language, without duplicates."""

        seen: dict[str, None] = {}
        for profile in self._profiles.values():
            seen.setdefault(profile.default_voice, None)
        return tuple(seen)
