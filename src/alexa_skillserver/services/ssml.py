"""Speech Synthesis Markup Language (SSML) builder.

Reference: https://developer.amazon.com/docs/custom-skills/speech-synthesis-markup-language-ssml-reference.html
"""

from datetime import timedelta
from enum import Enum
from urllib.parse import urlsplit


class AmazonEffect(str, Enum):
    WHISPERED = "whispered"


class EmphasisLevel(str, Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    REDUCED = "reduced"


class PauseStrength(str, Enum):
    NONE = "none"
    X_WEAK = "x-weak"
    WEAK = "weak"
    MEDIUM = "medium"  # Default
    STRONG = "strong"
    X_STRONG = "x-strong"


class ProsodyRate(str, Enum):
    X_SLOW = "x-slow"
    SLOW = "slow"
    MEDIUM = "medium"
    FAST = "fast"
    X_FAST = "x-fast"


class ProsodyPitch(str, Enum):
    X_LOW = "x-low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    X_HIGH = "x-high"


class ProsodyVolume(str, Enum):
    SILENT = "silent"
    X_SOFT = "x-soft"
    SOFT = "soft"
    MEDIUM = "medium"
    LOUD = "loud"
    X_LOUD = "x-loud"


def _signed(value: int) -> str:
    return f"+{value}" if value > 0 else str(value)


class SSMLBuilder:
    """Accumulates SSML elements and renders them inside ``<speak>``.

    Text is inserted as given, so callers may nest markup built elsewhere.
    Every ``append_*`` method returns the builder.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append_plain_speech(self, text: str) -> "SSMLBuilder":
        self._parts.append(text)
        return self

    def append_amazon_effect(self, effect: AmazonEffect, text: str) -> "SSMLBuilder":
        self._parts.append(f'<amazon:effect name="{AmazonEffect(effect).value}">{text}</amazon:effect>')
        return self

    def append_audio(self, src: str) -> "SSMLBuilder":
        """Append an audio clip. ``src`` must be an HTTPS URL."""
        try:
            link = urlsplit(src)
        except ValueError as e:
            raise ValueError(f"src failed to parse into a valid URL: {e}") from e
        if link.scheme != "https" or not link.netloc:
            raise ValueError(f"src must be a HTTPS URL, got {src!r}")
        self._parts.append(f'<audio src="{link.geturl()}"/>')
        return self

    def append_break(self, strength_or_duration: PauseStrength | timedelta) -> "SSMLBuilder":
        """Append a pause, either a named strength or an explicit duration."""
        if isinstance(strength_or_duration, PauseStrength):
            self._parts.append(f'<break strength="{strength_or_duration.value}"/>')
        elif isinstance(strength_or_duration, timedelta):
            millis = int(strength_or_duration.total_seconds() * 1000)
            self._parts.append(f'<break time="{millis}ms"/>')
        else:
            raise TypeError("break must be a PauseStrength or a timedelta")
        return self

    def append_emphasis(self, level: EmphasisLevel, text: str) -> "SSMLBuilder":
        self._parts.append(f'<emphasis level="{EmphasisLevel(level).value}">{text}</emphasis>')
        return self

    def append_paragraph(self, text: str) -> "SSMLBuilder":
        self._parts.append(f"<p>{text}</p>")
        return self

    def append_prosody(
        self,
        text: str,
        rate: ProsodyRate | int | None = None,
        pitch: ProsodyPitch | int | None = None,
        volume: ProsodyVolume | int | None = None,
    ) -> "SSMLBuilder":
        """Append a prosody element.

        Integer values are percentages for rate and pitch, and decibels
        for volume. Omitted attributes are left out of the element.
        """
        attributes = []
        if rate is not None:
            attributes.append(f'rate="{_prosody_value(rate, ProsodyRate, lambda v: f"{v}%")}"')
        if pitch is not None:
            attributes.append(
                f'pitch="{_prosody_value(pitch, ProsodyPitch, lambda v: f"{_signed(v)}%")}"'
            )
        if volume is not None:
            attributes.append(
                f'volume="{_prosody_value(volume, ProsodyVolume, lambda v: f"{_signed(v)}dB")}"'
            )
        self._parts.append(f"<prosody{''.join(' ' + a for a in attributes)}>{text}</prosody>")
        return self

    def append_sentence(self, text: str) -> "SSMLBuilder":
        self._parts.append(f"<s>{text}</s>")
        return self

    def append_substitution(self, alias: str, text: str) -> "SSMLBuilder":
        self._parts.append(f'<sub alias="{alias}">{text}</sub>')
        return self

    def build(self) -> str:
        return f"<speak>{''.join(self._parts)}</speak>"


def _prosody_value(value, enum_type: type[Enum], format_int) -> str:
    if isinstance(value, enum_type):
        return value.value
    if isinstance(value, int) and not isinstance(value, bool):
        return format_int(value)
    raise TypeError(f"unsupported {enum_type.__name__} value: {value!r}")
