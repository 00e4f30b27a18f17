"""Voice descriptors returned by the speech backend.

Responsibilities:
- Represent provider voice identities independently of the wire payload.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_VOICE_ID = "4JJwo477JUAx3HV0T7n7"
DEFAULT_SPEECH_MODEL = "eleven_turbo_v2_5"
DEFAULT_OUTPUT_FORMAT = "mp3_44100_192"


@dataclass(frozen=True, slots=True)
class VoiceProfile:
    """One voice available to the configured speech account.

    Attributes:
        voice_id: Provider-native voice identifier.
        name: Human-readable voice name.
        category: Provider voice category such as `premade` or `cloned`.
    """

    voice_id: str
    name: str
    category: str = ""
