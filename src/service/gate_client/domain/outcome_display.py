from enum import StrEnum

import attrs


class DisplayTone(StrEnum):
    SUCCESS = 'success'
    NOTICE = 'notice'  # previously admitted, not an error
    ERROR = 'error'


class AudioCue(StrEnum):
    ADMIT = 'admit'
    ALREADY_USED = 'already_used'
    ERROR = 'error'


_TONE_COLORS: dict[DisplayTone, str] = {
    DisplayTone.SUCCESS: 'green',
    DisplayTone.NOTICE: 'orange',
    DisplayTone.ERROR: 'red',
}


@attrs.define(frozen=True)
class OutcomeDisplay:
    tone: DisplayTone
    title: str
    message: str
    audio_cue: AudioCue

    @property
    def color(self) -> str:
        return _TONE_COLORS[self.tone]
