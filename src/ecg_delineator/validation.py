"""Beat validity."""

from .models import WAVE_NAMES, Beat


def is_complete(beat: Beat) -> bool:
    """True when all five waves have onset, offset and peak."""
    return all(getattr(beat, name).located for name in WAVE_NAMES)


def validate_beat(beat: Beat) -> Beat:
    """Return a copy of the beat with its ``valid`` flag set from ``is_complete``."""
    return beat.model_copy(update={"valid": is_complete(beat)})
