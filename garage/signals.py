"""Audio cue players for vehicle events."""

import logging

from .vehicle import VehicleKind

logger = logging.getLogger(__name__)


class SignalPlayer:
    """Plays the cue associated with a vehicle event."""

    def play(self, kind: VehicleKind, event: str) -> None:
        raise NotImplementedError


class LoggingSignalPlayer(SignalPlayer):
    """Writes cues to the log instead of playing sound."""

    def play(self, kind: VehicleKind, event: str) -> None:
        logger.info("Cue %s for %s", event, kind.display_name)


def play_cue(player: SignalPlayer, kind: VehicleKind, event: str) -> bool:
    """
    Play a cue, logging (not raising) any failure.

    Returns True if the player accepted the cue.
    """
    try:
        player.play(kind, event)
    except Exception as e:
        logger.warning("Could not play cue %s for %s: %s", event, kind.display_name, e)
        return False
    return True
