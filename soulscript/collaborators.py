"""Audio and physics seams

Scripts reach audio and physics only through named built-ins. The interpreter
forwards those calls to the backends given here; hosts plug in real ones, and
the null backends keep headless runs and tests quiet.
"""

import logging
from abc import ABC, abstractmethod

from .values import Vec2


logger = logging.getLogger(__name__)


class AudioBackend(ABC):
    """Sound playback collaborator"""

    @abstractmethod
    def play_sound(self, name: str, volume: float = 1.0):
        pass

    @abstractmethod
    def play_music(self, name: str, loop: bool = True):
        pass

    @abstractmethod
    def stop_music(self):
        pass

    @abstractmethod
    def play_ambient(self, name: str):
        pass

    @abstractmethod
    def stop_ambient(self):
        pass

    @abstractmethod
    def set_master_volume(self, volume: float):
        pass


class PhysicsBackend(ABC):
    """Rigid-body collaborator addressed by entity id"""

    @abstractmethod
    def apply_force(self, entity_id: int, force: Vec2):
        pass

    @abstractmethod
    def apply_impulse(self, entity_id: int, impulse: Vec2):
        pass

    @abstractmethod
    def set_gravity(self, gravity: Vec2):
        pass


class NullAudioBackend(AudioBackend):

    def play_sound(self, name: str, volume: float = 1.0):
        logger.debug("play_sound %s volume=%s", name, volume)

    def play_music(self, name: str, loop: bool = True):
        logger.debug("play_music %s loop=%s", name, loop)

    def stop_music(self):
        logger.debug("stop_music")

    def play_ambient(self, name: str):
        logger.debug("play_ambient %s", name)

    def stop_ambient(self):
        logger.debug("stop_ambient")

    def set_master_volume(self, volume: float):
        logger.debug("set_master_volume %s", volume)


class NullPhysicsBackend(PhysicsBackend):

    def apply_force(self, entity_id: int, force: Vec2):
        logger.debug("apply_force entity=%s %s", entity_id, force)

    def apply_impulse(self, entity_id: int, impulse: Vec2):
        logger.debug("apply_impulse entity=%s %s", entity_id, impulse)

    def set_gravity(self, gravity: Vec2):
        logger.debug("set_gravity %s", gravity)
