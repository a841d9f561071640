"""SoulScript Built-in Function Table

Built-ins are host functions scripts call by name. The table is closed:
names are validated when registered, the table is sealed once the
interpreter has installed its set, and a call to any other name is an
ordinary lookup miss that the interpreter reports as "Unknown function".

Built-ins are grouped by category like this:
- math: sin, cos, sqrt, abs, min, max, clamp, random, randomInt, lerp
- vector: randomVec2, distance, normalize, magnitude, vec2, vecX, vecY
- color: rgb
- entity: createEntity, getEntity, getAllEntities, getEntityCount,
  destroyEntity, getEntitiesInRadius, getPosition, setPosition
- time / event / utility: getTime, broadcast, subscribe, scheduleCallback, log
- sprite: setSpriteFrame, setFlipX, setFlipY, setScale, setRotation, setOpacity
- audio / physics: forwarded to the interpreter's collaborator backends
"""

import math
import re
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from .errors import BuiltinRegistrationError
from .executor import INTRINSICS
from .logs import LogLevel
from .values import Color, Vec2, format_value, is_truthy, to_number
from .world import WorldEntity


IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


class BuiltinCategory(Enum):
    """Categories for organizing built-ins"""
    MATH = "math"
    VECTOR = "vector"
    COLOR = "color"
    ENTITY = "entity"
    TIME = "time"
    EVENT = "event"
    UTILITY = "utility"
    SPRITE = "sprite"
    AUDIO = "audio"
    PHYSICS = "physics"
    CUSTOM = "custom"


@dataclass
class BuiltinMetadata:
    name: str
    category: BuiltinCategory
    description: str = ""
    signature: str = ""

    def __post_init__(self):
        if isinstance(self.category, str):
            self.category = BuiltinCategory(self.category)


@dataclass
class RegisteredBuiltin:
    """A registered built-in with metadata and implementation"""
    metadata: BuiltinMetadata
    func: Callable[..., Any]
    registered_at: float = field(default_factory=time.time)
    usage_count: int = 0

    def __call__(self, *args):
        self.usage_count += 1
        return self.func(*args)


class BuiltinRegistry:
    """Name -> built-in table, sealed after installation"""

    def __init__(self):
        self.builtins: Dict[str, RegisteredBuiltin] = {}
        self.categories: Dict[BuiltinCategory, List[str]] = {c: [] for c in BuiltinCategory}
        self.sealed = False

    def register(self,
                 name: str,
                 func: Callable[..., Any],
                 category: Union[BuiltinCategory, str] = BuiltinCategory.CUSTOM,
                 description: str = "",
                 signature: str = "") -> RegisteredBuiltin:
        """Register a built-in

        Raises BuiltinRegistrationError if the table is sealed, the name is not
        identifier-shaped, is reserved, or is already taken.
        """
        if self.sealed:
            raise BuiltinRegistrationError(f"Cannot register '{name}': built-in table is sealed")
        if not IDENTIFIER_PATTERN.match(name or ""):
            raise BuiltinRegistrationError(f"Invalid built-in name: {name!r}")
        if name in INTRINSICS:
            raise BuiltinRegistrationError(f"'{name}' is a reserved statement name")
        if name in self.builtins:
            raise BuiltinRegistrationError(f"Built-in '{name}' already registered")

        metadata = BuiltinMetadata(name=name, category=category,
                                   description=description, signature=signature)
        builtin = RegisteredBuiltin(metadata=metadata, func=func)
        self.builtins[name] = builtin
        self.categories[metadata.category].append(name)
        return builtin

    def seal(self):
        self.sealed = True

    def get(self, name: str) -> Optional[RegisteredBuiltin]:
        return self.builtins.get(name)

    def call(self, name: str, args: List[Any]) -> Any:
        """Call a registered built-in; KeyError if the name is unknown"""
        return self.builtins[name](*args)

    def by_category(self, category: BuiltinCategory) -> List[RegisteredBuiltin]:
        return [self.builtins[name] for name in self.categories[category]]

    def list_builtins(self) -> List[str]:
        return sorted(self.builtins.keys())

    def __contains__(self, name: str) -> bool:
        return name in self.builtins

    def __len__(self) -> int:
        return len(self.builtins)


def as_vec2(value: Any) -> Vec2:
    """Vector view of a script value: a Vec2, an entity's position or an {x, y} map"""
    if isinstance(value, Vec2):
        return value
    if isinstance(value, WorldEntity):
        return value.position
    if isinstance(value, dict) and 'x' in value and 'y' in value:
        return Vec2(x=to_number(value['x']), y=to_number(value['y']))
    raise TypeError(f"expected a vector, got {format_value(value)}")


def _vector_from_args(args) -> Vec2:
    # applyForce(vec) or applyForce(x, y)
    if len(args) == 1:
        return as_vec2(args[0])
    if len(args) >= 2:
        return Vec2(x=to_number(args[0]), y=to_number(args[1]))
    raise TypeError("expected a vector or x, y")


def install_builtins(registry: BuiltinRegistry, interpreter) -> BuiltinRegistry:
    """Install the standard built-in set bound to ``interpreter``"""
    rng = interpreter.rng

    def register(category, name, func, signature=""):
        registry.register(name, func, category, signature=signature)

    # Math
    math_functions = {
        'sin': lambda x: math.sin(to_number(x)),
        'cos': lambda x: math.cos(to_number(x)),
        'sqrt': lambda x: math.sqrt(to_number(x)),
        'abs': lambda x: abs(to_number(x)),
        'min': lambda a, b: min(to_number(a), to_number(b)),
        'max': lambda a, b: max(to_number(a), to_number(b)),
        'clamp': lambda x, lo, hi: max(to_number(lo), min(to_number(hi), to_number(x))),
        'random': lambda: rng.random(),
        'randomInt': lambda lo, hi: math.floor(rng.random() * (to_number(hi) - to_number(lo))) + int(to_number(lo)),
        'lerp': lambda a, b, t: to_number(a) + (to_number(b) - to_number(a)) * to_number(t),
    }
    for name, func in math_functions.items():
        register(BuiltinCategory.MATH, name, func)

    # Vector
    def random_vec2(min_x, max_x, min_y=None, max_y=None):
        min_x, max_x = to_number(min_x), to_number(max_x)
        min_y = min_x if min_y is None else to_number(min_y)
        max_y = max_x if max_y is None else to_number(max_y)
        return Vec2(x=rng.random() * (max_x - min_x) + min_x,
                    y=rng.random() * (max_y - min_y) + min_y)

    register(BuiltinCategory.VECTOR, 'randomVec2', random_vec2, "(minX, maxX, minY?, maxY?)")
    register(BuiltinCategory.VECTOR, 'distance', lambda a, b: as_vec2(a).distance_to(as_vec2(b)))
    register(BuiltinCategory.VECTOR, 'normalize', lambda v: as_vec2(v).normalized())
    register(BuiltinCategory.VECTOR, 'magnitude', lambda v: as_vec2(v).magnitude)
    register(BuiltinCategory.VECTOR, 'vec2', lambda x=0, y=0: Vec2(x=to_number(x), y=to_number(y)))
    register(BuiltinCategory.VECTOR, 'vecX', lambda v: as_vec2(v).x)
    register(BuiltinCategory.VECTOR, 'vecY', lambda v: as_vec2(v).y)

    # Color
    register(BuiltinCategory.COLOR, 'rgb',
             lambda r, g, b, a=1.0: Color(r=to_number(r), g=to_number(g), b=to_number(b), a=to_number(a)))

    # Entity
    def create_entity(entity_type, position=None):
        pos = as_vec2(position) if position is not None else None
        return interpreter.create_entity(format_value(entity_type), pos)

    def get_entity(entity_id):
        return interpreter.get_entity(int(to_number(entity_id)))

    def entities_in_radius(position, radius):
        return interpreter.world.in_radius(as_vec2(position), to_number(radius))

    def get_position(entity=None):
        target = interpreter.current_entity() if entity is None else _entity_arg(entity)
        return target.position if target is not None else None

    def set_position(*args):
        entity = interpreter.current_entity()
        if entity is not None:
            entity.position = _vector_from_args(args)

    def _entity_arg(value):
        if isinstance(value, WorldEntity):
            return value
        return interpreter.get_entity(int(to_number(value)))

    register(BuiltinCategory.ENTITY, 'createEntity', create_entity, "(type, position?)")
    register(BuiltinCategory.ENTITY, 'getEntity', get_entity)
    register(BuiltinCategory.ENTITY, 'getAllEntities', lambda: interpreter.world.all())
    register(BuiltinCategory.ENTITY, 'getEntityCount', lambda: interpreter.world.count())
    register(BuiltinCategory.ENTITY, 'destroyEntity', lambda entity: interpreter.destroy_entity(entity))
    register(BuiltinCategory.ENTITY, 'getEntitiesInRadius', entities_in_radius)
    register(BuiltinCategory.ENTITY, 'getPosition', get_position)
    register(BuiltinCategory.ENTITY, 'setPosition', set_position)

    # Time and events
    def schedule_callback(delay, method_name, *args):
        return interpreter.schedule_callback(to_number(delay), format_value(method_name), list(args))

    register(BuiltinCategory.TIME, 'getTime', interpreter.get_current_time)
    register(BuiltinCategory.TIME, 'scheduleCallback', schedule_callback, "(delay, method, ...args)")
    register(BuiltinCategory.EVENT, 'broadcast',
             lambda event, payload=None: interpreter.broadcast(format_value(event), payload))
    register(BuiltinCategory.EVENT, 'subscribe',
             lambda event, handler: interpreter.subscribe(format_value(event), format_value(handler)))

    # Utility
    def log(*parts):
        interpreter.log(LogLevel.INFO, " ".join(format_value(p) for p in parts))

    register(BuiltinCategory.UTILITY, 'log', log)

    # Sprite hooks write render properties of the entity being updated
    def sprite_setter(**props):
        entity = interpreter.current_entity()
        if entity is not None:
            entity.properties.update(props)

    def set_sprite_frame(frame, row=0):
        sprite_setter(spriteFrame=to_number(frame), spriteRow=to_number(row))
        interpreter.log(LogLevel.DEBUG,
                        f"Sprite frame set to {format_value(frame)}, row {format_value(row)}")

    def set_scale(scale_x, scale_y=None):
        scale_y = scale_x if scale_y is None else scale_y
        sprite_setter(scaleX=to_number(scale_x), scaleY=to_number(scale_y))

    register(BuiltinCategory.SPRITE, 'setSpriteFrame', set_sprite_frame)
    register(BuiltinCategory.SPRITE, 'setFlipX', lambda flip: sprite_setter(flipX=is_truthy(flip)))
    register(BuiltinCategory.SPRITE, 'setFlipY', lambda flip: sprite_setter(flipY=is_truthy(flip)))
    register(BuiltinCategory.SPRITE, 'setScale', set_scale)
    register(BuiltinCategory.SPRITE, 'setRotation', lambda r: sprite_setter(rotation=to_number(r)))
    register(BuiltinCategory.SPRITE, 'setOpacity',
             lambda o: sprite_setter(opacity=max(0.0, min(1.0, to_number(o)))))

    # Audio
    audio = interpreter.audio
    register(BuiltinCategory.AUDIO, 'playSound',
             lambda name, volume=1.0: audio.play_sound(format_value(name), to_number(volume)))
    register(BuiltinCategory.AUDIO, 'playMusic',
             lambda name, loop=True: audio.play_music(format_value(name), is_truthy(loop)))
    register(BuiltinCategory.AUDIO, 'stopMusic', lambda: audio.stop_music())
    register(BuiltinCategory.AUDIO, 'playAmbient', lambda name: audio.play_ambient(format_value(name)))
    register(BuiltinCategory.AUDIO, 'stopAmbient', lambda: audio.stop_ambient())
    register(BuiltinCategory.AUDIO, 'setMasterVolume',
             lambda volume: audio.set_master_volume(max(0.0, min(1.0, to_number(volume)))))

    # Physics acts on the entity being updated
    physics = interpreter.physics

    def apply_force(*args):
        entity = interpreter.current_entity()
        if entity is not None:
            physics.apply_force(entity.id, _vector_from_args(args))

    def apply_impulse(*args):
        entity = interpreter.current_entity()
        if entity is not None:
            physics.apply_impulse(entity.id, _vector_from_args(args))

    register(BuiltinCategory.PHYSICS, 'applyForce', apply_force, "(vec | x, y)")
    register(BuiltinCategory.PHYSICS, 'applyImpulse', apply_impulse, "(vec | x, y)")
    register(BuiltinCategory.PHYSICS, 'setGravity', lambda *args: physics.set_gravity(_vector_from_args(args)))

    return registry
