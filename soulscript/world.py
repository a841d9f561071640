"""World entity table

Entities are what the renderer draws: a type, a position, free-form render
properties and, optionally, the runtime component that drives them. Ids are
assigned monotonically and never reused within a session.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .registry import RuntimeComponent
from .values import Vec2


class WorldEntity(BaseModel):
    id: int
    type: str
    name: str
    position: Vec2 = Field(default_factory=Vec2)
    properties: Dict[str, Any] = Field(default_factory=dict)
    # RuntimeComponent; held by reference, never validated or copied
    component: Optional[Any] = None
    is_active: bool = True
    lifespan: float = 0.0

    def __hash__(self):
        return self.id

    def __eq__(self, other):
        return isinstance(other, WorldEntity) and self.id == other.id

    def __str__(self) -> str:
        return self.name

    def to_render_dict(self) -> Dict[str, Any]:
        """Renderer-facing view; the component is reduced to its name"""
        data = self.model_dump(exclude={'component'})
        data['component'] = self.component.name if self.component else None
        return data


class World:
    """Owns the entities of one interpreter session"""

    def __init__(self):
        self.entities: Dict[int, WorldEntity] = {}
        self.next_entity_id = 1

    def create(self, entity_type: str, position: Vec2,
               component: Optional[RuntimeComponent] = None) -> WorldEntity:
        entity_id = self.next_entity_id
        self.next_entity_id += 1
        entity = WorldEntity(
            id=entity_id,
            type=entity_type,
            name=f"{entity_type}_{entity_id}",
            position=position,
            component=component,
        )
        self.entities[entity_id] = entity
        return entity

    def get(self, entity_id: int) -> Optional[WorldEntity]:
        return self.entities.get(entity_id)

    def remove(self, entity_id: int) -> Optional[WorldEntity]:
        return self.entities.pop(entity_id, None)

    def all(self) -> List[WorldEntity]:
        """Active entities in creation order"""
        return [e for e in self.entities.values() if e.is_active]

    def count(self) -> int:
        return len(self.all())

    def in_radius(self, center: Vec2, radius: float) -> List[WorldEntity]:
        return [e for e in self.all() if e.position.distance_to(center) <= radius]

    def entity_for_component(self, component: Optional[RuntimeComponent]) -> Optional[WorldEntity]:
        if component is None:
            return None
        for entity in self.entities.values():
            if entity.component is component:
                return entity
        return None

    def advance_lifespans(self, delta_time: float):
        for entity in self.entities.values():
            if entity.is_active:
                entity.lifespan += delta_time

    def clear(self):
        self.entities.clear()
        self.next_entity_id = 1

    def __len__(self) -> int:
        return self.count()
