from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable


@dataclass
class ExclusionSet:
    """Entities never to be recommended again in this session.

    Tracks both local ids (items the user has liked/rated) and external ids
    (items already picked, possibly before they had a local row).
    """

    local_ids: set[int] = field(default_factory=set)
    external_ids: set[str] = field(default_factory=set)

    @classmethod
    def from_local_ids(cls, ids: Iterable[int]) -> ExclusionSet:
        return cls(local_ids=set(ids))

    def add(self, entity: Any) -> None:
        if entity.id is not None:
            self.local_ids.add(entity.id)
        self.external_ids.add(str(entity.external_id))

    def excludes(self, entity: Any) -> bool:
        if entity.id is not None and entity.id in self.local_ids:
            return True
        return str(entity.external_id) in self.external_ids

    def excludes_external(self, external_id: str) -> bool:
        return str(external_id) in self.external_ids

    def __len__(self) -> int:
        return len(self.local_ids) + len(self.external_ids)
