"""Request-scoped context passed into every mutating operation."""

from dataclasses import dataclass
from typing import Optional

from .db.database_models.user import UserDO


@dataclass(frozen=True)
class RequestContext:
    """Who is performing the current operation."""

    actor: Optional[UserDO] = None

    @property
    def actor_name(self) -> Optional[str]:
        return self.actor.name if self.actor else None


SYSTEM_CONTEXT = RequestContext()
