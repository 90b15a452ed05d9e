"""Base policy classes and types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class Ability(str, Enum):
    """Standard abilities checked by the generated endpoints."""

    # Collection level, checked against the model class
    SHOW_ANY = "showAny"
    SHOW_EVERY = "showEvery"
    STORE = "store"

    # Instance level
    SHOW = "show"
    UPDATE = "update"
    DELETE = "delete"


# Abilities that are allowed when the registered policy does not define them.
FAIL_OPEN_ABILITIES = frozenset({Ability.SHOW_ANY.value, Ability.SHOW_EVERY.value})


def ability_name(ability: Any) -> str:
    """Normalize an ``Ability`` member or plain string to its wire name."""
    if isinstance(ability, Ability):
        return ability.value
    return str(ability)


@dataclass
class PolicyResult:
    """Result of policy evaluation."""

    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls, reason: Optional[str] = None) -> "PolicyResult":
        """Create an allow result."""
        return cls(allowed=True, reason=reason)

    @classmethod
    def deny(cls, reason: Optional[str] = None) -> "PolicyResult":
        """Create a deny result."""
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed


class BasePolicy:
    """Optional base class for model policies.

    A policy exposes one method per ability, named in snake case
    (``show_any``, ``show_every``, ``show``, ``store``, ``update``,
    ``delete`` or any custom ability). Collection abilities receive the
    principal only, instance abilities receive the principal and the model.
    A ``before(principal, ability)`` hook may return a decision for every
    ability at once; returning ``None`` falls through to the method.
    """

    owner_attribute = "user_id"

    def _is_owner(self, principal: Any, subject: Any) -> bool:
        """Check if the principal owns the subject."""
        if principal is None or subject is None:
            return False

        owner_id = getattr(subject, self.owner_attribute, None)
        if owner_id is None:
            return False

        return owner_id == getattr(principal, "id", None)
