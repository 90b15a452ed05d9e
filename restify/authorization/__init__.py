"""Authorization for models and repositories."""

from .authorizable import (
    AbilityChecker,
    Authorizable,
    DirectSubject,
    ResourceWrapper,
    WrappedSubject,
    authorize_to_ability,
    authorized_to_ability,
    is_authorizable,
)
from .base_policy import Ability, BasePolicy, PolicyResult
from .gate import Gate, default_gate
from .registry import PolicyDescriptor, PolicyRegistry, policy_registry, register_policy

__all__ = [
    "Ability",
    "AbilityChecker",
    "Authorizable",
    "BasePolicy",
    "DirectSubject",
    "Gate",
    "PolicyDescriptor",
    "PolicyRegistry",
    "PolicyResult",
    "ResourceWrapper",
    "WrappedSubject",
    "authorize_to_ability",
    "authorized_to_ability",
    "default_gate",
    "is_authorizable",
    "policy_registry",
    "register_policy",
]
