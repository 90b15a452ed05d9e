"""REST endpoints for SQLAlchemy models, authorized through policies."""

from .authorization import (
    Ability,
    Authorizable,
    BasePolicy,
    Gate,
    PolicyRegistry,
    PolicyResult,
    default_gate,
    policy_registry,
    register_policy,
)
from .repositories import Repository, RepositoryRegistry, action, repository_registry
from .utils.exceptions import AuthorizationDenied, SubjectNotFound

__version__ = "1.0.0"

__all__ = [
    "Ability",
    "Authorizable",
    "AuthorizationDenied",
    "BasePolicy",
    "Gate",
    "PolicyRegistry",
    "PolicyResult",
    "Repository",
    "RepositoryRegistry",
    "SubjectNotFound",
    "action",
    "default_gate",
    "policy_registry",
    "register_policy",
    "repository_registry",
]
