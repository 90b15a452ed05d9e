"""Process-wide policy registry.

Policies are registered at application bootstrap, either explicitly or by
naming convention (``Post`` -> ``PostPolicy``), and the registry is frozen
before requests are served. Each registration is captured as a
``PolicyDescriptor`` so ability support is an explicit set lookup rather
than attribute probing at request time.
"""

import importlib
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType, ModuleType
from typing import Any, Callable, Optional

from restify.utils.exceptions import PolicyRegistryFrozen
from restify.utils.naming import camel_to_snake

from .base_policy import ability_name

logger = logging.getLogger(__name__)

BEFORE_HOOK = "before"


def subject_type_of(subject: Any) -> type:
    """Return the model class for a model class or instance."""
    return subject if isinstance(subject, type) else type(subject)


@dataclass(frozen=True)
class PolicyDescriptor:
    """Capabilities of one registered policy."""

    model: type
    policy: Any
    abilities: frozenset[str]
    before: Optional[Callable[..., Any]] = None

    @classmethod
    def build(cls, model: type, policy: Any) -> "PolicyDescriptor":
        """Capture the ability methods a policy exposes."""
        if isinstance(policy, type):
            policy = policy()

        abilities = set()
        for name in dir(policy):
            if name.startswith("_") or name == BEFORE_HOOK:
                continue
            if callable(getattr(policy, name)):
                abilities.add(name)

        before = getattr(policy, BEFORE_HOOK, None)
        return cls(
            model=model,
            policy=policy,
            abilities=frozenset(abilities),
            before=before if callable(before) else None,
        )

    def has_ability(self, ability: Any) -> bool:
        """Check if the policy defines a method for the ability."""
        return camel_to_snake(ability_name(ability)) in self.abilities

    def method_for(self, ability: Any) -> Optional[Callable[..., Any]]:
        """Get the bound policy method for the ability, if defined."""
        if not self.has_ability(ability):
            return None
        return getattr(self.policy, camel_to_snake(ability_name(ability)))


class PolicyRegistry:
    """Mapping of model classes to their policy descriptors."""

    def __init__(self):
        self._policies: dict[type, PolicyDescriptor] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, model: type, policy: Any) -> PolicyDescriptor:
        """
        Register a policy class or instance for a model class.

        Usage:
            registry.register(Post, PostPolicy)
        """
        if self._frozen:
            raise PolicyRegistryFrozen(
                f"Cannot register a policy for {model.__name__}: the policy registry is frozen"
            )

        descriptor = PolicyDescriptor.build(model, policy)
        self._policies[model] = descriptor

        logger.debug(
            f"Registered {type(descriptor.policy).__name__} for {model.__name__}",
            extra={"model": model.__name__, "abilities": sorted(descriptor.abilities)},
        )
        return descriptor

    def discover(
        self,
        models: Iterable[type],
        modules: Iterable[str | ModuleType],
    ) -> list[type]:
        """
        Register ``<Model>Policy`` classes found in the given modules.

        Models that already have an explicit registration are skipped, and
        the first module exposing a matching policy wins. Returns the models
        registered by this call.
        """
        loaded = [
            importlib.import_module(module) if isinstance(module, str) else module
            for module in modules
        ]

        discovered = []
        for model in models:
            if model in self._policies:
                continue

            for module in loaded:
                policy = getattr(module, f"{model.__name__}Policy", None)
                if policy is not None:
                    self.register(model, policy)
                    discovered.append(model)
                    break

        logger.info(
            f"Discovered {len(discovered)} policies",
            extra={"models": [model.__name__ for model in discovered]},
        )
        return discovered

    def freeze(self) -> None:
        """Make the registry read-only for request handling."""
        if not self._frozen:
            self._policies = MappingProxyType(dict(self._policies))
            self._frozen = True

    def lookup(self, subject: Any) -> Optional[PolicyDescriptor]:
        """
        Find the policy descriptor for a model class or instance.

        An exact registration wins; otherwise the nearest registered base
        class along the MRO is used.
        """
        subject_type = subject_type_of(subject)

        descriptor = self._policies.get(subject_type)
        if descriptor is not None:
            return descriptor

        for base in subject_type.__mro__[1:]:
            descriptor = self._policies.get(base)
            if descriptor is not None:
                return descriptor

        return None

    def policy_for(self, subject: Any) -> Any:
        """Get the policy object for a model class or instance."""
        descriptor = self.lookup(subject)
        return descriptor.policy if descriptor else None

    def has_ability(self, descriptor: Optional[PolicyDescriptor], ability: Any) -> bool:
        """Check if a descriptor supports the ability."""
        return descriptor is not None and descriptor.has_ability(ability)

    def __contains__(self, subject: Any) -> bool:
        return self.lookup(subject) is not None

    def __len__(self) -> int:
        return len(self._policies)


# Default registry used by the module-level gate
policy_registry = PolicyRegistry()


def register_policy(model: type, policy: Any) -> PolicyDescriptor:
    """
    Register a policy with the default registry.

    Usage:
        register_policy(Post, PostPolicy)
    """
    return policy_registry.register(model, policy)
