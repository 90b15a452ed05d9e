"""Ability checks against registered policies."""

import logging
from typing import Any, Callable, Optional

from .base_policy import PolicyResult, ability_name
from .registry import PolicyRegistry, policy_registry

logger = logging.getLogger(__name__)

BeforeCallback = Callable[[Any, str], Any]


def _to_result(value: Any) -> PolicyResult:
    if isinstance(value, PolicyResult):
        return value
    return PolicyResult(allowed=bool(value))


class Gate:
    """
    Ability-check service.

    Resolves the policy for the subject's model class and calls the method
    named after the ability. Abilities for subjects without a policy can be
    defined with closures. Anything not covered is denied.
    """

    def __init__(self, registry: Optional[PolicyRegistry] = None):
        self.registry = registry if registry is not None else policy_registry
        self._abilities: dict[str, Callable[..., Any]] = {}
        self._before: list[BeforeCallback] = []

    def define(self, ability: Any, callback: Callable[..., Any]) -> None:
        """
        Define a closure ability used when no policy covers the subject.

        Usage:
            gate.define("export", lambda principal, subject: principal.is_admin)
        """
        self._abilities[ability_name(ability)] = callback

    def before(self, callback: BeforeCallback) -> BeforeCallback:
        """Register a callback run before every check; a non-None result decides."""
        self._before.append(callback)
        return callback

    def has(self, ability: Any) -> bool:
        """Check if a closure ability is defined."""
        return ability_name(ability) in self._abilities

    def inspect(self, principal: Any, ability: Any, subject: Any, *args: Any) -> PolicyResult:
        """Run the check and return the full policy result."""
        name = ability_name(ability)

        for callback in self._before:
            decision = callback(principal, name)
            if decision is not None:
                return _to_result(decision)

        descriptor = self.registry.lookup(subject)
        if descriptor is not None:
            if descriptor.before is not None:
                decision = descriptor.before(principal, name)
                if decision is not None:
                    return _to_result(decision)

            method = descriptor.method_for(name)
            if method is None:
                return PolicyResult.deny(
                    f"{type(descriptor.policy).__name__} does not define {name}"
                )

            if isinstance(subject, type):
                return _to_result(method(principal, *args))
            return _to_result(method(principal, subject, *args))

        callback = self._abilities.get(name)
        if callback is not None:
            return _to_result(callback(principal, subject, *args))

        return PolicyResult.deny(f"Ability {name} is not defined")

    def check(self, principal: Any, ability: Any, subject: Any, *args: Any) -> bool:
        """Determine if the ability is granted for the principal."""
        result = self.inspect(principal, ability, subject, *args)

        if not result.allowed:
            logger.debug(
                f"Gate denied {ability_name(ability)}",
                extra={"ability": ability_name(ability), "reason": result.reason},
            )

        return result.allowed

    def allows(self, principal: Any, ability: Any, subject: Any, *args: Any) -> bool:
        return self.check(principal, ability, subject, *args)

    def denies(self, principal: Any, ability: Any, subject: Any, *args: Any) -> bool:
        return not self.check(principal, ability, subject, *args)


# Default gate bound to the default policy registry
default_gate = Gate()
