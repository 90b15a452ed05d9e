"""Authorization decisions for models and repositories.

``Authorizable`` can be mixed into a model class or into a repository that
wraps a model. Which of the two applies is fixed once per class: classes
that are ``ResourceWrapper`` subclasses authorize the model held in their
``resource`` field, every other class authorizes itself.

Only an explicit ``False`` from the gate makes the throwing variants raise.
Any other value, including non-boolean falsy results from a custom gate,
is treated as allowed.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Protocol, Union

from restify.utils.exceptions import AuthorizationDenied, SubjectNotFound

from .base_policy import FAIL_OPEN_ABILITIES, Ability, ability_name
from .gate import Gate, default_gate
from .registry import PolicyRegistry, subject_type_of

logger = logging.getLogger(__name__)


class AbilityChecker(Protocol):
    """Anything that answers ability checks the way ``Gate`` does."""

    registry: PolicyRegistry

    def check(self, principal: Any, ability: Any, subject: Any, *args: Any) -> Any:
        ...


class ResourceWrapper:
    """Capability of holding a model instance in ``resource``."""

    model: ClassVar[Optional[type]] = None

    resource: Any = None


@dataclass(frozen=True)
class DirectSubject:
    """The authorizable object is its own subject."""

    entity: Any

    def resolve(self, owner: type) -> Any:
        return self.entity


@dataclass(frozen=True)
class WrappedSubject:
    """The subject is the model wrapped by a repository."""

    entity: Any = None

    def resolve(self, owner: type) -> Any:
        if self.entity is None:
            raise SubjectNotFound(owner.__name__)
        return self.entity


Subject = Union[DirectSubject, WrappedSubject]


def is_authorizable(subject_type: Any, registry: Optional[PolicyRegistry] = None) -> bool:
    """Determine if a policy is registered for the model class."""
    registry = registry if registry is not None else default_gate.registry
    return registry.lookup(subject_type) is not None


def authorized_to_ability(
    principal: Any,
    subject_type: type,
    ability: Any,
    subject: Any = None,
    gate: Optional[AbilityChecker] = None,
) -> Any:
    """
    Determine if the principal has the ability on the subject.

    Models without a policy are open. ``showAny`` and ``showEvery`` are also
    open when the policy does not define them, and are always checked
    against the model class. Every other ability goes to the gate with the
    instance when one is given.
    """
    gate = gate if gate is not None else default_gate
    name = ability_name(ability)

    descriptor = gate.registry.lookup(subject_type)
    if descriptor is None:
        logger.debug(
            f"No policy for {subject_type.__name__}, allowing {name}",
            extra={"model": subject_type.__name__, "ability": name},
        )
        return True

    if name in FAIL_OPEN_ABILITIES:
        if not descriptor.has_ability(name):
            logger.debug(
                f"{type(descriptor.policy).__name__} does not define {name}, allowing",
                extra={"model": subject_type.__name__, "ability": name},
            )
            return True
        return gate.check(principal, name, subject_type)

    return gate.check(principal, name, subject if subject is not None else subject_type)


def authorize_to_ability(
    principal: Any,
    subject_type: type,
    ability: Any,
    subject: Any = None,
    gate: Optional[AbilityChecker] = None,
) -> None:
    """Raise ``AuthorizationDenied`` when the check is exactly ``False``."""
    if authorized_to_ability(principal, subject_type, ability, subject, gate=gate) is False:
        name = ability_name(ability)
        logger.info(
            f"Denied {name} on {subject_type.__name__}",
            extra={
                "model": subject_type.__name__,
                "ability": name,
                "principal_id": getattr(principal, "id", None),
            },
        )
        raise AuthorizationDenied()


class Authorizable:
    """Ability helpers for a model or a repository wrapping a model."""

    # Gate used for checks; falls back to the default gate
    authorization_gate: ClassVar[Optional[AbilityChecker]] = None

    _repository_context: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._repository_context = issubclass(cls, ResourceWrapper)

    @classmethod
    def is_repository_context(cls) -> bool:
        """Determine if the class wraps a model instead of being one."""
        return cls._repository_context

    @classmethod
    def get_gate(cls) -> AbilityChecker:
        return cls.authorization_gate if cls.authorization_gate is not None else default_gate

    @classmethod
    def subject_type(cls) -> type:
        """The model class the abilities are checked against."""
        if not cls.is_repository_context():
            return cls

        model = getattr(cls, "model", None)
        if model is None:
            raise SubjectNotFound(cls.__name__)
        return model

    @classmethod
    def authorizable(cls) -> bool:
        """Determine if a policy is registered for the model."""
        return is_authorizable(cls.subject_type(), cls.get_gate().registry)

    def subject(self) -> Subject:
        if self.is_repository_context():
            return WrappedSubject(getattr(self, "resource", None))
        return DirectSubject(self)

    def determine_subject(self) -> Any:
        """Resolve the model instance to authorize against."""
        return self.subject().resolve(type(self))

    # Collection abilities

    @classmethod
    def authorized_to_show_any(cls, principal: Any) -> Any:
        return authorized_to_ability(
            principal, cls.subject_type(), Ability.SHOW_ANY, gate=cls.get_gate()
        )

    @classmethod
    def authorize_to_show_any(cls, principal: Any) -> None:
        authorize_to_ability(principal, cls.subject_type(), Ability.SHOW_ANY, gate=cls.get_gate())

    @classmethod
    def authorized_to_show_every(cls, principal: Any) -> Any:
        return authorized_to_ability(
            principal, cls.subject_type(), Ability.SHOW_EVERY, gate=cls.get_gate()
        )

    @classmethod
    def authorize_to_show_every(cls, principal: Any) -> None:
        authorize_to_ability(
            principal, cls.subject_type(), Ability.SHOW_EVERY, gate=cls.get_gate()
        )

    @classmethod
    def authorized_to_store(cls, principal: Any) -> Any:
        return authorized_to_ability(principal, cls.subject_type(), Ability.STORE, gate=cls.get_gate())

    @classmethod
    def authorize_to_store(cls, principal: Any) -> None:
        authorize_to_ability(principal, cls.subject_type(), Ability.STORE, gate=cls.get_gate())

    # Instance abilities

    def authorized_to(self, principal: Any, ability: Any) -> Any:
        """Determine if the principal has the ability on the resolved subject."""
        if not is_authorizable(self.subject_type(), self.get_gate().registry):
            return True

        subject = self.determine_subject()
        return authorized_to_ability(
            principal, subject_type_of(subject), ability, subject, gate=self.get_gate()
        )

    def authorize_to(self, principal: Any, ability: Any) -> None:
        """Same as ``authorized_to`` but raises ``AuthorizationDenied``."""
        if not is_authorizable(self.subject_type(), self.get_gate().registry):
            return

        subject = self.determine_subject()
        authorize_to_ability(
            principal, subject_type_of(subject), ability, subject, gate=self.get_gate()
        )

    def authorized_to_show(self, principal: Any) -> Any:
        return self.authorized_to(principal, Ability.SHOW)

    def authorize_to_show(self, principal: Any) -> None:
        self.authorize_to(principal, Ability.SHOW)

    def authorized_to_update(self, principal: Any) -> Any:
        return self.authorized_to(principal, Ability.UPDATE)

    def authorize_to_update(self, principal: Any) -> None:
        self.authorize_to(principal, Ability.UPDATE)

    def authorized_to_delete(self, principal: Any) -> Any:
        return self.authorized_to(principal, Ability.DELETE)

    def authorize_to_delete(self, principal: Any) -> None:
        self.authorize_to(principal, Ability.DELETE)
