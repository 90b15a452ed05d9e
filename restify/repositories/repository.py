"""Repository wrapper around a model instance."""

import logging
from collections.abc import Callable
from typing import Any, ClassVar

from sqlalchemy import inspect as sa_inspect

from restify.authorization.authorizable import Authorizable, ResourceWrapper
from restify.utils.exceptions import SubjectNotFound, ValidationError
from restify.utils.naming import kebab_case, pluralize

logger = logging.getLogger(__name__)

ACTION_MARKER = "__restify_action__"


def action(name: str | None = None) -> Callable:
    """
    Mark a repository coroutine as a custom action.

    The action name doubles as the ability checked before it runs.

    Usage:
        class PostRepository(Repository):
            @action("publish")
            async def publish(self, db, payload):
                ...
    """

    def decorator(func: Callable) -> Callable:
        setattr(func, ACTION_MARKER, name or func.__name__)
        return func

    return decorator


class Repository(ResourceWrapper, Authorizable):
    """
    Exposes a model through the generated REST endpoints.

    Subclasses set ``model`` and usually ``fillable``. Authorization helpers
    are inherited from ``Authorizable`` and act on the wrapped ``resource``.
    """

    # SQLAlchemy model wrapped by this repository
    model: ClassVar[type | None] = None

    # Defaults to the kebab-case plural of the class name without "Repository"
    uri_key: ClassVar[str | None] = None

    # Attributes assignable from request payloads
    fillable: ClassVar[tuple[str, ...]] = ()

    # Attributes never serialized
    hidden: ClassVar[tuple[str, ...]] = ()

    # Custom action name -> method name, collected from @action methods
    _actions: ClassVar[dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        actions = {}
        for klass in reversed(cls.__mro__):
            for attr_name, value in vars(klass).items():
                action_name = getattr(value, ACTION_MARKER, None)
                if action_name:
                    actions[action_name] = attr_name
        cls._actions = actions

    def __init__(self, resource: Any = None):
        self.resource = resource

    @classmethod
    def get_uri_key(cls) -> str:
        if cls.uri_key:
            return cls.uri_key
        name = cls.__name__
        if name.endswith("Repository") and name != "Repository":
            name = name[: -len("Repository")]
        return pluralize(kebab_case(name))

    @classmethod
    def new_model(cls) -> Any:
        """Create an empty model instance."""
        return cls.subject_type()()

    @classmethod
    def action_names(cls) -> list[str]:
        return sorted(cls._actions)

    @classmethod
    def has_action(cls, name: str) -> bool:
        return name in cls._actions

    def get_action(self, name: str) -> Callable:
        """Get the bound coroutine for a custom action."""
        return getattr(self, self._actions[name])

    @classmethod
    def columns(cls) -> list[str]:
        """Column attribute names of the wrapped model."""
        mapper = sa_inspect(cls.subject_type())
        return [column.key for column in mapper.column_attrs]

    @classmethod
    def primary_key(cls) -> str:
        mapper = sa_inspect(cls.subject_type())
        return mapper.primary_key[0].key

    @classmethod
    def coerce_key(cls, key: Any) -> Any:
        """Convert a path parameter to the primary key python type."""
        column = sa_inspect(cls.subject_type()).primary_key[0]
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            return key

        if isinstance(key, python_type):
            return key

        try:
            return python_type(key)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid key: {key}", details={"id": key})

    def get_key(self) -> Any:
        if self.resource is None:
            return None
        return getattr(self.resource, self.primary_key())

    def fill(self, payload: dict[str, Any]) -> "Repository":
        """Assign fillable attributes from a request payload to the resource."""
        if self.resource is None:
            raise SubjectNotFound(type(self).__name__)

        if not isinstance(payload, dict):
            raise ValidationError("Payload must be a JSON object")

        ignored = sorted(set(payload) - set(self.fillable))
        if ignored:
            logger.debug(
                f"Ignoring non fillable attributes on {type(self).__name__}",
                extra={"attributes": ignored},
            )

        for field in self.fillable:
            if field in payload:
                setattr(self.resource, field, payload[field])

        return self

    def attributes(self) -> dict[str, Any]:
        """Serializable attributes of the resource."""
        if self.resource is None:
            raise SubjectNotFound(type(self).__name__)

        return {
            column: getattr(self.resource, column)
            for column in self.columns()
            if column not in self.hidden
        }

    def authorization_meta(self, principal: Any) -> dict[str, bool]:
        """Advertise which actions the principal may perform on the resource."""
        return {
            "authorizedToShow": self.authorized_to_show(principal) is not False,
            "authorizedToStore": self.authorized_to_store(principal) is not False,
            "authorizedToUpdate": self.authorized_to_update(principal) is not False,
            "authorizedToDelete": self.authorized_to_delete(principal) is not False,
        }

    def serialize(self, principal: Any) -> dict[str, Any]:
        """Serialize the resource together with its authorization meta."""
        return {
            "id": self.get_key(),
            "type": self.get_uri_key(),
            "attributes": self.attributes(),
            "meta": self.authorization_meta(principal),
        }
