"""
Selective HTML escaping for request payloads.

Applied explicitly by the routes that accept short labels (tags, assignee,
export filters, account fields). Free-text bodies, names, secrets and emails
are listed in ``SANITIZE_EXEMPT_FIELDS`` and left untouched so natural text
survives.
"""

from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ValidationError

from app.core.exceptions import ValidationFailed

SANITIZE_EXEMPT_FIELDS = frozenset(
    {
        "suggestion_text",
        "reply",
        "first_name",
        "last_name",
        "password",
        "current_password",
        "new_password",
        "email",
    }
)

MAX_DEPTH = 8

ModelT = TypeVar("ModelT", bound=BaseModel)

# Apostrophes and ampersands are kept so names like "R&D" and "don't" survive.
_ESCAPES = str.maketrans({"<": "&lt;", ">": "&gt;", '"': "&quot;", "/": "&#x2F;"})


def escape_text(value: str) -> str:
    return value.translate(_ESCAPES)


def sanitize_tree(
    value: Any,
    exempt: Iterable[str] = SANITIZE_EXEMPT_FIELDS,
    max_depth: int = MAX_DEPTH,
) -> Any:
    """
    Return a copy of ``value`` with every string escaped.

    Dict keys named in ``exempt`` keep their values verbatim at any depth.

    Raises:
        ValidationFailed: If the structure nests deeper than ``max_depth``
    """
    exempt = frozenset(exempt)

    def _walk(node: Any, depth: int) -> Any:
        if depth > max_depth:
            raise ValidationFailed("Payload is nested too deeply")
        if isinstance(node, str):
            return escape_text(node)
        if isinstance(node, list):
            return [_walk(item, depth + 1) for item in node]
        if isinstance(node, dict):
            return {
                key: item if key in exempt else _walk(item, depth + 1)
                for key, item in node.items()
            }
        return node

    return _walk(value, 0)


def sanitize_model(model: ModelT) -> ModelT:
    """
    Escape a validated request model and validate the result again.

    Only fields the client actually sent are carried over, so partial
    updates stay partial.

    Raises:
        ValidationFailed: If an escaped value no longer passes validation
    """
    data = sanitize_tree(model.model_dump(mode="json", exclude_unset=True))
    try:
        return type(model).model_validate(data)
    except ValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in e.errors()
        ]
        raise ValidationFailed("Validation failed", errors=errors)
