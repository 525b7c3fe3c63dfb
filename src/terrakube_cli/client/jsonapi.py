"""Translate between resource models and JSON:API documents.

The Terrakube API speaks `JSON:API <https://jsonapi.org/>`_: every resource
object carries ``type``, ``id``, an ``attributes`` object and a
``relationships`` object whose members point at other resources by
``{type, id}``.

Encoding sends only attributes that were assigned on the model and are not
``None``. A model populated with only the flags the user changed therefore
produces a partial document suitable for ``PATCH``.
"""

from __future__ import annotations

from typing import Any, TypeVar, Union

from terrakube_cli.exceptions import ServerError
from terrakube_cli.models import Resource

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"

T = TypeVar("T", bound=Resource)


def _alias(model: type[Resource], field_name: str) -> str:
    return model.model_fields[field_name].alias or field_name


def encode(resource: Resource) -> dict[str, Any]:
    """Build a JSON:API document for *resource*.

    Args:
        resource: The model to send.

    Returns:
        A ``{"data": {...}}`` document. ``id`` is included only when set.
    """
    model = type(resource)
    relations = model.relation_fields()

    attributes = resource.model_dump(
        mode="json",
        by_alias=True,
        exclude_unset=True,
        exclude_none=True,
        exclude={"id", *relations},
    )

    data: dict[str, Any] = {"type": model.resource_type}
    if resource.id:
        data["id"] = resource.id
    data["attributes"] = attributes

    relationships: dict[str, Any] = {}
    for name, related_type in relations.items():
        related_id = getattr(resource, name)
        if related_id:
            relationships[_alias(model, name)] = {
                "data": {"type": related_type, "id": related_id}
            }
    if relationships:
        data["relationships"] = relationships

    return {"data": data}


def decode(model: type[T], obj: dict[str, Any]) -> T:
    """Build a *model* instance from one JSON:API resource object.

    ``null`` attributes fall back to the model defaults. To-one
    relationships are stored as the related resource's ID.
    """
    values: dict[str, Any] = {
        key: value
        for key, value in (obj.get("attributes") or {}).items()
        if value is not None
    }
    values["id"] = str(obj.get("id") or "")

    relationships = obj.get("relationships") or {}
    for name in model.relation_fields():
        alias = _alias(model, name)
        member = relationships.get(alias)
        linkage = member.get("data") if isinstance(member, dict) else None
        if isinstance(linkage, dict) and linkage.get("id"):
            values[alias] = str(linkage["id"])

    return model.model_validate(values)


def decode_document(model: type[T], payload: Any) -> Union[T, list[T]]:
    """Decode a top-level JSON:API document into one model or a list of models.

    Raises:
        ServerError: If the payload is not a JSON:API document.
    """
    if not isinstance(payload, dict) or "data" not in payload:
        raise ServerError("unexpected response: missing JSON:API 'data' member")
    data = payload["data"]
    if data is None:
        return []
    if isinstance(data, list):
        return [decode(model, item) for item in data]
    if isinstance(data, dict):
        return decode(model, data)
    raise ServerError("unexpected response: 'data' is neither an object nor a list")
