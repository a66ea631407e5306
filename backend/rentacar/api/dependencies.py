from typing import Type, TypeVar

from flask import g, request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from rentacar.utils.exceptions import ValidationError

ANONYMOUS_ACTOR = "anonymous"

T = TypeVar("T", bound=BaseModel)


def get_actor() -> str:
    """Username for audit lines.

    Authentication happens upstream; when it ran it leaves ``g.user_id``.
    """
    user_id = (getattr(g, "user_id", None) or "").strip()
    if user_id:
        return user_id
    header_actor = (request.headers.get("X-Actor") or "").strip()
    return header_actor or ANONYMOUS_ACTOR


def get_origin() -> str:
    forwarded = (request.headers.get("X-Forwarded-For") or "").split(",")[0].strip()
    return forwarded or request.remote_addr or "unknown"


def parse_body(schema: Type[T], what: str) -> T:
    data = request.get_json(silent=True) or {}
    try:
        return schema(**data)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid {what} request", details={"errors": exc.errors(include_url=False, include_context=False)})


def parse_args(schema: Type[T], what: str) -> T:
    try:
        return schema(**request.args.to_dict())
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid {what} query", details={"errors": exc.errors(include_url=False, include_context=False)})
