import json
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from anka_builder.errors import MalformedOutputError
from anka_builder.models import CommandResult

M = TypeVar("M", bound=BaseModel)


def parse_output(raw: bytes | str) -> CommandResult:
    """
    Parse one machine-readable envelope: {status, body?, exceptionType?, message?}.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedOutputError(f"could not parse anka output: {e}", raw) from e

    if not isinstance(data, dict):
        raise MalformedOutputError(
            f"expected a JSON object from anka, got {type(data).__name__}", raw
        )

    try:
        return CommandResult.model_validate(data)
    except ValidationError as e:
        raise MalformedOutputError(f"unexpected anka output: {e}", raw) from e


def parse_body(command: str, model: type[M], body: Any) -> M:
    """Validate an OK envelope's body into `model`. A missing body counts as {}."""
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise MalformedOutputError(
            f"unexpected {command} body: expected an object, got {type(body).__name__}",
            str(body),
        )
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise MalformedOutputError(f"unexpected {command} body: {e}", str(body)) from e
