"""Request body validation for Flask views.

``@validate_request`` reads the view's ``data`` parameter annotation and, if
it is a Pydantic model, parses the JSON request body into it. Path
parameters pass through untouched.

Any body that cannot be turned into the model raises
``ValidationError(code="invalid_json")``: missing or undecodable JSON, a
JSON value that is not an object, or fields of the wrong type. Semantic
rules (lengths, required non-empty fields) belong to the flows.
"""

import inspect
import logging
from functools import wraps

from flask import request
from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

INVALID_JSON = "invalid_json"


def _body_model(func) -> type[BaseModel] | None:
    param = inspect.signature(func).parameters.get("data")
    if param is None:
        return None
    annotation = param.annotation
    if inspect.isclass(annotation) and issubclass(annotation, BaseModel):
        return annotation
    return None


def validate_request(func):
    """
    Decorator that validates the JSON body against the ``data`` annotation.

    Example:
    ```python
    @auth_bp.post("/login")
    @validate_request
    def login(data: LoginRequest):
        ...
    ```

    Raises:
        ValidationError: ``invalid_json`` when the body does not fit the model
    """
    model = _body_model(func)

    @wraps(func)
    def wrapper(*args, **kwargs):
        if model is None:
            return func(*args, **kwargs)

        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValidationError(
                "Request body must be a JSON object",
                {"detail": "request body must be a JSON object"},
                code=INVALID_JSON,
            )

        try:
            data = model.model_validate(payload)
        except PydanticValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            logger.info(f"Rejected {request.path} body, bad fields: {fields}")
            raise ValidationError(
                "Request body has invalid fields",
                {"detail": f"invalid fields: {', '.join(fields)}"},
                code=INVALID_JSON,
            )

        return func(*args, data=data, **kwargs)

    return wrapper
