"""
Pydantic models for user payloads.

The record shape is not fixed, so the request models are generated at
application start from the active field descriptors (see
``schemas.fields``).  Three models are produced per shape:

* ``UserCreate``  – every required field must be present.
* ``UserReplace`` – same rules as create; used by ``PUT`` (full replace).
* ``UserPatch``   – every field may be omitted, but a field that *is*
  supplied is validated exactly as on create.

Unknown keys (including ``id``) are ignored.  Validation failures are
translated into :class:`RecordValidationError` naming the first
offending field.
"""

import math
from typing import Annotated, Any, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, PlainValidator, ValidationError, constr, create_model
from pydantic_core import PydanticCustomError

from ..core.errors import RecordValidationError
from .fields import NUMBER, Fields


NonEmptyStr = constr(strict=True, strip_whitespace=True, min_length=1)
# Optional strings only have to be strings; "" is a legitimate value.
OptionalStr = constr(strict=True, strip_whitespace=True)


def _finite_number(value: Any) -> Union[int, float]:
    # bool is a subclass of int but is not a number for our purposes
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError("number_type", "Input should be a finite number")
    if not math.isfinite(value):
        raise PydanticCustomError("finite_number", "Input should be a finite number")
    return value


FiniteNumber = Annotated[Union[int, float], PlainValidator(_finite_number)]

_MODEL_CONFIG = ConfigDict(extra="ignore", protected_namespaces=())


def _field_type(kind: str, required: bool) -> Any:
    if kind == NUMBER:
        return FiniteNumber
    return NonEmptyStr if required else OptionalStr


def _build_model(name: str, fields: Fields, partial: bool) -> Type[BaseModel]:
    definitions: Dict[str, Any] = {}
    for field in fields:
        annotation = _field_type(field.kind, field.required)
        if not field.required:
            definitions[field.name] = (Optional[annotation], None)
        elif partial:
            # Default is not validated, so an omitted field stays unset while
            # an explicit null is still rejected.
            definitions[field.name] = (annotation, None)
        else:
            definitions[field.name] = (annotation, ...)
    return create_model(name, __config__=_MODEL_CONFIG, **definitions)


def _first_error(exc: ValidationError) -> RecordValidationError:
    error = exc.errors()[0]
    loc = error.get("loc") or ()
    field = str(loc[0]) if loc else "body"
    if error.get("type") == "model_type":
        return RecordValidationError("body", "request body must be a JSON object")
    return RecordValidationError(field, error.get("msg", "invalid value"))


class UserPayloads:
    """Validate request bodies against the active record shape."""

    def __init__(self, fields: Fields) -> None:
        self.fields = fields
        self.create_model = _build_model("UserCreate", fields, partial=False)
        self.replace_model = _build_model("UserReplace", fields, partial=False)
        self.patch_model = _build_model("UserPatch", fields, partial=True)

    def for_create(self, body: Any) -> Dict[str, Any]:
        """Return every declared field (absent optional fields as ``None``)."""
        model = self._validate(self.create_model, body)
        return model.model_dump()

    def for_replace(self, body: Any) -> Dict[str, Any]:
        model = self._validate(self.replace_model, body)
        return model.model_dump()

    def for_patch(self, body: Any) -> Dict[str, Any]:
        """Return only the supplied fields, in declaration order.

        Raises ``RecordValidationError`` if no known field was supplied.
        """
        model = self._validate(self.patch_model, body)
        values = model.model_dump(exclude_unset=True)
        if not values:
            raise RecordValidationError("body", "at least one field required")
        return values

    @staticmethod
    def _validate(model: Type[BaseModel], body: Any) -> BaseModel:
        try:
            return model.model_validate(body)
        except ValidationError as exc:
            raise _first_error(exc) from exc
