"""
Conversion between stored JSON records and models.
"""

from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import PersistenceFailure, ValidationError
from ..models import InventoryItem, PurchaseOrder, UsageEvent

ModelT = TypeVar("ModelT", bound=BaseModel)


def describe_validation_error(exc: PydanticValidationError) -> str:
    """Flatten a pydantic error into one readable line."""
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", ())) or "value"
        parts.append(f"{field}: {error.get('msg', 'invalid')}")
    return "; ".join(parts)


def validate_input(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """Validate caller-supplied data, raising ValidationError on failure."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_error(e)) from e


def _load(model: Type[ModelT], records: List[Dict[str, Any]], table: str) -> List[ModelT]:
    loaded = []
    for index, record in enumerate(records):
        try:
            loaded.append(model.model_validate(record))
        except PydanticValidationError as e:
            record_id = record.get("id", index) if isinstance(record, dict) else index
            raise PersistenceFailure(
                f"Malformed record {record_id} in {table} table: {describe_validation_error(e)}"
            ) from e
    return loaded


def load_items(records: List[Dict[str, Any]]) -> List[InventoryItem]:
    return _load(InventoryItem, records, "inventory")


def load_usage(records: List[Dict[str, Any]]) -> List[UsageEvent]:
    return _load(UsageEvent, records, "usage_history")


def load_orders(records: List[Dict[str, Any]]) -> List[PurchaseOrder]:
    return _load(PurchaseOrder, records, "purchase_orders")


def dump(models: List[BaseModel]) -> List[Dict[str, Any]]:
    return [model.to_dict() for model in models]
