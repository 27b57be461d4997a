"""
Pydantic schemas for input records
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .currency import to_amount
from .operations import OPERATION_CLASSES, Operation, OperationType


class OperationRecord(BaseModel):
    """One CSV row: type, client, tx, amount"""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        frozen=True
    )

    operation_type: OperationType = Field(..., alias="type")
    client_id: int = Field(..., alias="client", ge=0)
    tx_id: int = Field(..., alias="tx", ge=0)
    amount: Optional[Decimal] = Field(None, ge=0, allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def _strip_fields(cls, data):
        if not isinstance(data, dict):
            return data
        data = {
            key: value.strip() if isinstance(value, str) else value
            for key, value in data.items()
        }
        if data.get("amount") == "":
            data["amount"] = None
        return data

    @field_validator("amount")
    @classmethod
    def _quantize_amount(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is None:
            return None
        return to_amount(value)

    @model_validator(mode="after")
    def _check_amount_presence(self) -> 'OperationRecord':
        if self.operation_type.requires_amount and self.amount is None:
            raise ValueError(f"{self.operation_type.value} requires an amount")
        if not self.operation_type.requires_amount and self.amount is not None:
            raise ValueError(f"{self.operation_type.value} must not carry an amount")
        return self

    def to_operation(self) -> Operation:
        operation_class = OPERATION_CLASSES[self.operation_type]
        if self.operation_type.requires_amount:
            return operation_class(
                client_id=self.client_id, tx_id=self.tx_id, amount=self.amount
            )
        return operation_class(client_id=self.client_id, tx_id=self.tx_id)
