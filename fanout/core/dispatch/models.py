from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from fanout.core.errors import InputContractError

REQUIRED_FIELDS = ("protocol", "raw_request", "payloads")


class WorkPacket(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    protocol: Literal["http", "https"]
    raw_request_template: StrictStr = Field(alias="raw_request")
    payloads: List[Dict[StrictStr, StrictStr | StrictInt | StrictFloat]]

    @field_validator("payloads")
    @classmethod
    def stringify_values(cls, payloads: List[Dict[str, Any]]):
        return [
            {placeholder: str(value) for placeholder, value in payload.items()}
            for payload in payloads
        ]

    @classmethod
    def from_invocation_input(cls, invocation_input: Any) -> WorkPacket:
        if not isinstance(invocation_input, dict):
            raise InputContractError(
                f"Invocation input must be an object, got {type(invocation_input).__name__}"
            )

        missing = [name for name in REQUIRED_FIELDS if name not in invocation_input]
        if missing:
            raise InputContractError(
                f"Missing required fields: {', '.join(missing)}"
            )

        try:
            return cls.model_validate(invocation_input)

        except ValidationError as err:
            raise InputContractError(str(err))

    def to_invocation_input(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


@dataclass
class SplitPlan:
    local: List[Dict[str, str]] = field(default_factory=list)
    continuations: List[WorkPacket] = field(default_factory=list)

    @property
    def delegated(self) -> int:
        return sum(len(packet.payloads) for packet in self.continuations)


@dataclass
class DispatchReport:
    identity: str
    claimed: int = 0
    succeeded: int = 0
    failed: int = 0
    persistence_errors: int = 0
    continuations: int = 0
    dispatch_errors: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identity": self.identity,
            "claimed": self.claimed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "persistence_errors": self.persistence_errors,
            "continuations": self.continuations,
            "dispatch_errors": self.dispatch_errors,
        }
