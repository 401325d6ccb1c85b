from dataclasses import dataclass
from enum import Enum
from typing import Any


class Outcome(str, Enum):
    OK = "ok"
    LOCATION_NOT_FOUND = "location_not_found"
    AUTH_FAILURE = "auth_failure"
    RATE_LIMITED = "rate_limited"
    OTHER = "other"


@dataclass(frozen=True)
class AdapterResult:
    """What an upstream adapter hands back: data on OK, a detail string otherwise."""

    outcome: Outcome
    data: Any = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    @classmethod
    def success(cls, data):
        return cls(Outcome.OK, data=data)

    @classmethod
    def failure(cls, outcome: Outcome, detail: str = ""):
        return cls(outcome, detail=detail)
