from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Severity


@dataclass(frozen=True)
class StatusMessage:
    text: str
    severity: Severity = Severity.INFO

    def to_dict(self) -> dict:
        return {"text": self.text, "severity": self.severity.value}

    @classmethod
    def from_dict(cls, data: dict) -> "StatusMessage":
        return cls(text=str(data.get("text", "")), severity=Severity(data.get("severity", Severity.INFO.value)))
