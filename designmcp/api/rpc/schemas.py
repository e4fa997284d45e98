"""Per-method parameter validation built on pydantic models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from designmcp.api.rpc.errors import Violation
from designmcp.utils.exceptions import sanitize_error_message


class ParamsModel(BaseModel):
    """Base for method parameter schemas: strict types, unknown keys ignored."""

    model_config = ConfigDict(strict=True, extra="ignore")


class EmptyParams(ParamsModel):
    """Schema for methods that take no parameters."""


_MESSAGE_OVERRIDES = {
    "missing": "Required",
    "extra_forbidden": "Unrecognized key",
}


def violations_from_error(exc: ValidationError) -> list[Violation]:
    """Convert a pydantic ValidationError into ordered violations."""
    out: list[Violation] = []
    for err in exc.errors(include_url=False):
        message = _MESSAGE_OVERRIDES.get(err.get("type", ""), err.get("msg", "Invalid value"))
        out.append(Violation(path=tuple(err.get("loc") or ()), message=message))
    return out


@dataclass(slots=True)
class ValidationOutcome:
    params: Any = None
    violations: list[Violation] = field(default_factory=list)
    fault: str | None = None

    @property
    def ok(self) -> bool:
        return not self.violations and self.fault is None


class SchemaValidator:
    """Validate raw params against a method's schema without raising."""

    def _as_mapping(self, schema: type[BaseModel], raw: Any) -> tuple[dict[str, Any] | None, list[Violation]]:
        if raw is None:
            return {}, []
        if isinstance(raw, dict):
            return raw, []
        if isinstance(raw, list):
            names = list(schema.model_fields)
            if len(raw) > len(names):
                return None, [
                    Violation(
                        path=(),
                        message=f"Expected at most {len(names)} positional params, received {len(raw)}",
                    )
                ]
            return dict(zip(names, raw)), []
        return None, [Violation(path=(), message=f"Expected object or array, received {type(raw).__name__}")]

    def validate(self, schema: type[BaseModel] | None, raw: Any) -> ValidationOutcome:
        if schema is None:
            return ValidationOutcome(params=raw)
        try:
            mapping, violations = self._as_mapping(schema, raw)
            if violations:
                return ValidationOutcome(violations=violations)
            return ValidationOutcome(params=schema.model_validate(mapping))
        except ValidationError as e:
            return ValidationOutcome(violations=violations_from_error(e))
        except Exception as e:
            return ValidationOutcome(fault=sanitize_error_message(f"{type(e).__name__}: {e}"))
