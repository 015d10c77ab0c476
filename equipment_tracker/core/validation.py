"""Field-level rules for incoming equipment, brand, department and user data.

Each rule returns a :class:`RuleResult` carrying a stable :class:`ReasonCode`
so callers can map failures to their own wording. ``None`` always means the
field was not supplied; an explicit empty string is a value and is judged as
such.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict

EQUIPMENT_STATUSES = ("new", "old", "damaged", "repairing", "disposed")
DEFAULT_STATUS = "new"

USER_ROLES = ("user", "admin")
DEFAULT_ROLE = "user"

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
# bcrypt only hashes the first 72 bytes and refuses longer input.
MAX_PASSWORD_BYTES = 72
MIN_DISPLAY_NAME_LENGTH = 2


class ReasonCode(str, Enum):
    MISSING_NAME = "MISSING_NAME"
    INVALID_STATUS = "INVALID_STATUS"
    USERNAME_TOO_SHORT = "USERNAME_TOO_SHORT"
    PASSWORD_TOO_SHORT = "PASSWORD_TOO_SHORT"
    PASSWORD_TOO_LONG = "PASSWORD_TOO_LONG"
    INVALID_ROLE = "INVALID_ROLE"
    DISPLAY_NAME_TOO_SHORT = "DISPLAY_NAME_TOO_SHORT"
    INVALID_PURCHASE_DATE = "INVALID_PURCHASE_DATE"
    UNKNOWN_REFERENCE = "UNKNOWN_REFERENCE"


class RuleResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    accepted: bool
    reason: ReasonCode | None = None
    field: str | None = None
    absent: bool = False

    def __bool__(self) -> bool:
        return self.accepted


def _accept(field: str | None = None, *, absent: bool = False) -> RuleResult:
    return RuleResult(accepted=True, field=field, absent=absent)


def _reject(reason: ReasonCode, field: str) -> RuleResult:
    return RuleResult(accepted=False, reason=reason, field=field)


def validate_equipment_status(value: Any = None) -> RuleResult:
    """Exact, case-sensitive membership in the five equipment states."""

    if value is None:
        return _accept("status", absent=True)
    if isinstance(value, str) and value in EQUIPMENT_STATUSES:
        return _accept("status")
    return _reject(ReasonCode.INVALID_STATUS, "status")


def effective_status(result: RuleResult, value: str | None, current: str | None = None) -> str:
    """Status to persist: the supplied one, else ``current`` (update) or the default (create)."""

    if not result.absent and value is not None:
        return value
    return current if current is not None else DEFAULT_STATUS


def validate_required_name(value: Any, field: str = "name") -> RuleResult:
    if not isinstance(value, str) or not value.strip():
        return _reject(ReasonCode.MISSING_NAME, field)
    return _accept(field)


def validate_credential(
    username: str | None,
    password: str | None,
    min_password_length: int = MIN_PASSWORD_LENGTH,
    min_username_length: int = MIN_USERNAME_LENGTH,
) -> RuleResult:
    """Usernames are measured after trimming, the form in which they are stored."""

    if len((username or "").strip()) < min_username_length:
        return _reject(ReasonCode.USERNAME_TOO_SHORT, "username")
    result = validate_password(password or "", min_password_length)
    return result if not result.accepted else _accept()


def validate_password(password: str | None, min_password_length: int = MIN_PASSWORD_LENGTH) -> RuleResult:
    if password is None:
        return _accept("password", absent=True)
    if len(password) < min_password_length:
        return _reject(ReasonCode.PASSWORD_TOO_SHORT, "password")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return _reject(ReasonCode.PASSWORD_TOO_LONG, "password")
    return _accept("password")


def validate_user_role(value: Any = None) -> RuleResult:
    if value is None:
        return _accept("role", absent=True)
    if isinstance(value, str) and value in USER_ROLES:
        return _accept("role")
    return _reject(ReasonCode.INVALID_ROLE, "role")


def validate_display_name(value: Any, *, required: bool = True) -> RuleResult:
    if value is None and not required:
        return _accept("name", absent=True)
    if not isinstance(value, str) or len(value.strip()) < MIN_DISPLAY_NAME_LENGTH:
        return _reject(ReasonCode.DISPLAY_NAME_TOO_SHORT, "name")
    return _accept("name")


def validate_purchase_date(value: Any = None) -> RuleResult:
    """Accept ISO-8601 dates or datetimes (a trailing ``Z`` is allowed)."""

    if value is None:
        return _accept("purchase_date", absent=True)
    if isinstance(value, (date, datetime)):
        return _accept("purchase_date")
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            datetime.fromisoformat(text)
        except ValueError:
            return _reject(ReasonCode.INVALID_PURCHASE_DATE, "purchase_date")
        return _accept("purchase_date")
    return _reject(ReasonCode.INVALID_PURCHASE_DATE, "purchase_date")


def _first_failure(*results: RuleResult) -> RuleResult:
    for result in results:
        if not result.accepted:
            return result
    return _accept()


# Aggregate checks over request payloads. ``payload`` holds only the keys the
# client actually sent, so an empty update payload is a no-op and passes.


def check_equipment_create(payload: Mapping[str, Any]) -> RuleResult:
    return _first_failure(
        validate_required_name(payload.get("name")),
        validate_equipment_status(payload.get("status")),
        validate_purchase_date(payload.get("purchase_date")),
    )


def check_equipment_update(payload: Mapping[str, Any]) -> RuleResult:
    checks = []
    if "name" in payload:
        checks.append(validate_required_name(payload.get("name")))
    checks.append(validate_equipment_status(payload.get("status")))
    checks.append(validate_purchase_date(payload.get("purchase_date")))
    return _first_failure(*checks)


def check_named_create(payload: Mapping[str, Any]) -> RuleResult:
    """Brands and departments share the same shape: a required name."""

    return validate_required_name(payload.get("name"))


def check_named_update(payload: Mapping[str, Any]) -> RuleResult:
    if "name" in payload:
        return validate_required_name(payload.get("name"))
    return _accept()


def check_user_create(payload: Mapping[str, Any]) -> RuleResult:
    return _first_failure(
        validate_credential(payload.get("username"), payload.get("password")),
        validate_display_name(payload.get("name")),
        validate_user_role(payload.get("role")),
    )


def check_user_update(payload: Mapping[str, Any]) -> RuleResult:
    return _first_failure(
        validate_display_name(payload.get("name"), required=False),
        validate_user_role(payload.get("role")),
        validate_password(payload.get("password")),
    )


__all__ = [
    "DEFAULT_ROLE",
    "DEFAULT_STATUS",
    "EQUIPMENT_STATUSES",
    "MAX_PASSWORD_BYTES",
    "ReasonCode",
    "RuleResult",
    "USER_ROLES",
    "check_equipment_create",
    "check_equipment_update",
    "check_named_create",
    "check_named_update",
    "check_user_create",
    "check_user_update",
    "effective_status",
    "validate_credential",
    "validate_display_name",
    "validate_equipment_status",
    "validate_password",
    "validate_purchase_date",
    "validate_required_name",
    "validate_user_role",
]
