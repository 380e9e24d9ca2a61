"""Profile field validation.

Validation is an ordered list of pure functions. Each takes the candidate
record and returns zero or more field errors; the first failing rule for a
field produces its message.
"""

import re
from dataclasses import asdict, dataclass
from typing import Any, Callable, Mapping, Sequence

from domain.entities.profile import normalize_email

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 254
AGE_MIN = 1
AGE_MAX = 120

NAME_PATTERN = re.compile(r"^[a-zA-Z\s\-'.]+$")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
NUMBER_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)$")


@dataclass(frozen=True, slots=True)
class FieldError:
    """A single validation failure for one field."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


Candidate = Mapping[str, Any]
Validator = Callable[[Candidate], list[FieldError]]


def validate_name(candidate: Candidate) -> list[FieldError]:
    value = candidate.get("name")
    name = value.strip() if isinstance(value, str) else ""

    if not name:
        message = "Name is required"
    elif len(name) < NAME_MIN_LENGTH:
        message = f"Name must be at least {NAME_MIN_LENGTH} characters long"
    elif len(name) > NAME_MAX_LENGTH:
        message = f"Name must not exceed {NAME_MAX_LENGTH} characters"
    elif not NAME_PATTERN.match(name):
        message = "Name can only contain letters, spaces, hyphens, apostrophes, and periods"
    elif len(name.split()) < 2:
        message = "Please enter your full name (first and last name)"
    else:
        return []
    return [FieldError("name", message)]


def validate_email(candidate: Candidate) -> list[FieldError]:
    value = candidate.get("email")
    email = value.strip() if isinstance(value, str) else ""

    if not email:
        message = "Email address is required"
    elif not EMAIL_PATTERN.match(email):
        message = "Please enter a valid email address"
    elif len(email) > EMAIL_MAX_LENGTH:
        message = "Email address is too long"
    else:
        return []
    return [FieldError("email", message)]


def validate_age(candidate: Candidate) -> list[FieldError]:
    value = candidate.get("age")

    if value is None or (isinstance(value, str) and not value.strip()):
        return [FieldError("age", "Age is required")]

    age = coerce_age(value)
    if age is None:
        if _is_fractional(value):
            return [FieldError("age", "Age must be a whole number")]
        return [FieldError("age", "Age must be a valid number")]
    if age < AGE_MIN:
        return [FieldError("age", "Age must be at least 1 year")]
    if age > AGE_MAX:
        return [FieldError("age", f"Age cannot exceed {AGE_MAX} years")]
    return []


PROFILE_VALIDATORS: tuple[Validator, ...] = (validate_name, validate_email, validate_age)


def validate_profile(
    candidate: Candidate,
    validators: Sequence[Validator] = PROFILE_VALIDATORS,
) -> list[FieldError]:
    """Run each validator in order and collect every field error."""
    errors: list[FieldError] = []
    for validator in validators:
        errors.extend(validator(candidate))
    return errors


def normalize_profile(candidate: Candidate) -> dict[str, Any]:
    """Return the canonical name/email/age of an already validated candidate."""
    age = coerce_age(candidate["age"])
    if age is None:
        raise ValueError(f"Cannot normalize age: {candidate['age']!r}")
    return {
        "name": str(candidate["name"]).strip(),
        "email": normalize_email(str(candidate["email"])),
        "age": age,
    }


def coerce_age(value: Any) -> int | None:
    """Interpret ``value`` as an integer age, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and INTEGER_PATTERN.match(value.strip()):
        return int(value.strip())
    return None


def _is_fractional(value: Any) -> bool:
    if isinstance(value, float):
        return not value.is_integer()
    return isinstance(value, str) and bool(NUMBER_PATTERN.match(value.strip()))
