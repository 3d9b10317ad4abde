import re
from dataclasses import dataclass
from typing import List

from .models import Profile

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,64}")
PHONE_RE = re.compile(r"\+?[1-9]\d{1,14}")


@dataclass(frozen=True)
class ValidationError:
    """Base for the profile validation variants. Not an exception."""

    @property
    def message(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class InvalidEmail(ValidationError):
    @property
    def message(self) -> str:
        return "Please enter a valid email address"


@dataclass(frozen=True)
class InvalidPhone(ValidationError):
    @property
    def message(self) -> str:
        return "Please enter a valid phone number"


@dataclass(frozen=True)
class RequiredFieldMissing(ValidationError):
    field: str

    @property
    def message(self) -> str:
        return f"{self.field} is required"


def is_valid_email(email: str) -> bool:
    return EMAIL_RE.fullmatch(email) is not None


def is_valid_phone(phone: str) -> bool:
    return PHONE_RE.fullmatch(phone) is not None


def validate_profile(profile: Profile) -> List[ValidationError]:
    """
    Returns the validation errors for a profile snapshot. Empty list means valid.
    Every rule is checked; order is name, email, phone, school.
    """
    errors: List[ValidationError] = []

    if not profile.name:
        errors.append(RequiredFieldMissing("Name"))

    # Empty email is malformed, not missing
    if not is_valid_email(profile.email):
        errors.append(InvalidEmail())

    # Phone is optional
    if profile.phone_number and not is_valid_phone(profile.phone_number):
        errors.append(InvalidPhone())

    if not profile.school:
        errors.append(RequiredFieldMissing("School"))

    return errors


def format_errors(errors: List[ValidationError]) -> str:
    return "\n".join(e.message for e in errors)
