"""Registration and profile field rules

Each check returns a list of "fieldName: message" strings so that a form can
show every problem at once.
"""

import re
from typing import List, Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15

PASSWORD_RULE = "Password must be 8+ chars, include uppercase, lowercase, number, and special char."

REQUIRED_FIELDS = (
    ("first_name", "firstName", "First name is required."),
    ("last_name", "lastName", "Last name is required."),
    ("business_name", "businessName", "Business name is required."),
    ("business_address", "businessAddress", "Business address is required."),
    ("business_category", "businessCategory", "Business category is required."),
)

# Fields a partial update may omit but never clear
NON_NULL_FIELDS = (
    ("status", "status"),
    ("material_types", "materialTypes"),
    ("machinery_deployed", "machineryDeployed"),
    ("areas_of_interest", "areasOfInterest"),
)


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def is_valid_password(password: Optional[str]) -> bool:
    return bool(password) and PASSWORD_PATTERN.match(password) is not None


def phone_digit_count(phone: Optional[str]) -> int:
    return len(re.sub(r"\D", "", phone or ""))


def is_valid_phone(phone: Optional[str]) -> bool:
    return MIN_PHONE_DIGITS <= phone_digit_count(phone) <= MAX_PHONE_DIGITS


def parse_non_negative(value) -> Optional[float]:
    """Return the value as a number when it is a non-negative number, else None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if number != number or number < 0 or number == float("inf"):
        return None
    return number


def _numeric_errors(data: dict, required: bool) -> List[str]:
    errors = []
    for field, wire, label in (
        ("employees", "employees", "Employees"),
        ("monthly_volume", "monthlyVolume", "Monthly volume"),
    ):
        value = data.get(field)
        if value is None and not required:
            continue
        if parse_non_negative(value) is None:
            errors.append(f"{wire}: {label} must be a non-negative number.")
    return errors


def validate_registration(data: dict) -> List[str]:
    """Every rule a registration payload breaks (empty when valid)"""
    errors = []

    if not is_valid_email(data.get("email")):
        errors.append("email: Please enter a valid email address.")

    if not is_valid_phone(data.get("phone")):
        errors.append(f"phone: Phone number must contain {MIN_PHONE_DIGITS}-{MAX_PHONE_DIGITS} digits.")

    if not is_valid_password(data.get("password")):
        errors.append(f"password: {PASSWORD_RULE}")
    elif data.get("confirm_password") is not None and data["confirm_password"] != data["password"]:
        errors.append("confirmPassword: Passwords do not match.")

    for field, wire, message in REQUIRED_FIELDS:
        if not (data.get(field) or "").strip():
            errors.append(f"{wire}: {message}")

    errors.extend(_numeric_errors(data, required=True))
    return errors


def validate_profile_update(updates: dict) -> List[str]:
    """Rules for the fields present in a partial update"""
    errors = []

    for field, wire in NON_NULL_FIELDS:
        if field in updates and updates[field] is None:
            errors.append(f"{wire}: Cannot be null.")

    if "phone" in updates and not is_valid_phone(updates["phone"]):
        errors.append(f"phone: Phone number must contain {MIN_PHONE_DIGITS}-{MAX_PHONE_DIGITS} digits.")

    for field, wire, message in REQUIRED_FIELDS:
        if field in updates and not (updates[field] or "").strip():
            errors.append(f"{wire}: {message}")

    errors.extend(_numeric_errors(updates, required=False))
    return errors


def normalize_number(value):
    """Store whole numbers as int, everything else as float"""
    number = parse_non_negative(value)
    if number is None:
        return value
    return int(number) if number.is_integer() else number
