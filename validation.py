"""
Structural validation of create/update payloads.

Validators never touch the store. They collect every broken rule instead
of stopping at the first one, so a client can fix a form in one go.
"""
import re
from collections.abc import Mapping
from datetime import date, datetime

from email_validator import EmailNotValidError, validate_email

from data_models import MAX_ID
from errors import ValidationError

ISBN_PATTERN = re.compile(r"^[\d-]+$")
ISBN_MIN_LENGTH = 10
ISBN_MAX_LENGTH = 13

NOT_AN_OBJECT = "Request body must be a JSON object."


def parse_date(value):
    """
    Parse an ISO date ('YYYY-MM-DD') into a datetime.date.

    Returns:
         datetime.date or None for empty input.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    value = (value or "").strip()
    if not value:
        return None
    return datetime.strptime(value, "%Y-%m-%d").date()


def _text(payload, key):
    value = payload.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _positive_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if 1 <= number <= MAX_ID else None


def _check_text(errors, value, label, max_length, required=True):
    if not value:
        if required:
            errors.append(f"{label} is required.")
        return
    if len(value) > max_length:
        errors.append(f"{label} must not exceed {max_length} characters.")


def _check_date(errors, value, label):
    if value is None or (isinstance(value, str) and not value.strip()):
        errors.append(f"{label} is required.")
        return
    if not isinstance(value, (str, date)):
        errors.append(f"{label} must be a date in YYYY-MM-DD format.")
        return
    try:
        parse_date(value)
    except ValueError:
        errors.append(f"{label} must be a date in YYYY-MM-DD format.")


def validate_author(payload) -> list[str]:
    if not isinstance(payload, Mapping):
        return [NOT_AN_OBJECT]

    errors = []
    _check_text(errors, _text(payload, "first_name"), "First name", 50)
    _check_text(errors, _text(payload, "last_name"), "Last name", 50)
    _check_date(errors, payload.get("birth_date"), "Birth date")

    email = _text(payload, "email")
    _check_text(errors, email, "Email", 100)
    if email:
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            errors.append("Email must be a valid email address.")

    _check_text(errors, _text(payload, "biography"), "Biography", 1000, required=False)
    return errors


def validate_category(payload) -> list[str]:
    if not isinstance(payload, Mapping):
        return [NOT_AN_OBJECT]

    errors = []
    _check_text(errors, _text(payload, "name"), "Category name", 100)
    _check_text(errors, _text(payload, "description"), "Description", 500, required=False)
    return errors


def validate_book(payload) -> list[str]:
    if not isinstance(payload, Mapping):
        return [NOT_AN_OBJECT]

    errors = []
    _check_text(errors, _text(payload, "title"), "Title", 200)

    isbn = _text(payload, "isbn")
    if not isbn:
        errors.append("ISBN is required.")
    else:
        if not ISBN_MIN_LENGTH <= len(isbn) <= ISBN_MAX_LENGTH:
            errors.append(
                f"ISBN must be between {ISBN_MIN_LENGTH} and {ISBN_MAX_LENGTH} characters."
            )
        if not ISBN_PATTERN.match(isbn):
            errors.append("ISBN may contain only digits and hyphens.")

    _check_date(errors, payload.get("publication_date"), "Publication date")

    if _positive_int(payload.get("author_id")) is None:
        errors.append("A valid author must be selected.")
    if _positive_int(payload.get("category_id")) is None:
        errors.append("A valid category must be selected.")
    return errors


def _raise_on(errors):
    if errors:
        raise ValidationError(errors)


def clean_author(payload):
    """
    Validate an author payload and return column values ready for the model.

    Raises:
        ValidationError: with every broken rule.
    """
    _raise_on(validate_author(payload))
    return {
        "first_name": _text(payload, "first_name"),
        "last_name": _text(payload, "last_name"),
        "birth_date": parse_date(payload["birth_date"]),
        "email": _text(payload, "email"),
        "biography": _text(payload, "biography") or None,
    }


def clean_category(payload):
    _raise_on(validate_category(payload))
    return {
        "name": _text(payload, "name"),
        "description": _text(payload, "description") or None,
    }


def clean_book(payload):
    _raise_on(validate_book(payload))
    return {
        "title": _text(payload, "title"),
        "isbn": _text(payload, "isbn"),
        "publication_date": parse_date(payload["publication_date"]),
        "author_id": _positive_int(payload["author_id"]),
        "category_id": _positive_int(payload["category_id"]),
    }
