# file: LISTINGS/HOME/validator.py
import re
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from LISTINGS.core.errors import FieldError
from LISTINGS.HOME.models import Category

# Decimal float literal: optional sign, digits, optional fraction, optional exponent.
_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def is_present(value: Optional[str]) -> bool:
    return value is not None and value != ""


def is_float(value: Optional[str]) -> bool:
    if value is None:
        return False
    return bool(_FLOAT_RE.fullmatch(str(value)))


Rule = Tuple[str, Callable[[Optional[str]], bool], str]

REQUIRED_TITLE: Rule = ("title", is_present, "Title is required")
REQUIRED_LOCATION: Rule = ("location", is_present, "Location is required")
NUMERIC_LATITUDE: Rule = ("latitude", is_float, "Latitude must be a valid number")
NUMERIC_LONGITUDE: Rule = ("longitude", is_float, "Longitude must be a valid number")
REQUIRED_DESCRIPTION: Rule = ("description", is_present, "Description is required")

# ==============================
# Rule table per category, in form field order
# ==============================
RULES: Dict[Category, List[Rule]] = {
    Category.food: [
        REQUIRED_TITLE,
        REQUIRED_LOCATION,
        NUMERIC_LATITUDE,
        NUMERIC_LONGITUDE,
        REQUIRED_DESCRIPTION,
    ],
    Category.house: [
        REQUIRED_TITLE,
        REQUIRED_LOCATION,
        ("rent", is_float, "Rent must be a valid number"),
        NUMERIC_LATITUDE,
        NUMERIC_LONGITUDE,
        REQUIRED_DESCRIPTION,
    ],
    Category.market: [
        REQUIRED_TITLE,
        REQUIRED_LOCATION,
        ("price", is_float, "Price must be a valid number"),
        NUMERIC_LATITUDE,
        NUMERIC_LONGITUDE,
        REQUIRED_DESCRIPTION,
    ],
}


def form_fields(category: Category) -> List[str]:
    """Names of the submitted fields for a category, in form order."""
    return [name for name, _, _ in RULES[Category(category)]]


def validate(category: Category, fields: Mapping[str, Optional[str]]) -> List[FieldError]:
    """
    Check every rule for the category and return all failures.
    An empty list means the fields are acceptable.
    """
    errors = []
    for name, check, message in RULES[Category(category)]:
        value = fields.get(name)
        if not check(value):
            errors.append(FieldError(
                field=name,
                message=message,
                value=None if value is None else str(value),
            ))
    return errors
