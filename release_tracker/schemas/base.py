"""
Shared Schema Base

The tracker's JSON contract uses camelCase (googleBooksId, releaseDate)
while Python code uses snake_case. CamelModel maps between the two: fields
are declared in snake_case, validated from camelCase or snake_case input,
and serialized as camelCase (FastAPI serializes response models by alias).
"""

import re
from datetime import date
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model for every request and response body."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


_PARTIAL_DATE = re.compile(r"^(\d{4})(?:-(\d{1,2}))?(?:-(\d{1,2}))?$")


def parse_partial_date(value: Any) -> Any:
    """
    Accept the partial dates Google Books reports.

    "2025" -> 2025-01-01, "2025-06" -> 2025-06-01, "2025-06-15" as is.
    Empty strings become None. Anything else is handed to Pydantic's own
    date parsing, which rejects it with a field-level error.
    """
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        match = _PARTIAL_DATE.match(value)
        if match:
            year, month, day = match.groups()
            return date(int(year), int(month or 1), int(day or 1))
    return value


PartialDate = Annotated[date | None, BeforeValidator(parse_partial_date)]
