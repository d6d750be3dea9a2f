# backend/timekeeper/models/base.py

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# wire formats for every timestamp / date field
DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


def parse_formatted(raw: Any, fmt: str) -> datetime:
    """
    strptime that only accepts the canonical spelling of `fmt`
    ("2018-7-4", fractions and offsets are rejected). Raises ValueError.
    """
    try:
        parsed = datetime.strptime(raw, fmt)
    except (TypeError, ValueError):
        parsed = None
    if parsed is None or parsed.strftime(fmt) != raw:
        raise ValueError(f"'{raw}' does not match the format {fmt}")
    return parsed


def wire_datetime(v: Any) -> Any:
    """[before-validator] str -> datetime in DATETIME_FORMAT; datetime objects pass through"""
    if v is None or isinstance(v, datetime):
        return v
    if not isinstance(v, str):
        raise ValueError(f"expected a string in the format {DATETIME_FORMAT}")
    return parse_formatted(v, DATETIME_FORMAT)


def wire_date(v: Any) -> Any:
    """[before-validator] str -> date in DATE_FORMAT; date objects pass through"""
    if v is None or isinstance(v, date):
        return v
    if not isinstance(v, str):
        raise ValueError(f"expected a string in the format {DATE_FORMAT}")
    return parse_formatted(v, DATE_FORMAT).date()


def format_datetime(v: Optional[datetime]) -> Optional[str]:
    return v.strftime(DATETIME_FORMAT) if v is not None else None


def format_date(v: Optional[date]) -> Optional[str]:
    return v.strftime(DATE_FORMAT) if v is not None else None


class EntityModel(BaseModel):
    """
    Common base for every stored entity.
    - id is assigned by the store (None until inserted)
    - JSON uses camelCase (projectId, currentTime ...), python uses snake_case
    - timestamps / dates are read and written only in DATETIME_FORMAT / DATE_FORMAT
    """
    id: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,   # allow Task(project_id=...) as well as Task(projectId=...)
        from_attributes=True,
        use_enum_values=False,
    )
