"""Turn listing request arguments into LIMIT/OFFSET and ORDER BY parts."""

from typing import Any, Iterable, Mapping

from .config import Settings, get_settings
from .validators import is_numeric, to_int

DIRECTIONS = ("asc", "desc")


def _as_int(value: Any) -> int:
    """Lenient integer cast: anything non-numeric counts as 0."""
    if isinstance(value, bool):
        return int(value)
    if is_numeric(value):
        return to_int(value)
    return 0


def is_rows_count(args: Mapping[str, Any], settings: Settings | None = None) -> bool:
    """True when the caller only wants the number of rows."""
    settings = settings or get_settings()
    if settings.ROWS_COUNT_KEY not in args:
        return False
    return _as_int(args[settings.ROWS_COUNT_KEY]) == 1


def has_limit(args: Mapping[str, Any], settings: Settings | None = None) -> bool:
    """False when the caller opted out of LIMIT/OFFSET."""
    settings = settings or get_settings()
    if settings.NO_LIMIT_KEY not in args:
        return True
    return _as_int(args[settings.NO_LIMIT_KEY]) != 1


def get_page_number_for_sql(args: Mapping[str, Any], settings: Settings | None = None) -> int:
    """Zero-based page index."""
    settings = settings or get_settings()
    if settings.PAGE_KEY not in args:
        return 0
    page = _as_int(args[settings.PAGE_KEY])
    return page - 1 if page > 0 else 0


def get_page_number_for_human(args: Mapping[str, Any], settings: Settings | None = None) -> int:
    """One-based page number."""
    settings = settings or get_settings()
    if settings.PAGE_KEY not in args:
        return 1
    page = _as_int(args[settings.PAGE_KEY])
    return page if page > 1 else 1


def get_count_per_page(args: Mapping[str, Any], settings: Settings | None = None) -> int:
    """Rows per page, falling back to the configured size for missing or non-positive values."""
    settings = settings or get_settings()
    if settings.COUNT_KEY not in args:
        return settings.COUNT_PER_PAGE
    count = _as_int(args[settings.COUNT_KEY])
    if count <= 0:
        return settings.COUNT_PER_PAGE
    return count


def get_limit_offset_count(
    args: Mapping[str, Any], settings: Settings | None = None
) -> tuple[int, int]:
    """
    Return ``(limit, offset)`` for the requested page.

    Examples
    --------
        >>> get_limit_offset_count({"page": 2, "count": 2})
        (2, 2)
    """
    count = get_count_per_page(args, settings)
    page = get_page_number_for_sql(args, settings)
    return count, count * page


def is_valid_field_for_order_by(field: str, valid_fields: Iterable[str]) -> bool:
    return field in set(valid_fields)


def get_order_by_order_field(
    args: Mapping[str, Any],
    valid_fields: Iterable[str] = (),
    settings: Settings | None = None,
) -> list[tuple[str, str]]:
    """
    Parse the ``order`` argument into ``(field, direction)`` pairs.

    The argument is a comma separated list of ``field`` or
    ``field|direction`` items. Unknown fields and repeats are dropped, an
    unrecognised direction falls back to ascending, and an empty result
    falls back to the configured default order.

    Examples
    --------
        >>> get_order_by_order_field({"order": "title|desc,id,title"}, ["id", "title"])
        [('title', 'desc'), ('id', 'asc')]
    """
    settings = settings or get_settings()
    default = [(settings.DEFAULT_ORDER_FIELD, settings.DEFAULT_ORDER_DIRECTION)]

    if settings.ORDER_KEY not in args:
        return default

    valid = set(valid_fields)
    seen: set[str] = set()
    results: list[tuple[str, str]] = []

    for part in str(args[settings.ORDER_KEY]).split(settings.ORDER_DELIMITER):
        field = part.strip()
        direction = settings.DEFAULT_ORDER_DIRECTION

        subparts = part.split(settings.DIRECTION_DELIMITER)
        if len(subparts) > 1:
            field = subparts[0].strip()
            candidate = subparts[1].strip()
            if candidate in DIRECTIONS:
                direction = candidate

        if not is_valid_field_for_order_by(field, valid) or field in seen:
            continue

        seen.add(field)
        results.append((field, direction))

    return results or default


def implode_order(orders: Iterable[tuple[str, str]]) -> str:
    """Render pairs as an ORDER BY list: ``"title desc,id asc"``."""
    return ",".join(f"{field} {direction}" for field, direction in orders)


def has_invalid_primary_key(value: int) -> bool:
    return value < 1
