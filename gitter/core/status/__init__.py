"""Status stream decoding."""

from gitter.core.status.status_parser import (
    get_status_parser,
    parse_status_name_extra,
    parse_status_porcelain,
    parse_status_z,
)

__all__ = [
    "get_status_parser",
    "parse_status_name_extra",
    "parse_status_porcelain",
    "parse_status_z",
]
