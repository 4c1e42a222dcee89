import json
import sys
import typing as t


def jd(data: t.Any):
    """
    Pretty-print JSON with indentation.
    """
    print(json.dumps(data, indent=2), file=sys.stdout)  # noqa: T201


# from sqlalchemy.util.langhelpers
# from paste.deploy.converters
def asbool(obj: t.Any) -> bool:
    if isinstance(obj, str):
        obj = obj.strip().lower()
        if obj in ["true", "yes", "on", "y", "t", "1"]:
            return True
        elif obj in ["false", "no", "off", "n", "f", "0"]:
            return False
        else:
            raise ValueError("String is not true/false: %r" % obj)
    return bool(obj)


def parse_int(value: t.Any, field: str, optional: bool = False) -> t.Optional[int]:
    """
    Convert a string-typed numeric field from a `_cat` listing.

    Raises `ValueError` on non-numeric input. Empty values are accepted
    only when `optional` is set, and yield None.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if optional:
            return None
        raise ValueError(f"Missing value for field '{field}'")
    if isinstance(value, bool):
        raise ValueError(f"Invalid value for field '{field}': {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as ex:
        raise ValueError(f"Invalid value for field '{field}': {value!r}") from ex
