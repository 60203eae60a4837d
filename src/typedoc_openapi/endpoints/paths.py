"""Route template helpers."""

import re

_PATH_PARAMETER = re.compile(r":([^/]+)")
_REPEATED_SLASH = re.compile(r"/{2,}")


def convert_path_parameters(path: str) -> str:
    """Rewrite Express-style ``:name`` segments as OpenAPI ``{name}``."""
    return _PATH_PARAMETER.sub(r"{\1}", path)


def join_route(prefix: str, suffix: str) -> str:
    """Controller prefix + method suffix, each converted, without doubled slashes."""
    route = convert_path_parameters(prefix) + convert_path_parameters(suffix)
    route = _REPEATED_SLASH.sub("/", route)
    return route or "/"


def strip_quotes(text: str) -> str:
    """Decorator arguments are recorded as source text, quotes included."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    return text
