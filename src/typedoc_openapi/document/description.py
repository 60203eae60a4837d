"""Companion description file: ``@directive`` lines plus free prose.

Directive lines set info fields and OAuth2 security schemes; every other
line becomes part of the document description.

    @title: Sample API
    @version 2.1
    @license.name MIT
    @oauth2.auth.password.tokenurl https://example.com/token
    @oauth2.auth.password.scopes.read Read access
    Everything else is prose.
"""

import re
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field

from typedoc_openapi.errors import InputError

logger = structlog.get_logger(__name__)

_DIRECTIVE = re.compile(r"^@(?P<key>[\w.\-]+)\s*:?\s*(?P<value>.*)$")

_INFO_KEYS = {
    "title": "title",
    "version": "version",
    "email": "email",
    "name": "name",
    "url": "url",
    "termsofservice": "terms_of_service",
    "license.name": "license_name",
    "license.url": "license_url",
}

_OAUTH_FLOWS = {
    "password": "password",
    "clientcredentials": "clientCredentials",
    "authorizationcode": "authorizationCode",
    "implicit": "implicit",
}

_OAUTH_URLS = {
    "tokenurl": "token_url",
    "authorizationurl": "authorization_url",
    "refreshurl": "refresh_url",
}


class OAuthFlow(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    authorization_url: str | None = Field(default=None, alias="authorizationUrl")
    token_url: str | None = Field(default=None, alias="tokenUrl")
    refresh_url: str | None = Field(default=None, alias="refreshUrl")
    scopes: dict[str, str] = {}


class SecurityScheme(BaseModel):
    type: str = "oauth2"
    flows: dict[str, OAuthFlow] = {}


class ApiDescription(BaseModel):
    """Everything a description file can contribute to the document."""

    title: str | None = None
    version: str | None = None
    email: str | None = None
    name: str | None = None
    url: str | None = None
    terms_of_service: str | None = None
    license_name: str | None = None
    license_url: str | None = None
    description: str = ""
    security_schemes: dict[str, SecurityScheme] = {}
    security: dict[str, list[str]] = {}


def load_description(file_path: Path) -> ApiDescription:
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise InputError(f"Cannot read {file_path}: {e}") from e
    return parse_description(text)


def parse_description(text: str) -> ApiDescription:
    result = ApiDescription()
    prose = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        match = _DIRECTIVE.match(line.strip())
        if not match:
            prose.append(line)
            continue
        key, value = match.group("key"), match.group("value").strip()
        if not _apply_directive(result, key, value):
            logger.warning("description.unknown_directive", key=key, line=line_number)
    result.description = "\n".join(prose).strip()
    return result


def _apply_directive(result: ApiDescription, key: str, value: str) -> bool:
    """Apply one directive; False when the key is not understood."""
    field = _INFO_KEYS.get(key.lower())
    if field is not None:
        setattr(result, field, value)
        return True

    parts = key.split(".")
    if len(parts) < 4 or parts[0].lower() != "oauth2":
        return False
    scheme_name, flow_key, prop = parts[1], parts[2].lower(), ".".join(parts[3:])
    flow_name = _OAUTH_FLOWS.get(flow_key)
    if flow_name is None:
        return False

    # A scope on any flow also joins the scheme's default security requirement.
    if prop.lower().startswith("scopes."):
        scope = prop[len("scopes."):]
        flow = _flow(result, scheme_name, flow_name)
        flow.scopes[scope] = value
        scopes = result.security.setdefault(scheme_name, [])
        if scope not in scopes:
            scopes.append(scope)
        return True

    url_field = _OAUTH_URLS.get(prop.lower())
    if url_field is None:
        return False
    setattr(_flow(result, scheme_name, flow_name), url_field, value)
    return True


def _flow(result: ApiDescription, scheme_name: str, flow_name: str) -> OAuthFlow:
    scheme = result.security_schemes.setdefault(scheme_name, SecurityScheme())
    return scheme.flows.setdefault(flow_name, OAuthFlow())
