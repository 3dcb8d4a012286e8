"""Client options and request header composition."""

from __future__ import annotations

import platform
import re
import ssl

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .runtime.paging.definitions import DEFAULT_PAGE_SIZE, LOW_WATER_MARK, MAX_PAGE_SIZE
from .runtime.rest.retrying import ATTEMPT_LIMIT, RETRY_DELAY

CLIENT_NAME = "LazyHal"


def dromedary_case(value: str) -> str:
    """``rockenberg-commerce`` -> ``rockenbergCommerce``."""
    head, *rest = re.split(r"[-_\s]+", value.strip())
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def normalize_version_string(value: str) -> str:
    """Validate a ``name/version`` token and normalize its name.

    Raises:
        ValueError: If the token is not a name and version separated by one slash
    """
    name, separator, version = value.partition("/")
    if not separator or not name or not version or "/" in version:
        raise ValueError(
            "Invalid version string. It needs to consist of a name and version separated "
            "by a forward slash, e.g. RockenbergCommerce/3.1.12"
        )
    if re.search(r"\s", version):
        raise ValueError("Invalid version string. The version may not contain any whitespace.")
    return f"{dromedary_case(name)}/{version}"


class ClientOptions(BaseModel):
    """Options for an ``ApiClient``.

    Exactly one of ``api_key`` and ``access_token`` must be given.
    """

    api_endpoint: str = Field(..., min_length=1)
    api_key: str | None = Field(default=None, min_length=1)
    access_token: str | None = Field(default=None, min_length=1)
    version_strings: tuple[str, ...] = ()
    timeout: float = Field(default=30.0, gt=0)
    ca_certificates: str | None = None

    max_page_size: int = Field(default=MAX_PAGE_SIZE, ge=1)
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    low_water_mark: int = Field(default=LOW_WATER_MARK, ge=0)

    attempt_limit: int = Field(default=ATTEMPT_LIMIT, ge=1)
    retry_delay: float = Field(default=RETRY_DELAY, ge=0)

    @field_validator("version_strings", mode="before")
    @classmethod
    def validate_version_strings(cls, v: object) -> tuple[str, ...]:
        """Accept a single token or a sequence of tokens."""
        if v is None:
            return ()
        if isinstance(v, str):
            v = (v,)
        return tuple(normalize_version_string(token) for token in v)  # type: ignore[union-attr]

    @model_validator(mode="after")
    def validate_credentials(self) -> ClientOptions:
        if self.api_key is None and self.access_token is None:
            raise ValueError("Missing parameter: either api_key or access_token is required")
        if self.api_key is not None and self.access_token is not None:
            raise ValueError("Pass either api_key or access_token, not both")
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size cannot exceed max_page_size")
        return self

    @property
    def uses_oauth(self) -> bool:
        return self.access_token is not None

    def ssl_context(self) -> ssl.SSLContext | None:
        if self.ca_certificates is None:
            return None
        return ssl.create_default_context(cafile=self.ca_certificates)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


def compose_user_agent(options: ClientOptions, library_version: str) -> str:
    """``Python/3.12.1 LazyHal/0.1.0 RockenbergCommerce/1.16.0 OAuth/2.0``"""
    tokens = [
        f"Python/{platform.python_version()}",
        f"{CLIENT_NAME}/{library_version}",
        *options.version_strings,
    ]
    if options.uses_oauth:
        tokens.append("OAuth/2.0")
    return " ".join(tokens)


def default_headers(options: ClientOptions, library_version: str) -> dict[str, str]:
    """Headers sent with every request."""
    return {
        "Authorization": f"Bearer {options.api_key or options.access_token}",
        "Accept": "application/hal+json",
        "Accept-Encoding": "gzip",
        "Content-Type": "application/json",
        "User-Agent": compose_user_agent(options, library_version),
    }
