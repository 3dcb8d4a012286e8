"""Unit tests for core enums."""

import pytest

from lazyhal.client.core import HTTPMethod, UsageError


@pytest.mark.parametrize(
    ("method", "idempotent"),
    [
        (HTTPMethod.GET, True),
        (HTTPMethod.PATCH, True),
        (HTTPMethod.POST, False),
        (HTTPMethod.DELETE, False),
    ],
)
def test_idempotency_of_methods(method, idempotent):
    assert method.idempotent is idempotent


def test_from_str():
    assert HTTPMethod.from_str("post") is HTTPMethod.POST
    assert HTTPMethod.from_str(HTTPMethod.GET) is HTTPMethod.GET


@pytest.mark.parametrize("value", ["TRACE", "", "gett"])
def test_from_str_rejects_unknown_methods(value):
    with pytest.raises(UsageError, match="Unsupported HTTP method"):
        HTTPMethod.from_str(value)
