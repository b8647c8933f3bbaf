"""Tests for the directory identity lookup."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from installer_mcp.config import Settings
from installer_mcp.models import InvocationOutput
from installer_mcp.services import reset_state, set_settings
from installer_mcp.services.errors import SessionOpenError
from installer_mcp.utils.directory import (
    build_computer_search,
    identity_exists,
    ldap_escape,
)


@pytest.fixture(autouse=True)
def clean_state():
    reset_state()
    yield
    reset_state()


def make_factory(
    output: list | None = None,
    open_error: Exception | None = None,
) -> tuple[MagicMock, MagicMock]:
    session = MagicMock()
    session.target = "dc01"
    session.open = AsyncMock(side_effect=open_error)
    session.invoke = AsyncMock(return_value=InvocationOutput(output=output or []))
    session.close = AsyncMock()
    factory = MagicMock(return_value=session)
    return factory, session


def test_ldap_escape() -> None:
    assert ldap_escape("pc01") == "pc01"
    assert ldap_escape("*)(name=*") == "\\2a\\29\\28name=\\2a"
    assert ldap_escape("a\\b") == "a\\5cb"


def test_build_computer_search() -> None:
    script = build_computer_search("pc01")
    assert "[adsisearcher]'(&(objectCategory=computer)(name=pc01))'" in script
    assert "FindOne()" in script


def test_build_computer_search_escapes_quotes() -> None:
    script = build_computer_search("o'neil")
    assert "(name=o''neil)" in script


@pytest.mark.asyncio
async def test_identity_found() -> None:
    factory, session = make_factory(output=[True])

    assert await identity_exists("pc01", "dc01", session_factory=factory) is True
    factory.assert_called_once_with("dc01")
    session.invoke.assert_awaited_once_with(build_computer_search("pc01"))
    session.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_identity_missing() -> None:
    factory, _ = make_factory(output=[False])

    assert await identity_exists("pc99", "dc01", session_factory=factory) is False


@pytest.mark.asyncio
async def test_no_directory_server_configured() -> None:
    set_settings(Settings(directory_server=None))
    factory, _ = make_factory(output=[True])

    assert await identity_exists("pc01", session_factory=factory) is False
    factory.assert_not_called()


@pytest.mark.asyncio
async def test_directory_server_from_settings() -> None:
    set_settings(Settings(directory_server="dc02"))
    factory, _ = make_factory(output=[True])

    assert await identity_exists("pc01", session_factory=factory) is True
    factory.assert_called_once_with("dc02")


@pytest.mark.asyncio
async def test_unreachable_directory_is_missing() -> None:
    factory, session = make_factory(
        open_error=SessionOpenError("dc01", OSError("unreachable"))
    )

    assert await identity_exists("pc01", "dc01", session_factory=factory) is False
    session.close.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "   ", "pc01\nRemove-Item C:\\"])
async def test_invalid_names_are_missing(name: str) -> None:
    factory, _ = make_factory(output=[True])

    assert await identity_exists(name, "dc01", session_factory=factory) is False
    factory.assert_not_called()
