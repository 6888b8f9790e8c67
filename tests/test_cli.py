"""
Tests for the secretservice command line tool.

The D-Bus connection is replaced with the in-memory FakeTransport.
"""
from contextlib import asynccontextmanager

import orjson
import pytest
from typer.testing import CliRunner

from secretservice import cli as cli_module
from secretservice.cli import app
from secretservice.conf import (
    CONTENT_TYPE,
    DEFAULT_COLLECTION,
    IFACE_COLLECTION,
    IFACE_ITEM,
    IFACE_SERVICE,
    IFACE_SESSION,
)
from secretservice.crypto import aes_cbc_encrypt

SESSION = '/org/freedesktop/secrets/session/1'
ITEM = '/org/freedesktop/secrets/collection/login/1'
ITEM2 = '/org/freedesktop/secrets/collection/login/2'
PROMPT = '/org/freedesktop/secrets/prompt/p1'


# --- Test Fixtures ---

@pytest.fixture
def runner(transport, monkeypatch):
    """CliRunner wired to the FakeTransport, with a clean environment."""
    for name in ("SECRETSERVICE_ALGORITHM", "SECRETSERVICE_PROMPT_TIMEOUT",
                 "SECRETSERVICE_WINDOW_ID", "SECRETSERVICE_BUS",
                 "SECRETSERVICE_COLLECTION"):
        monkeypatch.delenv(name, raising=False)

    @asynccontextmanager
    async def connect(config):
        yield transport

    monkeypatch.setattr(cli_module, "connect", connect)
    return CliRunner()


@pytest.fixture
def keyring(transport):
    """A default collection with two plain-text items."""
    transport.reply(IFACE_SERVICE, 'OpenSession', (('s', ''), SESSION))
    transport.properties.update({
        (DEFAULT_COLLECTION, IFACE_COLLECTION, 'Items'): [ITEM, ITEM2],
        (ITEM, IFACE_ITEM, 'Label'): 'mail',
        (ITEM, IFACE_ITEM, 'Locked'): False,
        (ITEM, IFACE_ITEM, 'Attributes'): {'service': 'imap'},
        (ITEM, IFACE_ITEM, 'Created'): 0,
        (ITEM, IFACE_ITEM, 'Modified'): 0,
        (ITEM2, IFACE_ITEM, 'Label'): 'github',
        (ITEM2, IFACE_ITEM, 'Locked'): False,
        (ITEM2, IFACE_ITEM, 'Attributes'): {'service': 'github'},
        (ITEM2, IFACE_ITEM, 'Created'): 1700000000,
        (ITEM2, IFACE_ITEM, 'Modified'): 1700000000,
    })
    transport.reply(
        IFACE_ITEM, 'GetSecret',
        lambda path, session: ((session, b'', f'secret-of-{path[-1]}'.encode(), CONTENT_TYPE),),
    )
    return transport


# --- get ---

class TestGet:
    """Tests for the get command."""

    def test_prints_secret(self, runner, keyring):
        """Test that get prints the secret and closes the session."""
        result = runner.invoke(app, ["--plain", "get", "github"])
        assert result.exit_code == 0
        assert result.stdout == "secret-of-2"
        assert keyring.sent == [(SESSION, IFACE_SESSION, 'Close', '', ())]

    def test_locked_item(self, runner, keyring):
        """Test that a locked item is reported without reading its secret."""
        keyring.properties[(ITEM2, IFACE_ITEM, 'Locked')] = True
        result = runner.invoke(app, ["--plain", "get", "github"])
        assert result.exit_code == 1
        assert "locked!" in result.output
        assert keyring.calls_to('GetSecret') == []

    def test_missing_item(self, runner, keyring):
        """Test the exit status for an unknown label."""
        result = runner.invoke(app, ["--plain", "get", "nothing"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_custom_collection(self, runner, keyring):
        """Test that --collection selects the searched collection."""
        login = '/org/freedesktop/secrets/collection/login'
        keyring.properties[(login, IFACE_COLLECTION, 'Items')] = [ITEM]
        result = runner.invoke(app, ["--plain", "--collection", login, "get", "mail"])
        assert result.exit_code == 0
        assert result.stdout == "secret-of-1"


# --- lookup ---

class TestLookup:
    """Tests for the lookup command."""

    def test_encrypted_session(self, runner, transport, key_exchange):
        """Test lookup through a negotiated DH session."""
        iv = b'\x07' * 16

        def get_secret(path, session):
            value = aes_cbc_encrypt(key_exchange.keys[-1], iv, b's3cret')
            return ((session, iv, value, CONTENT_TYPE),)

        transport.reply(IFACE_SERVICE, 'SearchItems', ([ITEM], []))
        transport.reply(IFACE_ITEM, 'GetSecret', get_secret)
        result = runner.invoke(app, ["lookup", "service=imap"])
        assert result.exit_code == 0
        assert result.stdout == "s3cret"
        assert transport.calls[0][4] == ({'service': 'imap'},)

    def test_only_locked_matches(self, runner, transport):
        """Test lookup when every match is locked."""
        transport.reply(IFACE_SERVICE, 'SearchItems', ([], [ITEM]))
        result = runner.invoke(app, ["lookup", "service=imap"])
        assert result.exit_code == 1
        assert "locked" in result.output

    def test_no_match(self, runner, transport):
        """Test lookup without any match."""
        transport.reply(IFACE_SERVICE, 'SearchItems', ([], []))
        result = runner.invoke(app, ["lookup", "service=imap"])
        assert result.exit_code == 1

    def test_bad_attribute(self, runner, transport):
        """Test that malformed attributes are a usage error."""
        result = runner.invoke(app, ["lookup", "service"])
        assert result.exit_code == 2
        assert transport.calls == []


# --- store ---

class TestStore:
    """Tests for the store command."""

    def test_store_from_stdin(self, runner, keyring):
        """Test storing a secret read from standard input."""
        keyring.reply(IFACE_COLLECTION, 'CreateItem', (ITEM, '/'))
        result = runner.invoke(
            app, ["--plain", "store", "--label", "mail", "service=imap"],
            input="hunter2\n",
        )
        assert result.exit_code == 0
        assert ITEM in result.stdout
        (call,) = keyring.calls_to('CreateItem')
        properties, secret, replace = call[4]
        assert properties[f'{IFACE_ITEM}.Label'] == ('s', 'mail')
        assert properties[f'{IFACE_ITEM}.Attributes'] == ('a{ss}', {'service': 'imap'})
        assert secret == (SESSION, b'', b'hunter2', CONTENT_TYPE)
        assert replace is True


# --- list ---

class TestList:
    """Tests for the list command."""

    def test_json_listing(self, runner, keyring):
        """Test the JSON listing of the collection."""
        result = runner.invoke(app, ["--plain", "list"])
        assert result.exit_code == 0
        items = orjson.loads(result.stdout)
        assert [i["label"] for i in items] == ["mail", "github"]
        assert items[0] == {
            "path": ITEM,
            "label": "mail",
            "attributes": {"service": "imap"},
            "locked": False,
            "created": "1970-01-01T00:00:00+00:00",
            "modified": "1970-01-01T00:00:00+00:00",
        }


# --- clear ---

class TestClear:
    """Tests for the clear command."""

    def test_deletes_matches(self, runner, transport):
        """Test that clear deletes every match."""
        transport.reply(IFACE_COLLECTION, 'SearchItems', ([ITEM, ITEM2],))
        transport.reply(IFACE_ITEM, 'Delete', ('/',))
        result = runner.invoke(app, ["clear", "service=imap"])
        assert result.exit_code == 0
        assert "deleted 2 item(s)" in result.output
        assert [c[0] for c in transport.calls_to('Delete')] == [ITEM, ITEM2]

    def test_dismissed_prompt_is_fatal(self, runner, transport):
        """Test that a dismissed prompt fails the command."""
        transport.reply(IFACE_COLLECTION, 'SearchItems', ([ITEM],))
        transport.reply(IFACE_ITEM, 'Delete', (PROMPT,))
        transport.complete_prompts(dismissed=True)
        result = runner.invoke(app, ["clear", "service=imap"])
        assert result.exit_code == 1
        assert "Error:" in result.output


# --- configuration ---

class TestOptions:
    """Tests for the global options."""

    def test_invalid_timeout(self, runner, transport):
        """Test that an invalid timeout is rejected before connecting."""
        result = runner.invoke(app, ["--timeout", "-1", "list"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert transport.calls == []
