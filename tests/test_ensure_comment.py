import pytest
from authkeys_core import ensure_comment, parse_authorised_key


def test_adds_default_comment(make_key):
    key = make_key()
    assert ensure_comment("koding-", key) == f"{key} koding-sshkey"


def test_prefixes_existing_comment(make_key):
    key = make_key("alice@laptop")
    out = ensure_comment("koding-", key)
    assert out == key.replace("alice@laptop", "koding-alice@laptop")
    assert parse_authorised_key(out).comment == "koding-alice@laptop"


def test_already_prefixed_is_unchanged(make_key):
    key = make_key("koding-alice")
    assert ensure_comment("koding-", key) == key


def test_prefix_spliced_with_options(make_key):
    key = 'no-pty ' + make_key("ci runner")
    out = ensure_comment("koding-", key)
    assert out.startswith("no-pty ssh-ed25519 ")
    assert out.endswith(" koding-ci runner")


@pytest.mark.parametrize("comment", ["", "alice", "koding-bob", "two words"])
def test_idempotent(make_key, comment):
    key = make_key(comment)
    once = ensure_comment("koding-", key)
    assert ensure_comment("koding-", once) == once


def test_invalid_key_returned_unchanged(observer):
    assert ensure_comment("koding-", "not a key", observer) == "not a key"
    assert observer.invalid == [("not a key", "unchanged")]
