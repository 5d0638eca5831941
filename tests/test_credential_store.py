import pytest

from training_api.core.errors import DuplicateEmail, DuplicateUsername, UserNotFound


def test_insert_local_then_find_by_username(store):
    account = store.insert_local("alice", "hash-1")
    assert account.id is not None
    assert account.provider == "local"
    assert account.external_id is None

    found = store.find_by_username("alice")
    assert found.id == account.id
    assert found.password_hash == "hash-1"


def test_username_lookup_is_case_sensitive(store):
    store.insert_local("alice", "hash-1")
    assert store.find_by_username("Alice") is None


def test_duplicate_username_rejected_by_constraint(store):
    store.insert_local("alice", "hash-1")
    with pytest.raises(DuplicateUsername):
        store.insert_local("alice", "hash-2")
    with pytest.raises(DuplicateUsername):
        store.insert_sso("alice", "a@example.com", "google", "g-1", None)


def test_duplicate_email_rejected(store):
    store.insert_sso("bob", "bob@example.com", "google", "g-1", None)
    with pytest.raises(DuplicateEmail):
        store.insert_sso("bob2", "bob@example.com", "github", "99", None)


def test_find_by_email_and_external_id(store):
    account = store.insert_sso("github_bob_99", "bob@example.com", "github", "99", "A1")

    assert store.find_by_email("bob@example.com").id == account.id
    assert store.find_by_external_id("github", "99").id == account.id
    # external ids are scoped to their provider
    assert store.find_by_external_id("google", "99") is None


def test_updates_refresh_updated_at(store):
    account = store.insert_local("alice", "hash-1")

    store.update_password_hash(account.id, "hash-2")
    store.update_avatar(account.id, "https://img/a.png")

    updated = store.get(account.id)
    assert updated.password_hash == "hash-2"
    assert updated.avatar_url == "https://img/a.png"
    assert updated.updated_at >= account.updated_at
    assert updated.created_at == account.created_at


def test_update_unknown_account(store):
    with pytest.raises(UserNotFound):
        store.update_avatar(12345, "x")


def test_list_all_in_creation_order(store):
    store.insert_local("alice", "h")
    store.insert_sso("github_bob_99", "bob@example.com", "github", "99", None)

    assert [a.username for a in store.list_all()] == ["alice", "github_bob_99"]
