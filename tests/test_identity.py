import logging

import pytest

from training_api.core.errors import (
    DuplicateUsername,
    InvalidCredentials,
    UserNotFound,
    ValidationError,
)
from training_api.services import IdentityReconciler, MatchStrategy, SSOClaims
from training_api.services.passwords import generate_reset_password, verify_password
from training_api.services.sso import github_claims, google_claims

GITHUB = MatchStrategy.BY_EXTERNAL_ID_THEN_EMAIL
GOOGLE = MatchStrategy.BY_EMAIL_ONLY


@pytest.fixture
def reconciler(store):
    return IdentityReconciler(store)


def _github(**overrides):
    profile = {"id": 999, "login": "bob", "email": "bob@x.com", "avatar_url": "A1"}
    profile.update(overrides)
    return github_claims(profile)


# ---------- local accounts ----------
def test_register_and_verify_local(reconciler):
    account = reconciler.register_local("alice", "pw1")
    assert account.password_hash and account.password_hash != "pw1"

    assert reconciler.verify_local("alice", "pw1").id == account.id


def test_register_duplicate(reconciler):
    reconciler.register_local("alice", "pw1")
    with pytest.raises(DuplicateUsername):
        reconciler.register_local("alice", "pw2")


def test_register_rejects_overlong_password(reconciler):
    with pytest.raises(ValidationError):
        reconciler.register_local("alice", "x" * 73)


@pytest.mark.parametrize("username,password", [("alice", "wrong"), ("nobody", "pw1")])
def test_verify_local_failures_are_indistinguishable(reconciler, username, password):
    reconciler.register_local("alice", "pw1")
    with pytest.raises(InvalidCredentials) as exc:
        reconciler.verify_local(username, password)
    assert exc.value.message == "Invalid credentials"


def test_rejected_login_is_logged_without_password(reconciler, caplog):
    reconciler.register_local("alice", "pw1")
    with caplog.at_level(logging.INFO, logger="training_api.services.identity"):
        with pytest.raises(InvalidCredentials):
            reconciler.verify_local("alice", "s3cret-guess")

    assert "local login rejected username=alice" in caplog.text
    assert "s3cret-guess" not in caplog.text


def test_sso_account_cannot_log_in_locally(reconciler):
    reconciler.resolve_sso(_github(), GITHUB)
    with pytest.raises(InvalidCredentials):
        reconciler.verify_local("github_bob_999", "")


def test_reset_password_replaces_hash(reconciler, store):
    reconciler.register_local("alice", "pw1")
    new_password = reconciler.reset_password("alice")

    stored = store.find_by_username("alice")
    assert verify_password(new_password, stored.password_hash)
    assert not verify_password("pw1", stored.password_hash)


def test_reset_password_unknown_user(reconciler):
    with pytest.raises(UserNotFound):
        reconciler.reset_password("nobody")


def test_generated_password_shape():
    password = generate_reset_password()
    assert len(password) == 20
    assert password.isalnum() and password == password.lower()
    assert generate_reset_password() != password


# ---------- SSO reconciliation ----------
def test_github_first_login_creates_account(reconciler):
    account = reconciler.resolve_sso(_github(), GITHUB)

    assert account.username == "github_bob_999"
    assert account.provider == "github"
    assert account.external_id == "999"
    assert account.email == "bob@x.com"
    assert account.avatar_url == "A1"
    assert account.password_hash is None


def test_github_repeat_login_is_idempotent_and_keeps_avatar(reconciler, store):
    first = reconciler.resolve_sso(_github(), GITHUB)
    second = reconciler.resolve_sso(_github(avatar_url="A2"), GITHUB)

    assert second.id == first.id
    assert store.get(first.id).avatar_url == "A1"
    assert len(store.list_all()) == 1


def test_github_matches_by_external_id_after_email_change(reconciler, store):
    first = reconciler.resolve_sso(_github(), GITHUB)
    again = reconciler.resolve_sso(_github(email="bob@new.example"), GITHUB)

    assert again.id == first.id
    assert len(store.list_all()) == 1


def test_github_without_public_email_gets_placeholder(reconciler):
    account = reconciler.resolve_sso(_github(email=None), GITHUB)
    assert account.email == "bob@github.local"


def test_github_falls_back_to_email_match(reconciler, store):
    existing = store.insert_sso("carol", "bob@x.com", "google", "g-7", None)

    account = reconciler.resolve_sso(_github(), GITHUB)

    assert account.id == existing.id
    assert account.provider == "google"
    # empty avatar is backfilled from the claims
    assert store.get(existing.id).avatar_url == "A1"


def test_google_matches_by_email_only(reconciler, store):
    claims = google_claims({"id": "g-1", "email": "carol@example.com", "picture": "P1"})
    first = reconciler.resolve_sso(claims, GOOGLE)
    assert first.username == "carol"

    # same external id, different email: no external-id match for Google
    moved = google_claims({"id": "g-1", "email": "carol@elsewhere.com"})
    second = reconciler.resolve_sso(moved, GOOGLE)

    assert second.id != first.id
    assert len(store.list_all()) == 2


def test_google_username_collision_is_suffixed(reconciler):
    reconciler.register_local("carol", "pw")
    claims = google_claims({"id": "g-1", "email": "carol@example.com"})

    account = reconciler.resolve_sso(claims, GOOGLE)

    assert account.username == "carol_g-1"


def test_google_username_collision_when_suffixed_name_is_taken(reconciler, store):
    reconciler.register_local("carol", "pw")
    reconciler.register_local("carol_g-1", "pw")
    claims = google_claims({"id": "g-1", "email": "carol@example.com"})

    account = reconciler.resolve_sso(claims, GOOGLE)

    assert account.username == "carol_g-1_2"
    assert account.provider == "google"
    assert len(store.list_all()) == 3


def test_claims_without_email_skip_email_match(reconciler, store):
    store.insert_local("someone", "hash")
    claims = SSOClaims(provider="github", external_id="5", username="github_x_5")

    account = reconciler.resolve_sso(claims, GITHUB)

    assert account.username == "github_x_5"
