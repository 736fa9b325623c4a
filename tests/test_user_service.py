import pytest

from shop_auth.services import user_service
from shop_auth.storage.users import UserRepository


@pytest.fixture
def repo():
    return UserRepository()


def test_normalize_phone():
    assert user_service.normalize_phone(" +1 555\t123 4567 ") == "+15551234567"
    assert user_service.normalize_phone("   ") is None
    assert user_service.normalize_phone(None) is None


def test_password_is_hashed(repo):
    user = user_service.create_user(repo, "a@example.com", "pw")
    assert user["password_hash"] != "pw"
    assert user_service.verify_password("pw", user["password_hash"])
    assert not user_service.verify_password("other", user["password_hash"])


def test_long_passwords_are_accepted(repo):
    password = "x" * 100
    user = user_service.create_user(repo, "a@example.com", password)
    assert user_service.authenticate(repo, "a@example.com", password)["id"] == user["id"]


def test_create_rejects_invalid_role(repo):
    with pytest.raises(ValueError, match="Invalid role"):
        user_service.create_user(repo, "a@example.com", "pw", role="owner")


def test_authenticate_by_phone(repo):
    user = user_service.create_user(repo, "a@example.com", "pw", phone_number="+1 555 000")
    assert user["phone_number"] == "+1555000"
    assert user_service.authenticate(repo, "+1555000", "pw")["id"] == user["id"]
    assert user_service.authenticate(repo, "+1555000", "wrong") is None
    assert user_service.authenticate(repo, "nobody@example.com", "pw") is None


def test_phone_change_resets_verification(repo):
    user = user_service.create_user(repo, "a@example.com", "pw", phone_number="+1000")
    user_service.set_phone_verified(repo, "+1000")

    updated = user_service.update_user(repo, user["id"], {"phone_number": "+2000"})
    assert updated["phone_verified"] is False


def test_seed_admin_is_idempotent(repo):
    first = user_service.seed_admin(repo, "admin@example.com", "pw")
    second = user_service.seed_admin(repo, "admin@example.com", "pw")

    assert first["id"] == second["id"]
    assert len(user_service.list_users(repo)) == 1


def test_seed_admin_skipped_without_credentials(repo):
    assert user_service.seed_admin(repo, "", "") is None
    assert user_service.list_users(repo) == []


def test_repository_returns_copies(repo):
    user = repo.insert({"email": "a@example.com"})
    user["email"] = "changed"
    assert repo.get(user["id"])["email"] == "a@example.com"


@pytest.mark.parametrize("email", ["", "   ", None])
def test_create_requires_email(repo, email):
    with pytest.raises(ValueError, match="Please provide an email and password"):
        user_service.create_user(repo, email, "pw")
    assert user_service.list_users(repo) == []


def test_create_duplicate_is_conflict(repo):
    user_service.create_user(repo, "a@example.com", "pw")
    with pytest.raises(user_service.UserConflict):
        user_service.create_user(repo, " A@example.com", "pw")


def test_update_rejects_blank_email(repo):
    user = user_service.create_user(repo, "a@example.com", "pw")
    with pytest.raises(ValueError, match="Email cannot be blank"):
        user_service.update_user(repo, user["id"], {"email": "  "})
    assert repo.get(user["id"])["email"] == "a@example.com"


def test_profile_photo_url_base_override():
    assert user_service.profile_photo_url("/uploads/a.png", "https://cdn.example/") == "https://cdn.example/uploads/a.png"
