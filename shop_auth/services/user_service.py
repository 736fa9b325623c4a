import logging
import re

import bcrypt

from shop_auth.config import settings
from shop_auth.storage.users import UserRepository

logger = logging.getLogger("shop-auth")

DEFAULT_PROFILE_PHOTO = "/public/profile/staticprofile.jpeg"
ROLES = ("user", "admin")


class UserConflict(ValueError):
    """Email or phone already belongs to another account."""


_WHITESPACE = re.compile(r"\s+")


def normalize_phone(phone: str | None) -> str | None:
    """Strip all whitespace so issuance, verification and lookups use one key."""
    if phone is None:
        return None
    return _WHITESPACE.sub("", str(phone)) or None


def normalize_email(email: str | None) -> str | None:
    if email is None:
        return None
    return str(email).strip().lower() or None


def hash_password(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    return bcrypt.hashpw(password.encode("utf-8")[:72], bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:72], password_hash.encode("utf-8"))
    except ValueError:
        return False


def profile_photo_url(path: str | None, base_url: str | None = None) -> str:
    base = (base_url or settings.public_base_url).rstrip("/")
    return f"{base}{path or DEFAULT_PROFILE_PHOTO}"


def get_user_by_id(repo: UserRepository, user_id: str) -> dict | None:
    return repo.get(user_id)


def get_user_by_email(repo: UserRepository, email: str) -> dict | None:
    email = normalize_email(email)
    return repo.find_one(email=email) if email else None


def get_user_by_phone(repo: UserRepository, phone: str) -> dict | None:
    phone = normalize_phone(phone)
    return repo.find_one(phone_number=phone) if phone else None


def create_user(
    repo: UserRepository,
    email: str,
    password: str,
    name: str | None = None,
    phone_number: str | None = None,
    role: str = "user",
    profile_photo: str | None = None,
) -> dict:
    """Create a user. Raises UserConflict if email or phone is already taken."""
    if role not in ROLES:
        raise ValueError(f"Invalid role: {role}")
    email = normalize_email(email)
    phone_number = normalize_phone(phone_number)
    if not email or not password:
        raise ValueError("Please provide an email and password")

    if get_user_by_email(repo, email):
        raise UserConflict("User already exists")
    if phone_number and get_user_by_phone(repo, phone_number):
        raise UserConflict("Phone number already registered")

    return repo.insert({
        "name": name,
        "email": email,
        "phone_number": phone_number,
        "password_hash": hash_password(password),
        "role": role,
        "profile_photo": profile_photo,
        "phone_verified": False,
    })


def authenticate(repo: UserRepository, identifier: str, password: str) -> dict | None:
    """Look up by email when identifier contains '@', else by phone, and check the password."""
    identifier = str(identifier).strip()
    if "@" in identifier:
        user = get_user_by_email(repo, identifier)
    else:
        user = get_user_by_phone(repo, identifier)

    if not user or not verify_password(password, user["password_hash"]):
        return None
    return user


def update_user(repo: UserRepository, user_id: str, data: dict) -> dict | None:
    """Apply profile changes.

    Raises ValueError for a blank email or phone, UserConflict when the new
    email/phone belongs to someone else.
    """
    changes = {k: v for k, v in data.items() if v is not None}

    if "email" in changes:
        changes["email"] = normalize_email(changes["email"])
        if not changes["email"]:
            raise ValueError("Email cannot be blank")
        other = get_user_by_email(repo, changes["email"])
        if other and other["id"] != user_id:
            raise UserConflict("Email already in use")

    if "phone_number" in changes:
        changes["phone_number"] = normalize_phone(changes["phone_number"])
        if not changes["phone_number"]:
            raise ValueError("Phone number cannot be blank")
        other = get_user_by_phone(repo, changes["phone_number"])
        if other and other["id"] != user_id:
            raise UserConflict("Phone number already in use")
        current = repo.get(user_id)
        if current and current.get("phone_number") != changes["phone_number"]:
            changes["phone_verified"] = False

    if "password" in changes:
        changes["password_hash"] = hash_password(changes.pop("password"))

    return repo.update(user_id, changes)


def delete_user(repo: UserRepository, user_id: str) -> bool:
    return repo.delete(user_id)


def list_users(repo: UserRepository) -> list[dict]:
    return repo.list()


def set_phone_verified(repo: UserRepository, phone: str) -> dict | None:
    """Mark the owner of phone (if any) as verified."""
    user = get_user_by_phone(repo, phone)
    if not user:
        return None
    return repo.update(user["id"], {"phone_verified": True})


def seed_admin(repo: UserRepository, email: str, password: str, phone: str | None = None) -> dict | None:
    """Create the admin account unless a user with that email already exists."""
    if not email or not password:
        return None
    existing = get_user_by_email(repo, email)
    if existing:
        logger.info("Admin user already exists with email: %s", existing["email"])
        return existing

    admin = create_user(repo, email, password, name="Admin", phone_number=phone or None, role="admin")
    logger.info("Admin user created: %s (id=%s)", admin["email"], admin["id"])
    return admin
