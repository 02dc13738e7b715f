# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

WHY: Every ledger mutation must be attributable to the store owner.
Registration creates the owner and their single store together.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from Config.BCRYPT_ROUNDS)
- Minimum 6 characters required
- Emails are stored lower-cased and are globally unique
"""

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import ConflictError, ValidationError
from ..extensions import db
from ..models import Store, User
from ..time_utils import utcnow


MIN_PASSWORD_LENGTH = 6

REGISTRATION_FIELDS = (
    "email",
    "password",
    "confirmPassword",
    "firstName",
    "lastName",
    "storeName",
    "storePhone",
    "countryCode",
    "village",
    "postOffice",
    "policeStation",
    "district",
    "state",
    "postalPin",
)


def validate_password_strength(password: str) -> None:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            field="password",
        )


def hash_password(password: str) -> str:
    """Hash password using bcrypt; the password is validated before hashing."""
    validate_password_strength(password)
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash in the database
        return False


def _clean(data: dict, key: str) -> str:
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ""


def register_owner(data: dict) -> tuple[User, Store]:
    """
    Create a user and the store they own in one transaction.

    gstNumber is the only optional field.
    """
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")

    missing = [key for key in REGISTRATION_FIELDS if not _clean(data, key)]
    if missing:
        raise ValidationError("All fields are required", field=missing[0])

    if data["password"] != data["confirmPassword"]:
        raise ValidationError("Passwords do not match", field="confirmPassword")

    email = _clean(data, "email").lower()
    if db.session.query(User).filter_by(email=email).first():
        raise ConflictError("User already exists", field="email")

    user = User(
        email=email,
        password_hash=hash_password(data["password"]),
        first_name=_clean(data, "firstName"),
        last_name=_clean(data, "lastName"),
    )
    db.session.add(user)
    db.session.flush()

    store = Store(
        user_id=user.id,
        name=_clean(data, "storeName"),
        gst_number=_clean(data, "gstNumber") or None,
        country_code=_clean(data, "countryCode"),
        phone=_clean(data, "storePhone"),
        village_or_town=_clean(data, "village"),
        post=_clean(data, "postOffice"),
        police_station=_clean(data, "policeStation"),
        district=_clean(data, "district"),
        state=_clean(data, "state"),
        pincode=_clean(data, "postalPin"),
    )
    db.session.add(store)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("User already exists", field="email")

    return user, store


def authenticate(email: str, password: str) -> User | None:
    """Return the active user for these credentials, or None."""
    if not email or not password:
        return None

    user = db.session.query(User).filter_by(email=email.strip().lower()).first()
    if not user or not user.is_active:
        return None

    if not verify_password(password, user.password_hash):
        return None

    user.last_login_at = utcnow()
    db.session.commit()
    return user
