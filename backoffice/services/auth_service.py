"""
Credential check for the login endpoint.
Accounts live in the users table; only the seeded admin exists by default.
"""

from typing import Optional

from backoffice.database import Store
from backoffice.utils.logger import get_logger
from backoffice.utils.passwords import verify_password

logger = get_logger(__name__)


def public_account(row: dict) -> dict:
    """Account fields safe to put in a session or a response."""
    return {"id": row["id"], "name": row["name"], "email": row["email"], "role": row["role"]}


def authenticate(store: Store, email: str, password: str) -> Optional[dict]:
    """Return the account for valid credentials, None otherwise."""
    row = store.query_one("SELECT * FROM users WHERE email = :email", {"email": email})
    if row is None or not verify_password(password, row["password"]):
        logger.warning(f"Failed login for {email}")
        return None
    logger.info(f"User {email} signed in")
    return public_account(row)
