from datetime import timedelta

from berryevents.security_utils import create_access_token

PASSWORD = "correct-horse-battery"


def bearer(user_id: str, expires_delta=None) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id, expires_delta)}"}


def expired_bearer(user_id: str) -> dict:
    return bearer(user_id, timedelta(seconds=-30))
