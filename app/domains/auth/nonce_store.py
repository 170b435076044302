import secrets
from typing import Dict

from app.core.config import settings
from app.shared.ttl_store import ExpiringStore

MESSAGE_PREFIX = "Sign this command to access the echelon room."

# wallet address -> outstanding nonce
nonce_store: ExpiringStore[str] = ExpiringStore(ttl_seconds=settings.nonce_ttl_seconds)


def build_nonce_message(nonce: str) -> str:
    return f"{MESSAGE_PREFIX}\n\nNonce: {nonce}"


def create_nonce_for_wallet(wallet: str, store: ExpiringStore[str] = nonce_store) -> Dict[str, str]:
    nonce = secrets.token_hex(16)
    store.set(wallet, nonce)
    return {"nonce": nonce, "message": build_nonce_message(nonce)}


def consume_nonce(wallet: str, nonce: str, store: ExpiringStore[str] = nonce_store) -> bool:
    """
    Single use: a matching nonce is removed, a wrong one leaves the record in place
    """
    expected = store.get(wallet)
    if expected is None or not secrets.compare_digest(expected, nonce):
        return False
    store.pop(wallet)
    return True
