import base64
import binascii
import logging

from solders.pubkey import Pubkey
from solders.signature import Signature

logger = logging.getLogger(__name__)


def verify_wallet_signature(wallet: str, message: str, signature: str) -> bool:
    """
    Verify a base64 ed25519 signature of `message` made by the Solana wallet `wallet`
    """
    try:
        public_key = Pubkey.from_string(wallet)
        signature_bytes = base64.b64decode(signature, validate=True)
        return Signature.from_bytes(signature_bytes).verify(public_key, message.encode())
    except (ValueError, binascii.Error) as e:
        logger.warning("Signature verification error for %s: %s", wallet, e)
        return False
