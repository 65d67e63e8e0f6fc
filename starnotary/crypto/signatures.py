# starnotary/crypto/signatures.py
"""
Proof-of-ownership checks: a wallet signs the ownership message with the key
behind `address` (Electrum / Bitcoin Core "sign message"), and we recover the
public key from the compact signature to see whether it maps back to it.
"""
import logging
from typing import Callable

logger = logging.getLogger(__name__)

# (message, address, signature) -> bool
SignatureVerifier = Callable[[str, str, str], bool]


class BitcoinMessageVerifier:
    """
    Bitcoin signed-message verification backed by python-bitcoinlib.

    python-bitcoinlib keeps the selected network in process-wide state, so the
    network is selected once here and never touched while verifying. Only one
    network per process is supported: the most recently constructed verifier
    decides which network addresses are checked against.
    """

    def __init__(self, network: str = "mainnet"):
        # bitcoinlib loads OpenSSL at import time, so only pay for it when a verifier exists
        import bitcoin
        from bitcoin.signmessage import BitcoinMessage, VerifyMessage

        bitcoin.SelectParams(network)
        self.network = network
        self._message_cls = BitcoinMessage
        self._verify = VerifyMessage

    def __call__(self, message: str, address: str, signature: str) -> bool:
        try:
            return bool(self._verify(address, self._message_cls(message), signature))
        except Exception as e:
            # malformed base64, bad recovery id, unrecoverable point...
            logger.debug("[starnotary] Signature rejected for %s: %s", address, e)
            return False

    def __repr__(self):
        return f"BitcoinMessageVerifier(network={self.network!r})"
