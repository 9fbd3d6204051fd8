"""
associated_accounts.crypto
--------------------------
Signature verification for association envelopes.

- SignatureVerifier: key-type tag -> strategy table
- K1 (secp256k1): ECDSA recovery for plain accounts, ERC-1271 style checks
  for contract accounts via a ContractSignatureChecker
- R1, Ed25519, BLS, WebAuthn, ERC-6492: registered placeholders that raise
  UnsupportedKeyType instead of answering True or False
- Party-side helpers: k1_generate(), k1_address(), k1_sign()
"""

from __future__ import annotations
from typing import Callable, Dict, Iterable, Optional, Tuple
import os

from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError as KeyValidationError
from eth_utils import ValidationError

from .address import AddressCodec, default_codec
from .constants import (
    KEY_TYPE_K1, KEY_TYPE_R1, KEY_TYPE_ED25519, KEY_TYPE_BLS,
    KEY_TYPE_WEBAUTHN, KEY_TYPE_ERC6492,
)
from .errors import UnsupportedKeyType
from .logger import get_logger

log = get_logger("associated_accounts.crypto")

# (verifier, account, signature, digest) -> bool
Strategy = Callable[["SignatureVerifier", bytes, bytes, bytes], bool]


# --------- secp256k1 (sign/recover) ----------
def k1_generate() -> Tuple[bytes, bytes]:
    sk = keys.PrivateKey(os.urandom(32))
    return sk.to_bytes(), sk.public_key.to_canonical_address()

def k1_address(priv_raw: bytes) -> bytes:
    return keys.PrivateKey(priv_raw).public_key.to_canonical_address()

def k1_sign(priv_raw: bytes, digest: bytes) -> bytes:
    """65-byte r || s || v signature over a 32-byte digest, v in {27, 28}."""
    sig = keys.PrivateKey(priv_raw).sign_msg_hash(digest).to_bytes()
    return sig[:64] + bytes([sig[64] + 27])

def k1_recover(signature: bytes, digest: bytes) -> Optional[bytes]:
    if len(signature) != 65 or len(digest) != 32:
        return None
    v = signature[64]
    if v >= 27:
        v -= 27
    try:
        sig = keys.Signature(signature_bytes=signature[:64] + bytes([v]))
        return sig.recover_public_key_from_msg_hash(digest).to_canonical_address()
    except (BadSignature, KeyValidationError, ValidationError):
        return None


# --------- Contract accounts (ERC-1271) ----------
class ContractSignatureChecker:
    # Interface
    def is_contract(self, chain_reference: bytes, address: bytes) -> bool: ...
    def is_valid_signature(self, chain_reference: bytes, address: bytes, digest: bytes, signature: bytes) -> bool: ...


class NoContracts(ContractSignatureChecker):
    """Treats every account as a plain key-holding account."""

    def is_contract(self, chain_reference: bytes, address: bytes) -> bool:
        return False

    def is_valid_signature(self, chain_reference: bytes, address: bytes, digest: bytes, signature: bytes) -> bool:
        return False


class InMemoryContractAccounts(ContractSignatureChecker):
    """
    Contract accounts whose validation rule is "any registered owner key signed
    the digest", the common smart-wallet policy. Accounts are keyed by
    (chain reference, address) since the same address on two chains is two
    different contracts.
    """

    def __init__(self):
        self.owners: Dict[Tuple[bytes, bytes], set] = {}

    def register(self, chain_reference: bytes, address: bytes, owners: Iterable[bytes]) -> None:
        self.owners[(bytes(chain_reference), bytes(address))] = {bytes(o) for o in owners}

    def is_contract(self, chain_reference: bytes, address: bytes) -> bool:
        return (bytes(chain_reference), bytes(address)) in self.owners

    def is_valid_signature(self, chain_reference: bytes, address: bytes, digest: bytes, signature: bytes) -> bool:
        owners = self.owners.get((bytes(chain_reference), bytes(address)))
        if not owners:
            return False
        signer = k1_recover(signature, digest)
        return signer is not None and signer in owners


# --------- Strategies ----------
def verify_k1(verifier: "SignatureVerifier", account: bytes, signature: bytes, digest: bytes) -> bool:
    parsed = verifier.codec.parse(account)
    if verifier.contracts.is_contract(parsed.chain_reference, parsed.address):
        return verifier.contracts.is_valid_signature(parsed.chain_reference, parsed.address, digest, signature)
    signer = k1_recover(signature, digest)
    return signer is not None and signer == parsed.address


def unsupported(key_type: int) -> Strategy:
    def _raise(verifier, account, signature, digest):
        raise UnsupportedKeyType(key_type)
    _raise.placeholder = True
    return _raise


class SignatureVerifier:
    def __init__(self, codec: Optional[AddressCodec] = None, contracts: Optional[ContractSignatureChecker] = None):
        self.codec = codec or default_codec()
        self.contracts = contracts or NoContracts()
        self._strategies: Dict[int, Strategy] = {}

    def register(self, key_type: int, strategy: Strategy) -> None:
        self._strategies[key_type] = strategy

    def supports(self, key_type: int) -> bool:
        strategy = self._strategies.get(key_type)
        return strategy is not None and not getattr(strategy, "placeholder", False)

    def verify(self, account: bytes, key_type: int, signature: bytes, digest: bytes) -> bool:
        strategy = self._strategies.get(key_type)
        if strategy is None:
            raise UnsupportedKeyType(key_type)
        ok = strategy(self, account, signature, digest)
        log.debug(f"signature verified={ok}", extra={"event": "signature.verify", "key_type": key_type})
        return ok


def default_verifier(codec: Optional[AddressCodec] = None, contracts: Optional[ContractSignatureChecker] = None) -> SignatureVerifier:
    v = SignatureVerifier(codec=codec, contracts=contracts)
    v.register(KEY_TYPE_K1, verify_k1)
    for key_type in (KEY_TYPE_R1, KEY_TYPE_ED25519, KEY_TYPE_BLS, KEY_TYPE_WEBAUTHN, KEY_TYPE_ERC6492):
        v.register(key_type, unsupported(key_type))
    return v
