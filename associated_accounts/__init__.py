"""
Associated Accounts Core
========================
Two accounts jointly sign a canonical record declaring that they are associated;
the ledger verifies both signatures, indexes the pair and lets either side revoke.

Provides:
- ERC-7930 interoperable address codec
- Role-order-independent typed-data identifiers
- Key-type dispatched signature verification (secp256k1 + contract accounts)
- AssociationStore with memory / SQLite storage and replayable notifications
"""

from .address import AddressCodec, InteroperableAddress, evm_address, account_hash
from .canonical import association_id
from .crypto import SignatureVerifier, default_verifier
from .record import AssociationRecord, SignedAssociationRecord
from .store import AssociationStore, load_association_store

__all__ = [
    "AddressCodec",
    "InteroperableAddress",
    "evm_address",
    "account_hash",
    "association_id",
    "SignatureVerifier",
    "default_verifier",
    "AssociationRecord",
    "SignedAssociationRecord",
    "AssociationStore",
    "load_association_store",
]
