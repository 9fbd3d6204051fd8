# associated_accounts/constants.py

PROTOCOL_NAME = "AssociatedAccounts"
PROTOCOL_VERSION = "1"

EIP712_DOMAIN_TYPE = "EIP712Domain(string name,string version)"
ASSOCIATION_RECORD_TYPE = (
    "AssociatedAccountRecord(bytes initiator,bytes approver,bytes4 interfaceId,"
    "bytes data,uint40 validAt,uint40 validUntil)"
)

# ERC-7930 interoperable address layout
INTEROPERABLE_ADDRESS_VERSION = 0x0001
CHAIN_TYPE_EIP155 = 0x0000

# 2-byte key type tags
KEY_TYPE_K1 = 0x0001        # ECDSA secp256k1 (EOA or ERC-1271 contract)
KEY_TYPE_R1 = 0x0002        # ECDSA P-256
KEY_TYPE_ED25519 = 0x0003
KEY_TYPE_BLS = 0x0004
KEY_TYPE_WEBAUTHN = 0x8001
KEY_TYPE_ERC6492 = 0x8002   # counterfactual contract signature

EMPTY_INTERFACE_ID = b"\x00\x00\x00\x00"
UINT40_MAX = 2**40 - 1

TOPIC_ASSOCIATION_CREATED = "association.created"
TOPIC_ASSOCIATION_REVOKED = "association.revoked"
