from __future__ import annotations


class AssociationError(Exception):
    pass


# --------- Malformed input ----------
class MalformedInputError(AssociationError):
    pass


class UnsupportedChainType(MalformedInputError):
    def __init__(self, chain_type: int):
        self.chain_type = chain_type
        super().__init__(f"unsupported chain type 0x{chain_type:04x}")


class InteroperableAddressParsingError(MalformedInputError):
    def __init__(self, raw: bytes, reason: str = "malformed interoperable address"):
        self.raw = raw
        super().__init__(f"{reason}: 0x{raw.hex()}")


class UnsupportedKeyType(MalformedInputError):
    def __init__(self, key_type: int):
        self.key_type = key_type
        super().__init__(f"unsupported key type 0x{key_type:04x}")


class TimestampOutOfRange(MalformedInputError):
    def __init__(self, name: str, value: int):
        self.name = name
        self.value = value
        super().__init__(f"{name} must fit in uint40, got {value}")


# --------- Validation ----------
class InvalidAssociation(AssociationError):
    """Timestamp or signature check failed. Deliberately carries no detail."""

    def __init__(self):
        super().__init__("invalid association")


# --------- State conflicts ----------
class AssociationStateError(AssociationError):
    pass


class AssociationAlreadyExists(AssociationStateError):
    pass


class AssociationNotFound(AssociationStateError):
    pass


class AssociationAlreadyRevoked(AssociationStateError):
    pass


class UnauthorizedRevocation(AssociationStateError):
    pass
