"""
associated_accounts.address
---------------------------
ERC-7930 interoperable addresses: a chain-qualified binary account identifier.

    version(2) | chainType(2) | chainRefLen(1) | chainRef | addrLen(1) | address

Chain types are a small registry. Only EIP-155 (EVM) is registered by default;
anything else raises UnsupportedChainType so callers never treat an unknown
chain's bytes as if they were an EVM account.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

from .constants import INTEROPERABLE_ADDRESS_VERSION, CHAIN_TYPE_EIP155
from .errors import UnsupportedChainType, InteroperableAddressParsingError
from .utils import keccak


@dataclass(frozen=True)
class ChainTypeSpec:
    name: str
    address_length: Optional[int] = None   # None = variable length


@dataclass(frozen=True)
class InteroperableAddress:
    chain_type: int
    chain_reference: bytes
    address: bytes

    @property
    def chain_id(self) -> int:
        return int.from_bytes(self.chain_reference, "big") if self.chain_reference else 0


class AddressCodec:
    def __init__(self):
        self._chain_types: Dict[int, ChainTypeSpec] = {}

    def register(self, chain_type: int, spec: ChainTypeSpec) -> None:
        self._chain_types[chain_type] = spec

    def supports(self, chain_type: int) -> bool:
        return chain_type in self._chain_types

    def _spec(self, chain_type: int) -> ChainTypeSpec:
        spec = self._chain_types.get(chain_type)
        if spec is None:
            raise UnsupportedChainType(chain_type)
        return spec

    def parse(self, raw: bytes) -> InteroperableAddress:
        raw = bytes(raw)
        if len(raw) < 6:
            raise InteroperableAddressParsingError(raw, "truncated interoperable address")

        version = int.from_bytes(raw[0:2], "big")
        if version != INTEROPERABLE_ADDRESS_VERSION:
            raise InteroperableAddressParsingError(raw, f"unknown version {version}")

        chain_type = int.from_bytes(raw[2:4], "big")
        spec = self._spec(chain_type)

        ref_len = raw[4]
        ref_end = 5 + ref_len
        if len(raw) < ref_end + 1:
            raise InteroperableAddressParsingError(raw, "truncated chain reference")
        chain_reference = raw[5:ref_end]

        addr_len = raw[ref_end]
        address = raw[ref_end + 1:]
        if len(address) != addr_len:
            raise InteroperableAddressParsingError(raw, "address length mismatch")
        if spec.address_length is not None and addr_len != spec.address_length:
            raise InteroperableAddressParsingError(raw, f"{spec.name} address must be {spec.address_length} bytes")

        return InteroperableAddress(chain_type, chain_reference, address)

    def format(self, chain_type: int, chain_reference: bytes, address: bytes) -> bytes:
        spec = self._spec(chain_type)
        if len(chain_reference) > 255 or len(address) > 255:
            raise ValueError("chain reference and address must each fit in 255 bytes")
        if spec.address_length is not None and len(address) != spec.address_length:
            raise ValueError(f"{spec.name} address must be {spec.address_length} bytes")
        return b"".join([
            INTEROPERABLE_ADDRESS_VERSION.to_bytes(2, "big"),
            chain_type.to_bytes(2, "big"),
            bytes([len(chain_reference)]),
            bytes(chain_reference),
            bytes([len(address)]),
            bytes(address),
        ])


def default_codec() -> AddressCodec:
    codec = AddressCodec()
    codec.register(CHAIN_TYPE_EIP155, ChainTypeSpec(name="eip155", address_length=20))
    return codec


_DEFAULT = default_codec()


def parse_address(raw: bytes) -> InteroperableAddress:
    return _DEFAULT.parse(raw)


def format_address(chain_type: int, chain_reference: bytes, address: bytes) -> bytes:
    return _DEFAULT.format(chain_type, chain_reference, address)


def chain_reference_for(chain_id: int) -> bytes:
    # minimal big-endian; chain id 0 encodes as an empty reference
    if chain_id == 0:
        return b""
    return chain_id.to_bytes((chain_id.bit_length() + 7) // 8, "big")


def evm_address(chain_id: int, address: bytes) -> bytes:
    """Build an EVM account, e.g. ``evm_address(1, bytes.fromhex("d8da..."))``."""
    return format_address(CHAIN_TYPE_EIP155, chain_reference_for(chain_id), address)


def account_hash(account: bytes) -> bytes:
    return keccak(bytes(account))
