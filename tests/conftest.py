import pytest

from associated_accounts.address import evm_address
from associated_accounts.canonical import association_id
from associated_accounts.crypto import k1_address, k1_sign
from associated_accounts.record import SignedAssociationRecord

ALICE_KEY = b"\x01" * 32
BOB_KEY = b"\x02" * 32
CAROL_KEY = b"\x03" * 32


class FakeClock:
    def __init__(self, now=1_700_000_000):
        self.now = now

    def __call__(self):
        return self.now


def account_for(priv, chain_id=1):
    return evm_address(chain_id, k1_address(priv))


def sign_both(record, initiator_key, approver_key, **kwargs):
    digest = association_id(record)
    return SignedAssociationRecord(
        record=record,
        initiator_signature=k1_sign(initiator_key, digest),
        approver_signature=k1_sign(approver_key, digest),
        **kwargs,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def alice():
    return account_for(ALICE_KEY)


@pytest.fixture
def bob():
    return account_for(BOB_KEY)


@pytest.fixture
def carol():
    return account_for(CAROL_KEY)
