import pytest

from associated_accounts.address import account_hash
from associated_accounts.errors import InvalidAssociation
from associated_accounts.record import AssociationRecord
from associated_accounts.storage import InMemoryStorage, SQLiteStorage, load_storage_provider
from associated_accounts.store import AssociationStore, load_association_store
from associated_accounts.transport import LocalAdapter, NullTransport

from conftest import ALICE_KEY, BOB_KEY, CAROL_KEY, FakeClock, sign_both


def _populate(store, clock, alice, bob, carol):
    first = store.store_association(sign_both(AssociationRecord(alice, bob, valid_at=1, data=b"\x01"), ALICE_KEY, BOB_KEY))
    second = store.store_association(sign_both(AssociationRecord(bob, carol, valid_at=1), BOB_KEY, CAROL_KEY))
    clock.now += 10
    store.revoke_association(first, 0, bob)
    return first, second


def test_sqlite_roundtrip(tmp_path, alice, bob, carol):
    clock = FakeClock()
    path = str(tmp_path / "associations.db")
    store = AssociationStore(storage=SQLiteStorage(path), clock=clock)
    first, second = _populate(store, clock, alice, bob, carol)
    store.storage.close()

    reopened = AssociationStore(storage=SQLiteStorage(path), clock=clock)
    assert reopened.get_association_ids_for_account(bob) == [first, second]
    got = reopened.get_association(first)
    assert got.revoked_at == clock.now
    assert got.record.data == b"\x01"
    assert [e.topic for e in reopened.storage.list_events()] == [
        "association.created", "association.created", "association.revoked",
    ]


def test_sqlite_schema_exists(tmp_path):
    s = SQLiteStorage(str(tmp_path / "a.db"))
    tables = {r[0] for r in s.db.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"associations", "account_index", "events"} <= tables


def test_memory_rejected_store_writes_nothing(alice, bob):
    s = InMemoryStorage()
    store = AssociationStore(storage=s, clock=FakeClock())
    # approver signature from the wrong key
    with pytest.raises(InvalidAssociation):
        store.store_association(sign_both(AssociationRecord(alice, bob), ALICE_KEY, CAROL_KEY))
    assert s.get_index(account_hash(alice)) == []
    assert s.get_index(account_hash(bob)) == []
    assert s.list_events() == []


def test_sqlite_transaction_rolls_back(tmp_path):
    s = SQLiteStorage(str(tmp_path / "a.db"))
    with pytest.raises(RuntimeError):
        with s.transaction():
            s.append_index(b"\x01" * 32, b"\x02" * 32)
            raise RuntimeError("boom")
    assert s.get_index(b"\x01" * 32) == []


@pytest.mark.parametrize("make_storage", [
    lambda tmp: InMemoryStorage(),
    lambda tmp: SQLiteStorage(str(tmp / "replay.db")),
])
def test_replay_rebuilds_state(tmp_path, alice, bob, carol, make_storage):
    clock = FakeClock()
    source = AssociationStore(clock=clock)
    first, second = _populate(source, clock, alice, bob, carol)

    rebuilt = AssociationStore.from_events(source.storage.list_events(), storage=make_storage(tmp_path), clock=clock)

    for account in (alice, bob, carol):
        assert rebuilt.get_association_ids_for_account(account) == source.get_association_ids_for_account(account)
        assert rebuilt.get_associations_for_account(account) == source.get_associations_for_account(account)
    assert rebuilt.get_association(first).revoked_at == source.get_association(first).revoked_at
    assert len(rebuilt.storage.list_events()) == 3


def test_replay_from_published_notifications(alice, bob, carol):
    clock = FakeClock()
    bus = LocalAdapter()
    received = []
    bus.subscribe("association.created", lambda m: received.append(("association.created", m)))
    bus.subscribe("association.revoked", lambda m: received.append(("association.revoked", m)))
    source = AssociationStore(clock=clock, transport=bus)
    first, _ = _populate(source, clock, alice, bob, carol)

    from associated_accounts.events import event_from_dict
    rebuilt = AssociationStore.from_events(event_from_dict(t, m) for t, m in received)
    assert rebuilt.get_association(first) == source.get_association(first)
    assert rebuilt.get_association_ids_for_account(bob) == source.get_association_ids_for_account(bob)


def test_load_storage_provider_env(monkeypatch, tmp_path):
    monkeypatch.delenv("AA_STORAGE_PROVIDER", raising=False)
    assert isinstance(load_storage_provider(), InMemoryStorage)

    monkeypatch.setenv("AA_STORAGE_PROVIDER", "sqlite")
    monkeypatch.setenv("AA_DB_PATH", str(tmp_path / "env.db"))
    assert isinstance(load_storage_provider(), SQLiteStorage)
    assert (tmp_path / "env.db").exists()

    with pytest.raises(ValueError):
        load_storage_provider({"provider": "postgres"})


def test_load_association_store(monkeypatch, tmp_path):
    monkeypatch.setenv("AA_TRANSPORT", "none")
    store = load_association_store({"provider": "sqlite", "sqlite_path": str(tmp_path / "s.db")})
    assert isinstance(store.storage, SQLiteStorage)
    assert isinstance(store.transport, NullTransport)
