import pytest

from models import Order
from orders import OrderModel
from storage import JsonFileStore, MemoryStore, OrderStorage, StorageError, serialize_orders


def make_model(orders=()):
    store = MemoryStore()
    if orders:
        store.set_item('orders', serialize_orders(list(orders)))
    storage = OrderStorage(store)
    return OrderModel(storage), storage


def test_scenario_coffee_tea_espresso():
    model, storage = make_model()
    model.add_order('Coffee')
    assert model.orders == (Order(1, 'Coffee', False),)
    model.add_order('Tea')
    assert model.orders[-1] == Order(2, 'Tea', False)
    model.toggle_order(1)
    assert model.orders[0].complete is True
    model.delete_order(2)
    assert model.orders == (Order(1, 'Coffee', True),)
    model.edit_order(1, 'Espresso')
    assert model.orders == (Order(1, 'Espresso', True),)
    assert storage.load() == [Order(1, 'Espresso', True)]


def test_loads_persisted_orders():
    model, _ = make_model([Order(3, 'Tea', True), Order(7, 'Cake')])
    assert model.orders == (Order(3, 'Tea', True), Order(7, 'Cake'))


def test_corrupt_store_starts_empty():
    store = MemoryStore({'orders': '{broken'})
    model = OrderModel(OrderStorage(store))
    assert model.orders == ()
    model.add_order('Coffee')
    assert model.orders == (Order(1, 'Coffee'),)


def test_next_id_follows_true_maximum_after_load():
    model, _ = make_model([Order(9, 'Cake'), Order(4, 'Tea')])
    model.add_order('Coffee')
    assert model.orders[-1].id == 10


def test_ids_stay_unique_after_deleting_highest():
    model, _ = make_model()
    for text in ('a', 'b', 'c'):
        model.add_order(text)
    model.delete_order(3)
    model.add_order('d')
    model.delete_order(1)
    model.add_order('e')
    ids = [o.id for o in model.orders]
    assert len(ids) == len(set(ids))
    assert ids == [2, 4, 5]


def test_add_appends_incomplete_order():
    model, _ = make_model([Order(1, 'Coffee', True)])
    model.add_order('Tea')
    assert len(model.orders) == 2
    assert model.orders[-1] == Order(2, 'Tea', False)


def test_add_does_not_validate_text():
    model, _ = make_model()
    model.add_order('')
    assert model.orders == (Order(1, ''),)


def test_delete_removes_exactly_one_and_keeps_order():
    model, _ = make_model([Order(1, 'a'), Order(2, 'b'), Order(3, 'c')])
    model.delete_order(2)
    assert [o.id for o in model.orders] == [1, 3]


def test_toggle_twice_restores():
    model, _ = make_model([Order(1, 'a'), Order(2, 'b', True)])
    before = model.orders
    model.toggle_order(2)
    assert model.orders[1].complete is False
    model.toggle_order(2)
    assert model.orders == before


def test_edit_changes_only_text_of_match():
    model, _ = make_model([Order(1, 'a', True), Order(2, 'b')])
    model.edit_order(1, 'z')
    assert model.orders == (Order(1, 'z', True), Order(2, 'b'))


@pytest.mark.parametrize('mutate', [
    lambda m: m.edit_order(42, 'x'),
    lambda m: m.delete_order(42),
    lambda m: m.toggle_order(42),
])
def test_missing_id_still_commits(mutate):
    model, storage = make_model([Order(1, 'a')])
    calls = []
    model.subscribe(calls.append)
    storage.store.remove_item('orders')
    mutate(model)
    assert model.orders == (Order(1, 'a'),)
    assert calls == [(Order(1, 'a'),)]
    assert storage.load() == [Order(1, 'a')]


def test_listener_notified_before_persist():
    events = []

    class RecordingStorage(OrderStorage):
        def save(self, orders):
            events.append(('save', tuple(orders)))
            super().save(orders)

    model = OrderModel(RecordingStorage(MemoryStore()))
    model.subscribe(lambda orders: events.append(('notify', orders)))
    model.add_order('Coffee')
    assert events == [('notify', (Order(1, 'Coffee'),)), ('save', (Order(1, 'Coffee'),))]


def test_listener_receives_snapshot():
    model, _ = make_model()
    seen = []
    model.subscribe(seen.append)
    model.add_order('Coffee')
    model.add_order('Tea')
    assert isinstance(seen[0], tuple)
    assert seen[0] == (Order(1, 'Coffee'),)
    assert len(seen[1]) == 2


def test_subscribe_replaces_previous_listener():
    model, _ = make_model()
    first, second = [], []
    model.subscribe(first.append)
    model.bind_order_list_changed(second.append)
    model.add_order('Coffee')
    assert first == []
    assert len(second) == 1


def test_unsubscribe_only_removes_active_listener():
    model, _ = make_model()
    first, second = [], []
    unsubscribe_first = model.subscribe(first.append)
    unsubscribe_second = model.subscribe(second.append)
    unsubscribe_first()
    model.add_order('Coffee')
    assert len(second) == 1
    unsubscribe_second()
    model.add_order('Tea')
    assert len(second) == 1
    assert first == []


def test_commit_without_listener_still_persists():
    model, storage = make_model()
    model.add_order('Coffee')
    assert storage.load() == [Order(1, 'Coffee')]


class FailingStore(MemoryStore):
    def set_item(self, key, value):
        raise OSError('read-only file system')


def test_write_failure_propagates_without_rollback():
    model = OrderModel(OrderStorage(FailingStore()))
    notified = []
    model.subscribe(notified.append)
    with pytest.raises(StorageError):
        model.add_order('Coffee')
    assert model.orders == (Order(1, 'Coffee'),)
    assert notified == [(Order(1, 'Coffee'),)]


def test_get_order():
    model, _ = make_model([Order(1, 'a'), Order(2, 'b')])
    assert model.get_order(2) == Order(2, 'b')
    assert model.get_order(3) is None


def test_model_starts_empty_on_undecodable_file(tmp_path):
    (tmp_path / 'orders.json').write_bytes(b'[{"id": 1, "text": "\xff\xfe"}]')
    model = OrderModel(OrderStorage(JsonFileStore(tmp_path)))
    assert model.orders == ()
