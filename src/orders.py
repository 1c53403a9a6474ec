"""Order list state: ID management, mutation, and the commit protocol.

Every mutator ends with a commit: the subscribed listener is called with
the new snapshot first, then the snapshot is written to storage. A write
failure propagates out of the mutator and the in-memory change stays.
"""
import logging
from typing import Callable, List, Optional, Tuple

from models import Order
from storage import OrderStorage

logger = logging.getLogger(__name__)

OrderListListener = Callable[[Tuple[Order, ...]], None]


class OrderModel:
    def __init__(self, storage: OrderStorage):
        self.storage = storage
        self._orders: List[Order] = storage.load()
        self._listener: Optional[OrderListListener] = None
        # high-water mark: ids are never reused while the process runs
        self._next_id: int = max((o.id for o in self._orders), default=0) + 1

    # -------------------- queries --------------------
    @property
    def orders(self) -> Tuple[Order, ...]:
        return tuple(self._orders)

    def get_order(self, order_id: int) -> Optional[Order]:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    # -------------------- listener --------------------
    def subscribe(self, listener: OrderListListener) -> Callable[[], None]:
        """Make ``listener`` the single change listener.

        Replaces any previous listener. The returned callable unsubscribes,
        but only while ``listener`` is still the active one.
        """
        self._listener = listener

        def unsubscribe() -> None:
            if self._listener is listener:
                self._listener = None

        return unsubscribe

    def bind_order_list_changed(self, listener: OrderListListener) -> None:
        self.subscribe(listener)

    # -------------------- id management --------------------
    def _allocate_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    # -------------------- order operations --------------------
    def add_order(self, text: str) -> None:
        order = Order(id=self._allocate_id(), text=text, complete=False)
        self._orders = self._orders + [order]
        logger.info("Added order %d", order.id)
        self._commit()

    def edit_order(self, order_id: int, text: str) -> None:
        self._orders = self._replace_matching(order_id, lambda o: o.with_text(text))
        logger.info("Edited order %d", order_id)
        self._commit()

    def delete_order(self, order_id: int) -> None:
        self._orders = [o for o in self._orders if o.id != order_id]
        logger.info("Deleted order %d", order_id)
        self._commit()

    def toggle_order(self, order_id: int) -> None:
        self._orders = self._replace_matching(order_id, Order.toggled)
        logger.info("Toggled order %d", order_id)
        self._commit()

    def _replace_matching(self, order_id: int, change: Callable[[Order], Order]) -> List[Order]:
        if self.get_order(order_id) is None:
            logger.debug("No order with id %d; list unchanged", order_id)
        return [change(o) if o.id == order_id else o for o in self._orders]

    # -------------------- commit --------------------
    def _commit(self) -> None:
        snapshot = self.orders
        if self._listener is not None:
            self._listener(snapshot)
        self.storage.save(snapshot)

    def __str__(self) -> str:
        done = sum(1 for o in self._orders if o.complete)
        return f'Orders: {len(self._orders)} total, {done} complete'
