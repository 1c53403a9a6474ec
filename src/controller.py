"""Links user intents from the view to the order model, and model changes
back to the view. Holds no state of its own.
"""
import logging
from typing import Tuple

from models import Order
from orders import OrderModel

logger = logging.getLogger(__name__)


class Controller:
    def __init__(self, model: OrderModel, view):
        self.model = model
        self.view = view

        self.unsubscribe = self.model.subscribe(self.on_order_list_changed)
        self.view.bind_add_order(self.handle_add_order)
        self.view.bind_edit_order(self.handle_edit_order)
        self.view.bind_delete_order(self.handle_delete_order)
        self.view.bind_toggle_order(self.handle_toggle_order)

        # initial display; nothing is persisted here
        self.on_order_list_changed(self.model.orders)

    def on_order_list_changed(self, orders: Tuple[Order, ...]) -> None:
        self.view.render(orders)

    def handle_add_order(self, text: str) -> None:
        self.model.add_order(text)

    def handle_edit_order(self, order_id: int, text: str) -> None:
        self.model.edit_order(order_id, text)

    def handle_delete_order(self, order_id: int) -> None:
        self.model.delete_order(order_id)

    def handle_toggle_order(self, order_id: int) -> None:
        self.model.toggle_order(order_id)
