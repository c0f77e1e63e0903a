"""Order and order line storage for the mock backend"""

import uuid
from datetime import datetime
from typing import Optional

from ..models.order import Order, OrderLine, OrderStatus


class OrderDatabase:
    """In-memory order storage"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.lines: dict[int, OrderLine] = {}
        self.orders: dict[str, Order] = {}
        self._next_line_id = 1
        self._next_order_id = 1

    def create_line(self, product_id: int, quantity: int, price: float) -> OrderLine:
        """Store an order line; price is the extended price"""
        line = OrderLine(
            id=self._next_line_id,
            product=product_id,
            quantity=quantity,
            price=price,
        )
        self.lines[line.id] = line
        self._next_line_id += 1
        return line

    def get_line(self, line_id: int) -> Optional[OrderLine]:
        return self.lines.get(line_id)

    def delete_line(self, line_id: int) -> bool:
        """Delete a line not yet attached to any order"""
        if line_id not in self.lines:
            return False
        if any(line_id in order.lines for order in self.orders.values()):
            return False
        del self.lines[line_id]
        return True

    def create_order(
        self,
        user_document_id: str,
        line_ids: list[int],
        total_price: float,
    ) -> Order:
        """
        Create an order header referencing existing lines.

        Raises:
            KeyError: a referenced line does not exist
        """
        missing = [line_id for line_id in line_ids if line_id not in self.lines]
        if missing:
            raise KeyError(f"Unknown order lines: {missing}")

        now = datetime.utcnow()
        order = Order(
            id=self._next_order_id,
            document_id=uuid.uuid4().hex[:24],
            user=user_document_id,
            lines=list(line_ids),
            total_price=total_price,
            order_status=OrderStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self.orders[order.document_id] = order
        self._next_order_id += 1
        return order

    def get_order(self, document_id: str) -> Optional[Order]:
        return self.orders.get(document_id)

    def list_for_user(self, user_document_id: str) -> list[Order]:
        """Orders owned by a user, newest first"""
        orders = [o for o in self.orders.values() if o.user == user_document_id]
        orders.sort(key=lambda o: o.id, reverse=True)
        return orders

    def update_status(self, document_id: str, status: OrderStatus) -> Optional[Order]:
        order = self.get_order(document_id)
        if not order:
            return None

        order.order_status = status
        order.updated_at = datetime.utcnow()
        return order


# Singleton instance
order_db = OrderDatabase()
