"""
Order state machine for managing order status transitions
"""

from typing import Callable, Dict, List, Optional, Set, Tuple

from storefront.core.exceptions import TransitionNotAllowedException
from storefront.models.order import Order, OrderStatus, PaymentStatus, Actor

Guard = Callable[[Order], bool]

def _is_paid(order: Order) -> bool:
    return order.payment_status == PaymentStatus.PAID

class OrderStateMachine:
    """
    Valid order status transitions, per actor.

    Customers can only cancel early orders and return delivered, paid ones.
    Admins drive fulfilment forward and may re-record the current status to
    attach a tracking number, payment update or note. Cancelled and returned
    orders are terminal for everyone.
    """

    TERMINAL = frozenset({OrderStatus.CANCELLED, OrderStatus.RETURNED})

    def __init__(self):
        self.transitions: Dict[Actor, Dict[OrderStatus, Set[OrderStatus]]] = {
            Actor.CUSTOMER: {
                OrderStatus.PENDING: {OrderStatus.CANCELLED},
                OrderStatus.PROCESSING: {OrderStatus.CANCELLED},
                OrderStatus.DELIVERED: {OrderStatus.RETURNED},
            },
            Actor.ADMIN: {
                OrderStatus.PENDING: {
                    OrderStatus.PROCESSING,
                    OrderStatus.SHIPPED,
                    OrderStatus.CANCELLED,
                },
                OrderStatus.PROCESSING: {
                    OrderStatus.SHIPPED,
                    OrderStatus.CANCELLED,
                },
                OrderStatus.SHIPPED: {
                    OrderStatus.DELIVERED,
                    OrderStatus.RETURNED,
                },
                OrderStatus.DELIVERED: {
                    OrderStatus.RETURNED,
                },
            },
        }
        # Extra conditions on top of the table, keyed by (actor, target)
        self.guards: Dict[Tuple[Actor, OrderStatus], Guard] = {
            (Actor.CUSTOMER, OrderStatus.RETURNED): _is_paid,
        }

    def can_transition(
        self,
        order: Order,
        new_status: OrderStatus,
        actor: Actor
    ) -> bool:
        """
        Check if ``actor`` may move ``order`` to ``new_status``

        Args:
            order: Order in its current state
            new_status: Desired new status
            actor: Who is asking

        Returns:
            True if transition is allowed
        """
        current = OrderStatus(order.status)
        new_status = OrderStatus(new_status)

        if actor == Actor.ADMIN and current == new_status:
            return True

        allowed = self.transitions.get(actor, {}).get(current, set())
        if new_status not in allowed:
            return False

        guard = self.guards.get((actor, new_status))
        return guard(order) if guard else True

    def get_valid_transitions(self, order: Order, actor: Actor) -> List[OrderStatus]:
        """Statuses ``actor`` could move ``order`` to right now"""
        current = OrderStatus(order.status)
        return sorted(
            (
                status for status in self.transitions.get(actor, {}).get(current, set())
                if self.can_transition(order, status, actor)
            ),
            key=lambda status: status.value
        )

    def is_terminal_state(self, status: OrderStatus) -> bool:
        return OrderStatus(status) in self.TERMINAL

    def is_cancellable(self, order: Order) -> bool:
        """Customer may cancel: pending or processing"""
        return self.can_transition(order, OrderStatus.CANCELLED, Actor.CUSTOMER)

    def is_returnable(self, order: Order) -> bool:
        """Customer may return: delivered and paid"""
        return self.can_transition(order, OrderStatus.RETURNED, Actor.CUSTOMER)

    def apply(
        self,
        order: Order,
        new_status: OrderStatus,
        actor: Actor,
        note: Optional[str] = None,
        error_message: Optional[str] = None
    ) -> Tuple[OrderStatus, dict]:
        """
        Validate and perform a transition.

        Returns:
            (previous status, appended timeline entry)

        Raises:
            TransitionNotAllowedException: If the table or a guard forbids it
        """
        previous = OrderStatus(order.status)
        if not self.can_transition(order, new_status, actor):
            raise TransitionNotAllowedException(
                error_message
                or f"Cannot change order status from {previous.value} to {OrderStatus(new_status).value}"
            )
        entry = order.record_status(new_status, note, actor)
        return previous, entry

order_state_machine = OrderStateMachine()
