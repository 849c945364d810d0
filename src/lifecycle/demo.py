"""Demo order book used to populate a development instance.

One open order waiting for a carrier, followed by 29 delivered orders placed
over the previous month. Offsets, quantities and destinations are derived
from the order index so every run produces the same data.
"""

from datetime import datetime, timedelta

import structlog

from lifecycle.order.order import Order, OrderStatus, Product
from lifecycle.store import EntityKind

logger = structlog.get_logger(__name__)

DESTINATIONS = (
    "John Smith, 123 Main Street, New York, NY 10001, USA",
    "Emily Roberts, 45 Victoria Street, Manchester, M2 3NH, United Kingdom",
    "James Cook, 78 Digital Avenue, Sydney, NSW 2000, Australia",
)

WAREHOUSE_ADDRESS = (
    "GADA RETAIL PRIVATE LIMITED, Suburb Residency Private Limited Plot No 01, "
    "Omshree Industrial Park PO, PS -, MUMBAI, 400001, INDIA"
)

OPEN_ORDER_ID = "ORD340001"
PAST_ORDER_COUNT = 29


def _product(quantity: int) -> Product:
    return Product(
        name="Samsung Galaxy S23 Ultra 512GB Phantom Black",
        dimensions="16.39 x 7.89 x 0.89 cm",
        weight="234g",
        quantity=quantity,
    )


def demo_orders(now: datetime) -> list[Order]:
    orders = [
        Order(
            order_id=OPEN_ORDER_ID,
            placed_at=now,
            status=OrderStatus.OPEN,
            product=_product(2),
            customer_address=DESTINATIONS[0],
            warehouse_address=WAREHOUSE_ADDRESS,
            seller_address=WAREHOUSE_ADDRESS,
        )
    ]
    for i in range(1, PAST_ORDER_COUNT + 1):
        days_ago = (i * 7) % 30 + 1
        orders.append(
            Order(
                order_id=f"ORD{340002 + i}",
                placed_at=now - timedelta(days=days_ago),
                status=OrderStatus.DELIVERED,
                product=_product(i % 3 + 1),
                customer_address=DESTINATIONS[i % len(DESTINATIONS)],
                warehouse_address=WAREHOUSE_ADDRESS,
                seller_address=WAREHOUSE_ADDRESS,
            )
        )
    return orders


def bootstrap_demo(lifecycle, now: datetime | None = None) -> int:
    """Seed the demo order book into ``lifecycle``; returns how many were added."""
    now = now or lifecycle.now()
    added = 0
    for order in demo_orders(now):
        if lifecycle.store.contains(EntityKind.ORDER, order.order_id):
            continue
        lifecycle.seed(order)
        added += 1
    logger.info("Demo order book loaded", added=added)
    return added
