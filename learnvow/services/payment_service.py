import asyncio
import logging
import time
from decimal import Decimal
from typing import Any, Dict

from learnvow.core.config import settings

logger = logging.getLogger(__name__)

# Stand-in for a hosted checkout gateway. There is no signature checking or
# ledger here: every initiation and every verification succeeds after a fixed
# delay (PAYMENT_GATEWAY_DELAY_SECONDS).

GATEWAY_SUCCESS = "SUCCESS"


def build_order_id(user_id: int, book_id: int) -> str:
    """Order reference in the form ORDER_<epoch-ms>_<user>_<book>."""
    return f"ORDER_{int(time.time() * 1000)}_{user_id}_{book_id}"


async def _simulate_gateway_latency() -> None:
    delay = settings.PAYMENT_GATEWAY_DELAY_SECONDS
    if delay > 0:
        await asyncio.sleep(delay)


async def initiate_payment(order_id: str, amount: Decimal, currency: str, product_name: str) -> Dict[str, Any]:
    """
    Opens a checkout session with the gateway and returns where to send the
    customer.
    """
    logger.info(f"Initiating gateway payment for order {order_id}: {amount} {currency} ({product_name})")
    await _simulate_gateway_latency()

    response = {
        "status": GATEWAY_SUCCESS,
        "gateway_url": f"{settings.PAYMENT_GATEWAY_URL}?order_id={order_id}",
        "order_id": order_id,
        "amount": amount,
    }
    logger.info(f"Gateway accepted order {order_id}.")
    return response


async def verify_payment(order_id: str, transaction_id: str) -> Dict[str, Any]:
    """Asks the gateway whether `transaction_id` settled `order_id`."""
    logger.info(f"Verifying gateway transaction {transaction_id} for order {order_id}")
    await _simulate_gateway_latency()

    return {
        "status": GATEWAY_SUCCESS,
        "transaction_id": transaction_id,
        "order_id": order_id,
    }
