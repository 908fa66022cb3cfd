# storefront/services/payment_client.py
import random
import string
import time
from dataclasses import dataclass
from uuid import UUID

import requests
from requests import RequestException

from storefront.domain.errors import PaymentGatewayError
from storefront.utils.retry import http_retry
from storefront.utils.settings import PAYMENT_GATEWAY_URL, PAYMENT_SUCCESS_RATE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class PaymentResult:
    success: bool
    payment_id: str | None = None
    error: str | None = None


class SimulatedPaymentGateway:
    """Demo gateway, approves a configurable share of charges."""

    def __init__(self, success_rate: float = PAYMENT_SUCCESS_RATE, rng: random.Random | None = None):
        self.success_rate = success_rate
        self.rng = rng or random.Random()

    def _payment_id(self) -> str:
        suffix = "".join(self.rng.choices(string.ascii_lowercase + string.digits, k=9))
        return f"pay_{int(time.time() * 1000)}_{suffix}"

    def charge(self, order_id: UUID, amount: int, customer_email: str, customer_name: str | None, product_name: str) -> PaymentResult:
        logger.info(f"Simulated charge of {amount} for order {order_id}")
        if self.rng.random() < self.success_rate:
            return PaymentResult(success=True, payment_id=self._payment_id())
        return PaymentResult(success=False, error="Payment failed. Please try again.")


class HttpPaymentGateway:
    def __init__(self, base_url: str, timeout: int = 5):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _post_charge(self, payload: dict) -> requests.Response:
        url = f"{self.base_url}/charges"
        logger.info(f"PaymentGateway POST {url}")
        resp = requests.post(url, json=payload, timeout=self.timeout)
        # 402 is a decline, not a transport problem, so it is not retried
        if resp.status_code != 402:
            resp.raise_for_status()
        return resp

    def charge(self, order_id: UUID, amount: int, customer_email: str, customer_name: str | None, product_name: str) -> PaymentResult:
        payload = {
            "order_id": str(order_id),
            "amount": amount,
            "customer_email": customer_email,
            "customer_name": customer_name,
            "description": product_name,
        }
        try:
            resp = self._post_charge(payload)
        except RequestException as e:
            logger.error(f"Payment gateway unreachable for order {order_id}: {e}")
            raise PaymentGatewayError(f"Payment gateway error: {e}") from e

        body = resp.json()
        if resp.status_code == 402 or body.get("status") != "succeeded":
            return PaymentResult(success=False, error=body.get("error") or "Payment failed. Please try again.")
        return PaymentResult(success=True, payment_id=body["id"])


def build_payment_gateway():
    if PAYMENT_GATEWAY_URL:
        return HttpPaymentGateway(PAYMENT_GATEWAY_URL)
    return SimulatedPaymentGateway()
