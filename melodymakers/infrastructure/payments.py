import stripe
import structlog

from ..config import settings
from ..domain.errors import PaymentProviderError

logger = structlog.get_logger()


def to_minor_units(price: float) -> int:
    return int(round(price * 100))


class StripeGateway:
    """Thin wrapper over the Stripe PaymentIntent API."""

    def __init__(self, api_key: str, currency: str = "usd"):
        self.api_key = api_key
        self.currency = currency

    def create_intent(self, price: float) -> str:
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=to_minor_units(price),
                currency=self.currency,
                payment_method_types=["card"],
            )
        except stripe.StripeError as exc:
            logger.error("payment_intent_failed", error=str(exc), price=price)
            raise PaymentProviderError("payment provider request failed") from exc
        return intent["client_secret"]


def get_payment_gateway() -> StripeGateway:
    return StripeGateway(api_key=settings.PAYMENT_SECRET_KEY, currency=settings.PAYMENT_CURRENCY)
