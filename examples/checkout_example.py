"""
Checkout Example — price, review and submit one storefront order.

Run: uv run python examples/checkout_example.py
"""

from kungfu import Error, Ok

from cashier import CheckoutConfig
from cashier._types import AddressId, UserId
from cashier.checkout import Card, CardSubtype, CheckoutOrchestrator, OrderDraft
from cashier.log import configure_logging
from cashier.promotions import PromotionResolver
from cashier.retry import Retry
from cashier.session import SessionReads
from cashier.stock import StockValidator
from cashier.wire import CapacityReport
from examples._infra import FakeStore, banner, menu_item, promotion, run


# ═══════════════════════════════════════════════════════════════════════════════
# Store
# ═══════════════════════════════════════════════════════════════════════════════

store = FakeStore(
    promotions={1: promotion(7, percentage=20)},
    balances={3: 1500},
    stock={2: CapacityReport(max_quantity=1, limiting_ingredient="Bacon")},
    flaky_submits=1,
)

config = (
    CheckoutConfig()
    .with_submit_retry(Retry(times=3, backoff_initial=0.05))
    .with_logging(json=False, level="warning")
)

checkout = CheckoutOrchestrator(
    reads=SessionReads(store, store, UserId(3)),
    promotions=PromotionResolver(store),
    stock=StockValidator(store),
    gateway=store,
    cart=store,
    config=config,
)


def show(draft: OrderDraft) -> None:
    for line in draft.lines:
        print(f"   {line.item.name} x{line.quantity}: {line.original_total} → {line.discounted_total}")
    print(f"   subtotal={draft.subtotal} fee={draft.delivery_fee} points={draft.accepted_points}")
    print(f"   total={draft.total} earns={draft.points_earned} pts")
    window = draft.ready_window
    print(f"   ready in {window.min_minutes}-{window.max_minutes} min")


# ═══════════════════════════════════════════════════════════════════════════════
# Demo
# ═══════════════════════════════════════════════════════════════════════════════


async def main() -> None:
    configure_logging(json=config.log_json, level=config.log_level)
    banner("Checkout")

    # 1. Prepare: promotions, fee and balance are read concurrently
    print("\n1. Prepare:")
    cart = [
        menu_item("11", 1, "Smash Burger", "32.00", 2, prep=18),
        menu_item("12", 2, "Bacon Burger", "38.00", 2, prep=25),
    ]
    match await checkout.prepare(cart, address_id=AddressId(9)):
        case Ok(draft):
            show(draft)
        case Error(e):
            print(f"   error: {e.message}")
            return

    # 2. Card without subtype: review names the missing field
    print("\n2. Card payment, no subtype:")
    checkout.select_payment(Card())
    match await checkout.review():
        case Error(e):
            print(f"   blocked: {e.message} (field={e.field})")
        case Ok(_):
            print("   unexpected pass")
    checkout.choose_card_subtype(CardSubtype.CREDIT)

    # 3. Too many points: clamped with a notice
    print("\n3. Redeem 50000 points:")
    checkout.use_points(50_000)
    if (notice := checkout.redemption_notice) is not None:
        print(f"   notice: {notice.message}")

    # 4. Stock: one line exceeds capacity and is dropped
    print("\n4. Review:")
    match await checkout.review():
        case Error(e):
            print(f"   blocked: {e.message}")
            match await checkout.drop_unavailable():
                case Ok(draft):
                    show(draft)
                case Error(e):
                    print(f"   error: {e.message}")
        case Ok(_):
            print("   ready")
    await checkout.review()

    # 5. Submit: first call times out, retry succeeds with the same key
    print("\n5. Submit:")
    match await checkout.submit():
        case Ok(receipt):
            print(f"   order #{receipt.order_id} code={receipt.confirmation_code}")
        case Error(e):
            print(f"   failed: {e.message} (state={checkout.state.value})")

    sent = store.orders[0]
    print(f"\nSent: method={sent.payment_method} points={sent.points_to_redeem} "
          f"promotions={len(sent.promotions or [])}")


if __name__ == "__main__":
    run(main)
