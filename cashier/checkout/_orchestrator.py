"""
Checkout orchestrator — drives one checkout session.

    DRAFT → VALIDATING → READY_TO_SUBMIT → SUBMITTING → CONFIRMED
                                                      ↘ FAILED_RECOVERABLE
                                                      ↘ FAILED_FATAL
    (any non-terminal state) → CANCELLED

Every public operation returns Result[..., CheckoutError]; adapter
exceptions are converted at the boundary and never escape.

    checkout = CheckoutOrchestrator(reads, promotions, stock, backend, backend)
    await checkout.prepare(items, OrderType.DELIVERY, AddressId(7))
    checkout.select_payment(Card())
    checkout.choose_card_subtype(CardSubtype.CREDIT)
    match await checkout.review():
        case Ok(_):
            receipt = await checkout.submit()
        case Error(err):
            show(err.message, err.field)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import UTC, datetime
from decimal import Decimal

import combinators as C
from kungfu import Error, Ok, Result

from cashier import lift as L
from cashier._types import AddressId, IngredientId, OrderType
from cashier.checkout._draft import OrderDraft
from cashier.checkout._guard import SubmissionGuard
from cashier.checkout._payment import (
    Card,
    CardSubtype,
    Cash,
    PaymentMethodState,
    parse_payment_method,
)
from cashier.checkout._state import CheckoutState, can_transition
from cashier.checkout._submission import build_submission
from cashier.checkout._validation import first_problem
from cashier.config import CheckoutConfig
from cashier.cpf import normalize_cpf
from cashier.delivery import DeliveryFeeResolver
from cashier.errors import CheckoutError, CheckoutErrorKind, CheckoutErrors
from cashier.log import get_logger
from cashier.money import ZERO, parse_amount, parse_quantity
from cashier.pricing import CartItem, PricedLine, price_line
from cashier.promotions import PromotionDescriptor, PromotionResolver
from cashier.retry import retrying
from cashier.services import CartSync, OrderGateway
from cashier.session import SessionReads
from cashier.stock import LineAvailability, StockValidator, shortfalls
from cashier.wire import SubmissionReceipt

log = get_logger("checkout")

type Outcome = Result[OrderDraft, CheckoutError]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CheckoutOrchestrator:
    def __init__(
        self,
        reads: SessionReads,
        promotions: PromotionResolver,
        stock: StockValidator,
        gateway: OrderGateway,
        cart: CartSync | None = None,
        config: CheckoutConfig = CheckoutConfig(),
        guard: SubmissionGuard | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._reads = reads
        self._promotions = promotions
        self._stock = stock
        self._gateway = gateway
        self._cart = cart
        self._config = config
        self._guard = guard or SubmissionGuard()
        self._clock = clock
        self._fees = DeliveryFeeResolver(config.fallback_delivery_fee)

        self._state = CheckoutState.DRAFT
        self._draft: OrderDraft | None = None
        self._receipt: SubmissionReceipt | None = None
        self._stock_report: tuple[LineAvailability, ...] = ()
        self._last_error: CheckoutError | None = None
        self._priced_at: datetime | None = None
        self._ingredient_prices: Mapping[IngredientId, Decimal] = {}
        # bumped by cancel(); results of calls started before it are dropped
        self._epoch = 0

    # ═══════════════════════════════════════════════════════════════════════
    # Introspection
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def state(self) -> CheckoutState:
        return self._state

    @property
    def draft(self) -> OrderDraft | None:
        return self._draft

    @property
    def receipt(self) -> SubmissionReceipt | None:
        return self._receipt

    @property
    def last_error(self) -> CheckoutError | None:
        return self._last_error

    @property
    def stock_report(self) -> tuple[LineAvailability, ...]:
        return self._stock_report

    @property
    def redemption_notice(self) -> CheckoutError | None:
        """Set when the last points request was clamped."""
        if self._draft is None or self._draft.notice is None:
            return None
        return CheckoutErrors.redemption_clamped(self._draft.notice)

    @property
    def submit_enabled(self) -> bool:
        return self._state in (
            CheckoutState.READY_TO_SUBMIT,
            CheckoutState.FAILED_RECOVERABLE,
            CheckoutState.FAILED_FATAL,
        )

    def _move(self, target: CheckoutState) -> None:
        if target is self._state:
            return
        if not can_transition(self._state, target):
            raise RuntimeError(f"illegal transition {self._state.value} → {target.value}")
        log.debug("state_changed", source=self._state.value, target=target.value)
        self._state = target

    def _fail(self, target: CheckoutState, err: CheckoutError) -> Result[object, CheckoutError]:
        self._move(target)
        self._last_error = err
        return Error(err)

    # ═══════════════════════════════════════════════════════════════════════
    # Prepare
    # ═══════════════════════════════════════════════════════════════════════

    async def prepare(
        self,
        items: Iterable[CartItem],
        order_type: OrderType = OrderType.DELIVERY,
        address_id: AddressId | None = None,
        *,
        ingredient_prices: Mapping[IngredientId, Decimal] | None = None,
    ) -> Outcome:
        """Price the cart and build a fresh draft."""
        if not self._state.editable:
            return Error(CheckoutErrors.invalid_state("prepare", self._state.value))

        epoch = self._epoch
        cart = tuple(items)
        at = self._clock()

        reads = await C.parallel(
            self._reads.settings(),
            self._reads.balance(),
            self._promotions.resolve_many((item.product_id for item in cart), at),
        )
        match reads:
            case Ok([snapshot, balance, promos]):
                pass
            case Error(err):
                return Error(err)
        if epoch != self._epoch:
            return Error(CheckoutErrors.cancelled())

        prices = dict(ingredient_prices or {})
        lines = tuple(
            price_line(item, promos.get(item.product_id), at=at, ingredient_prices=prices)
            for item in cart
        )
        draft = OrderDraft(
            lines=lines,
            order_type=order_type,
            configured_fee=self._fees.configured_fee(snapshot),
            available_points=balance,
            policy=self._config.loyalty.with_rates(snapshot.settings.loyalty_rates),
            timings=snapshot.settings.estimated_delivery_time,
            address_id=address_id,
        )

        self._priced_at = at
        self._ingredient_prices = prices
        self._draft = draft
        self._stock_report = ()
        self._last_error = None
        self._move(CheckoutState.DRAFT)

        log.info(
            "checkout_prepared",
            lines=len(lines),
            excluded=len(draft.excluded_lines),
            subtotal=str(draft.subtotal),
            delivery_fee=str(draft.delivery_fee),
            total=str(draft.total),
            settings_reachable=snapshot.reachable,
        )
        return Ok(draft)

    # ═══════════════════════════════════════════════════════════════════════
    # Mutations
    # ═══════════════════════════════════════════════════════════════════════

    def _editable(self, operation: str) -> Result[OrderDraft, CheckoutError]:
        if self._draft is None:
            return Error(CheckoutErrors.no_draft())
        if not self._state.editable:
            return Error(CheckoutErrors.invalid_state(operation, self._state.value))
        return Ok(self._draft)

    def _mutate(
        self, operation: str, change: Callable[[OrderDraft], Outcome]
    ) -> Outcome:
        match self._editable(operation):
            case Error(err):
                return Error(err)
            case Ok(current):
                pass

        match change(current):
            case Error(err):
                return Error(err)
            case Ok(changed):
                decision = changed.redemption
                notice = decision.reason if decision.clamped else None
                if notice != changed.notice:
                    changed = changed.evolve(notice=notice, attempt_key=changed.attempt_key)
                self._draft = changed
                self._last_error = None
                self._move(CheckoutState.DRAFT)
                log.debug(
                    "draft_changed",
                    operation=operation,
                    total=str(changed.total),
                    points=decision.accepted,
                )
                return Ok(changed)

    def select_payment(self, method: PaymentMethodState | str) -> Outcome:
        state = parse_payment_method(method) if isinstance(method, str) else method
        if state is None:
            return Error(CheckoutErrors.invalid_choice("payment_method", method))
        return self._mutate("select_payment", lambda d: Ok(d.evolve(payment=state)))

    def choose_card_subtype(self, subtype: CardSubtype | str) -> Outcome:
        try:
            chosen = subtype if isinstance(subtype, CardSubtype) else CardSubtype(subtype.lower())
        except (ValueError, AttributeError):
            return Error(CheckoutErrors.invalid_choice("payment.card_subtype", subtype))

        def change(d: OrderDraft) -> Outcome:
            if not isinstance(d.payment, Card):
                return Error(CheckoutErrors.payment_not_card())
            return Ok(d.evolve(payment=Card(chosen)))

        return self._mutate("choose_card_subtype", change)

    def set_cash_tendered(self, amount: object) -> Outcome:
        parsed = parse_amount(amount)
        if not parsed.valid:
            return Error(CheckoutErrors.invalid_amount("payment.tendered"))

        def change(d: OrderDraft) -> Outcome:
            if not isinstance(d.payment, Cash):
                return Error(CheckoutErrors.payment_not_cash())
            needs_cash = d.order_type is OrderType.DELIVERY and d.total > ZERO
            if needs_cash and parsed.value < d.total:
                return Error(CheckoutErrors.cash_insufficient(parsed.value, d.total))
            return Ok(d.evolve(payment=Cash(parsed.value)))

        return self._mutate("set_cash_tendered", change)

    def use_points(self, requested: object) -> Outcome:
        """Request a redemption. Over-asks are clamped and leave a notice."""
        points = parse_quantity(requested).value
        return self._mutate("use_points", lambda d: Ok(d.evolve(requested_points=points)))

    def set_order_type(self, order_type: OrderType | str) -> Outcome:
        try:
            chosen = order_type if isinstance(order_type, OrderType) else OrderType(order_type)
        except ValueError:
            return Error(CheckoutErrors.invalid_choice("order_type", order_type))
        return self._mutate("set_order_type", lambda d: Ok(d.evolve(order_type=chosen)))

    def set_address(self, address_id: AddressId | None) -> Outcome:
        return self._mutate("set_address", lambda d: Ok(d.evolve(address_id=address_id)))

    def set_cpf(self, cpf: str | None) -> Outcome:
        """Store the CPF for the invoice; it is checked by review()."""
        value = normalize_cpf(cpf) if cpf else ""
        return self._mutate("set_cpf", lambda d: Ok(d.evolve(cpf=value or None)))

    def set_notes(self, notes: str | None) -> Outcome:
        text = (notes or "").strip()
        return self._mutate("set_notes", lambda d: Ok(d.evolve(notes=text or None)))

    def _find_line(self, draft: OrderDraft, line_ref: str) -> PricedLine | None:
        return next((line for line in draft.lines if line.line_ref == line_ref), None)

    async def _sync_cart(self, operation: str, call: Callable[[], object]) -> Result[None, CheckoutError]:
        if self._cart is None:
            return Ok(None)
        result = await retrying(
            L.service_call(call), self._config.read_retry, retry_on=lambda e: e.retryable
        )
        match result:
            case Ok(_):
                return Ok(None)
            case Error(err):
                log.warning("cart_sync_failed", operation=operation, code=err.code)
                return Error(err)

    async def remove_line(self, line_ref: str) -> Outcome:
        match self._editable("remove_line"):
            case Error(err):
                return Error(err)
            case Ok(draft):
                pass
        if self._find_line(draft, line_ref) is None:
            return Error(CheckoutErrors.unknown_line(line_ref))

        epoch = self._epoch
        cart = self._cart
        synced = await self._sync_cart("cart_remove", lambda: cart.remove_item(line_ref))
        if epoch != self._epoch:
            return Error(CheckoutErrors.cancelled())
        if isinstance(synced, Error):
            return synced

        return self._mutate(
            "remove_line",
            lambda d: Ok(d.evolve(lines=tuple(l for l in d.lines if l.line_ref != line_ref))),
        )

    async def set_quantity(self, line_ref: str, quantity: object) -> Outcome:
        parsed = parse_quantity(quantity, minimum=1)
        if not parsed.valid:
            return Error(CheckoutErrors.invalid_quantity())
        match self._editable("set_quantity"):
            case Error(err):
                return Error(err)
            case Ok(draft):
                pass
        if self._find_line(draft, line_ref) is None:
            return Error(CheckoutErrors.unknown_line(line_ref))

        epoch = self._epoch
        cart = self._cart
        synced = await self._sync_cart(
            "cart_update", lambda: cart.update_quantity(line_ref, parsed.value)
        )
        if epoch != self._epoch:
            return Error(CheckoutErrors.cancelled())
        if isinstance(synced, Error):
            return synced

        def reprice(line: PricedLine) -> PricedLine:
            if line.line_ref != line_ref:
                return line
            return price_line(
                line.item.with_quantity(parsed.value),
                line.promotion,
                at=self._priced_at,
                ingredient_prices=self._ingredient_prices,
            )

        return self._mutate(
            "set_quantity",
            lambda d: Ok(d.evolve(lines=tuple(reprice(l) for l in d.lines))),
        )

    async def drop_unavailable(
        self, report: Sequence[LineAvailability] | None = None
    ) -> Outcome:
        """Remove every line the stock report rejected (default: the last report)."""
        rejected = {a.line_ref for a in shortfalls(report if report is not None else self._stock_report)}
        match self._editable("drop_unavailable"):
            case Error(err):
                return Error(err)
            case Ok(_):
                pass

        epoch = self._epoch
        for line_ref in sorted(rejected):
            cart = self._cart
            synced = await self._sync_cart(
                "cart_remove", lambda ref=line_ref: cart.remove_item(ref)
            )
            if epoch != self._epoch:
                return Error(CheckoutErrors.cancelled())
            if isinstance(synced, Error):
                return synced

        self._stock_report = ()
        return self._mutate(
            "drop_unavailable",
            lambda d: Ok(d.evolve(lines=tuple(l for l in d.lines if l.line_ref not in rejected))),
        )

    # ═══════════════════════════════════════════════════════════════════════
    # Review
    # ═══════════════════════════════════════════════════════════════════════

    async def review(self) -> Outcome:
        """Run every pre-submission check; READY_TO_SUBMIT when all pass."""
        match self._editable("review"):
            case Error(err):
                return Error(err)
            case Ok(draft):
                pass

        self._move(CheckoutState.VALIDATING)
        if (problem := first_problem(draft)) is not None:
            log.info("review_rejected", code=problem.code, field=problem.field)
            return self._fail(CheckoutState.DRAFT, problem)

        epoch = self._epoch
        match await self._check_stock(draft):
            case Error(err):
                if epoch != self._epoch:
                    return Error(CheckoutErrors.cancelled())
                return self._fail(CheckoutState.DRAFT, err)
            case Ok(_):
                pass
        if epoch != self._epoch:
            return Error(CheckoutErrors.cancelled())

        self._last_error = None
        self._move(CheckoutState.READY_TO_SUBMIT)
        log.info("review_passed", total=str(draft.total), attempt_key=draft.attempt_key)
        return Ok(draft)

    async def _check_stock(
        self, draft: OrderDraft
    ) -> Result[tuple[LineAvailability, ...], CheckoutError]:
        epoch = self._epoch
        result = await self._stock.validate_all(draft.lines)
        match result:
            case Ok(report):
                if epoch == self._epoch:
                    self._stock_report = tuple(report)
                if shortfalls(report):
                    return Error(CheckoutErrors.stock_shortfall(tuple(report)))
                return Ok(tuple(report))
            case Error(err):
                return Error(err)

    # ═══════════════════════════════════════════════════════════════════════
    # Submit
    # ═══════════════════════════════════════════════════════════════════════

    async def submit(self) -> Result[SubmissionReceipt, CheckoutError]:
        """
        Submit the reviewed draft.

        A second call while a submission is in flight is rejected without
        side effects. After a failure, calling submit again re-runs review
        first.
        """
        if self._state is CheckoutState.SUBMITTING:
            log.info("duplicate_submit_ignored")
            return Error(CheckoutErrors.submission_in_flight())
        if self._draft is None:
            return Error(CheckoutErrors.no_draft())
        if self._state in (CheckoutState.FAILED_RECOVERABLE, CheckoutState.FAILED_FATAL):
            match await self.review():
                case Error(err):
                    return Error(err)
                case Ok(_):
                    pass
        if self._state is not CheckoutState.READY_TO_SUBMIT:
            return Error(CheckoutErrors.invalid_state("submit", self._state.value))

        draft = self._draft
        key = draft.attempt_key
        epoch = self._epoch
        self._move(CheckoutState.SUBMITTING)

        if not await self._guard.begin(key):
            if (receipt := await self._guard.receipt(key)) is not None:
                log.info("submission_replayed", attempt_key=key)
                return Ok(self._confirm(receipt))
            self._move(CheckoutState.READY_TO_SUBMIT)
            return Error(CheckoutErrors.submission_in_flight())

        # stock is re-checked immediately before the order call
        match await self._check_stock(draft):
            case Error(err):
                await self._guard.fail(key)
                if epoch != self._epoch:
                    return Error(CheckoutErrors.cancelled())
                return self._submission_failed(err)
            case Ok(_):
                pass
        if epoch != self._epoch:
            await self._guard.fail(key)
            return Error(CheckoutErrors.cancelled())

        try:
            request = build_submission(draft)
        except ValueError as exc:
            await self._guard.fail(key)
            return self._submission_failed(CheckoutErrors.invalid_request(str(exc)))

        gateway = self._gateway
        log.info("submitting_order", attempt_key=key, total=str(draft.total))
        result = await retrying(
            L.service_call(lambda: gateway.submit(request, key)),
            self._config.submit_retry,
            retry_on=lambda e: e.retryable,
        )

        match result:
            case Ok(receipt):
                await self._guard.complete(key, receipt)
                if epoch != self._epoch:
                    log.warning("late_receipt_dropped", attempt_key=key)
                    return Error(CheckoutErrors.cancelled())
                if receipt.total is not None and receipt.total != draft.total:
                    log.warning(
                        "order_total_mismatch",
                        order_id=receipt.order_id,
                        local=str(draft.total),
                        remote=str(receipt.total),
                    )
                return Ok(self._confirm(receipt))
            case Error(err):
                await self._guard.fail(key)
                if epoch != self._epoch:
                    return Error(CheckoutErrors.cancelled())
                if err.kind is CheckoutErrorKind.STOCK:
                    # fill the per-line report so the UI can offer to drop lines
                    await self._check_stock(draft)
                return self._submission_failed(err)

    def _submission_failed(self, err: CheckoutError) -> Result[SubmissionReceipt, CheckoutError]:
        target = (
            CheckoutState.FAILED_FATAL
            if err.kind is CheckoutErrorKind.TRANSPORT
            else CheckoutState.FAILED_RECOVERABLE
        )
        log.warning("submission_failed", kind=err.kind.value, code=err.code, target=target.value)
        self._move(target)
        self._last_error = err
        return Error(err)

    def _confirm(self, receipt: SubmissionReceipt) -> SubmissionReceipt:
        self._move(CheckoutState.CONFIRMED)
        self._receipt = receipt
        self._draft = None
        self._stock_report = ()
        self._last_error = None
        log.info(
            "order_confirmed",
            order_id=receipt.order_id,
            confirmation_code=receipt.confirmation_code,
        )
        return receipt

    # ═══════════════════════════════════════════════════════════════════════
    # Cancel
    # ═══════════════════════════════════════════════════════════════════════

    def cancel(self) -> Result[None, CheckoutError]:
        """Discard the draft. Results of calls still in flight are ignored."""
        if self._state is CheckoutState.CONFIRMED:
            return Error(CheckoutErrors.invalid_state("cancel", self._state.value))
        self._epoch += 1
        self._move(CheckoutState.CANCELLED)
        self._draft = None
        self._stock_report = ()
        log.info("checkout_cancelled")
        return Ok(None)


__all__ = ("CheckoutOrchestrator",)
