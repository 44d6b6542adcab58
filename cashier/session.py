"""
Session reads — store settings and loyalty balance for one checkout session.

Both are read through a session cache and never fail: an unreachable
settings service yields defaults (flagged unreachable so the delivery fee
can fall back), an unreachable loyalty service yields a zero balance.
"""

from __future__ import annotations

from dataclasses import dataclass

from kungfu import Error, LazyCoroResult, Ok, Result

from cashier import lift as L
from cashier._types import Pure, UserId
from cashier.cache import session_cache
from cashier.errors import CheckoutError
from cashier.log import get_logger
from cashier.retry import Retry, retrying
from cashier.services import LoyaltySource, SettingsSource
from cashier.wire import PublicSettings

log = get_logger("session")

_SETTINGS_KEY = "settings:public"


@dataclass(frozen=True, slots=True)
class SettingsSnapshot:
    settings: PublicSettings
    reachable: bool


class SessionReads:
    def __init__(
        self,
        settings_source: SettingsSource,
        loyalty_source: LoyaltySource,
        user_id: UserId | None = None,
        retry: Retry = Retry(times=2),
    ) -> None:
        self._user_id = user_id
        self._settings = session_cache(
            lambda _: _SETTINGS_KEY,
            lambda _: self._read(settings_source.public_settings),
        )
        self._balances = session_cache(
            lambda uid: f"balance:{uid.value}",
            lambda uid: self._read(lambda: loyalty_source.current_balance(uid)),
        )
        self._retry = retry

    def _read[T](self, call) -> LazyCoroResult[T, CheckoutError]:
        return retrying(L.service_call(call), self._retry, retry_on=lambda e: e.retryable)

    def settings(self) -> Pure[SettingsSnapshot]:
        lookup = self._settings.get(None)

        async def execute() -> Result[SettingsSnapshot, CheckoutError]:
            match await lookup:
                case Ok(cached):
                    return Ok(SettingsSnapshot(cached.value, reachable=True))
                case Error(err):
                    log.warning("settings_unavailable", code=err.code, error=err.message)
                    return Ok(SettingsSnapshot(PublicSettings(), reachable=False))

        return LazyCoroResult(execute)

    def balance(self) -> Pure[int]:
        user_id = self._user_id
        if user_id is None:
            return L.from_result(Ok(0))
        lookup = self._balances.get(user_id)

        async def execute() -> Result[int, CheckoutError]:
            match await lookup:
                case Ok(cached):
                    return Ok(max(int(cached.value), 0))
                case Error(err):
                    log.warning(
                        "balance_unavailable",
                        user_id=user_id.value,
                        code=err.code,
                        error=err.message,
                    )
                    return Ok(0)

        return LazyCoroResult(execute)

    def refresh(self) -> None:
        """Forget cached reads; the next prepare() fetches again."""
        self._settings.clear()
        self._balances.clear()


__all__ = ("SettingsSnapshot", "SessionReads")
