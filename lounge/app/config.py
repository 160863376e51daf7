import os
from decimal import Decimal, InvalidOperation
from typing import List

DEFAULT_GROUP_WINDOW_MS = 10_000
DEFAULT_CONSIGNMENT_FEE_RATE = Decimal("0.15")
DEFAULT_SESSION_HOURLY_RATE = Decimal("20")
DEFAULT_SESSION_FREE_MINUTES = 5


class Settings:
    def _split_csv(self, raw: str, *, default: List[str]) -> List[str]:
        parts = [p.strip() for p in (raw or "").split(",")]
        return [p for p in parts if p] or default

    def _env_int(self, name: str, default: int) -> int:
        raw = (os.getenv(name) or "").strip()
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError:
            return default

    def _env_rate(self, name: str, default: Decimal) -> Decimal:
        raw = (os.getenv(name) or "").strip()
        if not raw:
            return default
        try:
            rate = Decimal(raw)
        except InvalidOperation:
            return default
        if not rate.is_finite():
            return default
        return min(Decimal("1"), max(Decimal("0"), rate))

    def _env_amount(self, name: str, default: Decimal) -> Decimal:
        raw = (os.getenv(name) or "").strip()
        if not raw:
            return default
        try:
            amount = Decimal(raw)
        except InvalidOperation:
            return default
        if not amount.is_finite() or amount < 0:
            return default
        return amount

    def __init__(self) -> None:
        self.env = os.getenv('APP_ENV', 'local')
        # Comma-separated list of allowed CORS origins for the lounge screens.
        self.cors_origins = self._split_csv(
            os.getenv("CORS_ORIGINS", "").strip(),
            default=["http://localhost:8100", "http://127.0.0.1:8100"],
        )
        self.api_version = os.getenv("APP_VERSION", "0.1.0").strip() or "0.1.0"
        # Max gap between two same-customer add-on rows that still belong to one receipt.
        window = self._env_int("GROUP_WINDOW_MS", DEFAULT_GROUP_WINDOW_MS)
        self.group_window_ms = window if window > 0 else DEFAULT_GROUP_WINDOW_MS
        self.consignment_fee_rate = self._env_rate("CONSIGNMENT_FEE_RATE", DEFAULT_CONSIGNMENT_FEE_RATE)
        # Walk-in session pricing: pesos per hour, and the grace period before the meter starts.
        self.session_hourly_rate = self._env_amount("SESSION_HOURLY_RATE", DEFAULT_SESSION_HOURLY_RATE)
        free = self._env_int("SESSION_FREE_MINUTES", DEFAULT_SESSION_FREE_MINUTES)
        self.session_free_minutes = free if free >= 0 else DEFAULT_SESSION_FREE_MINUTES

settings = Settings()
