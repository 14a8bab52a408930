from functools import lru_cache
import logging

from offerflow.application.ports.notifier import NotifierPort
from offerflow.application.ports.offer_store import OfferStorePort
from offerflow.application.use_cases.confirm_offer import ConfirmOfferUseCase
from offerflow.application.use_cases.open_offer import OpenOfferUseCase
from offerflow.application.utils.money import to_decimal
from offerflow.core.config import settings
from offerflow.infrastructure.backend.backend_client import BackendClient
from offerflow.infrastructure.backend.backend_notifier import BackendNotifier
from offerflow.infrastructure.backend.backend_offer_store import BackendOfferStore
from offerflow.infrastructure.notifications.log_notifier import LogNotifier
from offerflow.infrastructure.store.json_store import JsonOfferStore
from offerflow.infrastructure.store.memory_store import MemoryOfferStore
from offerflow.infrastructure.store.session_registry import OfferSessionRegistry


_offer_store: OfferStorePort | None = None
_session_registry: OfferSessionRegistry | None = None


def _store_provider() -> str:
    provider = settings.OFFER_STORE.lower()
    if provider != "auto":
        return provider
    if settings.BACKEND_URL:
        return "backend"
    if settings.ENV.lower() in {"dev", "local"}:
        return "json"
    return "memory"


@lru_cache
def get_backend_client() -> BackendClient:
    if not settings.BACKEND_URL:
        raise ValueError("BACKEND_URL is required for the backend offer store.")
    return BackendClient(
        base_url=settings.BACKEND_URL,
        api_key=settings.BACKEND_API_KEY,
        timeout=settings.BACKEND_TIMEOUT_SECONDS,
    )


def get_offer_store() -> OfferStorePort:
    global _offer_store
    if _offer_store is None:
        provider = _store_provider()
        default_vat_rate = to_decimal(settings.DEFAULT_VAT_RATE)
        if provider == "backend":
            _offer_store = BackendOfferStore(client=get_backend_client(), default_vat_rate=default_vat_rate)
        elif provider == "json":
            _offer_store = JsonOfferStore(data_dir=settings.OFFER_DATA_DIR, default_vat_rate=default_vat_rate)
        else:
            _offer_store = MemoryOfferStore()
        logging.getLogger(__name__).info("Offer store selected: %s", provider)
    return _offer_store


def get_notifier() -> NotifierPort | None:
    if not settings.NOTIFICATIONS_ENABLED:
        return None
    if _store_provider() == "backend":
        return BackendNotifier(client=get_backend_client(), currency=settings.CURRENCY)
    return LogNotifier()


def get_confirm_offer_use_case() -> ConfirmOfferUseCase:
    return ConfirmOfferUseCase(
        store=get_offer_store(),
        notifier=get_notifier(),
        open_statuses=frozenset(settings.PUBLIC_OFFER_STATUSES),
    )


def get_open_offer_use_case() -> OpenOfferUseCase:
    return OpenOfferUseCase(store=get_offer_store(), confirm_use_case=get_confirm_offer_use_case())


def get_session_registry() -> OfferSessionRegistry:
    global _session_registry
    if _session_registry is None:
        _session_registry = OfferSessionRegistry(
            open_offer=get_open_offer_use_case(),
            idle_seconds=settings.SESSION_IDLE_SECONDS,
            max_sessions=settings.MAX_OPEN_SESSIONS,
        )
    return _session_registry
