from __future__ import annotations

from dataclasses import dataclass

from orderdesk.application.ports.backend import RestaurantBackend
from orderdesk.application.ports.notifier import Notifier, PaymentCollector
from orderdesk.application.scheduling import AutoRefresher
from orderdesk.application.use_cases.catalog import CatalogCache
from orderdesk.application.use_cases.checkout import CheckoutCoordinator
from orderdesk.application.use_cases.order_board import OrderBoard
from orderdesk.application.use_cases.pos_session import PosSession
from orderdesk.config import Settings
from orderdesk.domain.common.ids import RestaurantId
from orderdesk.infrastructure.http.client import HttpRestaurantBackend
from orderdesk.infrastructure.notify.logging_notifier import LoggingNotifier
from orderdesk.infrastructure.observability.logging_config import configure_logging
from orderdesk.infrastructure.observability.otel import configure_tracing


@dataclass
class PosApp:
    settings: Settings
    backend: RestaurantBackend
    session: PosSession
    checkout: CheckoutCoordinator
    board: OrderBoard
    board_refresher: AutoRefresher


def create_pos_app(
    restaurant_id: RestaurantId,
    settings: Settings | None = None,
    backend: RestaurantBackend | None = None,
    notifier: Notifier | None = None,
    payment_collector: PaymentCollector | None = None,
) -> PosApp:
    configure_logging()
    configure_tracing()

    settings = settings or Settings.from_env()
    backend = backend or HttpRestaurantBackend(settings)
    notifier = notifier or LoggingNotifier()

    catalog = CatalogCache(backend, currency=settings.currency)
    session = PosSession(
        catalog=catalog,
        notifier=notifier,
        tax_rate=settings.tax_rate,
        currency=settings.currency,
    )
    checkout = CheckoutCoordinator(
        restaurant_id=restaurant_id,
        session=session,
        backend=backend,
        payment_collector=payment_collector,
    )
    board = OrderBoard(
        restaurant_id=restaurant_id,
        backend=backend,
        notifier=notifier,
        currency=settings.currency,
        search_debounce_seconds=settings.search_debounce_seconds,
    )
    return PosApp(
        settings=settings,
        backend=backend,
        session=session,
        checkout=checkout,
        board=board,
        board_refresher=board.auto_refresher(settings.refresh_seconds),
    )
