from .setup import setup_observability, configure_logging
from .metrics import (
    eshop_orders_placed_total,
    eshop_order_rejections_total,
    eshop_stock_restorations_total,
    eshop_wallet_operations_total,
    eshop_version_conflicts_total,
)
