from prometheus_client import Counter

# Business Metrics
eshop_orders_placed_total = Counter(
    "eshop_orders_placed_total",
    "Total orders placed"
)

eshop_order_rejections_total = Counter(
    "eshop_order_rejections_total",
    "Order placements rejected before any stock was reserved",
    ["reason"] # Labels: 'insufficient_stock', 'invalid', 'not_found'
)

eshop_stock_restorations_total = Counter(
    "eshop_stock_restorations_total",
    "Order lines whose stock was restored by a cancellation"
)

eshop_wallet_operations_total = Counter(
    "eshop_wallet_operations_total",
    "Wallet balance operations",
    ["type", "outcome"] # type='deposit'|'withdraw', outcome='success'|'rejected'
)

eshop_version_conflicts_total = Counter(
    "eshop_version_conflicts_total",
    "Writes rejected because the row changed since it was read",
    ["entity"]
)
