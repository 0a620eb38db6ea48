"""Order details (order_details).

Grain: one row per POS order line, customer and product attributes removed.
"""

from winery_core.orders.transform import ORDER_DETAIL_COLUMNS, build_order_details

__all__ = ["ORDER_DETAIL_COLUMNS", "build_order_details"]
