"""Customer dimension (dim_customers).

Grain: one row per distinct non-null ``cust_num``.
"""

from winery_core.customers.transform import (
    COMPLETE,
    CUSTOMER_COLUMNS,
    INCOMPLETE,
    resolve_customers,
)

__all__ = ["COMPLETE", "CUSTOMER_COLUMNS", "INCOMPLETE", "resolve_customers"]
