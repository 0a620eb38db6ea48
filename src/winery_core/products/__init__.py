"""Product dimension (dim_products).

Grain: one row per ``prod_sku`` with a positive retail price.
"""

from winery_core.products.transform import PRODUCT_COLUMNS, resolve_products

__all__ = ["PRODUCT_COLUMNS", "resolve_products"]
