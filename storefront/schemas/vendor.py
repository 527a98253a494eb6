# storefront/schemas/vendor.py
from decimal import Decimal

from pydantic import ConfigDict
from sqlmodel import SQLModel


class InventorySummary(SQLModel):
    """
    Header figures for the vendor inventory screen.
    """
    model_config = ConfigDict(extra="forbid")

    total_products: int
    total_inventory_value: Decimal
    low_stock_count: int
    low_stock_threshold: int
