from pydantic import BaseModel
from typing import List
from decimal import Decimal
from schemas.invoices import DailySales
from schemas.medicine import LowStockMedicine
from schemas.batch import ExpiringBatch

class DashboardStats(BaseModel):
    todaySales: DailySales
    weeklySales: Decimal
    monthlySales: Decimal
    lowStockCount: int
    lowStockItems: List[LowStockMedicine]
    expiringCount: int
    expiringItems: List[ExpiringBatch]
    totalMedicines: int
    totalSuppliers: int
