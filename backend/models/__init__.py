from models.users import User, UserRole
from models.suppliers import Supplier
from models.categories import Category
from models.medicine import Medicine
from models.batch import Batch
from models.invoices import Invoice
from models.invoice_items import InvoiceItem
from models.purchase_orders import PurchaseOrder, PurchaseOrderStatus
from models.purchase_order_items import PurchaseOrderItem
from models.stock_adjustments import StockAdjustment, AdjustmentType
from models.audit_log import AuditLog
from models.app_config import AppConfig

__all__ = ['AdjustmentType', 'AppConfig', 'AuditLog', 'Batch', 'Category', 'Invoice', 'InvoiceItem', 'Medicine', 'PurchaseOrder', 'PurchaseOrderItem', 'PurchaseOrderStatus', 'StockAdjustment', 'Supplier', 'User', 'UserRole',]
