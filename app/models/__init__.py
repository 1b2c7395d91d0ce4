from app.models.auth.employee import Employee
from app.models.auth.audit_log import AuditLog
from app.models.catalog.category import Category
from app.models.catalog.brand import Brand
from app.models.catalog.product import Product
