from enum import Enum

# Enums
class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"

class AuditTargetModel(str, Enum):
    PRODUCT = "Product"
    CATEGORY = "Category"
    ORDER = "Order"
    EMPLOYEE = "Employee"
    CUSTOMER = "Customer"
    BRAND = "Brand"
    HERO = "Hero"
    REVIEW = "Review"
    SHIPPING = "Shipping"
    SETTINGS = "Settings"

class AuditAction(str, Enum):
    # Product related actions
    PRODUCT_CREATE = "product.create"
    PRODUCT_UPDATE = "product.update"
    PRODUCT_DELETE = "product.delete"
    PRODUCT_STATUS_UPDATE = "product.status.update"
    # Category related actions
    CATEGORY_CREATE = "category.create"
    CATEGORY_UPDATE = "category.update"
    CATEGORY_DELETE = "category.delete"
    CATEGORY_STATUS_UPDATE = "category.status.update"
    # Order related actions
    ORDER_CREATE = "order.create"
    ORDER_UPDATE = "order.update"
    ORDER_DELETE = "order.delete"
    ORDER_STATUS_UPDATE = "order.status.update"
    ORDER_PAYMENT_UPDATE = "order.payment.update"
    ORDER_SHIPPING_UPDATE = "order.shipping.update"
    # User management actions
    EMPLOYEE_CREATE = "employee.create"
    EMPLOYEE_UPDATE = "employee.update"
    EMPLOYEE_DELETE = "employee.delete"
    EMPLOYEE_STATUS_UPDATE = "employee.status.update"
    CUSTOMER_CREATE = "customer.create"
    CUSTOMER_UPDATE = "customer.update"
    CUSTOMER_DELETE = "customer.delete"
    CUSTOMER_STATUS_UPDATE = "customer.status.update"
    # Brand related actions
    BRAND_CREATE = "brand.create"
    BRAND_UPDATE = "brand.update"
    BRAND_DELETE = "brand.delete"
    BRAND_STATUS_UPDATE = "brand.status.update"
    # Hero section actions
    HERO_CREATE = "hero.create"
    HERO_UPDATE = "hero.update"
    HERO_DELETE = "hero.delete"
    # Review management actions
    REVIEW_CREATE = "review.create"
    REVIEW_UPDATE = "review.update"
    REVIEW_DELETE = "review.delete"
    REVIEW_STATUS_UPDATE = "review.status.update"
    # Shipping method actions
    SHIPPING_CREATE = "shipping.create"
    SHIPPING_UPDATE = "shipping.update"
    SHIPPING_DELETE = "shipping.delete"
    # Settings actions
    SETTINGS_UPDATE = "settings.update"
