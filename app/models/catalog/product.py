from sqlalchemy import Column, Integer, String, Numeric, ForeignKey
from app.db.base import BaseModel

class Product(BaseModel):
    """Catalog product, kept to the columns the category and brand screens read"""
    __tablename__ = 'products'

    name = Column(String(255), nullable=False)
    sku = Column(String(100), nullable=True, index=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="draft")  # draft, published, archived
    # Optional on both sides; a cascading category delete clears it
    category_id = Column(Integer, ForeignKey('categories.id'), nullable=True, index=True)
    brand_id = Column(Integer, ForeignKey('brands.id'), nullable=True, index=True)

    def __repr__(self):
        return f"<Product {self.id} {self.name!r} category={self.category_id}>"
