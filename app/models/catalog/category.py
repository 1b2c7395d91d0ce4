from sqlalchemy import Column, Integer, String, Boolean, Text, ForeignKey, Index, JSON
from sqlalchemy.sql import func
from app.db.base import BaseModel

class Category(BaseModel):
    __tablename__ = 'categories'

    name = Column(String(150), nullable=False)
    slug = Column(String(200), nullable=False, index=True)
    description = Column(Text)
    image = Column(String(500), nullable=True)
    parent_id = Column(Integer, ForeignKey('categories.id'), nullable=True, index=True)
    # Mirror of "which rows point at me through parent_id"; only CategoryService writes it
    children = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, default=True, nullable=False)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_main_category(self) -> bool:
        return self.parent_id is None

    def __repr__(self):
        return f"<Category {self.id} {self.name!r} parent={self.parent_id}>"


# Case-insensitive uniqueness backs up the service-level duplicate check
Index("uq_categories_name_lower", func.lower(Category.name), unique=True)
