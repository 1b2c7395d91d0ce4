from sqlalchemy import Column, Integer, String, Boolean, Text, JSON
from app.db.base import BaseModel

class Brand(BaseModel):
    __tablename__ = 'brands'

    name = Column(String(150), nullable=False)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    description = Column(Text)
    logo = Column(JSON, nullable=True)          # {"url": ..., "alt": ...}
    website = Column(String(500), nullable=True)
    countries = Column(JSON, nullable=False, default=list)
    status = Column(Boolean, default=True, nullable=False)
    order = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<Brand {self.id} {self.name!r}>"
