import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BaseAppException, NotFoundError, PersistenceError, ValidationError
from app.models.catalog.brand import Brand
from app.schemas.catalog.brand import BrandCreate, BrandUpdate
from app.utils.slug import make_slug

logger = logging.getLogger(__name__)


class BrandService:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------- Getters ----------
    async def get_brand(self, brand_id: int) -> Optional[Brand]:
        return await self.session.get(Brand, brand_id)

    async def get_brand_or_404(self, brand_id: int) -> Brand:
        brand = await self.get_brand(brand_id)
        if brand is None:
            raise NotFoundError("Brand not found")
        return brand

    async def list_brands(self) -> List[Brand]:
        result = await self.session.execute(
            select(Brand).order_by(Brand.order.asc(), Brand.created_at.desc(), Brand.id.desc())
        )
        return list(result.scalars().all())

    # ---------- Create / Update / Delete ----------
    async def create_brand(self, data: BrandCreate, created_by: Optional[int] = None) -> Brand:
        try:
            logo = data.logo.model_dump() if data.logo else None
            if logo and not logo.get("alt"):
                logo["alt"] = data.name

            brand = Brand(
                name=data.name,
                slug=await self._unique_slug(data.name),
                description=data.description,
                logo=logo,
                website=data.website,
                countries=list(data.countries),
                status=data.status,
                order=data.order,
                created_by=created_by,
            )
            self.session.add(brand)
            await self.session.commit()
            await self.session.refresh(brand)
            logger.info(f"Brand created: {brand.name}")
            return brand

        except BaseAppException:
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error creating brand: {e}")
            raise PersistenceError("Error creating brand")

    async def update_brand(self, brand_id: int, data: BrandUpdate, updated_by: Optional[int] = None) -> Brand:
        brand = await self.get_brand_or_404(brand_id)
        update_data = data.model_dump(exclude_unset=True)

        try:
            for required in ("name", "countries", "status", "order"):
                if required in update_data and update_data[required] is None:
                    raise ValidationError(f"{required} cannot be null")

            if "name" in update_data:
                name = update_data["name"].strip()
                if not name:
                    raise ValidationError("Brand name cannot be empty")
                update_data["name"] = name
                if name != brand.name:
                    brand.slug = await self._unique_slug(name, exclude_id=brand.id)

            if update_data.get("logo") and not update_data["logo"].get("alt"):
                update_data["logo"]["alt"] = update_data.get("name") or brand.name

            for field_name, value in update_data.items():
                setattr(brand, field_name, value)
            brand.updated_by = updated_by

            await self.session.commit()
            await self.session.refresh(brand)
            logger.info(f"Brand updated: {brand.id} fields={list(update_data)}")
            return brand

        except BaseAppException:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error updating brand {brand_id}: {e}")
            raise PersistenceError("Error updating brand")

    async def delete_brand(self, brand_id: int, deleted_by: Optional[int] = None) -> None:
        brand = await self.get_brand_or_404(brand_id)
        try:
            await self.session.delete(brand)
            await self.session.commit()
            logger.info(f"Brand {brand_id} deleted by {deleted_by}")
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error deleting brand {brand_id}: {e}")
            raise PersistenceError("Error deleting brand")

    async def _unique_slug(self, name: str, exclude_id: Optional[int] = None) -> str:
        base_slug = make_slug(name)
        slug = base_slug
        counter = 1
        while True:
            query = select(Brand.id).where(Brand.slug == slug)
            if exclude_id is not None:
                query = query.where(Brand.id != exclude_id)
            result = await self.session.execute(query.limit(1))
            if result.scalar_one_or_none() is None:
                return slug
            slug = f"{base_slug}-{counter}"
            counter += 1
