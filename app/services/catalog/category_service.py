import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import (
    BaseAppException,
    CircularReferenceError,
    ConflictError,
    DuplicateNameError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from app.models.catalog.category import Category
from app.models.catalog.product import Product
from app.schemas.catalog.category import (
    CategoryCreate,
    CategoryTableRow,
    CategoryUpdate,
    HierarchyIntegrityReport,
    MirrorMismatch,
)
from app.services.catalog.category_tree import collect_subtree_ids, would_create_cycle
from app.utils.slug import make_slug

logger = logging.getLogger(__name__)

NAME_INDEX = "uq_categories_name_lower"


@dataclass
class CategoryDeleteResult:
    root_id: int
    deleted_ids: List[int] = field(default_factory=list)
    unassigned_products: int = 0

    @property
    def deleted_count(self) -> int:
        return len(self.deleted_ids)


class CategoryService:
    """
    Owns every write to the category forest.

    A category's ``parent_id`` and its parent's ``children`` list describe the
    same edge, so both sides are changed inside one session transaction and
    committed together. The ``version`` column makes a concurrent writer fail
    with ConflictError instead of silently overwriting a children list.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- Getters ----------
    async def get_category(self, category_id: int) -> Optional[Category]:
        return await self.db.get(Category, category_id)

    async def get_category_or_404(self, category_id: int) -> Category:
        category = await self.get_category(category_id)
        if category is None:
            raise NotFoundError(f"Category not found (ID: {category_id})")
        return category

    async def list_categories(self, view: str = "table", page_index: int = 1, page_size: int = 10) -> Dict[str, Any]:
        """Main categories first, newest first; "tree" returns every row unpaginated"""
        total_result = await self.db.execute(select(func.count(Category.id)))
        total = total_result.scalar() or 0

        query = select(Category).order_by(
            Category.parent_id.is_(None).desc(),
            Category.created_at.desc(),
            Category.id.desc(),
        )
        if view == "tree":
            result = await self.db.execute(query)
            return {"categories": list(result.scalars().all()), "total": total}

        skip = (page_index - 1) * page_size
        result = await self.db.execute(query.offset(skip).limit(page_size))
        categories = result.scalars().all()

        page_ids = [c.id for c in categories]
        child_counts = await self._count_children(page_ids)
        product_counts = await self._count_products(page_ids)
        rows = []
        for category in categories:
            row = CategoryTableRow.model_validate(category)
            row.subcategories_count = child_counts.get(category.id, 0)
            row.products_count = product_counts.get(category.id, 0)
            rows.append(row)

        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total,
            "data": rows,
        }

    # ---------- Create / Update / Delete ----------
    async def create_category(self, category_data: CategoryCreate, current_user_id: int) -> Category:
        name = category_data.name.strip()
        if not name:
            raise ValidationError("Category name is required")
        if await self._name_taken(name):
            raise DuplicateNameError(f"A category named '{name}' already exists")

        parent = None
        if category_data.parent_id is not None:
            parent = await self.get_category(category_data.parent_id)
            if parent is None:
                raise ValidationError("Parent category not found")

        category = Category(
            name=name,
            slug=make_slug(name),
            description=category_data.description,
            image=category_data.image,
            is_active=category_data.is_active,
            parent_id=parent.id if parent else None,
            children=[],
            created_by=current_user_id,
        )

        try:
            self.db.add(category)
            await self._persist(commit=False)
            if parent is not None:
                self._attach(parent, category.id, current_user_id)
            await self._persist()
        except BaseAppException:
            await self.db.rollback()
            raise

        await self.db.refresh(category)
        logger.info(f"Category created: {category.id} {category.name!r} under {category.parent_id}")
        return category

    async def update_category(self, category_id: int, category_data: CategoryUpdate, current_user_id: int) -> Category:
        category = await self.get_category_or_404(category_id)
        update_data = category_data.model_dump(exclude_unset=True)

        try:
            if "name" in update_data:
                name = (update_data["name"] or "").strip()
                if not name:
                    raise ValidationError("Category name cannot be empty")
                if await self._name_taken(name, exclude_id=category.id):
                    raise DuplicateNameError(f"A category named '{name}' already exists")
                update_data["name"] = name

            if "is_active" in update_data and update_data["is_active"] is None:
                raise ValidationError("is_active cannot be null")

            if "parent_id" in update_data:
                await self._apply_parent(category, update_data.pop("parent_id"), current_user_id)

            for field_name, value in update_data.items():
                setattr(category, field_name, value)
            category.updated_by = current_user_id

            await self._persist()
        except BaseAppException:
            await self.db.rollback()
            raise

        await self.db.refresh(category)
        logger.info(f"Category updated: {category.id} fields={list(category_data.model_dump(exclude_unset=True))}")
        return category

    async def reparent(self, category_id: int, new_parent_id: Optional[int], current_user_id: int) -> Category:
        """Move a category under ``new_parent_id``; None turns it into a main category"""
        category = await self.get_category_or_404(category_id)
        try:
            await self._apply_parent(category, new_parent_id, current_user_id)
            await self._persist()
        except BaseAppException:
            await self.db.rollback()
            raise

        await self.db.refresh(category)
        return category

    async def delete_category(self, category_id: int, current_user_id: int) -> CategoryDeleteResult:
        """Remove the category and its whole subtree in one transaction"""
        category = await self.get_category_or_404(category_id)
        deleted_ids = await collect_subtree_ids(category.id, self._get_child_ids)

        parent = None
        if category.parent_id is not None and category.parent_id not in deleted_ids:
            parent = await self.get_category(category.parent_id)
        product_result = await self.db.execute(select(Product.id).where(Product.category_id.in_(deleted_ids)))
        product_ids = list(product_result.scalars().all())

        try:
            if parent is not None:
                self._detach(parent, category.id, current_user_id)
                await self._persist(commit=False)
            if product_ids:
                # Products outlive their category and become uncategorized
                await self.db.execute(
                    update(Product)
                    .where(Product.id.in_(product_ids))
                    .values(category_id=None, updated_by=current_user_id)
                    .execution_options(synchronize_session="fetch")
                )
            await self.db.execute(
                delete(Category)
                .where(Category.id.in_(deleted_ids))
                .execution_options(synchronize_session="fetch")
            )
            await self._persist()
        except BaseAppException:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error deleting category subtree {category_id}: {e}")
            raise PersistenceError("Error deleting category")

        logger.info(
            f"Category {category_id} deleted by {current_user_id} with {len(deleted_ids) - 1} subcategories, "
            f"{len(product_ids)} products unassigned"
        )
        return CategoryDeleteResult(root_id=category_id, deleted_ids=deleted_ids, unassigned_products=len(product_ids))

    # ---------- Hierarchy maintenance ----------
    async def check_integrity(self) -> HierarchyIntegrityReport:
        """Compare every stored children list with the one derived from parent_id"""
        result = await self.db.execute(
            select(Category).order_by(Category.id).execution_options(populate_existing=True)
        )
        categories = result.scalars().all()
        known_ids = {c.id for c in categories}

        expected: Dict[int, List[int]] = defaultdict(list)
        dangling: List[int] = []
        for category in categories:
            if category.parent_id is None:
                continue
            if category.parent_id in known_ids:
                expected[category.parent_id].append(category.id)
            else:
                dangling.append(category.id)

        mismatches = []
        for category in categories:
            stored = list(category.children or [])
            wanted = sorted(expected.get(category.id, []))
            if sorted(stored) != wanted:
                mismatches.append(
                    MirrorMismatch(category_id=category.id, stored_children=stored, expected_children=wanted)
                )

        return HierarchyIntegrityReport(
            consistent=not mismatches and not dangling,
            mismatches=mismatches,
            dangling_parent_ids=dangling,
        )

    async def rebuild_children(self, current_user_id: int) -> int:
        """Rewrite children lists from parent_id and promote rows whose parent is gone"""
        report = await self.check_integrity()
        repaired = 0

        try:
            for category_id in report.dangling_parent_ids:
                category = await self.get_category(category_id)
                logger.warning(f"Category {category_id} points at missing parent {category.parent_id}, promoting to main")
                category.parent_id = None
                category.updated_by = current_user_id
                repaired += 1

            for mismatch in report.mismatches:
                category = await self.get_category(mismatch.category_id)
                category.children = list(mismatch.expected_children)
                category.updated_by = current_user_id
                repaired += 1

            if repaired:
                await self._persist()
        except BaseAppException:
            await self.db.rollback()
            raise

        logger.info(f"Category hierarchy repair touched {repaired} rows")
        return repaired

    # ---------- Internals ----------
    async def _apply_parent(self, category: Category, new_parent_id: Optional[int], current_user_id: int) -> None:
        old_parent_id = category.parent_id

        new_parent = None
        if new_parent_id is not None:
            new_parent = await self.get_category(new_parent_id)
            if new_parent is None:
                raise ValidationError("Parent category not found")
            if await would_create_cycle(category.id, new_parent_id, self._get_parent_id):
                raise CircularReferenceError()

        if old_parent_id == new_parent_id:
            # Same parent: only make sure the mirror entry exists once
            if new_parent is not None:
                self._attach(new_parent, category.id, current_user_id)
            return

        if old_parent_id is not None:
            old_parent = await self.get_category(old_parent_id)
            if old_parent is not None:
                self._detach(old_parent, category.id, current_user_id)

        if new_parent is not None:
            self._attach(new_parent, category.id, current_user_id)

        category.parent_id = new_parent_id
        category.updated_by = current_user_id
        logger.info(f"Category {category.id} moved from {old_parent_id} to {new_parent_id}")

    @staticmethod
    def _attach(parent: Category, child_id: int, current_user_id: int) -> None:
        current = list(parent.children or [])
        if child_id in current:
            return
        # Assign a new list so the JSON column is flagged dirty
        parent.children = current + [child_id]
        parent.updated_by = current_user_id

    @staticmethod
    def _detach(parent: Category, child_id: int, current_user_id: int) -> None:
        current = list(parent.children or [])
        if child_id not in current:
            return
        parent.children = [c for c in current if c != child_id]
        parent.updated_by = current_user_id

    async def _get_parent_id(self, category_id: int) -> Optional[int]:
        result = await self.db.execute(select(Category.parent_id).where(Category.id == category_id))
        return result.scalar_one_or_none()

    async def _get_child_ids(self, category_id: int) -> List[int]:
        result = await self.db.execute(select(Category.id).where(Category.parent_id == category_id))
        return list(result.scalars().all())

    async def _count_children(self, parent_ids: List[int]) -> Dict[int, int]:
        if not parent_ids:
            return {}
        result = await self.db.execute(
            select(Category.parent_id, func.count(Category.id))
            .where(Category.parent_id.in_(parent_ids))
            .group_by(Category.parent_id)
        )
        return {parent_id: count for parent_id, count in result.all()}

    async def _count_products(self, category_ids: List[int]) -> Dict[int, int]:
        if not category_ids:
            return {}
        result = await self.db.execute(
            select(Product.category_id, func.count(Product.id))
            .where(Product.category_id.in_(category_ids))
            .group_by(Product.category_id)
        )
        return {category_id: count for category_id, count in result.all()}

    async def _name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        query = select(Category.id).where(func.lower(Category.name) == func.lower(name))
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def _persist(self, commit: bool = True) -> None:
        try:
            if commit:
                await self.db.commit()
            else:
                await self.db.flush()
        except StaleDataError as e:
            await self.db.rollback()
            logger.warning(f"Concurrent category write detected: {e}")
            raise ConflictError()
        except IntegrityError as e:
            await self.db.rollback()
            if NAME_INDEX in str(e.orig):
                raise DuplicateNameError("A category with the same name already exists")
            logger.error(f"Category write rejected: {e}")
            raise PersistenceError("The data store rejected the category write")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Category write failed: {e}")
            raise PersistenceError()
