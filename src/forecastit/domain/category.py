"""Category domain service."""

from typing import Optional
from forecastit.database.base import Database
from forecastit.domain.entities import COLORS, Category, CategoryGroup
from forecastit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_path_not_found,
)

UNCATEGORIZED = "Uncategorized"
UNCATEGORIZED_COLOR = "slate"
UNCATEGORIZED_ORDER = 999


class CategoryService:
    """Service for managing category groups and categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_group(self, name: str, color: str = "slate", display_order: int = 0) -> int:
        """Create a category group.

        Args:
            name: Group name, unique ignoring case
            color: One of the display colors
            display_order: Sort position

        Returns:
            Group ID

        Raises:
            ValidationError: If name is blank or color unknown
            ConflictError: If a group with the same name exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category group name is required")
        if color not in COLORS:
            raise ValidationError(f"Color must be one of: {', '.join(COLORS)}")
        if self.db.get_category_group_by_name(name) is not None:
            raise ConflictError(f"Category group '{name}' already exists")
        return self.db.create_category_group(name=name, color=color, display_order=display_order)

    def create_category(self, name: str, group_name: str, display_order: int = 0) -> int:
        """Create a category inside an existing group.

        Raises:
            NotFoundError: If the group doesn't exist
            ConflictError: If the group already has a category with this name
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        group = self.db.get_category_group_by_name(group_name)
        if group is None:
            raise NotFoundError(f"Category group '{group_name}' not found")
        if self.db.get_category_by_name(group.id, name) is not None:
            raise ConflictError(f"Category '{name}' already exists in '{group.name}'")
        return self.db.create_category(name=name, group_id=group.id, display_order=display_order)

    def get_category(self, category_id: int) -> Optional[Category]:
        return self.db.get_category(category_id)

    def get_category_by_path(self, path: str) -> Optional[Category]:
        """Get category by path.

        Args:
            path: Category path (e.g., "Food > Groceries")

        Returns:
            Category entity or None if not found
        """
        parts = [p.strip() for p in path.split(">")]
        if len(parts) != 2 or not all(parts):
            return None
        group = self.db.get_category_group_by_name(parts[0])
        if group is None:
            return None
        return self.db.get_category_by_name(group.id, parts[1])

    def require_category_by_path(self, path: str) -> Category:
        """Get category by path or raise NotFoundError."""
        category = self.get_category_by_path(path)
        if category is None:
            raise NotFoundError(category_path_not_found(path))
        return category

    def list_groups(self) -> list[CategoryGroup]:
        return self.db.list_category_groups()

    def list_categories(self, group_id: Optional[int] = None) -> list[Category]:
        return self.db.list_categories(group_id=group_id)

    def format_category_path(self, category_id: int) -> str:
        """Get full path for a category, e.g. "Food > Groceries"."""
        category = self.db.get_category(category_id)
        if category is None:
            return ""
        group = self.db.get_category_group(category.group_id)
        if group is None:
            return category.name
        return f"{group.name} > {category.name}"

    def uncategorized(self) -> Category:
        """Return the fallback category, creating it and its group if needed."""
        group = self.db.get_category_group_by_name(UNCATEGORIZED)
        if group is None:
            group_id = self.db.create_category_group(
                name=UNCATEGORIZED, color=UNCATEGORIZED_COLOR, display_order=UNCATEGORIZED_ORDER
            )
        else:
            group_id = group.id

        category = self.db.get_category_by_name(group_id, UNCATEGORIZED)
        if category is None:
            category_id = self.db.create_category(
                name=UNCATEGORIZED, group_id=group_id, display_order=UNCATEGORIZED_ORDER
            )
            category = self.db.get_category(category_id)
        return category
