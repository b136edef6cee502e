"""Tests for categories and category commands."""

import pytest
from forecastit.cli.main import cli
from forecastit.domain.errors import ConflictError, NotFoundError, ValidationError


class TestCategoryService:
    def test_path_lookup_ignores_case(self, category_service, groceries):
        assert category_service.get_category_by_path("food > groceries").id == groceries.id
        assert category_service.format_category_path(groceries.id) == "Food > Groceries"

    @pytest.mark.parametrize("path", ["Food", "Food > ", "Food > Restaurants", "Travel > Groceries"])
    def test_missing_paths(self, category_service, groceries, path):
        assert category_service.get_category_by_path(path) is None

    def test_require_missing_path(self, category_service):
        with pytest.raises(NotFoundError, match="Category 'Food > Tacos' not found"):
            category_service.require_category_by_path("Food > Tacos")

    def test_duplicate_group(self, category_service, groceries):
        with pytest.raises(ConflictError):
            category_service.create_group("FOOD")

    def test_duplicate_category_in_group(self, category_service, groceries):
        with pytest.raises(ConflictError):
            category_service.create_category("groceries", "Food")

    def test_same_name_in_another_group(self, category_service, groceries):
        category_service.create_group("Gifts", color="rose")
        category_id = category_service.create_category("Groceries", "Gifts")
        assert category_id != groceries.id

    def test_unknown_color(self, category_service):
        with pytest.raises(ValidationError, match="Color must be one of"):
            category_service.create_group("Fun", color="beige")

    def test_unknown_group(self, category_service):
        with pytest.raises(NotFoundError):
            category_service.create_category("Flights", "Travel")

    def test_uncategorized_is_created_once(self, category_service):
        first = category_service.uncategorized()
        second = category_service.uncategorized()

        assert first.id == second.id
        assert category_service.format_category_path(first.id) == "Uncategorized > Uncategorized"
        group = category_service.list_groups()[0]
        assert group.color == "slate"
        assert group.display_order == 999


def test_category_list_empty(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "category", "list"])

    assert result.exit_code == 0
    assert "No categories found" in result.output


def test_category_commands(cli_runner, temp_db):
    """Test creating a group and a category, then listing them."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "category", "create-group", "Housing", "--color", "teal"]
    )
    assert result.exit_code == 0
    assert "Created category group 'Housing'" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "category", "create", "Rent", "--group", "Housing"]
    )
    assert result.exit_code == 0
    assert "Created category 'Housing > Rent'" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "category", "list"])
    assert result.exit_code == 0
    assert "Housing [teal]" in result.output
    assert "  Rent" in result.output


def test_category_create_unknown_group(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "category", "create", "Rent", "--group", "Nowhere"]
    )

    assert result.exit_code == 1
    assert "Error:" in result.output
