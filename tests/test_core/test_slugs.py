"""Tests for category slugs."""

import pytest

from category_admin.core.slugs import MAX_SLUG_LENGTH, slugify, unique_slug


class TestSlugify:
    """Tests for slugify."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Phones", "phones"),
            ("  Smart Watches  ", "smart-watches"),
            ("Men's Shoes & Boots", "men-s-shoes-boots"),
            ("Café Crème", "cafe-creme"),
            ("4K TVs", "4k-tvs"),
        ],
    )
    def test_slugify(self, name, expected) -> None:
        assert slugify(name) == expected

    def test_nothing_left_falls_back(self) -> None:
        assert slugify("¡¿!?") == "category"

    def test_length_is_capped(self) -> None:
        slug = slugify("a " * 200)

        assert len(slug) <= MAX_SLUG_LENGTH
        assert not slug.endswith("-")


class TestUniqueSlug:
    """Tests for unique_slug."""

    def test_free_slug_kept(self) -> None:
        assert unique_slug("Tablets", ["phones", "laptops"]) == "tablets"

    def test_counter_added_on_collision(self) -> None:
        assert unique_slug("Phones", ["phones"]) == "phones-2"

    def test_counter_skips_taken_suffixes(self) -> None:
        assert unique_slug("Phones", ["phones", "phones-2", "phones-3"]) == "phones-4"

    def test_accepts_generator(self) -> None:
        assert unique_slug("Shoes", (s for s in ["shoes"])) == "shoes-2"
