"""Shared fixtures for closet tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from closet.domain.enums import Category, Color, Material
from closet.domain.models import ClothingItem, new_id
from closet.storage import ClosetStorage


@pytest.fixture()
def make_item() -> Callable[..., ClothingItem]:
    def _make(
        category: Category = Category.TOP,
        material: Material = Material.MEDIUM,
        *,
        name: str | None = None,
        colors: list[Color] | None = None,
    ) -> ClothingItem:
        return ClothingItem(
            id=new_id(),
            name=name or f"{material.value} {category.value}",
            image="data:image/png;base64,AAAA",
            category=category,
            colors=colors or [Color.BLACK],
            material=material,
        )

    return _make


@pytest.fixture()
def storage(tmp_path: Path) -> ClosetStorage:
    return ClosetStorage(tmp_path / "closet")
