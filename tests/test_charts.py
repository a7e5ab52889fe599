"""Tests for the charts module."""

from __future__ import annotations

import pytest
from PIL import Image

from lifetrack.charts import life_balance, weekly_consistency


class TestWeeklyConsistency:
    def test_returns_image(self) -> None:
        img = weekly_consistency([25, 50, 0, 75, 25, 0, 0])
        assert isinstance(img, Image.Image)
        assert img.size[0] > 0 and img.size[1] > 0

    def test_empty_week(self) -> None:
        img = weekly_consistency([0] * 7)
        assert isinstance(img, Image.Image)

    def test_custom_size(self) -> None:
        img = weekly_consistency([10] * 7, size=(300, 150), dpi=50)
        assert isinstance(img, Image.Image)

    def test_rejects_wrong_length(self) -> None:
        with pytest.raises(ValueError):
            weekly_consistency([1, 2, 3])


class TestLifeBalance:
    @pytest.mark.parametrize("share", [0.0, 0.65, 1.0, 1.5, -0.2])
    def test_returns_image(self, share: float) -> None:
        assert isinstance(life_balance(share), Image.Image)
