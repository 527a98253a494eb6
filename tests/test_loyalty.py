# tests/test_loyalty.py
import pytest

from storefront.services.profile_service import loyalty_tier


@pytest.mark.parametrize(
    "points, name, next_threshold, progress",
    [
        (0, "Bronze", 500, 0.0),
        (250, "Bronze", 500, 50.0),
        (499, "Bronze", 500, 99.8),
        (500, "Silver", 1000, 50.0),
        (999, "Silver", 1000, 99.9),
        (1000, "Gold", None, 100.0),
        (5000, "Gold", None, 100.0),
    ],
)
def test_loyalty_tier(points, name, next_threshold, progress):
    tier = loyalty_tier(points)

    assert tier.name == name
    assert tier.next_threshold == next_threshold
    assert tier.progress_percent == progress
