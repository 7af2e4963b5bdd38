import numpy as np
import pytest

from wbtviz.config import (
    DEFAULT_COLOR,
    MIN_LINE_WIDTH,
    BaseTrajectoryConfig,
    ContactTrajectoryConfig,
    DisplayConfig,
)
from wbtviz.style import RenderStyle


class TestTrajectoryStyleConfig:
    def test_defaults(self):
        config = BaseTrajectoryConfig()
        assert config.style is RenderStyle.POINT_SAMPLES
        assert config.line_width == 0.01
        assert config.color == pytest.approx(DEFAULT_COLOR)
        assert config.alpha == 1.0
        assert config.axes_scale == 1.0
        assert config.rgba == pytest.approx((0.0, 85 / 255, 1.0, 1.0))

    @pytest.mark.parametrize("width", [0.0, -1.0, 0.0005])
    def test_line_width_is_clamped(self, width):
        assert ContactTrajectoryConfig(line_width=width).line_width == MIN_LINE_WIDTH

    @pytest.mark.parametrize("alpha, expected", [(-0.5, 0.0), (0.3, 0.3), (2.0, 1.0)])
    def test_alpha_is_clamped(self, alpha, expected):
        assert ContactTrajectoryConfig(alpha=alpha).alpha == expected

    @pytest.mark.parametrize(
        "field, value",
        [
            ("line_width", np.nan),
            ("line_width", np.inf),
            ("alpha", np.nan),
            ("alpha", -np.inf),
        ],
    )
    def test_non_finite_width_or_alpha_raises(self, field, value):
        with pytest.raises(ValueError, match=field):
            BaseTrajectoryConfig(**{field: value})

    def test_replace_rejects_non_finite_width(self):
        with pytest.raises(ValueError, match="line_width"):
            ContactTrajectoryConfig().replace(line_width=float("nan"))

    def test_color_is_clipped(self):
        assert ContactTrajectoryConfig(color=(2.0, -1.0, 0.5)).color == (1.0, 0.0, 0.5)

    @pytest.mark.parametrize("color", [(1.0, 0.0), (1.0, 0.0, 0.0, 1.0), (np.nan, 0.0, 0.0)])
    def test_bad_color_raises(self, color):
        with pytest.raises(ValueError, match="color"):
            ContactTrajectoryConfig(color=color)

    @pytest.mark.parametrize("scale", [-0.1, np.inf])
    def test_bad_axes_scale_raises(self, scale):
        with pytest.raises(ValueError, match="axes_scale"):
            BaseTrajectoryConfig(axes_scale=scale)

    def test_bad_style_raises(self):
        with pytest.raises(ValueError):
            BaseTrajectoryConfig(style="wireframe")

    def test_replace_validates(self):
        config = BaseTrajectoryConfig(style="ribbon")
        updated = config.replace(line_width=0.0, alpha=0.5)
        assert updated.line_width == MIN_LINE_WIDTH
        assert updated.alpha == 0.5
        assert updated.style is RenderStyle.RIBBON
        assert config.alpha == 1.0


def test_display_config_from_dict():
    config = DisplayConfig.from_dict(
        {
            "base": {"style": "polyline", "axes_scale": 2.0},
            "contact": {"style": "ribbon", "color": [1, 0, 0]},
            "dev": {"printing": True},
        }
    )
    assert config.base.style is RenderStyle.POLYLINE
    assert config.base.axes_scale == 2.0
    assert config.contact.style is RenderStyle.RIBBON
    assert config.contact.color == (1.0, 0.0, 0.0)
    assert config.dev.printing


def test_display_config_from_empty_dict():
    config = DisplayConfig.from_dict({})
    assert config.base.style is RenderStyle.POINT_SAMPLES
    assert not config.dev.printing
