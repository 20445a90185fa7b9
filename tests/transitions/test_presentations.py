"""Tests for transition presentations."""

import pytest

from kinetic.timeline.models import TransitionType
from kinetic.transitions.presentations import CLOCK_WIPE_SIZE, presentation


class TestPresentation:
    """Tests for presentation."""

    def test_none_is_a_hard_cut(self):
        """Test none is a hard cut."""
        assert presentation(TransitionType.NONE, 0.5) is None
        assert presentation("none", 0.5) is None

    def test_fade(self):
        """Test fade presentation opacities."""
        comp = presentation("fade", 0.25)
        assert comp.outgoing.opacity == pytest.approx(0.75)
        assert comp.incoming.opacity == pytest.approx(0.25)

    def test_slide_from_right(self):
        """Test slide from right."""
        comp = presentation("slide", 0.5)
        assert comp.outgoing.translate_x_pct == pytest.approx(-50)
        assert comp.incoming.translate_x_pct == pytest.approx(50)

    def test_flip_hides_backfaces(self):
        """Test flip hides backfaces."""
        comp = presentation("flip", 0.6)
        assert comp.outgoing.rotate_x_deg == pytest.approx(108)
        assert not comp.outgoing.visible
        assert comp.incoming.rotate_x_deg == pytest.approx(-72)
        assert comp.incoming.visible

    def test_wipe_reveals_from_left(self):
        """Test wipe reveals from left."""
        comp = presentation("wipe", 0.3)
        assert comp.incoming.clip["shape"] == "inset"
        assert comp.incoming.clip["right"] == pytest.approx(70)
        assert comp.outgoing.clip is None

    def test_clock_wipe(self):
        """Test clock wipe."""
        comp = presentation("clockWipe", 0.5)
        clip = comp.incoming.clip
        assert clip["sweep_deg"] == pytest.approx(180)
        assert (clip["width"], clip["height"]) == CLOCK_WIPE_SIZE

    def test_progress_is_clamped(self):
        """Test progress is clamped."""
        assert presentation("fade", 1.5).progress == 1.0
        assert presentation("fade", -0.5).incoming.opacity == 0.0

    def test_to_dict(self):
        """Test compositing serialization."""
        data = presentation("slide", 0.5).to_dict()
        assert data["type"] == "slide"
        assert data["incoming"]["translate_x_pct"] == pytest.approx(50)

    def test_unknown_type(self):
        """Test unknown type."""
        with pytest.raises(ValueError):
            presentation("spin", 0.5)
