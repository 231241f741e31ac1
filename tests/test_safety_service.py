"""Unit tests for SafetyService — radar caps and score gates."""
import pytest

from soulsort.schemas.radar import RADAR_DIMENSIONS, RadarProfile
from soulsort.schemas.scan import CoercionScan
from soulsort.services.safety_service import SafetyService, merge_flags


@pytest.fixture
def safety_service():
    return SafetyService()


class TestLowEngagementClamp:
    def test_clamps_into_band(self, safety_service):
        radar = RadarProfile(self_transcendence=90, self_enhancement=5, rooting=20)
        clamped, flags = safety_service.clamp_low_engagement(radar, garbage=True, gaming=False)
        assert clamped.self_transcendence == 25
        assert clamped.self_enhancement == 15
        assert clamped.rooting == 20  # already inside the band
        assert flags == ("low_engagement",)

    def test_every_dimension_in_band(self, safety_service, owner_radar):
        clamped, _ = safety_service.clamp_low_engagement(owner_radar, garbage=False, gaming=True)
        assert all(15 <= getattr(clamped, d) <= 25 for d in RADAR_DIMENSIONS)

    def test_both_flags(self, safety_service):
        _, flags = safety_service.clamp_low_engagement(RadarProfile(), garbage=True, gaming=True)
        assert flags == ("low_engagement", "gaming_detected")

    def test_no_op_when_clean(self, safety_service, owner_radar):
        clamped, flags = safety_service.clamp_low_engagement(owner_radar, False, False, ["upstream"])
        assert clamped == owner_radar
        assert flags == ("upstream",)

    def test_input_not_mutated(self, safety_service, owner_radar):
        before = owner_radar.model_dump()
        safety_service.clamp_low_engagement(owner_radar, True, True)
        assert owner_radar.model_dump() == before


class TestCoercionCaps:
    def test_high_severity(self, safety_service, owner_radar):
        scan = CoercionScan(triggered=True, severity="high", matches=("belongs_to_me",))
        capped, flags = safety_service.apply_coercion_caps(owner_radar, scan)
        assert capped.consent == 35
        assert capped.relational == 52  # 72 - 20
        assert capped.erotic == 53      # 68 - 15
        assert flags == ("ownership_language",)

    def test_medium_severity(self, safety_service, owner_radar):
        scan = CoercionScan(triggered=True, severity="medium", matches=("obedience",))
        capped, flags = safety_service.apply_coercion_caps(owner_radar, scan)
        assert capped.consent == 35
        assert capped.relational == 57
        assert capped.erotic == 58
        assert flags == ("coercive_control_language",)

    def test_floors_at_zero(self, safety_service):
        radar = RadarProfile(relational=10, erotic=5, consent=20)
        scan = CoercionScan(triggered=True, severity="high")
        capped, _ = safety_service.apply_coercion_caps(radar, scan)
        assert capped.relational == 0
        assert capped.erotic == 0
        assert capped.consent == 20  # already under the cap

    def test_untriggered_is_identity(self, safety_service, owner_radar):
        capped, flags = safety_service.apply_coercion_caps(owner_radar, CoercionScan(), ["low_engagement"])
        assert capped == owner_radar
        assert flags == ("low_engagement",)


class TestScoreGates:
    def test_consent_gate(self, safety_service):
        assert safety_service.apply_score_gates(90, RadarProfile(consent=39), []) == 55
        assert safety_service.apply_score_gates(90, RadarProfile(consent=40), []) == 90

    def test_abuse_flag_gate(self, safety_service):
        assert safety_service.apply_score_gates(90, RadarProfile(), ["gaming_detected"]) == 60

    def test_gates_never_raise(self, safety_service):
        assert safety_service.apply_score_gates(30, RadarProfile(consent=10), ["x"]) == 30

    def test_low_engagement_cap(self, safety_service):
        assert safety_service.apply_low_engagement_cap(80, garbage=True, gaming=False) == 25
        assert safety_service.apply_low_engagement_cap(80, garbage=False, gaming=True) == 25
        assert safety_service.apply_low_engagement_cap(80, garbage=False, gaming=False) == 80
        assert safety_service.apply_low_engagement_cap(10, garbage=True, gaming=True) == 10


class TestMergeFlags:
    def test_dedupes_in_insertion_order(self):
        assert merge_flags(["a", "b"], ["b", "c", "a"]) == ("a", "b", "c")
