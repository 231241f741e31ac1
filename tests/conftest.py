"""Shared pytest fixtures for SoulSort tests."""
import pytest

from soulsort.schemas.radar import RadarProfile
from soulsort.services.scoring_service import ScoringService


@pytest.fixture
def thoughtful_answers():
    """Four substantive answers: no gaming, garbage, coercion or dealbreaker text."""
    return [
        "I like to slow down and check in with how the other person is feeling before anything physical happens.",
        "When we disagree I try to name what I am feeling and then listen carefully to their side of things.",
        "Curiosity about ideas, long walks, honest conversations and building something steady together over time matters most to me.",
        "I ask directly about boundaries early on and I keep checking in as things change between us.",
    ]


@pytest.fixture
def neutral_radar():
    return RadarProfile()


@pytest.fixture
def owner_radar():
    """A warm, consent-forward owner profile."""
    return RadarProfile(
        self_transcendence=70,
        self_enhancement=45,
        rooting=60,
        searching=55,
        relational=72,
        erotic=68,
        consent=80,
    )


@pytest.fixture
def sample_sliders():
    return {
        "pace": 40,
        "connection_chemistry": 70,
        "vanilla_kinky": 60,
        "open_monogamous": 80,
        "boundaries": 30,
        "boundaries_scale_version": 1,
    }


@pytest.fixture
def scoring_service():
    return ScoringService()
