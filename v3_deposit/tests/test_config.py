"""
Settings 테스트
"""

import pytest

from ..config import Settings
from ..constants import TICK_SPACINGS


class TestSettings:
    """Settings 테스트"""

    def test_defaults(self):
        settings = Settings(environ={})
        assert settings.EFFICIENCY_CAP == 9999.0
        assert settings.AMOUNT_DISPLAY_PLACES == 8
        assert settings.PRICE_DISPLAY_PLACES == 6
        assert settings.EXTRA_FEE_TIERS == {}
        assert settings.tick_spacings == TICK_SPACINGS

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("V3_DEPOSIT_EFFICIENCY_CAP", "500")
        monkeypatch.setenv("V3_DEPOSIT_AMOUNT_DISPLAY_PLACES", "4")
        settings = Settings()
        assert settings.EFFICIENCY_CAP == 500.0
        assert settings.AMOUNT_DISPLAY_PLACES == 4

    def test_extra_fee_tiers(self):
        settings = Settings(environ={"V3_DEPOSIT_EXTRA_FEE_TIERS": "2500:50, 20000:400"})
        assert settings.EXTRA_FEE_TIERS == {2500: 50, 20000: 400}
        assert settings.tick_spacings[2500] == 50
        assert settings.tick_spacings[3000] == 60

    def test_tick_spacings_is_a_copy(self):
        settings = Settings(environ={})
        settings.tick_spacings[1234] = 1
        assert 1234 not in TICK_SPACINGS

    @pytest.mark.parametrize("environ", [
        {"V3_DEPOSIT_EFFICIENCY_CAP": "1"},
        {"V3_DEPOSIT_EFFICIENCY_CAP": "abc"},
        {"V3_DEPOSIT_AMOUNT_DISPLAY_PLACES": "-1"},
        {"V3_DEPOSIT_EXTRA_FEE_TIERS": "2500"},
        {"V3_DEPOSIT_EXTRA_FEE_TIERS": "2500:0"},
    ])
    def test_invalid(self, environ):
        with pytest.raises(ValueError):
            Settings(environ=environ)
