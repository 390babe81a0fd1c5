from termtris.config import GameConfig
from termtris.utils import gravity_interval_ms


def test_gravity_speed_increases_with_level():
    assert gravity_interval_ms(2) < gravity_interval_ms(1)
    assert gravity_interval_ms(1) == GameConfig().base_gravity_ms


def test_gravity_never_speeds_up_past_the_floor():
    config = GameConfig()
    intervals = [gravity_interval_ms(level, config) for level in range(1, 60)]
    assert all(later <= earlier for earlier, later in zip(intervals, intervals[1:]))
    assert min(intervals) == config.min_gravity_ms
    assert gravity_interval_ms(500, config) == config.min_gravity_ms


def test_gravity_follows_config():
    config = GameConfig(base_gravity_ms=800, gravity_decay=0.5, min_gravity_ms=150)
    assert gravity_interval_ms(1, config) == 800
    assert gravity_interval_ms(2, config) == 400
    assert gravity_interval_ms(3, config) == 200
    assert gravity_interval_ms(4, config) == 150
