import random

import pytest

from tesourim.config import ENEMY_Y, SHOT_COOLDOWN_FRAMES, WANDER_SPEED
from tesourim.enemy import EnemySquad, calculate_pid, enemy_count, wander_step
from tesourim.entities import Bullet, EnemyMode

from tests.helpers import FixedRng


def parked_squad(grid_size=7, difficulty=1, rng=None, x=3.0):
    """Squad whose first enemy holds still in pursuit over column `x`"""
    squad = EnemySquad(grid_size, difficulty=difficulty, rng=rng or random.Random(0))
    enemy = squad.enemies[0]
    enemy.x = x
    enemy.mode = EnemyMode.PURSUIT
    enemy.mode_timer = 10_000
    enemy.shot_cooldown = 10_000
    return squad, enemy


# ----------------------------
# PID / wander
# ----------------------------

@pytest.mark.parametrize("difficulty", [1, 2, 3])
def test_pid_output_is_clamped(difficulty):
    for setpoint, current, acum, prev in [(100.0, 0.0, 0.0, 0.0), (-50.0, 10.0, -400.0, 3.0),
                                          (0.0, 0.0, 1e9, -1e9), (2.0, 1.0, 0.0, 0.0)]:
        output, _, _ = calculate_pid(setpoint, current, difficulty, acum, prev)
        assert -1.0 <= output <= 1.0


def test_pid_accumulates_error():
    output, acum, err = calculate_pid(2.0, 1.0, 2, 0.5, 0.0)
    assert err == 1.0
    assert acum == 1.5
    assert output == pytest.approx(0.3 * 1.0 + 0.1 * 1.5)


def test_pid_proportional_only_on_easy():
    output, _, _ = calculate_pid(1.0, 0.0, 1, 100.0, -5.0)
    assert output == pytest.approx(0.3)


def test_wander_step_is_capped():
    assert wander_step(0.0, 4.0) == WANDER_SPEED
    assert wander_step(4.0, 0.0) == -WANDER_SPEED


def test_wander_step_jumps_on_arrival():
    assert wander_step(2.0, 2.05, FixedRng(fraction=0.0)) == -1.0
    assert wander_step(2.0, 2.05, FixedRng(fraction=1.0)) == 1.0


def test_wander_arrival_repicks_and_jumps():
    squad = EnemySquad(7, rng=FixedRng(fraction=0.75))
    enemy = squad.enemies[0]
    enemy.mode = EnemyMode.WANDER
    enemy.mode_timer = 10_000
    enemy.shot_cooldown = 10_000
    enemy.x, enemy.target_x = 1.05, 1.0

    squad.update(0)

    assert enemy.x == pytest.approx(1.55)
    assert enemy.target_x == pytest.approx(4.5)


def test_wander_walks_toward_target():
    squad = EnemySquad(7, rng=FixedRng(fraction=0.75))
    enemy = squad.enemies[0]
    enemy.mode = EnemyMode.WANDER
    enemy.mode_timer = 10_000
    enemy.shot_cooldown = 10_000
    enemy.x, enemy.target_x = 1.0, 3.0

    squad.update(0)

    assert enemy.x == pytest.approx(1.0 + WANDER_SPEED)
    assert enemy.target_x == 3.0


@pytest.mark.parametrize("seed", range(5))
def test_enemies_stay_on_the_row(seed):
    rng = random.Random(seed)
    squad = EnemySquad(9, difficulty=3, rng=rng)
    for enemy in squad.enemies:
        enemy.x = rng.random() * 8
    for _ in range(3000):
        squad.update(rng.randrange(9))
        for enemy in squad.enemies:
            assert 0.0 <= enemy.x <= 8.0


def test_enemy_count():
    assert enemy_count(6) == 0
    assert enemy_count(7) == 1
    assert enemy_count(9) == 3
    assert enemy_count(12) == 3


def test_enemies_spread_evenly():
    squad = EnemySquad(8, rng=random.Random(0))
    assert [e.x for e in squad.enemies] == pytest.approx([8 / 3, 16 / 3])


# ----------------------------
# Modes
# ----------------------------

def test_killers_are_capped():
    squad = EnemySquad(9, max_killers=1, rng=random.Random(0))
    first, second, _ = squad.enemies
    assert squad.set_mode(first, EnemyMode.PURSUIT)
    assert not squad.set_mode(second, EnemyMode.PURSUIT)
    assert second.mode is EnemyMode.WANDER
    assert squad.killers_count == 1

    assert squad.set_mode(first, EnemyMode.WANDER)
    assert squad.set_mode(second, EnemyMode.PURSUIT)


def test_mode_flip_every_six_seconds():
    squad = EnemySquad(7, rng=FixedRng(coin=0))
    enemy = squad.enemies[0]
    squad.update(3)
    assert enemy.mode is EnemyMode.PURSUIT
    assert enemy.mode_timer == 360


def test_entering_pursuit_clears_pid_state():
    squad = EnemySquad(7, rng=random.Random(0))
    enemy = squad.enemies[0]
    enemy.err_acum, enemy.prev_err = 12.0, 3.0
    squad.set_mode(enemy, EnemyMode.PURSUIT)
    assert (enemy.err_acum, enemy.prev_err) == (0.0, 0.0)


# ----------------------------
# Firing
# ----------------------------

def test_fires_live_round_when_aligned():
    squad, enemy = parked_squad(rng=FixedRng(roll=1))
    enemy.shot_cooldown = 0
    squad.update(3)
    assert len(enemy.bullets) == 1
    bullet = enemy.bullets[0]
    assert bullet.active and not bullet.reflected
    assert bullet.owner == 0
    assert bullet.x == 3.0
    assert enemy.shot_cooldown == SHOT_COOLDOWN_FRAMES


def test_dud_is_dropped_but_cooldown_resets():
    squad, enemy = parked_squad(rng=FixedRng(roll=6))
    enemy.shot_cooldown = 0
    squad.update(3)
    assert enemy.bullets == []
    assert enemy.shot_cooldown == SHOT_COOLDOWN_FRAMES


def test_holds_fire_when_not_aligned():
    squad, enemy = parked_squad(rng=FixedRng(roll=1), x=0.0)
    enemy.mode = EnemyMode.WANDER
    enemy.target_x = 0.0
    enemy.shot_cooldown = 0
    squad.update(5)
    assert enemy.bullets == []


# ----------------------------
# Bullets
# ----------------------------

def test_bullet_leaves_at_the_bottom():
    squad, enemy = parked_squad()
    enemy.bullets = [Bullet(x=0.0, y=6.9, owner=0), Bullet(x=0.0, y=2.0, owner=0)]
    squad.update(3)
    assert len(enemy.bullets) == 1
    assert enemy.bullets[0].y == pytest.approx(2.18)


def test_reflected_bullet_leaves_at_the_top():
    squad, enemy = parked_squad(x=5.0)
    enemy.bullets = [Bullet(x=0.0, y=ENEMY_Y - 0.9, owner=0, dy=-1.0, reflected=True)]
    squad.update(5)
    assert enemy.bullets == []
    assert enemy.alive


def test_reflected_bullet_kills_its_owner_once():
    squad, enemy = parked_squad(x=2.0)
    bullet = Bullet(x=2.0, y=-1.4, owner=0, dy=-1.0, reflected=True)
    enemy.bullets = [bullet]

    assert squad.update(2) == 1
    assert not enemy.alive
    assert not bullet.active
    assert enemy.bullets == []
    assert squad.update(2) == 0


def test_unreflected_bullet_spares_its_owner():
    squad, enemy = parked_squad(x=2.0)
    enemy.bullets = [Bullet(x=2.0, y=-1.7, owner=0)]
    squad.update(2)
    assert enemy.alive


def test_reflected_bullet_finds_its_owner_by_index():
    squad = EnemySquad(8, rng=random.Random(0))
    first, second = squad.enemies
    for enemy in squad.enemies:
        enemy.mode = EnemyMode.PURSUIT
        enemy.mode_timer = 10_000
        enemy.shot_cooldown = 10_000
    first.x, second.x = 1.0, 5.0
    first.bullets = [Bullet(x=5.0, y=-1.4, owner=1, dy=-1.0, reflected=True)]

    assert squad.update(3) == 1
    assert first.alive
    assert not second.alive
