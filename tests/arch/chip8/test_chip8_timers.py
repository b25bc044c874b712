# tests/arch/chip8/test_chip8_timers.py
"""
retro_chip8.arch.chip8.timers の単体テスト。
"""
import pytest

from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.arch.chip8.timers import TimerController, TIMER_HZ

# @intent:test_suite タイマの減算（0で停止）と、経過時間からのtick換算を検証します。


class TestTimerController:
    def test_default_frequency(self):
        assert TimerController().hz == TIMER_HZ == 60

    def test_invalid_frequency(self):
        with pytest.raises(ValueError):
            TimerController(0)

    # @intent:test_case_tick 両タイマが1ずつ減り、0で止まることを検証します。
    def test_tick_saturates_at_zero(self):
        state = Chip8CpuState(delay_timer=2, sound_timer=1)
        timers = TimerController()
        timers.tick(state)
        assert (state.delay_timer, state.sound_timer) == (1, 0)
        timers.tick(state)
        timers.tick(state)
        assert (state.delay_timer, state.sound_timer) == (0, 0)

    def test_sound_active_follows_sound_timer(self):
        state = Chip8CpuState(sound_timer=1)
        assert state.sound_active
        TimerController().tick(state)
        assert not state.sound_active

    # @intent:test_case_advance 1秒分の経過で60tickされることを検証します。
    def test_advance_one_second(self):
        state = Chip8CpuState(delay_timer=100)
        ticks = TimerController().advance(state, 1.0)
        assert ticks == 60
        assert state.delay_timer == 40

    def test_advance_carries_fractional_ticks(self):
        state = Chip8CpuState(delay_timer=10)
        timers = TimerController()
        assert timers.advance(state, 0.5 / 60) == 0
        assert timers.advance(state, 0.5 / 60) == 1
        assert state.delay_timer == 9

    def test_reset_drops_pending_fraction(self):
        state = Chip8CpuState(delay_timer=10)
        timers = TimerController()
        timers.advance(state, 0.9 / 60)
        timers.reset()
        assert timers.advance(state, 0.5 / 60) == 0
        assert state.delay_timer == 10
