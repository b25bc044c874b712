# tests/runner/test_runner.py
"""
retro_chip8.runner.runner モジュールの単体テスト。
FrameRunnerのフレーム実行、実行状態の制御、表示・音声アダプタへの通知を検証します。
"""
import pytest
from unittest.mock import MagicMock

from retro_chip8.common.types import RunState
from retro_chip8.config.builder import build_bus
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.runner.runner import FrameRunner

# @intent:test_suite ホストループの1フレーム処理と状態遷移の検証。

# 0x200: LD V0, #03 / LD ST, V0 / LD I, $000 / DRW V1, V1, 5 / JP $208
BEEP_AND_DRAW = bytes([0x60, 0x03, 0xF0, 0x18, 0xA0, 0x00, 0xD1, 0x15, 0x12, 0x08])
# 0x200: ADD V0, #01 / JP $200
COUNTER = bytes([0x70, 0x01, 0x12, 0x00])


class TestFrameRunner:
    @pytest.fixture
    def setup_runner(self):
        cpu = Chip8Cpu(build_bus())
        renderer = MagicMock()
        audio = MagicMock()
        runner = FrameRunner(cpu, instructions_per_tick=4, renderer=renderer, audio=audio)
        return runner, cpu, renderer, audio

    def test_invalid_instructions_per_tick(self):
        with pytest.raises(ValueError):
            FrameRunner(Chip8Cpu(build_bus()), instructions_per_tick=0)

    # @intent:test_case_frame 1フレームで指定数の命令が実行され、その後にタイマが1つ進むことを検証します。
    def test_run_frame_executes_batch_then_ticks(self, setup_runner):
        runner, cpu, _, _ = setup_runner
        cpu.load_rom(COUNTER)
        cpu.get_state().delay_timer = 5
        runner.run_frame()
        assert cpu.cycle_count == 4
        assert cpu.get_state().v[0] == 2
        assert cpu.get_state().delay_timer == 4
        assert runner.frame_count == 1

    def test_render_only_when_drawn(self, setup_runner):
        runner, cpu, renderer, _ = setup_runner
        cpu.load_rom(BEEP_AND_DRAW)
        assert runner.run_frame() is True
        renderer.render.assert_called_once_with(cpu.framebuffer)
        assert runner.run_frame() is False
        renderer.render.assert_called_once()

    # @intent:test_case_audio サウンドタイマの状態が変化したときだけ音声アダプタへ通知されることを検証します。
    def test_tone_follows_sound_timer(self, setup_runner):
        runner, cpu, _, audio = setup_runner
        cpu.load_rom(BEEP_AND_DRAW)

        runner.run_frame()  # ST=3 -> 2
        assert runner.tone_active
        audio.set_tone.assert_called_once_with(True)

        runner.run_frame()  # 2 -> 1
        runner.run_frame()  # 1 -> 0
        assert not runner.tone_active
        assert [c.args for c in audio.set_tone.call_args_list] == [(True,), (False,)]

    def test_paused_does_not_advance(self, setup_runner):
        runner, cpu, _, _ = setup_runner
        cpu.load_rom(COUNTER)
        cpu.get_state().delay_timer = 5
        runner.pause()
        assert runner.state == RunState.PAUSED
        runner.run_frame()
        assert cpu.cycle_count == 0
        assert cpu.get_state().delay_timer == 5
        assert runner.frame_count == 0

        runner.resume()
        assert runner.is_running
        runner.run_frame()
        assert cpu.cycle_count == 4

    def test_pause_silences_tone(self, setup_runner):
        runner, cpu, _, audio = setup_runner
        cpu.load_rom(BEEP_AND_DRAW)
        runner.run_frame()
        runner.pause()
        runner.run_frame()
        assert not runner.tone_active
        audio.set_tone.assert_called_with(False)

    def test_toggle_pause(self, setup_runner):
        runner, cpu, _, _ = setup_runner
        cpu.load_rom(COUNTER)
        runner.toggle_pause()
        assert runner.state == RunState.PAUSED
        runner.toggle_pause()
        assert runner.state == RunState.RUNNING

    def test_resume_without_rom_stays_paused(self, setup_runner):
        runner, _, _, _ = setup_runner
        runner.resume()
        assert runner.state == RunState.PAUSED

    def test_quit_stops_everything(self, setup_runner):
        runner, cpu, renderer, _ = setup_runner
        cpu.load_rom(BEEP_AND_DRAW)
        runner.quit()
        assert runner.state == RunState.QUIT
        assert runner.run_frame() is False
        assert cpu.cycle_count == 0
        renderer.render.assert_not_called()
        runner.resume()
        assert runner.state == RunState.QUIT

    def test_reset_reloads_rom(self, setup_runner):
        runner, cpu, _, _ = setup_runner
        cpu.load_rom(COUNTER)
        runner.run_frame()
        runner.run_frame()
        runner.reset()
        assert cpu.get_state().v[0] == 0
        assert cpu.get_state().pc == 0x200
        assert runner.frame_count == 0
        assert runner.state == RunState.RUNNING

    # @intent:test_case_reset_render リセット後の最初のフレームで、消去された画面が表示アダプタへ渡されることを検証します。
    def test_reset_redraws_cleared_screen(self, setup_runner):
        runner, cpu, renderer, _ = setup_runner
        cpu.load_rom(COUNTER)
        runner.run_frame()
        cpu.framebuffer[0][0] = True
        assert runner.run_frame() is False
        renderer.reset_mock()

        runner.reset()

        assert runner.run_frame() is True
        renderer.render.assert_called_once_with(cpu.framebuffer)
        assert not any(any(row) for row in cpu.framebuffer)

    def test_key_events_reach_keypad(self, setup_runner):
        runner, cpu, _, _ = setup_runner
        runner.press_key(0xC)
        assert cpu.get_state().keypad[0xC]
        runner.release_key(0xC)
        assert not cpu.get_state().keypad[0xC]

    def test_run_with_frame_limit(self, setup_runner):
        runner, cpu, _, _ = setup_runner
        cpu.load_rom(COUNTER)
        assert runner.run(max_frames=3, frame_time=0) == 3
        assert cpu.cycle_count == 12

    def test_run_ends_on_quit(self, setup_runner):
        runner, cpu, _, _ = setup_runner
        cpu.load_rom(COUNTER)
        runner.quit()
        assert runner.run(max_frames=10, frame_time=0) == 0

    def test_runs_without_adapters(self):
        cpu = Chip8Cpu(build_bus())
        cpu.load_rom(BEEP_AND_DRAW)
        runner = FrameRunner(cpu)
        assert runner.run_frame() is True
        assert runner.tone_active
