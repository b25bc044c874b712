# tests/core/test_cpu.py
"""
retro_chip8.core.cpuモジュールの単体テスト。
"""
import pytest
from typing import Dict, List

from retro_chip8.core.state import CpuState
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.snapshot import Snapshot, Operation
from retro_chip8.transport.bus import Bus, RAM, BusAccessType
from retro_chip8.common.types import RegisterLayoutInfo, RegisterInfo

# @intent:test_suite CPUの状態管理と抽象CPUの命令サイクル（テンプレートメソッド）を検証します。

class StubCpu(AbstractCpu):
    """
    2バイト命令を持つ最小限のテスト用CPU。
    0x0001 は 0x0020 に 0xFF を書き込み、0x1NNN は NNN へジャンプします。
    """
    def __init__(self, bus: Bus, initial_pc: int = 0x0000):
        self._initial_pc = initial_pc
        super().__init__(bus)

    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=self._initial_pc)

    def _fetch(self) -> int:
        pc = self._state.pc
        return (self._bus.read(pc) << 8) | self._bus.read(pc + 1)

    def _decode(self, opcode: int) -> Operation:
        if opcode & 0xF000 == 0x1000:
            return Operation(f"{opcode:04X}", "JP", [f"${opcode & 0xFFF:03X}"], opcode)
        return Operation(f"{opcode:04X}", "POKE", [], opcode)

    def _execute(self, operation: Operation) -> None:
        if operation.mnemonic == "JP":
            self._state.pc = operation.instruction & 0x0FFF
        else:
            self._bus.write(0x0020, 0xFF)

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc, "SP": self._state.sp}

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [RegisterLayoutInfo("Test Group", [RegisterInfo("PC", 16), RegisterInfo("SP", 8)])]

    def get_flag_state(self) -> Dict[str, bool]:
        return {}


class TestCpuState:
    def test_cpu_state_init_default(self):
        state = CpuState()
        assert state.pc == 0x0000
        assert state.sp == 0

    def test_cpu_state_mutability(self):
        state = CpuState()
        state.pc = 0x1000
        state.sp = 3
        assert (state.pc, state.sp) == (0x1000, 3)


class TestAbstractCpu:
    @pytest.fixture
    def setup_cpu(self):
        bus = Bus()
        bus.map_device(0x0000, RAM(256))
        cpu = StubCpu(bus, initial_pc=0x0010)
        return cpu, bus

    def test_abstract_cpu_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            AbstractCpu(Bus())

    def test_reset(self, setup_cpu):
        cpu, bus = setup_cpu
        bus.write(0x0011, 0x01)
        cpu.step()
        assert cpu.cycle_count == 1
        cpu.reset()
        assert cpu.get_state().pc == 0x0010
        assert cpu.cycle_count == 0

    # @intent:test_case_step 1サイクルでPCが命令長だけ進み、バスアクセスがスナップショットに記録されることを検証します。
    def test_step(self, setup_cpu):
        cpu, bus = setup_cpu
        bus.write(0x0010, 0x00)
        bus.write(0x0011, 0x01)
        bus.drain_activity_log()

        snapshot = cpu.step()

        assert cpu.get_state().pc == 0x0012
        assert isinstance(snapshot, Snapshot)
        assert snapshot.state is cpu.get_state()
        assert snapshot.operation.mnemonic == "POKE"
        assert snapshot.metadata.cycle_count == 1
        assert snapshot.metadata.symbol_info == "0x0010: 0001  POKE"
        assert [(a.address, a.access_type) for a in snapshot.bus_activity] == [
            (0x0010, BusAccessType.READ),
            (0x0011, BusAccessType.READ),
            (0x0020, BusAccessType.WRITE),
        ]

    # ジャンプ命令が設定したPCは、PC更新で上書きされない
    def test_step_jump_is_not_overwritten(self, setup_cpu):
        cpu, bus = setup_cpu
        bus.write(0x0010, 0x10)
        bus.write(0x0011, 0x40)
        cpu.step()
        assert cpu.get_state().pc == 0x0040

    def test_ui_api(self, setup_cpu):
        cpu, _ = setup_cpu
        assert cpu.get_register_map()["PC"] == 0x0010
        layout = cpu.get_register_layout()
        assert layout[0].group_name == "Test Group"
        assert len(layout[0].registers) == 2
