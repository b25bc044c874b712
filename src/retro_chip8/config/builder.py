from dataclasses import asdict
from typing import Optional, Tuple

from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.quirks import Quirks
from retro_chip8.arch.chip8.state import MEMORY_SIZE
from retro_chip8.loader.loader import RomSource
from .models import SystemConfig

# @intent:responsibility 4KiBのRAMを0x000-0xFFFにマップしたバスを生成します。
def build_bus() -> Bus:
    bus = Bus()
    bus.map_device(0x000, RAM(MEMORY_SIZE))
    return bus

# @intent:responsibility システム構成（Config）に基づいて、Bus、CPUを生成・接続し、ROMをロードします。
class SystemBuilder:
    def build_system(self, config: SystemConfig, rom: Optional[RomSource] = None) -> Tuple[Chip8Cpu, Bus]:
        bus = build_bus()
        cpu = Chip8Cpu(
            bus,
            mode=config.extension_mode,
            quirks=self.build_quirks(config),
            stack_policy=config.stack_policy,
            strict_opcodes=config.strict_opcodes,
            rng_seed=config.rng_seed,
            display_width=config.display.width,
            display_height=config.display.height,
            timer_hz=config.timer_hz,
        )

        source = rom if rom is not None else config.rom_path
        if source is not None:
            cpu.load_rom(source)

        return cpu, bus

    # @intent:responsibility 拡張モードの既定値に、Configで指定されたquirkの上書きを適用します。
    def build_quirks(self, config: SystemConfig) -> Quirks:
        return Quirks.for_mode(config.extension_mode, **asdict(config.quirks))
