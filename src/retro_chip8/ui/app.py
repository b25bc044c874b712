# src/retro_chip8/ui/app.py
"""
Qtアプリケーションのエントリポイント。
コマンドライン引数と設定ファイルから構成を組み立て、メインウィンドウを起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from retro_chip8.common.errors import Chip8Error
from retro_chip8.common.types import ExtensionMode
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import SystemConfig
from .main_window import MainWindow

logger = logging.getLogger(__name__)


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retro-chip8", description="CHIP-8 interpreter")
    parser.add_argument("rom", nargs="?", help="path to a CHIP-8 ROM image")
    parser.add_argument("--config", help="YAML system config")
    parser.add_argument("--mode", choices=[m.value for m in ExtensionMode], help="extension mode")
    parser.add_argument("--ipt", type=_positive_int, help="instructions executed per 60 Hz tick")
    parser.add_argument("--scale", type=_positive_int, help="display scale factor")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser

# @intent:responsibility 設定ファイルを読み込み、コマンドライン引数で上書きした構成を返します。
def build_config(args: argparse.Namespace) -> SystemConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    if args.mode:
        config.extension_mode = ExtensionMode(args.mode)
    if args.ipt is not None:
        config.instructions_per_tick = args.ipt
    if args.scale is not None:
        config.display.scale_factor = args.scale
    if args.rom:
        config.rom_path = args.rom
    return config

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except Chip8Error as e:
        logger.error("%s", e)
        return 1

    app = QApplication(sys.argv[:1])
    main_win = MainWindow(config)
    if config.rom_path:
        try:
            main_win.load_rom(config.rom_path)
        except Chip8Error as e:
            logger.error("%s", e)
            return 1
    main_win.show()
    return app.exec()

if __name__ == '__main__':
    sys.exit(main())
