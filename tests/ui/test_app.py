# tests/ui/test_app.py
"""
コマンドライン引数の解釈と構成の組み立てのテスト。
"""
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
pytest.importorskip("PySide6")

from retro_chip8.common.types import ExtensionMode
from retro_chip8.config.models import SystemConfig
from retro_chip8.ui.app import build_arg_parser, build_config

# @intent:test_suite コマンドライン引数による構成の上書きと、不正な数値の拒否を検証します。


class TestCommandLine:
    @pytest.fixture
    def parser(self):
        return build_arg_parser()

    def test_defaults(self, parser):
        config = build_config(parser.parse_args([]))
        assert config == SystemConfig()

    def test_overrides(self, parser):
        args = parser.parse_args(["game.ch8", "--mode", "MODERN", "--ipt", "1", "--scale", "5"])
        config = build_config(args)
        assert config.rom_path == "game.ch8"
        assert config.extension_mode == ExtensionMode.MODERN
        assert config.instructions_per_tick == 1
        assert config.display.scale_factor == 5

    # @intent:test_case_reject 0以下や数値でない値は黙って無視されず、引数エラーで終了することを検証します。
    @pytest.mark.parametrize("argv", [
        ["--ipt", "0"],
        ["--ipt", "-3"],
        ["--ipt", "many"],
        ["--scale", "0"],
    ])
    def test_invalid_counts_are_rejected(self, parser, argv, capsys):
        with pytest.raises(SystemExit) as excinfo:
            parser.parse_args(argv)
        assert excinfo.value.code == 2
        err = capsys.readouterr().err
        assert "must be positive" in err or "invalid integer" in err

    def test_config_file_then_overrides(self, parser, tmp_path):
        path = tmp_path / "system.yaml"
        path.write_text("instructions_per_tick: 20\ntimer_hz: 60\n", encoding="utf-8")
        config = build_config(parser.parse_args(["--config", str(path), "--ipt", "3"]))
        assert config.instructions_per_tick == 3
        assert config.timer_hz == 60
