"""
Tests for the command line interface
"""
import json
import logging
from unittest.mock import patch

import pytest
import yaml

from bgclips.cli.main import build_arg_parser, create_config_from_args, main
from bgclips.core.errors import ConfigurationError, ErrorHandler
from bgclips.core.pipeline import ClipPipeline

from conftest import FakeToolchain


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("bgclips")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)


@pytest.fixture
def base_args(tmp_path):
    return [
        "--cache-path", str(tmp_path / "source.mp4"),
        "--output-dir", str(tmp_path / "bg"),
        "--no-progress",
    ]


def run_with(tools, argv):
    """Run main() with the real pipeline wired to a fake toolchain"""
    seen = []

    def factory(config, show_progress=False):
        seen.append(config)
        return ClipPipeline(config, tools, ErrorHandler())

    with patch("bgclips.cli.main.ClipPipeline", side_effect=factory):
        code = main(argv)
    return code, seen


class TestArgumentParsing:

    def test_defaults_match_reference_script(self):
        args = build_arg_parser().parse_args([])
        config = create_config_from_args(args).pipeline
        assert config.source.url == "https://youtu.be/nMBBXqu0OLE"
        assert config.output_dir == "docs/public/bg"
        assert config.source.cache_path == "temp-bf6-gameplay.mp4"
        assert config.plan.clip_count == 5
        assert config.plan.clip_duration == 5
        assert config.max_workers == 1
        assert config.timeout_seconds is None

    def test_facebook_preset(self):
        args = build_arg_parser().parse_args(["facebook"])
        source = create_config_from_args(args).pipeline.source
        assert source.url == "https://www.facebook.com/watch/?v=1136294041346082"
        assert source.format_selector == "best[ext=mp4]/best"

    def test_timestamps(self):
        args = build_arg_parser().parse_args(["--timestamps", "0:10,0:30,1:00"])
        plan = create_config_from_args(args).pipeline.plan
        assert plan.explicit_offsets == [10, 30, 60]

    def test_bad_timestamps_exit_with_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            build_arg_parser().parse_args(["--timestamps", "soon"])
        assert exc_info.value.code == 2

    def test_empty_timestamps_rejected(self):
        args = build_arg_parser().parse_args(["--timestamps", ","])
        with pytest.raises(ConfigurationError, match="must not be empty"):
            create_config_from_args(args)

    def test_debug_overrides_log_level(self):
        args = build_arg_parser().parse_args(["--log-level", "WARNING", "--debug"])
        assert create_config_from_args(args).logging.level == "DEBUG"


class TestMain:

    def test_successful_run(self, base_args, capsys):
        tools = FakeToolchain()
        code, _ = run_with(tools, base_args)

        assert code == 0
        assert len(tools.transcodes) == 5
        out = capsys.readouterr().out
        assert "All background clips created!" in out
        assert "bg-clip-5.mp4" in out
        assert "Visit: http://localhost:5174/" in out

    def test_clip_failure_still_exits_zero(self, base_args, capsys):
        code, _ = run_with(FakeToolchain(fail_offsets={90}), base_args)
        assert code == 0
        assert "bg-clip-3.mp4 FAILED" in capsys.readouterr().out

    def test_download_failure_exits_non_zero(self, base_args, tmp_path):
        tools = FakeToolchain(download_fails=True)
        code, _ = run_with(tools, base_args)
        assert code == 1
        assert tools.transcodes == []
        assert not any((tmp_path / "bg").glob("bg-clip-*.mp4"))

    def test_missing_tool_exits_non_zero(self, base_args):
        code, _ = run_with(FakeToolchain(missing_tool="yt-dlp"), base_args)
        assert code == 1

    def test_empty_timestamps_exit_non_zero(self, base_args, capsys):
        tools = FakeToolchain()
        code, _ = run_with(tools, base_args + ["--timestamps", ","])
        assert code == 1
        assert tools.transcodes == []
        assert "Explicit offsets must not be empty" in capsys.readouterr().err

    def test_overrides_reach_pipeline(self, base_args):
        code, seen = run_with(FakeToolchain(), base_args + ["facebook", "--workers", "2",
                                                            "--timeout", "120"])
        assert code == 0
        config = seen[0]
        assert config.source.url.startswith("https://www.facebook.com/")
        assert config.max_workers == 2
        assert config.timeout_seconds == 120


class TestConfigFiles:

    def test_write_then_load_yaml(self, tmp_path, base_args):
        config_file = tmp_path / "bgclips.yaml"
        assert main(base_args + ["--workers", "3", "--write-config", str(config_file)]) == 0

        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        assert data["pipeline"]["max_workers"] == 3

        args = build_arg_parser().parse_args(["--config", str(config_file)])
        loaded = create_config_from_args(args)
        assert loaded.pipeline.max_workers == 3
        assert loaded.pipeline.output_dir == str(tmp_path / "bg")

    def test_json_config(self, tmp_path):
        config_file = tmp_path / "bgclips.json"
        config_file.write_text(json.dumps({
            "pipeline": {"plan": {"clip_count": 3, "fallback_offsets": [1, 2, 3]}}
        }), encoding="utf-8")
        args = build_arg_parser().parse_args(["-c", str(config_file)])
        plan = create_config_from_args(args).pipeline.plan
        assert plan.clip_count == 3
        assert plan.fallback_offsets == [1, 2, 3]

    def test_missing_config_file(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "nope.yaml")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_values(self, tmp_path, capsys):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("pipeline:\n  max_workers: 0\n", encoding="utf-8")
        assert main(["--config", str(config_file)]) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_cross_field_validation(self, tmp_path, capsys):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("pipeline:\n  clip_name_template: clip.mp4\n", encoding="utf-8")
        assert main(["--config", str(config_file)]) == 1
        assert "{index}" in capsys.readouterr().err

    def test_unreadable_yaml(self, tmp_path, capsys):
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("pipeline: [unclosed\n", encoding="utf-8")
        assert main(["--config", str(config_file)]) == 1
        assert "Could not read configuration file" in capsys.readouterr().err
