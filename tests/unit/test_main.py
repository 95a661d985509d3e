import json
import pytest
import yaml
from unittest.mock import patch
from typer.testing import CliRunner
from vsp.main import app

runner = CliRunner()

def test_segments_command(vsp_yaml):
    result = runner.invoke(app, ["segments", "--duration", "25", "--config", str(vsp_yaml)])
    assert result.exit_code == 0
    assert "3 segments" in result.output
    assert "25.00s" in result.output

def test_run_command_json(vsp_yaml, tmp_path):
    result = runner.invoke(app, [
        "run", "--duration", "25", "--config", str(vsp_yaml), "--mode", "sequential", "--json"
    ])
    assert result.exit_code == 0, result.output

    stats = json.loads(result.stdout)
    assert stats["segment_count"] == 3
    assert stats["cpu_cores"] == 8
    assert stats["total_time"] == stats["sequential_time"]
    assert (tmp_path / "logs" / "vsp.log").exists()

def test_run_command_summary(vsp_yaml):
    result = runner.invoke(app, [
        "run", "--duration", "12", "--config", str(vsp_yaml), "--no-dashboard", "--cores", "2"
    ])
    assert result.exit_code == 0, result.output
    assert "Speedup factor" in result.output

def test_run_with_video_uses_ffprobe(vsp_yaml, tmp_path):
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"\x00" * 2048)

    with patch("vsp.main.FFprobeAdapter") as MockAdapter:
        MockAdapter.return_value.get_duration.return_value = 15.0
        result = runner.invoke(app, ["run", str(video), "--config", str(vsp_yaml), "--json"])

    assert result.exit_code == 0, result.output
    MockAdapter.return_value.get_duration.assert_called_once_with(video)

def test_run_requires_a_duration_source(vsp_yaml):
    result = runner.invoke(app, ["run", "--config", str(vsp_yaml)])
    assert result.exit_code == 1
    assert "--duration" in result.output

def test_run_rejects_non_positive_duration(vsp_yaml):
    result = runner.invoke(app, ["run", "--duration", "-5", "--config", str(vsp_yaml)])
    assert result.exit_code == 1
    assert "positive" in result.output

def test_run_missing_video(vsp_yaml, tmp_path):
    result = runner.invoke(app, ["run", str(tmp_path / "nope.mp4"), "--config", str(vsp_yaml)])
    assert result.exit_code == 1
    assert "does not exist" in result.output

def test_run_json_ignores_dashboard_setting(vsp_yaml):
    config = yaml.safe_load(vsp_yaml.read_text())
    config["general"]["dashboard"] = True
    vsp_yaml.write_text(yaml.dump(config))

    result = runner.invoke(app, ["run", "--duration", "25", "--config", str(vsp_yaml), "--json"])

    assert result.exit_code == 0, result.output
    stats = json.loads(result.stdout)
    assert stats["segment_count"] == 3

def test_run_without_ffprobe_reports_error(vsp_yaml, tmp_path):
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"\x00" * 2048)

    with patch("subprocess.run", side_effect=FileNotFoundError(2, "No such file or directory")):
        result = runner.invoke(app, ["run", str(video), "--config", str(vsp_yaml)])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "ffprobe not found" in result.output

def test_segments_without_ffprobe_reports_error(vsp_yaml, tmp_path):
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"\x00" * 2048)

    with patch("vsp.main.FFprobeAdapter") as MockAdapter:
        MockAdapter.return_value.get_duration.side_effect = PermissionError(13, "Permission denied")
        result = runner.invoke(app, ["segments", str(video), "--config", str(vsp_yaml)])

    assert result.exit_code == 1
    assert "Error:" in result.output

@pytest.mark.parametrize("command", [["run", "--duration", "25"], ["segments", "--duration", "25"]])
def test_malformed_config_reports_error(tmp_path, command):
    bad = tmp_path / "broken.yaml"
    bad.write_text("general: [unclosed\n")

    result = runner.invoke(app, command + ["--config", str(bad)])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)
