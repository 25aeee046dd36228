"""
Tests for the console driver, fed with scripted answers.

Run with: python -m pytest tests/test_main.py -v
Or simply: python tests/test_main.py
"""

import io
import shutil
import sys
import tempfile
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pytest
from PIL import Image

import main as app_main
from watermarker.config import AppConfig, PromptLabels
from watermarker.core.errors import ParseError
from watermarker.ui import ConsolePrompter


@pytest.fixture
def workdir():
    path = Path(tempfile.mkdtemp())
    yield path
    shutil.rmtree(path, ignore_errors=True)


def save_image(path: Path, arr: np.ndarray) -> Path:
    Image.fromarray(arr).save(path)
    return path


def random_rgb(width: int, height: int, seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


def run_main(answers, argv=None):
    """Run main() with scripted answers; returns (exit_code, stdout lines)."""
    stdout = io.StringIO()
    prompter = ConsolePrompter(stdin=io.StringIO("\n".join(answers) + "\n"), stdout=stdout)
    code = app_main.main(argv or [], prompter=prompter)
    return code, stdout.getvalue().splitlines()


def test_single_placement_run(workdir):
    base = random_rgb(4, 4, seed=1)
    mark = random_rgb(2, 2, seed=2)
    base_path = save_image(workdir / "base.png", base)
    mark_path = save_image(workdir / "mark.png", mark)
    out_path = workdir / "out.png"

    code, lines = run_main([
        str(base_path), str(mark_path), "no", "50", "single", "1 2", str(out_path)
    ])

    assert code == 0
    assert lines == [
        "Input the image filename:",
        "Input the watermark image filename:",
        "Do you want to set a transparency color?",
        "Input the watermark transparency percentage (Integer 0-100):",
        "Choose the position method (single, grid):",
        "Input the watermark position ([x 0-2] [y 0-2]):",
        "Input the output image filename (jpg or png extension):",
        f"The watermarked image {out_path} has been created.",
    ]

    with Image.open(out_path) as img:
        out = np.array(img)
    assert out.shape == (4, 4, 3)
    # Watermark (0, 0) lands on base (x=1, y=2)
    expected = (base[2, 1].astype(int) + mark[0, 0].astype(int)) // 2
    assert np.array_equal(out[2, 1], expected)
    assert np.array_equal(out[0, 0], base[0, 0])
    assert np.array_equal(out[1, 1], base[1, 1])


def test_alpha_channel_grid_run(workdir):
    base = random_rgb(5, 5, seed=3)
    mark = np.dstack([random_rgb(2, 2, seed=4), np.full((2, 2), 255, dtype=np.uint8)])
    mark[0, 0, 3] = 0
    base_path = save_image(workdir / "base.png", base)
    mark_path = save_image(workdir / "mark.png", mark)
    out_path = workdir / "out.png"

    code, lines = run_main([
        str(base_path), str(mark_path), "yes", "100", "grid", str(out_path)
    ])

    assert code == 0
    assert "Do you want to use the watermark's Alpha channel?" in lines
    assert "Do you want to set a transparency color?" not in lines

    with Image.open(out_path) as img:
        out = np.array(img)
    for y in range(5):
        for x in range(5):
            if (x % 2, y % 2) == (0, 0):
                assert np.array_equal(out[y, x], base[y, x])
            else:
                assert np.array_equal(out[y, x], mark[y % 2, x % 2, :3])


def test_declined_alpha_then_color_key(workdir):
    base = random_rgb(3, 3, seed=5)
    mark = np.full((1, 1, 4), 40, dtype=np.uint8)
    base_path = save_image(workdir / "base.png", base)
    mark_path = save_image(workdir / "mark.png", mark)
    out_path = workdir / "out.png"

    code, lines = run_main([
        str(base_path), str(mark_path), "no", "yes", "40 40 40", "100", "grid", str(out_path)
    ])

    assert code == 0
    assert "Input a transparency color ([Red] [Green] [Blue]):" in lines
    with Image.open(out_path) as img:
        assert np.array_equal(np.array(img), base)


def test_gif_output_stops_before_compositing(workdir, monkeypatch):
    base_path = save_image(workdir / "base.png", random_rgb(4, 4, seed=6))
    mark_path = save_image(workdir / "mark.png", random_rgb(2, 2, seed=7))

    def fail_run(self):
        raise AssertionError("compositing should not start")

    monkeypatch.setattr(app_main.CompositeWorker, "run", fail_run)

    code, lines = run_main([
        str(base_path), str(mark_path), "no", "50", "grid", str(workdir / "out.gif")
    ])

    assert code == 1
    assert lines[-1] == 'The output file extension isn\'t "jpg" or "png".'
    assert not (workdir / "out.gif").exists()


@pytest.mark.parametrize(
    "answers, message",
    [
        (["{missing}"], "The file {missing} doesn't exist."),
        (["{base}", "{big}"], "The watermark's dimensions are larger."),
        (["{base}", "{mark}", "no", "fifty"], "The transparency percentage isn't an integer number."),
        (["{base}", "{mark}", "no", "150"], "The transparency percentage is out of range."),
        (["{base}", "{mark}", "yes", "1 2 300"], "The transparency color input is invalid."),
        (["{base}", "{mark}", "no", "10", "corner"], "The position method input is invalid."),
        (["{base}", "{mark}", "no", "10", "single", "3 0"], "The position input is out of range."),
        (["{base}", "{mark}", "no", "10", "single", "a b"], "The position input is invalid."),
        (["{gray}"], "The number of image color components isn't 3."),
        (["{base}", "{gray}"], "The number of watermark color components isn't 3."),
    ],
)
def test_invalid_answers_exit_with_one_diagnostic(workdir, answers, message):
    paths = {
        "missing": workdir / "missing.png",
        "base": save_image(workdir / "base.png", random_rgb(4, 4, seed=8)),
        "mark": save_image(workdir / "mark.png", random_rgb(2, 2, seed=9)),
        "big": save_image(workdir / "big.png", random_rgb(5, 2, seed=10)),
        "gray": workdir / "gray.png",
    }
    Image.new("L", (2, 2)).save(paths["gray"])

    code, lines = run_main([answer.format(**paths) for answer in answers])

    assert code == 1
    assert lines[-1] == message.format(**paths)


def test_info_flag(workdir, capsys):
    path = save_image(workdir / "base.png", random_rgb(3, 2, seed=11))

    code = app_main.main(["--info", str(path), str(workdir / "missing.png")])

    assert code == 0
    out = capsys.readouterr().out.splitlines()
    assert f"Image file: {path}" in out
    assert "Width: 3" in out
    assert "Height: 2" in out
    assert "Bits per pixel: 24" in out
    assert "Transparency: OPAQUE" in out
    assert out[-1] == f"The file {workdir / 'missing.png'} doesn't exist."


def test_labels_flow_into_prompts(workdir):
    base_path = save_image(workdir / "base.png", random_rgb(2, 2, seed=12))
    stdout = io.StringIO()
    prompter = ConsolePrompter(
        labels=PromptLabels(image="photo", watermark="logo", output="result"),
        stdin=io.StringIO(f"{base_path}\n"),
        stdout=stdout,
    )
    config = AppConfig(labels=prompter.labels, workers=1)

    with pytest.raises(ParseError, match="No input available."):
        app_main.WatermarkController(config, prompter).run()

    lines = stdout.getvalue().splitlines()
    assert lines == ["Input the photo filename:", "Input the logo photo filename:"]


def test_config_from_env():
    config = AppConfig.from_env({"WATERMARKER_WORKERS": "3", "WATERMARKER_LOG_LEVEL": "debug"})
    assert config.workers == 3
    assert config.log_level == "DEBUG"

    fallback = AppConfig.from_env({"WATERMARKER_WORKERS": "lots"})
    assert fallback.workers == AppConfig().workers
    assert fallback.log_level == "WARNING"


class RecordingController:
    """Stands in for WatermarkController and keeps the config it was given."""

    configs = []

    def __init__(self, config, prompter):
        self.configs.append(config)

    def run(self):
        return None


def test_flags_override_environment(monkeypatch):
    monkeypatch.setenv("WATERMARKER_WORKERS", "5")
    monkeypatch.setenv("WATERMARKER_LOG_LEVEL", "ERROR")
    monkeypatch.setattr(RecordingController, "configs", [])
    monkeypatch.setattr(app_main, "WatermarkController", RecordingController)

    code, _ = run_main([], argv=["--workers", "2", "--verbose"])
    assert code == 0
    assert RecordingController.configs[-1].workers == 2
    assert RecordingController.configs[-1].log_level == "DEBUG"

    code, _ = run_main([], argv=["--workers", "0"])
    assert code == 0
    assert RecordingController.configs[-1].workers == 5
    assert RecordingController.configs[-1].log_level == "ERROR"


def test_verbose_flag_passes_debug_to_logging(monkeypatch):
    levels = []
    monkeypatch.delenv("WATERMARKER_LOG_LEVEL", raising=False)
    monkeypatch.setattr(app_main, "WatermarkController", RecordingController)
    monkeypatch.setattr(
        app_main.logging, "basicConfig", lambda **kwargs: levels.append(kwargs["level"])
    )

    run_main([], argv=["--verbose"])
    run_main([])

    assert levels == [app_main.logging.DEBUG, app_main.logging.WARNING]


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
