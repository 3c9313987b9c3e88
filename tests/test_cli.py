import logging

import numpy as np
import PIL.Image
import pytest

import render as cli
from mandelbrot import ImageBounds, RenderSettings, render_parallel


def test_renders_png(tmp_path):
    path = tmp_path / "mandel.png"
    status = cli.main(["--workers", "2", "--", str(path), "64x48", "-2.0,1.2", "0.6,-1.2"])
    assert status == 0

    with PIL.Image.open(path) as image:
        assert image.size == (64, 48)
        assert image.mode == "L"
        written = np.array(image).ravel()

    expected = render_parallel(
        ImageBounds(64, 48), complex(-2.0, 1.2), complex(0.6, -1.2), RenderSettings(workers=1, kernel="numpy")
    )
    assert written.tobytes() == expected.tobytes()


def test_python_kernel_and_band_grouping(tmp_path):
    path = tmp_path / "mandel.png"
    status = cli.main(
        ["--kernel", "python", "--rows-per-band", "4", "--max-iterations", "64", "--",
         str(path), "20x10", "-2.0,1.0", "1.0,-1.0"]
    )
    assert status == 0
    assert path.exists()


@pytest.mark.parametrize(
    "args,message",
    [
        (["out.png", "64", "-2,1", "1,-1"], "error parsing image dimensions"),
        (["out.png", "64x48", "-2;1", "1,-1"], "error parsing upper left corner point"),
        (["out.png", "64x48", "-2,1", "1"], "error parsing lower right corner point"),
        (["out.png", "0x48", "-2,1", "1,-1"], "width must be positive"),
        (["out.png", "64x48", "1,1", "-2,-1"], "lower right real part"),
    ],
)
def test_bad_arguments_exit_with_usage_error(tmp_path, capsys, args, message):
    args = ["--", str(tmp_path / args[0]), *args[1:]]
    with pytest.raises(SystemExit) as excinfo:
        cli.main(args)
    assert excinfo.value.code == 2
    assert message in capsys.readouterr().err
    assert not (tmp_path / "out.png").exists()


def test_invalid_settings_are_usage_errors(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--workers", "0", "--", str(tmp_path / "x.png"), "8x8", "-2,1", "1,-1"])
    assert excinfo.value.code == 2


def test_write_failure_returns_error_status(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    status = cli.main(["--", str(blocker / "out.png"), "8x8", "-2,1", "1,-1"])
    assert status == 1


def test_negative_corner_points_need_no_separator(tmp_path):
    path = tmp_path / "mandle.png"
    status = cli.main([str(path), "40x30", "-1.20,0.35", "-1,0.20"])
    assert status == 0

    with PIL.Image.open(path) as image:
        written = np.array(image).ravel()
    expected = render_parallel(ImageBounds(40, 30), complex(-1.2, 0.35), complex(-1.0, 0.2))
    assert written.tobytes() == expected.tobytes()


def test_options_before_negative_corner_points(tmp_path):
    path = tmp_path / "mandle.png"
    status = cli.main(["--workers", "2", "--max-iterations", "50", str(path), "16x12", "-.5,1", "0.5,-1"])
    assert status == 0
    assert path.exists()


@pytest.mark.parametrize(
    "args,expected",
    [
        (["a.png", "8x8", "-2,1", "1,-1"], ["a.png", "8x8", "--", "-2,1", "1,-1"]),
        (["-v", "a.png", "8x8", "2,1", "3,-1"], ["-v", "a.png", "8x8", "2,1", "3,-1"]),
        (["a.png", "8x8", "--", "-2,1", "1,-1"], ["a.png", "8x8", "--", "-2,1", "1,-1"]),
        (["--workers", "-3", "a.png"], ["--workers", "-3", "a.png"]),
    ],
)
def test_negative_points_are_marked_positional(args, expected):
    assert cli._protect_negative_points(args) == expected


@pytest.fixture
def tensorflow_logger():
    logger = logging.getLogger("tensorflow")
    level = logger.level
    logger.setLevel(logging.NOTSET)
    yield logger
    logger.setLevel(level)


def test_tensorflow_logger_is_quiet_by_default(tmp_path, tensorflow_logger):
    assert cli.main([str(tmp_path / "q.png"), "8x8", "-2,1", "1,-1"]) == 0
    assert tensorflow_logger.level == logging.ERROR


def test_verbose_leaves_tensorflow_logger_alone(tmp_path, tensorflow_logger):
    assert cli.main(["-v", str(tmp_path / "v.png"), "8x8", "-2,1", "1,-1"]) == 0
    assert tensorflow_logger.level == logging.NOTSET
