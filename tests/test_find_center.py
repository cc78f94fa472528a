import subprocess

import cv2
import numpy as np
import pytest

import image_io
from find_center import main


@pytest.fixture
def shape_png(tmp_path, make_rgb):
    # blue square (10,5)-(29,24) on white
    path = tmp_path / "shape.png"
    image_io.save_rgb(path, make_rgb(60, 40, rects=[(10, 5, 29, 24, (30, 60, 220))]))
    return path


def test_prints_centroid_and_writes_overlay(shape_png, tmp_path, capsys):
    out = tmp_path / "marked.png"

    assert main([str(shape_png), "--out", str(out)]) == 0

    assert capsys.readouterr().out.strip() == "19 14"
    marked = image_io.load_rgb(out)
    assert marked.shape == (40, 60, 3)
    assert tuple(marked[14, 0]) == (255, 0, 0)
    assert tuple(marked[0, 19]) == (255, 0, 0)


def test_working_size_applies_before_detection(shape_png, tmp_path, capsys):
    out = tmp_path / "marked.png"
    assert main([str(shape_png), "--out", str(out), "--max-width", "30", "--max-height", "30"]) == 0
    x, y = map(int, capsys.readouterr().out.split())
    assert abs(x - 9) <= 1 and abs(y - 7) <= 1
    assert image_io.load_rgb(out).shape == (20, 30, 3)


def test_euclidean_metric_flag(shape_png, tmp_path, capsys):
    assert main([str(shape_png), "--out", str(tmp_path / "o.png"), "--metric", "euclidean"]) == 0
    assert capsys.readouterr().out.strip() == "19 14"


def test_blank_image_reports_no_shape(tmp_path, make_rgb, capsys):
    path = tmp_path / "blank.png"
    image_io.save_rgb(path, make_rgb(20, 20))
    out = tmp_path / "o.png"

    assert main([str(path), "--out", str(out)]) == 1

    assert "No shape found" in capsys.readouterr().err
    assert not out.exists()


def test_unreadable_input(tmp_path, capsys):
    assert main([str(tmp_path / "missing.png")]) == 1
    assert "unreadable" in capsys.readouterr().err


def test_bad_config_is_a_usage_error(shape_png, capsys):
    assert main([str(shape_png), "--hole-fraction", "2"]) == 2
    assert "hole_fraction" in capsys.readouterr().err


def test_input_is_required():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


def test_open_launches_viewer(shape_png, tmp_path, monkeypatch):
    launched = []
    monkeypatch.setattr(image_io, "open_with_default_viewer", launched.append)
    out = tmp_path / "o.png"
    assert main([str(shape_png), "--out", str(out), "--open"]) == 0
    assert launched == [out]


def test_load_rgb_returns_rgb_order(tmp_path):
    path = tmp_path / "px.png"
    bgr = np.zeros((2, 2, 3), dtype=np.uint8)
    bgr[0, 0] = (255, 0, 0)  # blue in OpenCV order
    cv2.imwrite(str(path), bgr)
    assert tuple(image_io.load_rgb(path)[0, 0]) == (0, 0, 255)


def test_load_rgb_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        image_io.load_rgb(tmp_path / "nope.png")


@pytest.mark.parametrize("platform, cmd", [
    ("linux", ["xdg-open", "out.png"]),
    ("darwin", ["open", "out.png"]),
    ("win32", ["cmd", "/C", "start", "", "out.png"]),
])
def test_default_viewer_command(monkeypatch, platform, cmd):
    calls = []
    monkeypatch.setattr(image_io.sys, "platform", platform)
    monkeypatch.setattr(subprocess, "Popen", calls.append)
    image_io.open_with_default_viewer("out.png")
    assert calls == [cmd]


@pytest.mark.parametrize("name", ["marked.xyz", "no_such_dir/marked.png"])
def test_unwritable_output_is_reported(shape_png, tmp_path, capsys, name):
    out = tmp_path / name

    assert main([str(shape_png), "--out", str(out)]) == 1

    err = capsys.readouterr().err
    assert "Error:" in err
    assert "Could not write image" in err
    assert not out.exists()


def test_save_rgb_raises_oserror_for_unknown_extension(tmp_path):
    with pytest.raises(OSError):
        image_io.save_rgb(tmp_path / "x.xyz", np.zeros((2, 2, 3), dtype=np.uint8))
