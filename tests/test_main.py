import os

from main import main

from conftest import make_noise
from seamless_texture.utils import load_texture, save_image


def test_main_writes_texture_and_preview(tmp_path, capsys):
    source = tmp_path / "stone.png"
    save_image(make_noise(80, 60).rgb(), str(source))
    out_dir = tmp_path / "out"

    code = main(["--input", str(source), "--output-dir", str(out_dir),
                 "--method", "patch_based", "--tiles", "3", "--mark-seams",
                 "--crop-top", "5", "--format", "png", "--seed", "1", "--evaluate"])

    assert code == 0
    seamless = load_texture(str(out_dir / "stone_seamless.png"))
    preview = load_texture(str(out_dir / "stone_preview.png"))
    assert seamless.shape == (55, 80, 3)
    assert preview.shape == (165, 240, 3)
    assert "SEAMLESS TEXTURE EVALUATION" in capsys.readouterr().out


def test_main_visualize_jpeg(tmp_path):
    source = tmp_path / "bark.png"
    save_image(make_noise(40, 40).rgb(), str(source))
    figure = tmp_path / "figure.png"

    code = main(["--input", str(source), "--output-dir", str(tmp_path),
                 "--method", "mirrored", "--visualize", str(figure)])

    assert code == 0
    assert os.path.exists(tmp_path / "bark_seamless.jpg")
    assert figure.exists()
    assert load_texture(str(figure)).ndim == 3


def test_main_missing_input(tmp_path):
    assert main(["--input", str(tmp_path / "nope.png")]) == 1


def test_main_invalid_settings(tmp_path):
    source = tmp_path / "x.png"
    save_image(make_noise(20, 20).rgb(), str(source))
    assert main(["--input", str(source), "--quality", "0"]) == 1


def test_main_undecodable_input(tmp_path):
    source = tmp_path / "broken.png"
    source.write_bytes(b"garbage")
    assert main(["--input", str(source), "--output-dir", str(tmp_path)]) == 1
