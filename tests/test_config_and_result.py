"""配置加载/校验、颜色解析与 Result 类型。"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from square_resizer.core.config import ResizeSettings, load_settings
from square_resizer.core.exceptions import InvalidConfigurationError, ResizerError
from square_resizer.core.models import OutputFormat, ResizeMode, ResizeResponse, ResizeOutcome
from square_resizer.core.result import ErrorCode, Failure, Success, failure, success
from square_resizer.utils.colors import parse_color


def test_default_settings() -> None:
    settings = ResizeSettings()

    assert settings.target_size == 512
    assert settings.padding_color == (0, 0, 0, 255)
    assert settings.jpeg_quality == 90
    assert settings.png_compression_level == 6
    assert settings.max_file_size_bytes == 52428800
    assert {".jpg", ".jpeg", ".png", ".gif", ".bmp"} == settings.allowed_extensions


def test_settings_are_immutable() -> None:
    settings = ResizeSettings()

    with pytest.raises(AttributeError):
        settings.jpeg_quality = 10  # type: ignore[misc]


def test_extensions_are_stored_lowercase() -> None:
    settings = ResizeSettings(allowed_extensions=frozenset({".JPG", ".Png"}))

    assert settings.allowed_extensions == frozenset({".jpg", ".png"})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"target_width": 0},
        {"target_height": -1},
        {"allowed_extensions": frozenset()},
        {"allowed_extensions": frozenset({"jpg"})},
        {"max_file_size_bytes": 0},
        {"padding_color": (0, 0, 0, 256)},
        {"jpeg_quality": 0},
        {"jpeg_quality": 101},
        {"png_compression_level": 10},
        {"output_directory": ""},
    ],
)
def test_invalid_settings_raise(kwargs: dict) -> None:
    with pytest.raises(InvalidConfigurationError):
        ResizeSettings(**kwargs)


def test_all_violations_are_reported() -> None:
    with pytest.raises(InvalidConfigurationError) as excinfo:
        ResizeSettings(target_width=0, jpeg_quality=0)

    assert "target_width" in str(excinfo.value)
    assert "jpeg_quality" in str(excinfo.value)


def test_load_settings_from_json(tmp_path: Path) -> None:
    config_path = tmp_path / "settings.json"
    config_path.write_text(
        json.dumps(
            {
                "target_width": 256,
                "target_height": 256,
                "allowed_extensions": [".JPG", ".png"],
                "padding_color": "#ffffff",
                "jpeg_quality": 80,
                "output_directory": str(tmp_path / "out"),
            }
        ),
        encoding="utf-8",
    )

    settings = load_settings(config_path)

    assert settings.target_size == 256
    assert settings.allowed_extensions == frozenset({".jpg", ".png"})
    assert settings.padding_color == (255, 255, 255, 255)
    assert settings.jpeg_quality == 80
    assert settings.output_directory == tmp_path / "out"


def test_load_settings_overrides_win(tmp_path: Path) -> None:
    config_path = tmp_path / "settings.json"
    config_path.write_text(json.dumps({"target_width": 256, "target_height": 256}), encoding="utf-8")

    settings = load_settings(config_path, target_width=128, target_height=128, output_directory=None)

    assert settings.target_size == 128
    assert settings.output_directory == Path("output")


def test_load_settings_without_path_uses_defaults() -> None:
    assert load_settings() == ResizeSettings()


def test_load_settings_rejects_unknown_keys(tmp_path: Path) -> None:
    config_path = tmp_path / "settings.json"
    config_path.write_text(json.dumps({"target_widht": 256}), encoding="utf-8")

    with pytest.raises(InvalidConfigurationError, match="target_widht"):
        load_settings(config_path)


def test_load_settings_rejects_bad_json(tmp_path: Path) -> None:
    config_path = tmp_path / "settings.json"
    config_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(InvalidConfigurationError):
        load_settings(config_path)


def test_load_settings_missing_file(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigurationError):
        load_settings(tmp_path / "missing.json")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("#000", (0, 0, 0, 255)),
        ("ff8000", (255, 128, 0, 255)),
        ("#11223344", (17, 34, 51, 68)),
        ([10, 20, 30], (10, 20, 30, 255)),
        ((10, 20, 30, 40), (10, 20, 30, 40)),
    ],
)
def test_parse_color(value: object, expected: tuple) -> None:
    assert parse_color(value) == expected


@pytest.mark.parametrize("value", ["", "#12", "red", [1, 2], [0, 0, 300], [0.5, 0, 0]])
def test_parse_color_rejects_invalid(value: object) -> None:
    with pytest.raises(InvalidConfigurationError):
        parse_color(value)


def test_success_and_failure_states() -> None:
    ok = success(b"data")
    empty = success()
    err = failure(ErrorCode.FILE_NOT_FOUND, "missing")

    assert isinstance(ok, Success) and ok.is_success and not ok.is_failure
    assert ok.unwrap() == b"data"
    assert empty.value is None
    assert isinstance(err, Failure) and err.is_failure and not err.is_success
    assert err.code is ErrorCode.FILE_NOT_FOUND


def test_failure_requires_code() -> None:
    with pytest.raises(ValueError):
        Failure(code="", message="no code")  # type: ignore[arg-type]


def test_failure_accepts_code_string() -> None:
    assert Failure(code="FILE_TOO_LARGE", message="big").code is ErrorCode.FILE_TOO_LARGE  # type: ignore[arg-type]


def test_failure_unwrap_raises_with_cause() -> None:
    cause = OSError("disk")
    err = failure(ErrorCode.FILE_READ_ERROR, "read failed", cause)

    with pytest.raises(ResizerError) as excinfo:
        err.unwrap()

    assert excinfo.value.__cause__ is cause


def test_failure_equality_ignores_cause() -> None:
    assert failure(ErrorCode.VALIDATION_ERROR, "x", ValueError()) == failure(ErrorCode.VALIDATION_ERROR, "x")


@pytest.mark.parametrize(
    ("code", "status"),
    [
        (ErrorCode.FILE_NOT_FOUND, 404),
        (ErrorCode.VALIDATION_ERROR, 400),
        (ErrorCode.UNSUPPORTED_FORMAT, 400),
        (ErrorCode.FILE_TOO_LARGE, 400),
        (ErrorCode.IMAGE_LOAD_ERROR, 400),
        (ErrorCode.FILE_READ_ERROR, 500),
        (ErrorCode.FILE_WRITE_ERROR, 500),
        (ErrorCode.IMAGE_PROCESSING_ERROR, 500),
        (ErrorCode.INTERNAL_SERVER_ERROR, 500),
    ],
)
def test_http_status_mapping(code: ErrorCode, status: int) -> None:
    assert code.http_status == status


def test_resize_mode_parse() -> None:
    assert ResizeMode.parse(None) is ResizeMode.FIT
    assert ResizeMode.parse("") is ResizeMode.FIT
    assert ResizeMode.parse(" Crop ") is ResizeMode.CROP
    assert ResizeMode.parse("zoom") is None


def test_output_format_from_extension() -> None:
    assert OutputFormat.from_extension(".JPEG") is OutputFormat.JPEG
    assert OutputFormat.from_extension(".gif") is OutputFormat.GIF
    assert OutputFormat.from_extension(".tiff") is OutputFormat.PNG
    assert OutputFormat.from_extension(None) is OutputFormat.PNG


def test_response_from_result() -> None:
    ok = ResizeResponse.from_result(success(ResizeOutcome("out/a_512x512.png", ResizeMode.CROP, 10)), 512)
    err = ResizeResponse.from_result(failure(ErrorCode.FILE_TOO_LARGE, "too big"))

    assert ok.to_dict() == {
        "success": True,
        "message": "图片已转换为 512×512",
        "outputIdentifier": "out/a_512x512.png",
        "modeUsed": "crop",
    }
    assert ok.status_code == 200
    assert err.to_dict() == {"success": False, "errorCode": "FILE_TOO_LARGE", "message": "too big"}
    assert err.status_code == 400


def test_padding_color_accepts_hex_string() -> None:
    assert ResizeSettings(padding_color="#fff").padding_color == (255, 255, 255, 255)  # type: ignore[arg-type]
    assert ResizeSettings(padding_color=[10, 20, 30]).padding_color == (10, 20, 30, 255)  # type: ignore[arg-type]


@pytest.mark.parametrize("value", ["#ff", "white", 5, (0, 0, "0", 255)])
def test_padding_color_invalid_values_raise_configuration_error(value: object) -> None:
    with pytest.raises(InvalidConfigurationError, match="padding_color"):
        ResizeSettings(padding_color=value)  # type: ignore[arg-type]
