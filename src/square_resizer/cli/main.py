"""命令行入口。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from square_resizer.core.config import ResizeSettings, load_settings
from square_resizer.core.exceptions import InvalidConfigurationError
from square_resizer.core.models import ResizeRequest, ResizeResponse
from square_resizer.core.result import Failure
from square_resizer.core.storage import FileSystemImageStorage
from square_resizer.processing.pipeline import ResizePipeline
from square_resizer.processing.validation import validate
from square_resizer.utils.logging import setup_logging

app = typer.Typer(help="将图片转换为固定尺寸的正方形缩略图。")
console = Console()


def _load(config: Optional[Path], **overrides: object) -> ResizeSettings:
    try:
        return load_settings(config, **overrides)
    except InvalidConfigurationError as exc:
        console.print(f"[bold red]配置错误[/]: {exc}")
        raise typer.Exit(code=2) from exc


def _print_failure(result: Failure) -> None:
    console.print(f"[bold red]{result.code.value}[/]: {result.message}")


@app.command("resize")
def resize_cli(
    source: str = typer.Argument(..., help="源图片路径"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="变换方式，fit 或 crop（默认 fit）"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON 配置文件"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="输出目录，覆盖配置文件"),
    size: Optional[int] = typer.Option(None, "--size", "-s", help="正方形边长，覆盖配置文件"),
    dev: bool = typer.Option(False, "--dev", help="开发模式：错误信息中包含异常详情"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """转换单张图片并写入输出目录。"""

    setup_logging(logging.DEBUG if verbose else logging.INFO)

    settings = _load(
        config,
        output_directory=output,
        target_width=size,
        target_height=size,
        development_mode=dev or None,
    )

    with ResizePipeline(settings) as pipeline:
        result = pipeline.submit_file(ResizeRequest(source=source, mode=mode)).result()

    if result.is_failure:
        _print_failure(result)
        raise typer.Exit(code=1)

    response = ResizeResponse.from_result(result, settings.target_size)
    console.print(f"[bold green]{response.message}[/] ({response.mode_used})")
    console.print(f"输出文件：{response.output_identifier}")


@app.command("check")
def check_cli(
    source: str = typer.Argument(..., help="源图片路径"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="变换方式，fit 或 crop（默认 fit）"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON 配置文件"),
) -> None:
    """只执行请求校验，不读取图片内容。"""

    settings = _load(config)
    result = validate(ResizeRequest(source=source, mode=mode), settings, FileSystemImageStorage(settings.input_directory))
    if result.is_failure:
        _print_failure(result)
        raise typer.Exit(code=1)

    console.print(f"[bold green]校验通过[/]: {source}")


if __name__ == "__main__":
    app()
