"""命令行界面"""

from .app import cli


def run_cli() -> None:
    """运行CLI"""
    cli()


__all__ = ["cli", "run_cli"]
