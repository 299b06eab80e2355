"""微信小程序 URL Link 生成器 - 主入口点

python -m wechat_linker <command> [args]
"""

from .presentation.cli import run_cli


def main() -> None:
    """主入口函数"""
    run_cli()


if __name__ == "__main__":
    main()
