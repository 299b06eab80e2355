"""CLI主应用 - 基于Click和Rich"""

from __future__ import annotations

import sys
from collections.abc import Awaitable
from pathlib import Path
from typing import NoReturn, TypeVar

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ...application.ports.inbound import LinkBatchProgress
from ...application.services.error_aggregator import summarize_records
from ...domain.entities import LinkBatchResult, LinkRequestItem
from ...domain.value_objects import EnvVersion
from ...infrastructure.config import Container, get_container, get_settings
from ...infrastructure.observability import install_exception_hooks, run_with_capture
from ...shared.constants import VERSION
from ...shared.exceptions import LinkerError, NotFoundError
from ...shared.utils import mask_app_id, setup_logger

console = Console()

T = TypeVar("T")


def _fail(e: Exception) -> NoReturn:
    """打印错误并以非零状态退出"""
    message = e.user_message if isinstance(e, LinkerError) else (str(e) or type(e).__name__)
    console.print(f"[red]{escape(message)}")
    sys.exit(1)


def _run(container: Container, awaitable: Awaitable[T]) -> T:
    """在事件循环中运行协程，结束后释放网络资源"""

    async def runner() -> T:
        try:
            return await awaitable
        finally:
            await container.aclose()

    return run_with_capture(runner(), container.errors)


@click.group()
@click.version_option(VERSION, prog_name="wechat-linker")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """微信小程序 URL Link 生成器 - 命令行工具"""
    settings = get_settings()
    log_level = "DEBUG" if debug or settings.debug else settings.log_level
    setup_logger(level=log_level)

    # 未捕获的异常写入错误日志，命令结束后恢复原有钩子
    try:
        errors_log = get_container().errors
    except LinkerError as e:
        _fail(e)
    ctx.call_on_close(install_exception_hooks(errors_log))


# ============ profile ============


@cli.group()
def profile():
    """管理小程序配置"""


@profile.command(name="list")
@click.option("--json", "output_json", is_flag=True, help="以 JSON 格式输出")
def profile_list(output_json: bool):
    """列出所有小程序配置"""
    try:
        store = get_container().credential_store
        default_id = store.default_profile_id
    except LinkerError as e:
        _fail(e)

    if output_json:
        data = [
            {
                "id": p.id,
                "name": p.name,
                "appid": mask_app_id(p.app_id),
                "default": p.id == default_id,
            }
            for p in store.profiles
        ]
        console.print_json(data=data)
        return

    if not store.profiles:
        console.print("[yellow]还没有小程序配置，使用 profile add 添加")
        return

    table = Table(title="小程序配置")
    table.add_column("", width=1)
    table.add_column("ID", style="dim")
    table.add_column("名称", style="cyan")
    table.add_column("AppID", style="green")
    table.add_column("创建时间")

    for p in store.profiles:
        table.add_row(
            "*" if p.id == default_id else "",
            p.id,
            escape(p.name),
            mask_app_id(p.app_id),
            p.created_at.astimezone().strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@profile.command(name="add")
@click.argument("name")
@click.argument("app_id", metavar="APPID")
@click.argument("app_secret", metavar="SECRET")
def profile_add(name: str, app_id: str, app_secret: str):
    """
    添加小程序配置

    示例:
        wechat-linker profile add 商城 wx1234567890 your-app-secret
    """
    try:
        store = get_container().credential_store
        created = store.add(name, app_id, app_secret)
    except LinkerError as e:
        _fail(e)

    console.print(f"[green]✓ 已添加: {escape(created.name)}[/green] [dim]({created.id})[/dim]")
    if store.default_profile_id == created.id:
        console.print("[dim]已设为默认小程序[/dim]")


@profile.command(name="edit")
@click.argument("profile_id", metavar="ID")
@click.option("--name", help="新名称")
@click.option("--appid", "app_id", help="新 AppID")
@click.option("--secret", "app_secret", help="新 AppSecret")
def profile_edit(profile_id: str, name: str | None, app_id: str | None, app_secret: str | None):
    """修改小程序配置（未指定的字段保持不变）"""
    try:
        store = get_container().credential_store
    except LinkerError as e:
        _fail(e)
    current = store.resolve(profile_id)
    if current is None:
        _fail(NotFoundError(f"小程序配置不存在: {profile_id}"))

    try:
        store.update(
            profile_id,
            name if name is not None else current.name,
            app_id if app_id is not None else current.app_id,
            app_secret if app_secret is not None else current.app_secret,
        )
    except LinkerError as e:
        _fail(e)

    console.print(f"[green]✓ 已更新: {escape(profile_id)}")


@profile.command(name="remove")
@click.argument("profile_id", metavar="ID")
@click.option("--yes", "-y", is_flag=True, help="不再确认")
def profile_remove(profile_id: str, yes: bool):
    """删除小程序配置"""
    try:
        store = get_container().credential_store
    except LinkerError as e:
        _fail(e)
    current = store.resolve(profile_id)
    if current is None:
        _fail(NotFoundError(f"小程序配置不存在: {profile_id}"))

    if not yes and not click.confirm(f"确定删除 {current.name}？"):
        console.print("[已取消]")
        return

    try:
        store.remove(profile_id)
    except LinkerError as e:
        _fail(e)

    console.print(f"[green]✓ 已删除: {escape(current.name)}")


@profile.command(name="default")
@click.argument("profile_id", metavar="[ID]", required=False)
@click.option("--clear", is_flag=True, help="取消默认小程序")
def profile_default(profile_id: str | None, clear: bool):
    """查看或设置默认小程序"""
    try:
        store = get_container().credential_store
    except LinkerError as e:
        _fail(e)

    if not profile_id and not clear:
        current = store.default_profile
        if current is None:
            console.print("[yellow]未设置默认小程序")
        else:
            console.print(f"默认小程序: [cyan]{escape(current.name)}[/cyan] [dim]({current.id})[/dim]")
        return

    try:
        store.set_default(None if clear else profile_id)
    except LinkerError as e:
        _fail(e)

    if clear:
        console.print("[green]✓ 已取消默认小程序")
    else:
        console.print(f"[green]✓ 默认小程序: {escape(profile_id)}")


# ============ generate ============


def _collect_items(items: tuple[str, ...], input_file: str | None) -> list[LinkRequestItem]:
    collected = [LinkRequestItem.parse(text) for text in items]
    if input_file:
        with open(input_file, "r", encoding="utf-8") as f:
            collected.extend(
                LinkRequestItem.parse(line.strip())
                for line in f
                if line.strip() and not line.strip().startswith("#")
            )
    return collected


def _display_results(result: LinkBatchResult) -> None:
    table = Table(title="URL Link")
    table.add_column("#", style="dim", justify="right")
    table.add_column("路径", style="cyan")
    table.add_column("参数")
    table.add_column("结果")

    for index, item in enumerate(result, start=1):
        outcome = f"[green]{escape(item.link)}" if item.ok else f"[red]{escape(item.error_message)}"
        table.add_row(str(index), escape(item.path), escape(item.query), outcome)

    console.print(table)


@cli.command()
@click.argument("items", nargs=-1, required=False)
@click.option("--profile", "-p", "profile_id", help="小程序配置 ID（默认使用默认小程序）")
@click.option(
    "--env",
    "-e",
    "env_version",
    type=click.Choice([v.value for v in EnvVersion]),
    help="小程序版本（默认读取配置）",
)
@click.option("--file", "-f", "input_file", type=click.Path(exists=True), help="从文件读取路径（每行一个）")
@click.option("--copy-file", "-o", type=click.Path(), help="把成功的链接写入文件（每行一个）")
@click.option("--output-format", type=click.Choice(["text", "json"]), default="text", help="输出格式")
def generate(
    items: tuple[str, ...],
    profile_id: str | None,
    env_version: str | None,
    input_file: str | None,
    copy_file: str | None,
    output_format: str,
):
    """
    批量生成 URL Link

    ITEM 形如 pages/index 或 pages/index?id=1

    示例:
        wechat-linker generate pages/index "pages/detail?id=1"
        wechat-linker generate -f paths.txt -e trial -o links.txt
    """
    container = get_container()
    env = env_version or container.settings.link.default_env_version
    requests = _collect_items(items, input_file)
    if profile_id is None:
        try:
            profile_id = container.credential_store.default_profile_id
        except LinkerError as e:
            _fail(e)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
        disable=output_format == "json",
        transient=True,
    ) as progress:
        task = progress.add_task("正在生成...", total=None)

        def on_progress(state: LinkBatchProgress) -> None:
            progress.update(
                task,
                total=state.total,
                completed=state.completed,
                description=f"正在生成: {state.current_path}",
            )

        try:
            result = _run(
                container,
                container.link_generator.generate(profile_id, env, requests, on_progress),
            )
        except LinkerError as e:
            _fail(e)

    if output_format == "json":
        output_data = {
            "success_count": len(result.succeeded),
            "failed_count": len(result.failed),
            "total": len(result),
            "results": [r.to_dict() for r in result],
        }
        console.print_json(data=output_data)
    else:
        _display_results(result)
        console.print(
            f"\n[bold]生成完成:[/bold] 成功 {len(result.succeeded)}, 失败 {len(result.failed)}"
        )

    if copy_file and result.succeeded:
        Path(copy_file).write_text(result.links + "\n", encoding="utf-8")
        if output_format != "json":
            console.print(f"[green]链接已写入: {escape(copy_file)}")

    if not result.succeeded:
        sys.exit(1)


# ============ errors ============


@cli.group()
def errors():
    """查看与提交错误日志"""


@errors.command(name="list")
@click.option("--json", "output_json", is_flag=True, help="以 JSON 格式输出")
def errors_list(output_json: bool):
    """列出已记录的错误"""
    records = get_container().errors.records

    if output_json:
        console.print_json(data=[r.to_dict() for r in records])
        return

    if not records:
        console.print("[green]没有记录的错误")
        return

    table = Table(title="错误日志")
    table.add_column("时间", style="dim")
    table.add_column("来源")
    table.add_column("级别")
    table.add_column("消息")

    for record in records:
        table.add_row(
            record.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            record.origin.value,
            record.severity.value,
            escape(record.message),
        )

    console.print(table)
    counts = summarize_records(records)
    console.print(
        f"共 {len(records)} 条: "
        + ", ".join(f"{level} {count}" for level, count in counts.items() if count)
    )


@errors.command(name="clear")
def errors_clear():
    """清空错误日志"""
    get_container().errors.clear()
    console.print("[green]✓ 错误日志已清空")


@errors.command(name="report")
@click.argument("contact")
def errors_report(contact: str):
    """
    提交错误报告（成功后清空日志）

    示例:
        wechat-linker errors report someone@example.com
    """
    container = get_container()
    try:
        count = _run(container, container.report_use_case.execute(contact))
    except LinkerError as e:
        _fail(e)

    console.print(f"[green]✓ 错误报告已提交，共 {count} 条")
    saved_to = getattr(container.report_delivery, "last_report_path", None)
    if saved_to:
        console.print(f"[dim]报告文件: {escape(str(saved_to))}[/dim]")
