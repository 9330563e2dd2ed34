"""
CLI 模块

命令行接口实现。
"""

import asyncio
from typing import Optional

import click
from loguru import logger

from modkeeper import __version__
from modkeeper.config import load_config
from modkeeper.exceptions import ModKeeperError
from modkeeper.logger import setup_logger
from modkeeper.models import ModKeeperConfig
from modkeeper.orchestrator import ModKeeper


def run(coro):
    """运行协程，将库错误转换为 ClickException"""
    try:
        return asyncio.run(coro)
    except ModKeeperError as e:
        logger.error(f"{e}")
        raise click.ClickException(str(e))


async def _with_keeper(ctx: click.Context, action):
    config: ModKeeperConfig = ctx.obj["config"]
    async with ModKeeper(ctx.obj["manifest"], config=config) as keeper:
        return await action(keeper)


@click.group()
@click.option(
    "-c", "--config", "config_path", type=click.Path(exists=True), help="配置文件路径"
)
@click.option("-m", "--manifest", help="清单文件路径")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], manifest: Optional[str], debug: bool):
    """ModKeeper - Minecraft 模组下载与更新工具"""
    setup_logger(level="DEBUG" if debug else None)

    try:
        config = load_config(config_path)
    except ModKeeperError as e:
        raise click.ClickException(str(e))

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["manifest"] = manifest or config.manifest


@main.command()
@click.argument("name")
@click.pass_context
def search(ctx: click.Context, name: str):
    """按名称搜索模组"""

    async def action(keeper: ModKeeper):
        return await keeper.resolver.search_by_name(name)

    hits = run(_with_keeper(ctx, action))
    for hit in hits:
        click.echo(f"{hit.slug}\t{hit.project_id}\t{hit.title}")


@main.command()
@click.argument("name")
@click.argument("target")
@click.option("-l", "--loader", help="模组加载器")
@click.pass_context
def versions(ctx: click.Context, name: str, target: str, loader: Optional[str]):
    """列出兼容版本（TARGET 为游戏版本或精确模组版本号）"""

    async def action(keeper: ModKeeper):
        return await keeper.get_compatible_versions(name, target, loader)

    for version in run(_with_keeper(ctx, action)):
        click.echo(
            f"{version.version_number}\t{','.join(version.loaders)}\t"
            f"{','.join(version.game_versions)}"
        )


@main.command()
@click.argument("name")
@click.argument("target")
@click.option("-l", "--loader", help="模组加载器")
@click.option("-d", "--mods-dir", help="模组目录")
@click.pass_context
def download(
    ctx: click.Context,
    name: str,
    target: str,
    loader: Optional[str],
    mods_dir: Optional[str],
):
    """下载并安装模组"""

    async def action(keeper: ModKeeper):
        return await keeper.download(name, target, loader, mods_dir)

    version = run(_with_keeper(ctx, action))
    click.echo(f"{name} {version.version_number}")


@main.command()
@click.argument("game_version", required=False)
@click.option("-l", "--loader", help="清单未记录加载器时使用的加载器")
@click.option("-d", "--mods-dir", help="模组目录")
@click.pass_context
def update(
    ctx: click.Context,
    game_version: Optional[str],
    loader: Optional[str],
    mods_dir: Optional[str],
):
    """更新清单中的所有模组"""

    async def action(keeper: ModKeeper):
        return await keeper.update_all(mods_dir, game_version, loader)

    outcomes = run(_with_keeper(ctx, action))
    if not outcomes:
        click.echo("所有模组均为最新")
    for outcome in outcomes:
        click.echo(f"{outcome.mod_name} {outcome.old_version} -> {outcome.new_version}")


@main.command()
@click.argument("name")
@click.option("-d", "--mods-dir", help="模组目录")
@click.pass_context
def remove(ctx: click.Context, name: str, mods_dir: Optional[str]):
    """移除已安装的模组"""

    async def action(keeper: ModKeeper):
        return await keeper.remove(name, mods_dir)

    run(_with_keeper(ctx, action))
    click.echo(f"已移除 {name}")


@main.command(name="list")
@click.pass_context
def list_installed(ctx: click.Context):
    """列出清单中的模组"""

    async def action(keeper: ModKeeper):
        return keeper.installed()

    entries = run(_with_keeper(ctx, action))
    if not entries:
        click.echo("清单为空")
    for name, entry in entries.items():
        click.echo(f"{name}\t{entry.version}\t{entry.loader or '-'}\t{entry.filename or '-'}")


if __name__ == "__main__":
    main()
