"""主命令行接口"""

import click

from pyfanssh import __version__
from pyfanssh.commands.execute import execute_command
from pyfanssh.commands.hosts import hosts_command
from pyfanssh.commands.upload import upload_command
from pyfanssh.commands.version import version_command
from pyfanssh.config.settings import (
    DEFAULT_INVENTORY,
    DEFAULT_TIMEOUT,
    ENV_PREFIX,
    RunSettings,
)
from pyfanssh.core.models import HostKeyPolicy
from pyfanssh.log import LOG_LEVELS, setup_logging


@click.group(context_settings={"auto_envvar_prefix": ENV_PREFIX})
@click.version_option(version=__version__)
@click.option(
    "--inventory", "-i", default=DEFAULT_INVENTORY, type=click.Path(), help="主机清单文件 (YAML)"
)
@click.option(
    "--log-level",
    "-l",
    default="INFO",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="日志级别",
)
@click.option(
    "--timeout",
    "-t",
    default=DEFAULT_TIMEOUT,
    type=click.FloatRange(min=0, min_open=True),
    help="每个阶段的超时时间（秒）",
)
@click.option(
    "--connect-timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="连接阶段超时时间，默认同 --timeout",
)
@click.option(
    "--max-concurrent",
    "-c",
    default=0,
    type=click.IntRange(min=0),
    help="最大并发数，0 表示不限制",
)
@click.option(
    "--host-key-policy",
    type=click.Choice([policy.value for policy in HostKeyPolicy]),
    default=HostKeyPolicy.ACCEPT_ALL.value,
    help="主机密钥校验策略，accept-all 不做任何校验",
)
@click.option("--known-hosts", type=click.Path(), help="known_hosts 文件路径")
@click.option("--service", "-s", multiple=True, help="只操作指定服务，可重复")
@click.pass_context
def cli(
    ctx,
    inventory,
    log_level,
    timeout,
    connect_timeout,
    max_concurrent,
    host_key_policy,
    known_hosts,
    service,
):
    """pyfanssh - 在多台主机上并发执行命令或上传文件

    每次调用只执行一种操作，汇总所有主机的 stdout 和 stderr 后输出。
    """
    setup_logging(log_level)
    ctx.obj = RunSettings(
        inventory=inventory,
        timeout=timeout,
        connect_timeout=connect_timeout,
        max_concurrent=max_concurrent,
        host_key_policy=HostKeyPolicy(host_key_policy),
        known_hosts=known_hosts,
        services=tuple(service),
        log_level=log_level.upper(),
    )


# 注册子命令
cli.add_command(execute_command, name="exec")
cli.add_command(upload_command, name="upload")
cli.add_command(hosts_command, name="hosts")
cli.add_command(version_command, name="version")


def main():
    """主入口函数"""
    cli()


if __name__ == "__main__":
    main()
