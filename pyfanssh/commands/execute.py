"""命令执行命令"""

import asyncio
import logging
from typing import List, Optional

import click

from pyfanssh.config.inventory import Inventory, InventoryError
from pyfanssh.config.settings import RunSettings
from pyfanssh.core.connection import ConnectionEstablisher
from pyfanssh.core.executor import CommandExecutor
from pyfanssh.core.models import ConnectionSpec
from pyfanssh.core.orchestrator import Dispatcher, Orchestrator
from pyfanssh.ui.formatter import OUTPUT_FORMATS, OutputFormatter


@click.command()
@click.argument("command")
@click.option(
    "--output",
    "-o",
    type=click.Choice(OUTPUT_FORMATS),
    default="default",
    help="输出格式",
)
@click.option("--output-file", "-f", help="输出文件路径")
@click.option("--show-errors", is_flag=True, help="在报告中显示每台主机的错误")
@click.pass_obj
def execute_command(settings: RunSettings, command, output, output_file, show_errors):
    """在清单中的所有主机上执行命令"""

    _run_operation(
        settings, CommandExecutor(command, logger=_logger()), output, output_file, show_errors
    )


def _logger() -> logging.Logger:
    return logging.getLogger("pyfanssh")


def _get_target_specs(settings: RunSettings) -> List[ConnectionSpec]:
    """读取清单，得到所有目标主机；清单错误直接终止"""
    try:
        inventory = Inventory.from_file(settings.inventory)
        return inventory.specs(settings.services)
    except InventoryError as e:
        raise click.ClickException(str(e))


def _run_operation(
    settings: RunSettings,
    dispatcher: Dispatcher,
    output: str,
    output_file: Optional[str],
    show_errors: bool,
):
    logger = _logger()
    specs = _get_target_specs(settings)

    if not specs:
        click.echo(f"No hosts found in inventory '{settings.inventory}'", err=True)
        return

    logger.debug("Starting ssh executor")

    establisher = ConnectionEstablisher(
        host_key_policy=settings.host_key_policy,
        known_hosts=settings.known_hosts,
        connect_timeout=settings.connect_timeout,
        logger=logger,
    )
    orchestrator = Orchestrator(
        establisher,
        dispatcher,
        connect_timeout=settings.connect_timeout,
        operation_timeout=settings.timeout,
        max_concurrent=settings.max_concurrent,
        logger=logger,
    )

    report = asyncio.run(orchestrator.run(specs))

    formatter = OutputFormatter(output, show_errors=show_errors)
    if output_file:
        formatter.write_report(report, output_file)
        logger.info(f"Results saved to {output_file}")
    else:
        formatter.print_report(report)
