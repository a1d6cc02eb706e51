import sys
import platform

import asyncssh
import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pyfanssh import __version__

REPOSITORY = "https://github.com/souloss/pyfanssh"


def version_info():
    return [
        ("Program", "pyfanssh"),
        ("Version", __version__),
        ("Repository", REPOSITORY),
        ("Python", " ".join(sys.version.split("\n"))),
        ("Platform", platform.platform()),
        ("asyncssh", asyncssh.__version__),
    ]


def print_version():
    """
    print version
    """
    click.echo("\n".join(f"{key}: {value}" for key, value in version_info()))


def print_version_by_rich():
    """
    使用 Rich 输出版本信息
    """
    console = Console()

    table = Table(show_header=False, box=box.ROUNDED, padding=(0, 1))
    table.add_column("Key", style="cyan bold", width=12)
    table.add_column("Value", style="white")

    for key, value in version_info():
        table.add_row(key, value)

    console.print(Panel(table, title=f"[b]pyfanssh {__version__}[/b]", border_style="yellow"))


@click.command()
@click.option("--simple", "-s", is_flag=True, default=False, help="简化版输出")
def version_command(simple):
    """
    打印版本信息
    """
    if simple:
        print_version()
    else:
        print_version_by_rich()
