"""清单查看命令"""

import click
from rich.console import Console
from rich.table import Table

from pyfanssh.commands.execute import _get_target_specs

console = Console()


@click.command()
@click.pass_obj
def hosts_command(settings):
    """列出清单解析出的目标主机（不显示密码）"""

    specs = _get_target_specs(settings)

    if not specs:
        console.print("[yellow]No hosts found[/yellow]")
        return

    table = Table(title=f"Hosts ({len(specs)})")
    table.add_column("Service", style="cyan")
    table.add_column("Host", style="white")
    table.add_column("Port", style="blue")
    table.add_column("User", style="green")
    table.add_column("Auth", style="yellow")

    for spec in specs:
        table.add_row(
            spec.service, spec.host, str(spec.port), spec.user, spec.credential.kind
        )

    console.print(table)
