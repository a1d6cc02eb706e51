"""文件上传命令"""

from pathlib import Path

import click

from pyfanssh.commands.execute import _logger, _run_operation
from pyfanssh.core.transfer import FileUploader, resolve_local_path
from pyfanssh.ui.formatter import OUTPUT_FORMATS


@click.command()
@click.argument("local_path")
@click.argument("remote_path")
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
def upload_command(settings, local_path, remote_path, output, output_file, show_errors):
    """上传文件到清单中的所有主机

    以 ~/ 开头的 REMOTE_PATH 会展开为 /home/<远程用户>/...
    """

    # 检查本地文件是否存在
    local_file = Path(resolve_local_path(local_path))
    if not local_file.is_file():
        raise click.ClickException(f"Local file '{local_path}' does not exist")

    uploader = FileUploader(local_path, remote_path, logger=_logger())
    _run_operation(settings, uploader, output, output_file, show_errors)
