"""输出格式化模块"""

import json
from pathlib import Path
from typing import List

import click
import yaml

from pyfanssh.core.models import AggregatedReport, ReportEntry

OUTPUT_FORMATS = ["default", "json", "yaml", "none"]


class OutputFormatter:
    """输出格式化器"""

    def __init__(self, format_type: str = "default", show_errors: bool = False):
        self.format_type = format_type.lower()
        self.show_errors = show_errors

    def format_report(self, report: AggregatedReport, styled: bool = False) -> str:
        """格式化汇总报告"""
        if self.format_type == "none":
            return ""
        elif self.format_type == "json":
            return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
        elif self.format_type == "yaml":
            return yaml.dump(report.to_dict(), indent=2, allow_unicode=True)
        else:
            return self._format_default(report, styled)

    def _format_default(self, report: AggregatedReport, styled: bool) -> str:
        sections = [("stdout", report.stdout), ("stderr", report.stderr)]
        if self.show_errors:
            sections.append(("errors", report.errors))

        output_lines = []
        for title, entries in sections:
            output_lines.append(self._header(title, styled))
            output_lines.extend(self._render(entries))
        return "\n".join(output_lines)

    @staticmethod
    def _header(title: str, styled: bool) -> str:
        if not styled:
            return title
        color = "red" if title == "errors" else "cyan"
        return click.style(title, fg=color, bold=True)

    @staticmethod
    def _render(entries: List[ReportEntry]) -> List[str]:
        # 每行 "<地址>\t<内容>"，内容末尾的换行原样保留
        return [entry.render() for entry in entries]

    def print_report(self, report: AggregatedReport):
        """打印到标准输出"""
        if self.format_type == "none":
            return
        click.echo(self.format_report(report, styled=True))

    def write_report(self, report: AggregatedReport, output_file: str):
        """写入文件"""
        file_path = Path(output_file)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(self.format_report(report))
            f.write("\n")
