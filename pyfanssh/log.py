"""日志配置"""

import logging

import click

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


class ClickEchoHandler(logging.Handler):
    """通过 click.echo 输出到 stderr，避免混入 stdout 的结果"""

    def emit(self, record):
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """配置 pyfanssh 根日志器并返回它"""
    logger = logging.getLogger("pyfanssh")
    logger.setLevel(level.upper())

    # 重复调用时替换 handler，而不是叠加
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = ClickEchoHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    logger.addHandler(handler)
    return logger
