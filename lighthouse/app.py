"""A lighthouse bundling a logger, a messenger bot and an error-shipping hook."""

from __future__ import annotations

import argparse
import sys

from lighthouse.bot import Bot
from lighthouse.kibana import Hook, KibanaConfig
from lighthouse.langs import EN
from lighthouse.logger import Logger, Stage
from lighthouse.sperror import SpError


class Lighthouse:
    """Logs through its logger and ships errors through its hook."""

    def __init__(self, bot: Bot, hook: Hook, logger: Logger):
        self.bot = bot
        self.hook = hook
        self.logger = logger

    def debug(self, msg: str, *args) -> None:
        self.logger.debug(msg, *args)

    def info(self, msg: str, *args) -> None:
        self.logger.info(msg, *args)

    def error(self, e: BaseException | None, level: int) -> None:
        self.logger.error(e, level)

    def fire(self, error: SpError) -> None:
        self.hook.fire(error)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="lighthouse", description="Emit a sample debug record.")
    parser.parse_args(argv)
    hook = Hook(KibanaConfig())
    lighthouse = Lighthouse(Bot(), hook, Logger(Stage.LOCAL, EN, sys.stdout))
    lighthouse.debug("test")
    hook.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())