"""
Minimal sqlbus chat script.

Usage:
    python examples/run_broker.py --dsn DSN [--channel NAME] [--prefix PREFIX] [--poll SECONDS]

Lines typed on stdin are published on the channel; messages from every
broker sharing the table are printed as they are polled. Options default to
the SQLBUS_* environment variables (see sqlbus.config.BrokerConfig).
"""

import argparse
import asyncio
import logging
import sys

from sqlbus.broker import SqlBroker
from sqlbus.config import BrokerConfig
from sqlbus.types import TimeUnit

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


async def main() -> None:
    config = BrokerConfig.from_env()
    parser = argparse.ArgumentParser(description="sqlbus chat")
    parser.add_argument("--dsn", default=config.dsn)
    parser.add_argument("--channel", default="chat")
    parser.add_argument("--prefix", default=config.table_prefix)
    parser.add_argument("--poll", type=float, default=config.poll_seconds)
    args = parser.parse_args()
    if not args.dsn:
        parser.error("--dsn or SQLBUS_DSN is required")

    config.dsn = args.dsn
    config.table_prefix = args.prefix
    config.poll_interval = args.poll
    config.poll_unit = TimeUnit.SECONDS

    async def on_message(channel: str, data: bytes) -> None:
        print(f"[{channel}] {data.decode('utf-8', errors='replace')}")

    broker = SqlBroker.from_config(config, on_message=on_message, channels=[args.channel])
    if not await broker.start():
        logger.error("could not start broker on %s", broker.table)
        return
    logger.info(
        "sqlbus listening on table %s, channel %s (poll=%.1fs)",
        broker.table,
        args.channel,
        broker.poll_interval,
    )

    loop = asyncio.get_running_loop()
    try:
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            await broker.send(args.channel, line.rstrip("\n").encode("utf-8"))
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        await broker.close()
        logger.info("broker stopped")


if __name__ == "__main__":
    asyncio.run(main())
