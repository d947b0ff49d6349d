#!/usr/bin/env python3
"""Pyth price update submitter.

Fetches the latest signed price update from the Pyth network, pays the
update fee and submits it to a deployed consumer contract, then monitors
the price for a short while.

Configuration is read from environment variables or a .env file. See
.env.example for the available settings.
"""

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv
from eth_account import Account

from .src.PriceSubmitter import PriceSubmitter
from .src.SubmitterConfig import ConfigError, SubmitterConfig

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure root logging from LOG_LEVEL, including a value set in .env."""
    load_dotenv()
    level_name = (os.environ.get("LOG_LEVEL") or "INFO").upper()
    level = logging.getLevelName(level_name)
    known = isinstance(level, int)

    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger().setLevel(level if known else logging.INFO)
    if not known:
        logger.warning(f"Unknown LOG_LEVEL '{level_name}', using INFO")


def deploy_contract(config: SubmitterConfig) -> None:
    """Print the steps needed to deploy the consumer contract.

    Compilation and deployment are done with external tooling.

    :param config: Runtime configuration.
    """
    logger.info("Deploying your contract...")
    logger.info(f"Deployer wallet: {Account.from_key(config.private_key).address}")
    logger.info("To deploy your contract:")
    logger.info("1. Compile your Solidity contract using Hardhat/Foundry")
    logger.info(f"2. Deploy it with the Pyth contract address: {config.pyth_address}")
    logger.info("3. Set CONTRACT_ADDRESS in your .env file")


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the Pyth price update submitter CLI."""
    parser = argparse.ArgumentParser(
        description="Pyth price update submitter: fetch, pay and submit a price update",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fetch the latest ETH/USD update and submit it to CONTRACT_ADDRESS
  python -m pyth_submitter.main

  # Print contract deployment instructions
  python -m pyth_submitter.main deploy

Environment variables:
  SEPOLIA_RPC_URL, PRIVATE_KEY, CONTRACT_ADDRESS, PYTH_CONTRACT_ADDRESS,
  PRICE_FEED_ID, PRICE_LABEL, HERMES_URL, ORACLE_STRATEGY, GAS_LIMIT,
  MIN_BALANCE_ETH, MONITOR_DURATION, POLL_INTERVAL, LOG_LEVEL
""",
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=["deploy"],
        help="Optional command: 'deploy' prints deployment instructions",
    )

    args = parser.parse_args(argv)
    configure_logging()

    try:
        config = SubmitterConfig.from_env()
        config.validate(require_contract=args.command != "deploy")
    except ConfigError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    if args.command == "deploy":
        try:
            deploy_contract(config)
        except Exception as e:
            logger.error(f"Deployment helper failed: {e}")
            sys.exit(1)
        return

    # Log configuration
    logger.info("=" * 60)
    logger.info("Pyth Price Update Submitter")
    logger.info("=" * 60)
    logger.info(f"RPC URL:           {config.rpc_url}")
    logger.info(f"Pyth Contract:     {config.pyth_address}")
    logger.info(f"Price Feed:        {config.price_label} ({config.price_id})")
    logger.info(f"Hermes:            {config.hermes_url}")
    logger.info(f"Strategy:          {config.strategy.value}")
    logger.info(f"Gas Limit:         {config.gas_limit}")
    logger.info(
        f"Monitor:           {config.monitor_duration:g}s"
        if config.monitor_duration > 0
        else "Monitor:           disabled"
    )
    logger.info("=" * 60)

    try:
        price_submitter = PriceSubmitter(config)
        asyncio.run(price_submitter.run())
        logger.info("Script completed successfully!")
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        logger.error("Interrupted before the price update workflow completed")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Script failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
