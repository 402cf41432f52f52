"""
PizzaRound config service - admin entry point.

Resolves and stores round settings (planned pizzas per round, total round
limit) in PostgreSQL. Each subcommand prints its result as JSON.
"""

import argparse
import asyncio
import json
import sys
from typing import Any

from src.config.settings import Settings
from src.database.postgres import PostgresClient
from src.logger.logger import get_logger, init_logger
from src.logger.postgres_writer import PostgresWriter
from src.logger.types import Category, category, param
from src.repository.config_repository import ConfigRepository
from src.repository.flavor_history_repository import FlavorHistoryRepository
from src.repository.round_repository import RoundRepository
from src.services.round_config import ConfigResolver


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="pizzaround-config",
        description="Inspect and update PizzaRound game settings.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    get_config = commands.add_parser(
        "get-round-config", help="Resolve planned pizzas for a round"
    )
    get_config.add_argument("round_id")

    save_config = commands.add_parser(
        "save-round-config", help="Store planned pizzas for a round"
    )
    save_config.add_argument("round_id")
    save_config.add_argument("planned_units", type=int)

    commands.add_parser("get-round-limit", help="Show the total round limit")

    save_limit = commands.add_parser(
        "save-round-limit", help="Store the total round limit"
    )
    save_limit.add_argument("max_rounds", type=int)

    commands.add_parser(
        "check-round-limit", help="Check finalized rounds against the limit"
    )
    commands.add_parser("list-config", help="List all stored settings")

    return parser


async def run_command(
    args: argparse.Namespace,
    resolver: ConfigResolver,
    config_repo: ConfigRepository,
) -> dict[str, Any]:
    """
    Execute one parsed subcommand.

    Returns:
        JSON-serializable result
    """
    if args.command == "get-round-config":
        round_config = await resolver.get_round_config(args.round_id)
        return {
            "round_id": args.round_id,
            "planned_units": round_config.planned_units,
            "per_unit_time_limit": round_config.per_unit_time_limit,
        }
    if args.command == "save-round-config":
        await resolver.save_round_config(args.round_id, args.planned_units)
        return {"round_id": args.round_id, "planned_units": args.planned_units}
    if args.command == "get-round-limit":
        return {"limit": await resolver.get_round_limit()}
    if args.command == "save-round-limit":
        await resolver.save_round_limit(args.max_rounds)
        return {"limit": args.max_rounds}
    if args.command == "check-round-limit":
        status = await resolver.check_round_limit_exceeded()
        return status.to_dict()
    if args.command == "list-config":
        return {
            "entries": [
                {"key": e.key, "value": e.value, "description": e.description}
                for e in config_repo.get_all()
            ]
        }
    raise ValueError(f"Unknown command: {args.command}")


async def main(argv: list[str] | None = None) -> int:
    """Main entry point, returns the process exit code."""
    args = build_parser().parse_args(argv)
    settings = Settings()

    log_writer: PostgresWriter | None = None
    if settings.log_to_postgres:
        log_writer = PostgresWriter(dsn=settings.postgres.dsn)

    init_logger(
        service_name=settings.service_name,
        environment=settings.environment,
        writer=log_writer,
        level=settings.log_level,
    )
    logger = get_logger().with_category(Category.CLI)

    postgres_client = PostgresClient(settings.postgres)
    exit_code = 0
    try:
        # Until connected the writer dumps its buffer to stderr on close
        if log_writer:
            await log_writer.connect()
        await postgres_client.connect()
        logger.debug("Connected to PostgreSQL", category(Category.DATABASE))

        config_repo = ConfigRepository(postgres_client)
        resolver = ConfigResolver(
            config_repo,
            RoundRepository(postgres_client),
            FlavorHistoryRepository(postgres_client),
            default_planned_units=settings.game.default_planned_units,
            default_round_limit=settings.game.default_round_limit,
        )

        result = await run_command(args, resolver, config_repo)
        print(json.dumps(result))
    except Exception as e:
        logger.error("Command failed", e, param("command", args.command))
        exit_code = 1
    finally:
        await postgres_client.close()
        if log_writer:
            await log_writer.close()

    return exit_code


def cli() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
