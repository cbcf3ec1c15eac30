#!/usr/bin/env python3
"""Main entry point for the cooperative voting service."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from coop_voting.domain.shared.exceptions import DomainError
from coop_voting.domain.shared.messages import LogTemplates
from coop_voting.domain.voting.value_objects import AgendaCategory, AgendaStatus, VoteChoice

if TYPE_CHECKING:
    from coop_voting.config.container import Container
    from coop_voting.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.warning(LogTemplates.LOGGING_CONFIG_FALLBACK, _LOGGING_CONFIG_PATH)

    logging.getLogger().setLevel(resolved_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coop-voting", description="Run timed yes/no votes on cooperative agendas."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create-agenda", help="Create a new agenda")
    create.add_argument("--title", required=True)
    create.add_argument("--description", default="")
    create.add_argument(
        "--category",
        choices=[c.value for c in AgendaCategory],
        default=AgendaCategory.OUTROS.value,
    )
    create.add_argument(
        "--status",
        choices=[s.value for s in AgendaStatus.startable()],
        default=AgendaStatus.OPEN.value,
    )

    start = subparsers.add_parser("start-session", help="Open a timed voting session")
    start.add_argument("agenda_id")
    start.add_argument("--minutes", type=int, required=True, dest="duration_in_minutes")

    vote = subparsers.add_parser("vote", help="Cast a YES/NO vote")
    vote.add_argument("agenda_id")
    vote.add_argument("user_id")
    vote.add_argument("choice", metavar="{" + ",".join(c.value for c in VoteChoice) + "}")

    tally = subparsers.add_parser("tally", help="Show the current tally of an agenda")
    tally.add_argument("agenda_id")

    sessions = subparsers.add_parser("sessions", help="List the sessions of an agenda")
    sessions.add_argument("agenda_id")

    subparsers.add_parser("serve", help="Run the expired session sweeper until interrupted")

    return parser


async def _dispatch(container: Container, args: argparse.Namespace) -> dict[str, Any] | None:
    from coop_voting.application.commands import CastVoteCommand, StartSessionCommand
    from coop_voting.application.queries import GetSessionsQuery, GetTallyQuery, tally_payload
    from coop_voting.domain.shared.validators import validate_model

    match args.command:
        case "create-agenda":
            agenda = await container.voting_service.create_agenda(
                title=args.title,
                description=args.description,
                category=AgendaCategory(args.category),
                status=AgendaStatus(args.status),
            )
            return agenda.model_dump(mode="json", by_alias=True)
        case "start-session":
            command = StartSessionCommand.from_payload(
                {"agendaId": args.agenda_id, "durationInMinutes": args.duration_in_minutes}
            )
            result = await container.start_session_handler.handle(command)
            return result.to_payload()
        case "vote":
            command = CastVoteCommand.from_payload(
                {"agendaId": args.agenda_id, "userId": args.user_id, "vote": args.choice}
            )
            vote_result = await container.cast_vote_handler.handle(command)
            return vote_result.to_payload()
        case "tally":
            query = GetTallyQuery.from_payload({"agendaId": args.agenda_id})
            return tally_payload(await container.get_tally_handler.handle(query))
        case "sessions":
            sessions_query = validate_model(GetSessionsQuery, {"agenda_id": args.agenda_id})
            listing = await container.get_sessions_handler.handle(sessions_query)
            active = listing.active_session
            return {
                "agenda": listing.agenda.model_dump(mode="json", by_alias=True),
                "sessions": [s.model_dump(mode="json", by_alias=True) for s in listing.sessions],
                "activeSession": active.model_dump(mode="json", by_alias=True) if active else None,
            }
        case "serve":
            await _serve(container)
            return None
        case _:
            raise ValueError(f"Unknown command: {args.command}")


async def _serve(container: Container) -> None:
    if container.settings.sweeper.enabled:
        container.expiry_sweeper.start()
    await asyncio.Event().wait()


async def run(args: argparse.Namespace, settings: Settings) -> dict[str, Any] | None:
    from coop_voting.config.container import create_container

    container = create_container(settings)
    try:
        await container.initialize()
        return await _dispatch(container, args)
    finally:
        await container.shutdown()


def main(argv: Sequence[str] | None = None) -> int:
    from coop_voting.config.settings import get_settings

    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.APP_STARTING.format(environment=settings.environment))

    try:
        payload = asyncio.run(run(args, settings))
    except KeyboardInterrupt:
        logger.info(LogTemplates.APP_KEYBOARD_INTERRUPT)
        return 0
    except DomainError as e:
        print(f"error [{e.code}]: {e.message}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception(LogTemplates.APP_FATAL_ERROR, e)
        return 1

    if payload is not None:
        print(json.dumps(payload, indent=2))
    logger.info(LogTemplates.APP_STOPPED)
    return 0


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
