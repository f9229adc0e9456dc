"""
Command line entry point of the assigner web service.

Reacts to Teamwork.com task webhooks and assigns users based on AI, cost
and workload decisions.
"""

import argparse
import logging
import sys
from typing import Optional

import uvicorn
from dotenv import load_dotenv

from teamwork_ai.agent import AgentConfigError, registered_agents
from teamwork_ai.config import LOG_FORMAT, ConfigError, Settings, configure_logging
from teamwork_ai.delegation.models import AssignOptions
from teamwork_ai.main import build_agent, create_app

logger = logging.getLogger("teamwork_ai")

EXIT_INVALID_INPUT = 1
EXIT_SETUP_FAILURE = 2


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="teamwork-ai-assigner",
        description="Assign Teamwork.com tasks with the help of an AI agent.",
        epilog=f"Available agents: {', '.join(registered_agents())}",
    )
    parser.add_argument("--skip-rates", action="store_true", help="Skip rate analysis when assigning a task")
    parser.add_argument(
        "--skip-workload", action="store_true", help="Skip workload analysis when assigning a task"
    )
    parser.add_argument(
        "--skip-assignment", action="store_true", help="Skip task assignment (only comment)"
    )
    parser.add_argument("--skip-comment", action="store_true", help="Skip task comment (only assign)")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    load_dotenv()

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        # logging is not configured yet
        logging.basicConfig(level=logging.ERROR, format=LOG_FORMAT)
        for error in e.errors:
            logger.error(f"Failed to parse configuration: {error}")
        return EXIT_INVALID_INPUT

    configure_logging(settings.logging_level)

    try:
        agent = build_agent(settings)
    except AgentConfigError as e:
        logger.error(f"Failed to initialize agent: {e}")
        return EXIT_SETUP_FAILURE

    options = AssignOptions(
        skip_rates=args.skip_rates,
        skip_workload=args.skip_workload,
        skip_assignment=args.skip_assignment,
        skip_comment=args.skip_comment,
    )
    app = create_app(settings=settings, agent=agent, options=options)

    logger.info(f"Starting web server on 0.0.0.0:{settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.logging_level)
    logger.info("Server stopped")
    return 0


def run() -> None:
    sys.exit(main())
