import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import ValidationError

from teamwork_ai.agent import AgentConfigError, TaskAgent, init_agent
from teamwork_ai.config import Settings
from teamwork_ai.delegation.models import AssignOptions
from teamwork_ai.tools.teamwork import TeamworkClient
from teamwork_ai.triggers.webhooks import handle_task_webhook

logger = logging.getLogger(__name__)

SERVICE_NAME = "teamwork-ai"
VERSION = "0.1.0"


def build_agent(settings: Settings) -> TaskAgent:
    """Initialize the configured agent adapter."""
    agent = init_agent(settings.agentic_name, settings.agentic_dsn)
    if agent is None:
        raise AgentConfigError("no agentic implementation configured")
    return agent


def create_app(
    settings: Optional[Settings] = None,
    agent: Optional[TaskAgent] = None,
    client: Optional[TeamworkClient] = None,
    options: Optional[AssignOptions] = None,
) -> FastAPI:
    """
    Build the webhook service.

    Missing collaborators are created from the environment on startup; a
    Teamwork client created here is closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_client = None
        if app.state.client is None or app.state.agent is None:
            load_dotenv()
            current = settings or Settings.from_env()
            if app.state.client is None:
                owned_client = TeamworkClient(current.teamwork_server, current.teamwork_api_token)
                app.state.client = owned_client
                logger.info(f"Teamwork client ready for {current.teamwork_server}")
            if app.state.agent is None:
                app.state.agent = build_agent(current)

        yield

        if owned_client is not None:
            await owned_client.aclose()
            logger.info("Teamwork client closed")

    app = FastAPI(
        title="teamwork-ai",
        description="Assigns Teamwork.com tasks with the help of an AI agent",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.client = client
    app.state.agent = agent
    app.state.options = options or AssignOptions()

    @app.get("/")
    async def root():
        """API root - shows available endpoints."""
        return {
            "service": SERVICE_NAME,
            "version": VERSION,
            "docs": "/docs",
            "endpoints": {
                "health": "/health",
                "task_webhook": "/teamwork-ai/webhooks/task",
            },
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok", "service": SERVICE_NAME}

    @app.post("/teamwork-ai/webhooks/task")
    async def task_webhook(request: Request):
        """Handle Teamwork task created/updated webhooks."""
        payload = await request.body()
        try:
            await handle_task_webhook(
                payload, request.app.state.client, request.app.state.agent, request.app.state.options
            )
        except ValidationError as e:
            logger.error(f"Failed to decode request body: {e}")
            return PlainTextResponse("failed to decode request body", status_code=400)
        except Exception as e:
            logger.error(f"Failed to auto assign task: {e}", exc_info=True)
            return PlainTextResponse("failed to auto assign task", status_code=500)

        return Response(status_code=200)

    return app


app = create_app()
