"""Application wiring.

Builds every component from settings in one place and manages the
content platform connection and the report scheduler.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass

from blocker_insights.config import Settings, get_settings
from blocker_insights.db.contentstack import ContentstackClient
from blocker_insights.integration.notification_service import ReportNotifier
from blocker_insights.integration.slack_adapter import SlackAdapter
from blocker_insights.reporting.insights import InsightGenerator
from blocker_insights.reporting.scheduler import report_scheduler_lifespan
from blocker_insights.reporting.service import ReportService
from blocker_insights.repositories.blocker_repo import BlockerRepository
from blocker_insights.repositories.report_repo import ReportRepository
from blocker_insights.repositories.team_member_repo import TeamMemberRepository
from blocker_insights.services.blocker_service import BlockerService
from blocker_insights.services.llm_client import LLMClient

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """All long-lived components of a running instance."""

    settings: Settings
    client: ContentstackClient
    blocker_repo: BlockerRepository
    report_repo: ReportRepository
    member_repo: TeamMemberRepository
    report_service: ReportService
    blocker_service: BlockerService
    notifier: ReportNotifier

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "AppContext":
        """Construct components; nothing connects until ``connect``."""
        settings = settings or get_settings()
        client = ContentstackClient(settings)

        blocker_repo = BlockerRepository(client)
        report_repo = ReportRepository(client)
        member_repo = TeamMemberRepository(client)

        llm_client = LLMClient(settings=settings)
        if not llm_client.is_configured:
            logger.warning("ANTHROPIC_API_KEY not set; reports use rule-based analysis")
        insight_generator = InsightGenerator(
            llm_client,
            temperature=settings.generation_temperature,
            max_tokens=settings.generation_max_tokens,
        )

        report_service = ReportService(
            blocker_repo,
            report_repo,
            member_repo,
            insight_generator,
            individual_blocker_limit=settings.individual_blocker_limit,
            team_blocker_limit=settings.team_blocker_limit,
            recent_report_limit=settings.recent_report_limit,
        )
        blocker_service = BlockerService(
            blocker_repo, member_repo, stats_limit=settings.stats_blocker_limit
        )
        notifier = ReportNotifier(SlackAdapter(bot_token=settings.slack_bot_token))

        return cls(
            settings=settings,
            client=client,
            blocker_repo=blocker_repo,
            report_repo=report_repo,
            member_repo=member_repo,
            report_service=report_service,
            blocker_service=blocker_service,
            notifier=notifier,
        )

    async def connect(self) -> None:
        """Open the content platform connection."""
        await self.client.connect()

    async def close(self) -> None:
        """Close the content platform connection."""
        await self.client.close()


@asynccontextmanager
async def lifespan(settings: Settings | None = None) -> AsyncGenerator[AppContext, None]:
    """Application lifespan management.

    Startup:
    - Build components and connect to the content platform
    - Start the team report scheduler (unless disabled)

    Shutdown:
    - Stop the scheduler, close the connection
    """
    context = AppContext.from_settings(settings)
    logger.info(f"Starting {context.settings.app_name}...")
    await context.connect()

    try:
        async with AsyncExitStack() as stack:
            if context.settings.report_schedule_enabled:
                await stack.enter_async_context(
                    report_scheduler_lifespan(
                        context.report_service,
                        context.member_repo,
                        context.notifier,
                        context.settings,
                    )
                )
            else:
                logger.info("Report scheduler disabled")
            yield context
    finally:
        logger.info(f"Shutting down {context.settings.app_name}...")
        await context.close()
