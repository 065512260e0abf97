"""Dependency injection containers for the support chat service."""
from dependency_injector import containers, providers

from api.features.chat.controller import ChatController
from api.features.chat.generator import ReplyGenerator
from api.features.chat.history import HistoryAssembler
from api.features.chat.repository import PostgresConversationStore, SqliteConversationStore
from api.features.chat.service import SessionCoordinator
from api.features.chat.validators import ChatMessageValidator
from core.settings import Settings
from infra.llm import OpenAICompletionClient
from infra.resources import DatabaseResource, OpenAIResource


class InfrastructureContainer(containers.DeclarativeContainer):
    """Infrastructure layer dependencies."""

    config = providers.Configuration()

    # Database
    database = providers.Singleton(
        DatabaseResource,
        database_url=config.database_url,
    )

    # OpenAI
    openai = providers.Singleton(
        OpenAIResource,
        api_key=config.openai_api_key,
        base_url=config.openai_base_url,
        timeout=config.openai_timeout,
    )

    completion_client = providers.Singleton(
        OpenAICompletionClient,
        openai_resource=openai,
        model=config.openai_model,
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Application services - depends on infrastructure."""

    config = providers.Configuration()
    infrastructure = providers.DependenciesContainer()

    # One store per process, backend fixed at startup
    conversation_store = providers.Selector(
        config.store_backend,
        postgres=providers.Singleton(
            PostgresConversationStore, database=infrastructure.database
        ),
        sqlite=providers.Singleton(
            SqliteConversationStore, database=infrastructure.database
        ),
    )

    history_assembler = providers.Factory(
        HistoryAssembler,
        store=conversation_store,
    )

    reply_generator = providers.Factory(
        ReplyGenerator,
        completion_client=infrastructure.completion_client,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
        max_prompt_chars=config.max_prompt_chars,
        support_email=config.support_email,
    )

    validator = providers.Factory(
        ChatMessageValidator,
        max_length=config.max_message_length,
    )

    session_coordinator = providers.Factory(
        SessionCoordinator,
        store=conversation_store,
        history_assembler=history_assembler,
        reply_generator=reply_generator,
        validator=validator,
        max_history_messages=config.max_history_messages,
        support_email=config.support_email,
    )


class ControllerContainer(containers.DeclarativeContainer):
    """Controller-specific dependencies."""

    services = providers.DependenciesContainer()

    chat_controller = providers.Factory(
        ChatController,
        session_coordinator=services.session_coordinator,
        history_assembler=services.history_assembler,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Main application container composing all sub-containers."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "api.features.chat.router",
        ]
    )

    config = providers.Configuration()
    infrastructure = providers.Container(InfrastructureContainer, config=config)
    services = providers.Container(
        ServiceContainer, infrastructure=infrastructure, config=config
    )
    controllers = providers.Container(ControllerContainer, services=services)


def build_container(settings: Settings) -> ApplicationContainer:
    """Create the application container and load its configuration from settings."""
    container = ApplicationContainer()
    container.config.from_dict(
        {
            "database_url": str(settings.DATABASE.DATABASE_URL),
            "store_backend": settings.DATABASE.STORE_BACKEND,
            "openai_api_key": settings.OPENAI.OPENAI_API_KEY.get_secret_value(),
            "openai_base_url": settings.OPENAI.OPENAI_BASE_URL,
            "openai_timeout": settings.OPENAI.OPENAI_TIMEOUT,
            "openai_model": settings.OPENAI.OPENAI_MODEL,
            "max_tokens": settings.CHAT.MAX_TOKENS,
            "temperature": settings.CHAT.TEMPERATURE,
            "max_prompt_chars": settings.CHAT.MAX_PROMPT_CHARS,
            "max_message_length": settings.CHAT.MAX_MESSAGE_LENGTH,
            "max_history_messages": settings.CHAT.MAX_HISTORY_MESSAGES,
            "support_email": settings.CHAT.SUPPORT_EMAIL,
        }
    )
    return container
