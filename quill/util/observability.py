"""Observability configuration using Logfire.

Every post lifecycle step opens a span (``post_service.insert``,
``slug_allocator.allocate``, ``post_info.commit``, ...) and the SQLAlchemy
instrumentation nests the statements, SAVEPOINTs included, under them.
Call ``configure_logfire`` once at process start; library code then just
uses the module-level API:

    import logfire

    with logfire.span("post_service.update", post_id=post_id):
        logfire.info("Post row updated", post_id=post_id, slug=slug)
"""

import logfire
from sqlalchemy.ext.asyncio import AsyncEngine

from quill.config import ObservabilitySettings, Settings
from quill.util.error import ConfigurationError


def _send_to_logfire(observability: ObservabilitySettings) -> bool:
    # Explicit setting wins; otherwise send only when a token is present
    if observability.send_to_logfire is not None:
        return observability.send_to_logfire
    return bool(observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the current environment.

    Without a token everything stays on the console. With
    OBSERVABILITY__LOGFIRE_TOKEN set, spans are also sent to Logfire cloud
    unless OBSERVABILITY__SEND_TO_LOGFIRE=false.

    Args:
        settings: Application settings

    Raises:
        ConfigurationError: If sending is forced on without a token
    """
    observability = settings.observability
    send = _send_to_logfire(observability)
    if send and not observability.logfire_token:
        raise ConfigurationError(
            "OBSERVABILITY__SEND_TO_LOGFIRE is set but OBSERVABILITY__LOGFIRE_TOKEN is empty"
        )

    options = {
        "service_name": "quill",
        "service_version": "0.1.0",
        "environment": settings.environment,
        "send_to_logfire": send,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }
    if observability.logfire_token:
        options["token"] = observability.logfire_token

    logfire.configure(**options)
    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace every statement run on ``engine``.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(
        engine=engine.sync_engine,
        enable_commenter=True,  # Add SQL comments with span context
    )
    logfire.info("SQLAlchemy instrumented")
