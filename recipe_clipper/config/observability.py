"""
Logfire setup for the recipe extraction service.

Configuration is best effort: a deployment without credentials keeps running
and logfire calls become local no-ops.
"""

import logfire

from .settings import Settings, settings as default_settings

_configured = False


def configure_logfire(app_settings: Settings = None) -> bool:
    """
    Configure logfire once per process.

    Args:
        app_settings: Settings to read the token and console flag from

    Returns:
        True when logfire accepted the configuration
    """
    global _configured
    if _configured:
        return True

    app_settings = app_settings or default_settings

    # Setting up logfire for tracing (skip if no credentials)
    try:
        logfire.configure(
            token=app_settings.logfire_token,
            send_to_logfire="if-token-present",
            console=None if app_settings.logfire_console else False,
            scrubbing=False,
        )
        _configured = True
        print("✅ Logfire configured successfully")
    except Exception as e:
        print(f"⚠️  Logfire setup skipped: {e}")

    return _configured
