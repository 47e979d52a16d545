"""Global model configuration for the extension recommender.

The session operations are loaded once per process and shared by the CLI and
the HTTP server. The model version is used to track breaking changes in the
model input layout.
"""

# Model Configuration
MODEL_VERSION = "1.0.0"  # Increment when the encoding layout changes

# Singleton instance
_session_operations = None


def get_session_operations(config=None):
    """Get or create the global session operations singleton.

    Args:
        config: Config to build the session from on first use. Defaults to
            a Config for the default directory.

    Returns:
        SessionOperations: The global session operations instance.
    """
    global _session_operations

    if _session_operations is None:
        from extension_recommender.config.settings import Config
        from extension_recommender.core.session import SessionOperations

        _session_operations = SessionOperations.from_config(config or Config())

    return _session_operations


def reset_session_operations():
    """Reset the global session operations (mainly for testing)."""
    global _session_operations
    _session_operations = None
