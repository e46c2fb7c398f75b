"""
Rate limiting configuration.

Applies per-blueprint rate limits using Flask-Limiter.
The Limiter instance is created in mentorme/__init__.py with no default
limits; this module applies the configured limit to the program routes.

Usage:
    from mentorme.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

DEFAULT_PROGRAM_LIMIT = "60/minute"


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits (per remote IP):
        - Program endpoints: PROGRAM_RATE_LIMIT (default 60/minute)
        - Health check:      exempt

    Rate limiting is disabled in testing mode.
    """
    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    program_limit = app.config.get("PROGRAM_RATE_LIMIT") or DEFAULT_PROGRAM_LIMIT
    bp = app.blueprints.get("institutional_program")
    if bp:
        limiter.limit(program_limit)(bp)

    bp = app.blueprints.get("health")
    if bp:
        limiter.exempt(bp)

    app.logger.info("Rate limiter configured — programs: %s", program_limit)
