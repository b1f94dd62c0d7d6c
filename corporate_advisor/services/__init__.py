"""
Business services.

Services wrap an ``AsyncSession`` and the repositories they need, and raise
``AdvisorError`` subclasses with the user-facing message on rule violations.
"""
