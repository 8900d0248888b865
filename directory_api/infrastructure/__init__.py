"""Infrastructure — database pool, SMTP delivery and logging setup."""
