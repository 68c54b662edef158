import logging
import sys

def setup_logging():
    """
    Configure logging for the application.

    Logs go to stdout with timestamps, levels and logger names so they are
    picked up by the container runtime.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # Reduce SQLAlchemy noise in logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("todo_api")


# Create global logger instance
logger = setup_logging()
