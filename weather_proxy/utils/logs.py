import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FORMAT = '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'


def setup_logging(app):
    """
    Configure logging system.

    app.logger is the `weather_proxy` logger, so module loggers of the
    package propagate into the same handler.
    """
    app.logger.setLevel(logging.DEBUG if app.debug else logging.INFO)

    log_dir = app.config.get('LOG_DIR')
    if not log_dir:
        return

    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    log_file = os.path.abspath(os.path.join(log_dir, 'weather_service.log'))
    if any(getattr(h, 'baseFilename', None) == log_file for h in app.logger.handlers):
        return

    handler = RotatingFileHandler(
        log_file, maxBytes=1000000, backupCount=5, delay=True
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    app.logger.addHandler(handler)
