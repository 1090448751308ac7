import atexit
import logging
import os
import signal
import sys

from weather_proxy import create_app
from weather_proxy.errors import ConfigurationError

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')


def main():
    try:
        app = create_app()
    except ConfigurationError as e:
        logging.error(f"ERROR: {e}")
        sys.exit(1)

    janitor = app.extensions['weather_proxy'].janitor

    def handle_shutdown(signum, frame):
        """Handle graceful shutdown"""
        app.logger.info("Shutting down...")
        janitor.shutdown()
        sys.exit(0)

    signal.signal(signal.SIGTERM, handle_shutdown)
    signal.signal(signal.SIGINT, handle_shutdown)
    atexit.register(janitor.shutdown)

    port = int(os.getenv('PORT', 3001))
    app.logger.info(f"Weather API server running on http://localhost:{port}")
    # The reloader would start a second janitor in the child process
    app.run(host='0.0.0.0', port=port, threaded=True, use_reloader=False)


if __name__ == '__main__':
    main()
