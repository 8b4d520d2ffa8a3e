"""Direct Flask development server using environment variables.

Service coroutines run on a background event loop; the Flask dev server owns
the main thread.
"""

from __future__ import annotations

from config import load_config
from core import setup_logger
from services import BackgroundLoop, create_promotion_services, run_coroutine_sync
from web import create_app

if __name__ == "__main__":
    config = load_config()
    setup_logger(name="", level=config.log_level)

    background = BackgroundLoop()
    background.start()
    services = run_coroutine_sync(create_promotion_services(config))

    app = create_app(config, services)
    try:
        app.run(host=config.web_host, port=config.web_port, debug=config.debug, use_reloader=False, threaded=True)
    finally:
        run_coroutine_sync(services.close())
        background.stop()
