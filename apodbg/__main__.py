from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
import traceback
from logging.handlers import TimedRotatingFileHandler

import truststore


if __name__ == "__main__":

    truststore.inject_into_ssl()

    from apodbg.config import FILE_FORMATTER, LOGGING_LEVELS, LOGS_DIR, STORAGE_PATH, ensure_data_dir
    from apodbg.config.settings import Settings
    from apodbg.core.loader import BackgroundLoader
    from apodbg.storage import JsonFileStore
    from apodbg.utils import task_wrapper
    from apodbg.version import __version__
    from apodbg.web.page_manager import WebPageManager

    logger = logging.getLogger("APODBackground")
    logger.setLevel(logging.INFO)
    # Always add console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(FILE_FORMATTER)
    logger.addHandler(console_handler)

    if sys.version_info < (3, 10):
        raise RuntimeError("Python 3.10 or higher is required")

    class ParsedArgs(argparse.Namespace):
        _verbose: int
        _debug_http: bool
        once: bool
        host: str
        port: int

        @property
        def logging_level(self) -> int:
            return LOGGING_LEVELS[min(self._verbose + 2, 4)]

        @property
        def debug_http(self) -> int:
            """
            If the debug flag is True, return DEBUG.
            Otherwise, return NOTSET to inherit the global logging level.
            """
            if self._debug_http:
                return logging.DEBUG
            return logging.NOTSET

    # handle input parameters
    parser = argparse.ArgumentParser(
        description="Serves a page with NASA's Astronomy Picture of the Day as its background.",
    )
    parser.add_argument("--version", action="version", version=f"v{__version__}")
    parser.add_argument("-v", dest="_verbose", action="count", default=0)
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument(
        "--once", action="store_true", help="resolve today's background, print it and exit"
    )
    # undocumented debug args
    parser.add_argument(
        "--debug-http", dest="_debug_http", action="store_true", help=argparse.SUPPRESS
    )
    args = parser.parse_args(namespace=ParsedArgs())
    logger.setLevel(args.logging_level)
    # load settings
    try:
        ensure_data_dir()
        settings = Settings(args)
    except Exception:
        logger.exception("Error while loading settings")
        print(f"Settings error: {traceback.format_exc()}", file=sys.stderr)
        sys.exit(4)

    async def main():
        logging.getLogger("APODBackground.http").setLevel(settings.debug_http)

        page = WebPageManager(settings)
        loader = BackgroundLoader(settings, JsonFileStore(STORAGE_PATH), page)

        if settings.once:
            try:
                url = await loader.on_page_load()
            finally:
                await loader.close()
            print(url if not url.startswith("data:") else f"{url[:60]}... ({len(url)} chars)")
            return 0

        LOGS_DIR.mkdir(exist_ok=True)
        log_file = LOGS_DIR / "apodbg.log"
        file_handler = TimedRotatingFileHandler(log_file, when="midnight", backupCount=5)
        file_handler.setFormatter(FILE_FORMATTER)
        logger.addHandler(file_handler)
        logger.info(f"Logging to file: {log_file}")

        logger.info("=== APOD Background Starting ===")
        logger.info(f"Version: {__version__}")
        logger.info(f"Python version: {sys.version}")

        from apodbg.web import app as webapp

        webapp.set_managers(page, loader)
        logger.info(f"Starting web server on http://{settings.host}:{settings.port}")
        web_server_task = asyncio.create_task(webapp.run_server(host=settings.host, port=settings.port))
        # warm the cache, so the first page served already has a background
        warmup_task = asyncio.create_task(task_wrapper(loader.on_page_load)())

        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        if sys.platform == "linux":
            loop.add_signal_handler(signal.SIGINT, stop.set)
            loop.add_signal_handler(signal.SIGTERM, stop.set)

        exit_status = 0
        try:
            stop_task = asyncio.create_task(stop.wait())
            done, _ = await asyncio.wait(
                {web_server_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
            )
            stop_task.cancel()
            if web_server_task in done and (exc := web_server_task.exception()) is not None:
                logger.error("Web server stopped with an error", exc_info=exc)
                exit_status = 1
        finally:
            logger.info("=== Starting shutdown sequence ===")
            if sys.platform == "linux":
                loop.remove_signal_handler(signal.SIGINT)
                loop.remove_signal_handler(signal.SIGTERM)
            warmup_task.cancel()
            if not web_server_task.done():
                logger.info("Shutting down web server")
                await webapp.shutdown_server()
                try:
                    await asyncio.wait_for(web_server_task, timeout=5.0)
                except asyncio.TimeoutError:
                    logger.warning("Web server didn't exit in time, forcing cancellation")
                    web_server_task.cancel()
            await loader.close()
            settings.save()
        logger.info(f"=== Exiting with status code: {exit_status} ===")
        return exit_status

    sys.exit(asyncio.run(main()))
