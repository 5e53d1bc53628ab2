import logging
import threading
import webbrowser

import uvicorn

from nectree.config import Settings, get_settings


def run_uvicorn(settings: Settings):
    config = uvicorn.Config(
        "nectree.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        reload=False,
    )
    server = uvicorn.Server(config)
    server.run()


def open_browser_once(settings: Settings):
    url = f"http://{settings.host}:{settings.port}/"
    print(f"[server] Opening {url}")
    try:
        webbrowser.open(url)
    except webbrowser.Error as exc:
        print(f"[server] Could not open a browser: {exc}")


def main():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if settings.open_browser:
        # give uvicorn a moment to boot before opening the page
        threading.Timer(1.0, open_browser_once, args=(settings,)).start()

    print(f"[server] Serving NecTree on http://{settings.host}:{settings.port}/")
    try:
        run_uvicorn(settings)
    except KeyboardInterrupt:
        print("\n[server] Shutting down.")


if __name__ == "__main__":
    main()
