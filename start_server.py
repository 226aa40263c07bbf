#!/usr/bin/env python3
"""
Run the Employee Task Tracker API under uvicorn.
Host, port, reload and log level come from Settings (HOST, PORT, RELOAD, LOG_LEVEL).
"""

import uvicorn

from tasktracker.config.settings import settings


def server_options() -> dict:
    return {
        "host": settings.HOST,
        "port": settings.PORT,
        "reload": settings.RELOAD,
        "log_level": settings.LOG_LEVEL.lower(),
    }


def main():
    options = server_options()

    print("🚀 Employee Task Tracker API")
    print(f"   Listening on http://{options['host']}:{options['port']}")
    print(f"   Reload: {'on' if options['reload'] else 'off'} | Log level: {options['log_level']}")
    print(f"   Database: {'SQLite' if settings.is_sqlite() else 'PostgreSQL'}")

    uvicorn.run("main:app", **options)


if __name__ == "__main__":
    main()
