from __future__ import annotations

import os

from . import create_app


def run() -> None:
    app = create_app()
    try:
        app.run(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            debug=bool(app.config.get("DEBUG")),
        )
    finally:
        # Let queued SMS finish before the process exits.
        app.extensions["school_attendance"].shutdown()


if __name__ == "__main__":
    run()
