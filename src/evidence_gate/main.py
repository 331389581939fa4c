"""Entrypoint: run the Evidence Gate server."""

import uvicorn

from evidence_gate.api.app import create_app
from evidence_gate.config.settings import Settings


def main() -> None:
    settings = Settings()
    app = create_app()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
