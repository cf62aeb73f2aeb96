import logging

from rich import print
from rich.logging import RichHandler
import uvicorn

from app import config
from app.app import ENDPOINTS, app


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def banner(cfg: config.Config) -> None:
    print(f"[bold]Recipe API with Google Gemini[/bold] running on port {cfg.port}")
    print(f"Using model: {cfg.gemini_model}")
    print("Available endpoints:")
    for route, description in ENDPOINTS.items():
        print(f"  {route:<22} - {description}")


def main() -> None:
    # Serve the module-level app so only one generation client exists.
    cfg: config.Config = app.state.config
    configure_logging(cfg.log_level)
    banner(cfg)
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_config=None)


if __name__ == "__main__":
    main()
