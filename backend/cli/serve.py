from pathlib import Path

import click
import uvicorn
from comicsold.config import settings


@click.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", type=int, default=None, help="Default: PORT setting")
@click.option("--reload/--no-reload", default=False, show_default=True)
def main(host, port, reload):
    """Run the proxy API under uvicorn."""
    uvicorn.run(
        "app.main:app",
        host=host,
        port=port or settings.PORT,
        reload=reload,
        app_dir=str(Path(__file__).resolve().parents[1]),
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
