import logging
import click
import uvicorn

from lms_backend.database import get_engine
from lms_backend.model import Base
from lms_backend.settings import settings

@click.command()
def init_db():
    """Create all tables on the configured database."""
    Base.metadata.create_all(get_engine())
    click.echo("Database schema created")

@click.command()
@click.option("--host", "host", default="127.0.0.1", show_default=True)
@click.option("--port", "port", default=8000, type=int, show_default=True)
@click.option("--log-level", "log_level", default="info", show_default=True)
@click.option("--reload/--no-reload", "reload", default=None, help="Defaults to on when DEBUG_MODE is development")
def serve(host, port, log_level, reload):
    """Run the HTTP API."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if reload is None:
        reload = settings.DEBUG_MODE == "development"

    uvicorn.run("lms_backend.server:app", host=host, port=port, log_level=log_level, reload=reload)
