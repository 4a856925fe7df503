import click
from dotenv import load_dotenv

from lms_backend.database import reset_engine
from lms_backend.settings import BackendSettings
from .admin import admin
from .server import init_db, serve

@click.group()
@click.option("--env-file", "env_file", type=click.Path(dir_okay=False), default=None, help="dotenv file to load before running")
def cli(env_file):
    load_dotenv(env_file)

    # re-read the environment into the settings singleton
    BackendSettings()
    reset_engine()

cli.add_command(init_db,"init-db")
cli.add_command(admin,"admin")
cli.add_command(serve,"serve")

if __name__ == '__main__':
    cli()
