"""
Flask CLI commands.
"""
import click
from talentflow_app.services.stages import seed_default_stages


def register_commands(app):

    @app.cli.command('seed-stages')
    def seed_stages_command():
        """Create the default interview stages if they are missing."""
        created = seed_default_stages()
        click.echo(f"Created {created} interview stage(s)")
