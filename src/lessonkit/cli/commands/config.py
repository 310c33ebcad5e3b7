"""Configuration management commands."""

import click


@click.group()
def config():
    """Manage lessonkit configuration files."""
    pass


@config.command(name="init")
@click.option(
    "--location",
    type=click.Choice(["user", "project"], case_sensitive=False),
    default="user",
    help="Where to create the configuration file.",
)
@click.option(
    "--force",
    is_flag=True,
    help="Overwrite existing configuration file.",
)
def config_init(location, force):
    """Create an example configuration file.

    By default the file goes to ~/.config/lessonkit/config.toml (or the
    platform equivalent). Use --location=project to create
    .lessonkit/config.toml in the current directory.
    """
    from lessonkit.infrastructure.config import (
        get_config_file_locations,
        write_example_config,
    )

    locations = get_config_file_locations()
    config_path = locations[location.lower()]

    if config_path.exists() and not force:
        click.echo(f"Configuration file already exists at {config_path}\nUse --force to overwrite.")
        return

    try:
        created_path = write_example_config(location=location.lower())
    except OSError as e:
        raise click.ClickException(f"Cannot create configuration file: {e}") from None

    click.echo(f"Created configuration file: {created_path}")


@config.command(name="show")
def config_show():
    """Show current configuration values from all sources."""
    from lessonkit.cli.commands.shared import load_config

    cfg = load_config()

    click.echo("Current lessonkit Configuration:")
    click.echo("=" * 60)

    click.echo("\n[Logging]")
    click.echo(f"  log_level: {cfg.logging.log_level}")

    click.echo("\n[Checks]")
    click.echo(f"  min_quiz_options: {cfg.checks.min_quiz_options}")
    click.echo(f"  planned_topics_are_warnings: {cfg.checks.planned_topics_are_warnings}")
    click.echo(f"  snippet_languages: {', '.join(cfg.checks.snippet_languages)}")

    click.echo("\n[Links]")
    click.echo(f"  timeout: {cfg.links.timeout}")
    click.echo(f"  max_workers: {cfg.links.max_workers}")
    click.echo(f"  max_retries: {cfg.links.max_retries}")
    click.echo(f"  user_agent: {cfg.links.user_agent}")

    click.echo("\n[Drafts]")
    click.echo(f"  similarity_threshold: {cfg.drafts.similarity_threshold}")

    click.echo("\n[CSV]")
    click.echo(f"  encoding: {cfg.csv.encoding}")
    click.echo(f"  delimiter: {cfg.csv.delimiter!r}")


@config.command(name="locate")
def config_locate():
    """Show where lessonkit looks for configuration files."""
    from lessonkit.infrastructure.config import find_config_files, get_config_file_locations

    locations = get_config_file_locations()
    existing = find_config_files()

    click.echo("Configuration File Locations:")
    click.echo("=" * 60)

    for key, title in (
        ("system", "System config (lowest priority)"),
        ("user", "User config"),
        ("project", "Project config (highest priority)"),
    ):
        click.echo(f"\n{title}:")
        click.echo(f"  Path: {existing[key] or locations[key]}")
        click.echo(f"  Status: {'Exists' if existing[key] else 'Not found'}")

    click.echo("\nPriority order (highest to lowest):")
    click.echo("  1. Environment variables (LESSONKIT_<SECTION>__<KEY>)")
    click.echo("  2. Project config (.lessonkit/config.toml or lessonkit.toml)")
    click.echo("  3. User config (~/.config/lessonkit/config.toml)")
    click.echo("  4. System config (/etc/lessonkit/config.toml)")
    click.echo("  5. Default values")
