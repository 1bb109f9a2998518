"""CLI application for PromptMate administration"""
import click
import json
import os
import sys

from .api_client import GatewayClient, run_async
from .db_utils import (
    init_database,
    drop_all_tables,
    get_database_stats,
    run_alembic_command,
)

TONES = ["formal", "casual", "friendly", "professional", "creative", "concise"]
TYPES = ["email", "message", "explanation", "summary", "proposal", "report", "other"]


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """PromptMate CLI - Administration and maintenance tools"""
    pass


@cli.group()
def db():
    """Database management commands"""
    pass


@db.command()
def init():
    """Initialize database schema"""
    click.echo("Initializing database...")
    try:
        run_async(init_database())
        click.echo("✓ Database initialized successfully")
    except Exception as e:
        click.echo(f"✗ Error initializing database: {e}", err=True)
        sys.exit(1)


@db.command()
def migrate():
    """Run database migrations"""
    click.echo("Running migrations...")
    try:
        run_alembic_command("upgrade", "head")
        click.echo("✓ Migrations complete")
    except Exception as e:
        click.echo(f"✗ Error running migrations: {e}", err=True)
        sys.exit(1)


@db.command()
@click.option('--confirm', is_flag=True, help='Confirm reset')
def reset(confirm):
    """Reset database (destructive)"""
    if not confirm:
        click.echo("⚠ This will delete all prompt history. Use --confirm to proceed.")
        return

    click.echo("Resetting database...")
    try:
        run_async(drop_all_tables())
        run_async(init_database())
        click.echo("✓ Database reset successfully")
    except Exception as e:
        click.echo(f"✗ Error resetting database: {e}", err=True)
        sys.exit(1)


@db.command()
def stats():
    """Show database statistics"""
    click.echo("Database Statistics")
    click.echo("=" * 40)
    try:
        stats = run_async(get_database_stats())
        click.echo(f"Prompts:      {stats['prompts']}")
        click.echo(f"Users:        {stats['users']}")
        click.echo(f"Favorites:    {stats['favorites']}")
        if stats['tones']:
            click.echo("\nTones:")
            for entry in stats['tones']:
                click.echo(f"  {entry['tone'].value:<14}{entry['count']}")
        if stats['types']:
            click.echo("\nTypes:")
            for entry in stats['types']:
                click.echo(f"  {entry['type'].value:<14}{entry['count']}")
    except Exception as e:
        click.echo(f"✗ Error getting stats: {e}", err=True)
        sys.exit(1)


@cli.group()
def api():
    """Commands against a running gateway"""
    pass


@api.command()
def health():
    """Check gateway health"""
    client = GatewayClient()
    try:
        result = run_async(client.health_check())
        click.echo(f"✓ {result['message']} (uptime {result['uptime']:.0f}s)")
    except Exception as e:
        click.echo(f"✗ Gateway unreachable at {client.base_url}: {e}", err=True)
        sys.exit(1)


@api.command()
@click.argument('text')
@click.option('--tone', type=click.Choice(TONES), help='Rewrite tone')
@click.option('--type', 'prompt_type', type=click.Choice(TYPES), help='Content type')
@click.option('--user-id', help='Save the result to this user\'s history')
@click.option('--json', 'as_json', is_flag=True, help='Print the raw response')
def rewrite(text: str, tone, prompt_type, user_id, as_json: bool):
    """Rewrite TEXT through the gateway"""
    client = GatewayClient()
    try:
        result = run_async(client.rewrite(text, tone=tone, prompt_type=prompt_type, user_id=user_id))
    except Exception as e:
        click.echo(f"✗ Error rewriting prompt: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    if not result.get("success"):
        click.echo(f"⚠ {result.get('error')}: {result.get('message')}", err=True)
        fallback = result.get("fallback") or {}
        if fallback.get("rewrittenPrompt"):
            click.echo("Fallback:")
            click.echo(fallback["rewrittenPrompt"])
        sys.exit(1)

    data = result["data"]
    click.echo(data["rewrittenPrompt"])
    click.echo("")
    click.echo(f"tone={data['tone']} type={data['type']} model={data['metadata'].get('model')}")
    if "savedToHistory" in data:
        saved = f"saved as {data['historyId']}" if data["savedToHistory"] else "not saved"
        click.echo(f"History: {saved}")


@api.command()
@click.argument('user_id')
@click.option('--page', default=1, type=int, help='Page number')
@click.option('--limit', default=20, type=int, help='Page size')
def history(user_id: str, page: int, limit: int):
    """List a user's saved prompts"""
    client = GatewayClient()
    try:
        result = run_async(client.get_history(user_id, page=page, limit=limit))
    except Exception as e:
        click.echo(f"✗ Error fetching history: {e}", err=True)
        sys.exit(1)

    prompts = result["data"]["prompts"]
    pagination = result["data"]["pagination"]
    click.echo(
        f"History for {user_id} - page {pagination['currentPage']}/{pagination['totalPages']}"
        f" ({pagination['totalItems']} total)"
    )
    click.echo("=" * 40)
    for prompt in prompts:
        star = "★" if prompt["isFavorite"] else " "
        preview = prompt["rewrittenPrompt"].replace("\n", " ")[:60]
        click.echo(f"{star} {prompt['id']}  [{prompt['tone']}/{prompt['type']}]  {preview}")


@api.command()
def info():
    """Show API and AI model information"""
    client = GatewayClient()
    try:
        result = run_async(client.get_info())
    except Exception as e:
        click.echo(f"✗ Error fetching info: {e}", err=True)
        sys.exit(1)

    data = result["data"]
    click.echo(f"API version:        {data['api']['version']}")
    click.echo(f"Prompts processed:  {data['api']['totalPromptsProcessed']}")
    click.echo(f"AI model:           {data['ai']['model']} ({data['ai']['connectionStatus']})")
    if data['ai'].get('lastError'):
        click.echo(f"Last AI error:      {data['ai']['lastError']}")


@cli.command()
@click.option('--host', default=None, help='Bind address (default GATEWAY_HOST or 0.0.0.0)')
@click.option('--port', default=None, type=int, help='Port (default GATEWAY_PORT or 3000)')
@click.option('--reload', is_flag=True, help='Reload on code changes')
def serve(host, port, reload: bool):
    """Run the API server"""
    import uvicorn
    from promptmate_gateway.config import get_settings

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port
    click.echo(f"Starting PromptMate backend on {host}:{port} ({settings.environment})")
    uvicorn.run("promptmate_gateway.app:app", host=host, port=port, reload=reload)


@cli.group()
def config():
    """Configuration management"""
    pass


@config.command()
def show():
    """Show current configuration"""
    from promptmate_gateway.config import Settings

    click.echo("Current Configuration")
    click.echo("=" * 40)
    for key, value in Settings.from_env().as_dict.items():
        click.echo(f"{key.upper()}: {value}")


@config.command()
def check():
    """Check configuration validity"""
    click.echo("Checking configuration...")

    errors = []
    warnings = []

    if not os.getenv('DATABASE_URL'):
        warnings.append("DATABASE_URL not set, using the local default")

    provider = os.getenv('AI_PROVIDER', 'gemini')
    if provider not in ['gemini', 'mock']:
        errors.append(f"Invalid AI_PROVIDER: {provider}")
    elif provider == 'gemini':
        api_key = os.getenv('GEMINI_API_KEY', '')
        if not api_key:
            warnings.append("GEMINI_API_KEY not set, rewrites will use the offline fallback")
        elif not api_key.startswith('AIza'):
            warnings.append("GEMINI_API_KEY does not look like a Google API key, rewrites will use the offline fallback")

    if errors:
        click.echo("\n✗ Errors:")
        for error in errors:
            click.echo(f"  - {error}")

    if warnings:
        click.echo("\n⚠ Warnings:")
        for warning in warnings:
            click.echo(f"  - {warning}")

    if not errors and not warnings:
        click.echo("✓ Configuration is valid")

    sys.exit(1 if errors else 0)


if __name__ == '__main__':
    cli()
