import click
from pagestreak.exceptions import BackupValidationError
from pagestreak.services.backup_service import IMPORT_MODES, BackupService, validate_backup
from ..utils import echo_error, echo_label, echo_success, get_clock, open_session

@click.group()
def backup():
    """Backup and restore commands"""
    pass

@backup.command(name='export')
@click.argument('path', type=click.Path(dir_okay=False, writable=True))
@click.pass_context
def export_backup(ctx, path):
    """Write all reading data to a JSON file"""
    with open_session(ctx) as session:
        written = BackupService(session, get_clock(ctx)).export_to_file(path)
        echo_success(f"Backup written to {written}")

@backup.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
def validate(path):
    """Check a backup file without importing it"""
    try:
        result = validate_backup(BackupService.load_file(path))
    except BackupValidationError as e:
        echo_error(str(e))
        raise click.Abort()
    echo_label("Created", result.created_at or "unknown")
    echo_label("Books", result.total_books)
    echo_label("Sessions", result.total_sessions)
    for warning in result.warnings:
        click.echo(click.style(f"Warning: {warning}", fg='yellow'))
    for error in result.errors:
        echo_error(error)
    if not result.is_valid:
        raise click.Abort()
    echo_success("Backup is valid")

@backup.command(name='import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--mode', type=click.Choice(IMPORT_MODES), default='replace',
              help='replace clears existing data first, merge updates rows by id')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def import_backup(ctx, path, mode, yes):
    """Restore reading data from a JSON backup

    Example:
        pagestreak backup import pagestreak-backup.json --mode merge
    """
    if mode == 'replace' and not yes:
        click.confirm("Replace your current data with the backup?", abort=True)
    with open_session(ctx) as session:
        result = BackupService(session, get_clock(ctx)).import_file(path, mode)
        for warning in result.warnings:
            click.echo(click.style(f"Warning: {warning}", fg='yellow'))
        echo_success(f"Imported {result.books} books and {result.sessions} sessions ({mode})")
