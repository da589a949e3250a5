"""CLI entry point."""

import sys
import logging
import webbrowser
from typing import Optional, Tuple

import click
from click import Context

from ... import __version__, setup_logging
from ...config import Config, default_config
from ...config.config_parser import parse_config
from ...git import GitHistory, RealGit
from ...github import GitHubClient, GitHubRepository, repository_from_config
from ...resolve import PullRequestResolver
from ...typing import InvalidCommitError

# Get module logger
logger = logging.getLogger(__name__)

directory_option = click.option(
    '-C', '--directory', type=click.Path(exists=True, file_okay=False, dir_okay=True),
    help='Run as if whichpr was started in DIRECTORY instead of the current working directory')
verbose_option = click.option(
    '-v', '--verbose', count=True,
    help="Increase verbosity (can be used multiple times for more verbosity)")

def check(err: Exception) -> None:
    """Log error and exit."""
    logger.error(f"{err}")
    sys.exit(1)

@click.group()
@click.pass_context
def cli(ctx: Context) -> None:
    """whichpr - find the GitHub pull request that introduced a commit."""
    ctx.obj = {}

def setup_git(directory: Optional[str] = None) -> Tuple[Config, RealGit, GitHubRepository]:
    """Setup Git command, config and the GitHub repository of the checkout."""
    git_cmd = RealGit(default_config(), directory)
    git_cmd.must_git("rev-parse --git-dir")

    config = Config(parse_config(git_cmd))
    git_cmd = RealGit(config, directory)
    repository = repository_from_config(config)
    logger.info(f"Repository: {repository.host}/{repository.full_name}")
    return config, git_cmd, repository

def build_resolver(directory: Optional[str] = None) -> Tuple[GitHubRepository, PullRequestResolver]:
    """Wire the resolver to the local git history and the GitHub search API."""
    config, git_cmd, repository = setup_git(directory)
    resolver = PullRequestResolver(
        GitHistory(git_cmd),
        GitHubClient(config),
        repository.full_name,
        min_commit_length=config.tool.min_commit_length,
    )
    return repository, resolver

def resolve_pull_request(directory: Optional[str], commit: str) -> Tuple[GitHubRepository, int]:
    """Resolve commit, turning failures into CLI errors."""
    try:
        repository, resolver = build_resolver(directory)
        return repository, resolver.resolve(commit)
    except InvalidCommitError as e:
        raise click.UsageError(str(e))
    except Exception as e:
        check(e)
        raise

@cli.command(name="show", help="Print the number of the pull request that introduced COMMIT")
@click.argument('commit')
@directory_option
@verbose_option
def show(commit: str, directory: Optional[str], verbose: int) -> None:
    """Show command."""
    setup_logging(verbose)
    _, number = resolve_pull_request(directory, commit)
    click.echo(number)

@cli.command(name="open", help="Open the pull request that introduced COMMIT in a web browser")
@click.argument('commit')
@directory_option
@verbose_option
@click.option('--print-url', is_flag=True, help="Print the pull request URL instead of opening it")
def open_(commit: str, directory: Optional[str], verbose: int, print_url: bool) -> None:
    """Open command."""
    setup_logging(verbose)
    repository, number = resolve_pull_request(directory, commit)
    url = repository.pull_request_url(number)
    if print_url:
        click.echo(url)
        return
    logger.info(f"Opening {url}")
    if not webbrowser.open(url):
        check(Exception(f"Could not open a web browser for {url}"))

@cli.command(name="version", help="Print the whichpr version")
def version() -> None:
    """Version command."""
    click.echo(__version__)

def main() -> None:
    """Main entry point."""
    cli(obj={})

if __name__ == "__main__":
    main()
