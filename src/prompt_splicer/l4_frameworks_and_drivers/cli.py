"""CLI entry point for prompt-splicer."""

from __future__ import annotations

import asyncio
import inspect
import sys
from collections.abc import Callable
from pathlib import Path

import click

from prompt_splicer import __version__


def _read_text_arg(value: str) -> str:
    """'-' reads from stdin; anything else is taken literally."""
    if value == '-':
        return click.get_text_stream('stdin').read()
    return value


def _run_session(container, action: Callable):
    """Run *action(controller)* inside an event loop with autosave active.

    The previous session is restored first; a pending debounced save is
    flushed before the loop closes.
    """
    from prompt_splicer.l1_entities.errors import PromptSplicerError  # noqa: PLC0415 -- deferred: not needed for --help

    async def _main():
        controller = container.start_session()
        container.autosave.start()
        try:
            result = action(controller)
            if inspect.isawaitable(result):
                result = await result
            return result
        finally:
            await container.autosave.stop(flush=True)

    try:
        return asyncio.run(_main())
    except PromptSplicerError as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)


@click.group()
@click.option(
    '-c',
    '--config',
    'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Path to YAML config file.',
)
@click.option(
    '--storage-dir',
    default=None,
    type=click.Path(file_okay=False),
    help='Directory for the session, cache and preferences (default: user data dir).',
)
@click.option('--debug-log', is_flag=True, help='Write a debug log into the storage directory.')
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx: click.Context, config_path, storage_dir, debug_log):
    """prompt-splicer -- split a long prompt into segments, edit them, recombine."""
    from prompt_splicer.l3_interface_adapters.gateways.yaml_config_loader import (  # noqa: PLC0415 -- deferred: yaml stack not loaded on --help
        YamlConfigLoader,
    )
    from prompt_splicer.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: openai stack not loaded on --help
        DependencyContainer,
    )
    from prompt_splicer.l4_frameworks_and_drivers.infra_config import (  # noqa: PLC0415 -- deferred: not needed for --help
        InfraConfig,
        build_app_config,
    )

    try:
        overrides: dict = {}
        if storage_dir:
            overrides['storage'] = {'directory': storage_dir}
        raw = YamlConfigLoader().load_raw(config_path, overrides=overrides or None)
        config = build_app_config(raw)
        infra = InfraConfig.model_validate(raw)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)

    container = DependencyContainer(config, infra=infra)
    if debug_log:
        from prompt_splicer.l4_frameworks_and_drivers.logging_setup import (  # noqa: PLC0415 -- deferred: only with --debug-log
            setup_file_logging,
        )

        setup_file_logging(container.storage_dir)
    ctx.obj = container


@cli.command('set-prompt')
@click.argument('text')
@click.pass_obj
def set_prompt(container, text):
    """Replace the prompt (use '-' to read stdin). Clears existing segments."""
    prompt = _read_text_arg(text)
    _run_session(container, lambda c: c.set_original_prompt(prompt))
    click.echo(f'Prompt set ({len(prompt)} chars).')


@cli.command()
@click.pass_obj
def split(container):
    """Ask the AI provider to break the prompt into segments."""

    async def _split(controller):
        if not controller.state.original_prompt.strip():
            click.echo('No prompt set. Use `set-prompt` first.', err=True)
            return None
        return await controller.break_into_segments()

    segments = _run_session(container, _split)
    if segments:
        click.echo(f'{len(segments)} segments:')
        for seg in segments:
            click.echo(f'  {seg.order}. [{seg.id}] {seg.title}')


@cli.command('list')
@click.pass_obj
def list_segments(container):
    """List segments in order."""
    segments = _run_session(container, lambda c: c.store.ordered_segments())
    if not segments:
        click.echo('No segments.')
        return
    for seg in segments:
        mark = 'x' if seg.is_included else ' '
        click.echo(f'[{mark}] {seg.order}. {seg.id}  {seg.title}  ({len(seg.content)} chars)')


@cli.command()
@click.pass_obj
def show(container):
    """Print the combined output of included segments."""
    output = _run_session(container, lambda c: c.state.derived_output)
    click.echo(output)


@cli.command()
@click.argument('segment_id')
@click.option('--title', default=None, help='New title.')
@click.option('--content', default=None, help="New content ('-' reads stdin).")
@click.pass_obj
def edit(container, segment_id, title, content):
    """Edit a segment's title and/or content."""
    fields: dict = {}
    if title is not None:
        fields['title'] = title
    if content is not None:
        fields['content'] = _read_text_arg(content)
    if not fields:
        click.echo('Nothing to change.', err=True)
        return
    _run_session(container, lambda c: c.update_segment(segment_id, fields, strict=True))
    click.echo(f'Updated {segment_id}.')


@cli.command()
@click.argument('segment_id')
@click.pass_obj
def toggle(container, segment_id):
    """Include or exclude a segment from the output."""
    included = _run_session(container, lambda c: c.toggle_included(segment_id))
    click.echo(f'{segment_id} is now {"included" if included else "excluded"}.')


@cli.command()
@click.argument('segment_id')
@click.argument('position', type=click.IntRange(min=0))
@click.pass_obj
def move(container, segment_id, position):
    """Move a segment to POSITION (0-based)."""
    _run_session(container, lambda c: c.move_segment(segment_id, position))
    click.echo(f'Moved {segment_id} to position {position}.')


@cli.command()
@click.argument('segment_id')
@click.pass_obj
def condense(container, segment_id):
    """Ask the AI provider to make one segment more concise."""
    result = _run_session(container, lambda c: c.make_concise(segment_id))
    if result is None:
        click.echo('Segment changed while condensing; result discarded.', err=True)
        return
    click.echo(result)


@cli.command()
@click.option(
    '-o',
    '--output-dir',
    default=None,
    type=click.Path(file_okay=False),
    help='Directory to write prompt-output.txt into.',
)
@click.pass_obj
def export(container, output_dir):
    """Write the combined output to prompt-output.txt."""
    path = _run_session(container, lambda c: c.export_output(Path(output_dir) if output_dir else None))
    click.echo(f'Exported to {path}')


@cli.command()
@click.pass_obj
def copy(container):
    """Copy the combined output to the clipboard."""
    fallback = _run_session(container, lambda c: c.copy_output())
    if fallback:
        click.echo(f'Clipboard unavailable; output written to {fallback} for manual copy.')
    else:
        click.echo('Copied to clipboard.')


@cli.command()
@click.pass_obj
def stats(container):
    """Show output size and segment counts."""
    s = _run_session(container, lambda c: c.stats())
    click.echo(f'{s.segment_count} segments, {s.included_count} included')
    click.echo(f'{s.characters} chars, {s.words} words, {s.lines} lines')


@cli.command()
@click.option('--api-key', prompt=True, hide_input=True, help='Provider API key.')
@click.option(
    '--model',
    default='gpt-5-mini',
    type=click.Choice(['gpt-5-mini', 'gpt-4o-mini', 'gpt-3.5-turbo']),
    show_default=True,
)
@click.option('--check', is_flag=True, help='Verify the key against the provider before saving.')
@click.pass_obj
def login(container, api_key, model, check):
    """Store the provider API key and model."""
    from pydantic import ValidationError  # noqa: PLC0415 -- deferred: not needed for --help

    from prompt_splicer.l1_entities.credentials import ProviderCredentials  # noqa: PLC0415 -- deferred: not needed for --help

    try:
        credentials = ProviderCredentials(api_key=api_key, model=model)
    except ValidationError as e:
        click.echo(f'Error: {e.errors()[0]["msg"]}', err=True)
        sys.exit(1)
    if check:
        ok, err = container.build_llm_client(credentials).check_connectivity()
        if not ok:
            click.echo(f'Error: {err}', err=True)
            sys.exit(1)
    container.preferences.save_credentials(credentials)
    click.echo(f'Saved key {credentials.masked_key()} for {credentials.model}.')


@cli.command()
@click.pass_obj
def logout(container):
    """Forget the stored API key."""
    container.preferences.clear_credentials()
    click.echo('API key removed.')


@cli.command()
@click.argument('choice', required=False, type=click.Choice(['dark', 'light']))
@click.pass_obj
def theme(container, choice):
    """Show or set the theme preference."""
    if choice:
        container.preferences.set_theme(choice)
    click.echo(container.preferences.theme())


@cli.command('clear-cache')
@click.pass_obj
def clear_cache(container):
    """Drop all cached AI results."""
    removed = container.cache.clear()
    click.echo(f'Removed {removed} cached results.')
