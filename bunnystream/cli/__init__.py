"""Command-line interface."""

import json
import logging
from pathlib import Path

import click

from ..api import StreamClient
from ..config.settings import load_settings
from ..core.errors import StreamError
from ..core.models import TranscriptionOptions


def _configure_logging(level: str, log_file: str | None, verbose: bool) -> None:
    if verbose:
        level = "DEBUG"
    logging.basicConfig(
        level=getattr(logging, level),
        filename=log_file,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _run(ctx: click.Context, operation):
    """Run ``operation(client)`` and print its JSON result."""
    try:
        settings = load_settings(ctx.obj["config"])
        _configure_logging(settings.logging.level, settings.logging.file, ctx.obj["verbose"])
        with StreamClient(settings.stream) as client:
            result = operation(client)
    except StreamError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo(json.dumps(result, indent=2))


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Custom configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, config: Path | None, verbose: bool):
    """Manage videos and collections in a Bunny Stream library.

    Credentials come from the configuration file or the
    BUNNY_STREAM_API_KEY and BUNNY_STREAM_LIBRARY_ID environment variables.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


@main.command("list-videos")
@click.option("--search", help="Only videos matching this text")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--items-per-page", type=int, default=100, show_default=True)
@click.option("--collection", help="Only videos in this collection")
@click.option("--order-by", help="Sort field, e.g. date or title")
@click.pass_context
def list_videos(ctx, search, page, items_per_page, collection, order_by):
    """List videos in the library."""
    _run(ctx, lambda client: client.list_videos(search, page, items_per_page, collection, order_by))


@main.command("get-video")
@click.argument("video_id")
@click.pass_context
def get_video(ctx, video_id):
    """Show one video."""
    _run(ctx, lambda client: client.get_video(video_id))


@main.command("delete-video")
@click.argument("video_id")
@click.pass_context
def delete_video(ctx, video_id):
    """Delete a video."""
    _run(ctx, lambda client: client.delete_video(video_id))


@main.command("upload")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--title", help="Video title (defaults to the file name)")
@click.option("--collection-id", help="Collection to place the video in")
@click.option("--thumbnail-time", type=int, help="Thumbnail position in milliseconds")
@click.option("--resolutions", help="Comma separated resolutions to encode, e.g. 720p,1080p")
@click.option("--cleanup-on-failure", is_flag=True, help="Delete the created video if the upload fails")
@click.pass_context
def upload(ctx, path, title, collection_id, thumbnail_time, resolutions, cleanup_on_failure):
    """Create a video and upload PATH into it."""
    _run(ctx, lambda client: client.upload_video(
        title or path.stem,
        path,
        collection_id=collection_id,
        thumbnail_time=thumbnail_time,
        enabled_resolutions=resolutions,
        cleanup_on_failure=cleanup_on_failure,
    ))


@main.command("fetch")
@click.argument("url")
@click.option("--title", help="Video title")
@click.option("--collection-id", help="Collection to place the video in")
@click.pass_context
def fetch(ctx, url, title, collection_id):
    """Have the API download a video from URL."""
    _run(ctx, lambda client: client.fetch_video(url, title=title, collection_id=collection_id))


@main.command("add-caption")
@click.argument("video_id")
@click.argument("srclang")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--label", help="Label shown in the player")
@click.pass_context
def add_caption(ctx, video_id, srclang, path, label):
    """Upload a captions file for one language."""
    _run(ctx, lambda client: client.add_caption(video_id, srclang, path, label))


@main.command("transcribe")
@click.argument("video_id")
@click.argument("language")
@click.option("--force", is_flag=True, help="Transcribe again even if captions exist")
@click.option("--target-language", "target_languages", multiple=True, help="Translate into this language")
@click.option("--generate-titles", is_flag=True, help="Generate a title")
@click.option("--generate-description", is_flag=True, help="Generate a description")
@click.pass_context
def transcribe(ctx, video_id, language, force, target_languages, generate_titles, generate_description):
    """Start automatic transcription of a video."""
    options = TranscriptionOptions(
        target_languages=list(target_languages) or None,
        generate_titles=generate_titles or None,
        generate_description=generate_description or None,
    )
    _run(ctx, lambda client: client.transcribe_video(video_id, language, force, options))


@main.command("list-collections")
@click.option("--search", help="Only collections matching this text")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--items-per-page", type=int, default=100, show_default=True)
@click.option("--include-thumbnails", is_flag=True)
@click.pass_context
def list_collections(ctx, search, page, items_per_page, include_thumbnails):
    """List collections in the library."""
    _run(ctx, lambda client: client.list_collections(
        search, page, items_per_page, include_thumbnails=include_thumbnails
    ))


@main.command("create-collection")
@click.argument("name")
@click.pass_context
def create_collection(ctx, name):
    """Create a collection."""
    _run(ctx, lambda client: client.create_collection(name))


@main.command("delete-collection")
@click.argument("collection_id")
@click.pass_context
def delete_collection(ctx, collection_id):
    """Delete a collection."""
    _run(ctx, lambda client: client.delete_collection(collection_id))


if __name__ == "__main__":
    main()
