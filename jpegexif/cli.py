"""CLI interface for jpegexif -- info, set, strip-gps subcommands."""

import json
import logging
import sys
from pathlib import Path

import click

import jpegexif
from jpegexif.config import CodecConfig
from jpegexif.document import DirectoryId, ExifDocument, open_jpeg
from jpegexif.errors import ExifError
from jpegexif.log import (
    cli_bold,
    cli_dim,
    cli_error,
    cli_header,
    cli_info,
    cli_mismatch,
    cli_segment,
    cli_separator,
    cli_success,
    cli_tag,
    cli_warning,
    set_color_enabled,
)
from jpegexif.manager import ExifManager
from jpegexif.tiff.tags import GPS_TAG_NAMES, INTEROP_TAG_NAMES, TAG_NAMES, tag_name
from jpegexif.verify import verify_saved

_NAMES = {
    DirectoryId.GPS: GPS_TAG_NAMES,
    DirectoryId.INTEROP: INTEROP_TAG_NAMES,
}


def _fail(msg: str):
    click.echo(cli_error(f'Error: {msg}'), err=True)
    sys.exit(1)


def _open(ctx, path) -> ExifDocument:
    try:
        return open_jpeg(path, ctx.obj['config'])
    except ExifError as e:
        _fail(f'{Path(path).name}: {e}')


def _save(document: ExifDocument, output: Path, no_verify: bool, decode_check: bool):
    try:
        document.save(output)
    except ExifError as e:
        _fail(str(e))
    click.echo(cli_success(f'Wrote {output}'))

    if no_verify:
        return
    try:
        result = verify_saved(document, output, check_decode=decode_check)
    except ImportError as e:
        _fail(str(e))
    if result.is_valid:
        click.echo(cli_dim(f'  Verified {result.tags_checked} tag(s)'))
        return
    if result.error:
        click.echo(cli_error(f'  {result.error}'), err=True)
    for m in result.mismatches:
        click.echo(cli_mismatch(m.directory, m.tag_name, m.expected, m.actual), err=True)
    if result.thumbnail_matches is False:
        click.echo(cli_warning('  Thumbnail differs'), err=True)
    sys.exit(1)


def _describe(document: ExifDocument) -> dict:
    manager = ExifManager(document)
    photographer, editor = manager.get_copyright()
    data = {
        'file': str(document.source_path),
        'byte_order': document.byte_order,
        'segment': {
            'offset': document.segment.marker_offset,
            'size': document.segment.segment_size,
        },
        'directories': {},
        'thumbnail_length': len(document.thumbnail_bytes()),
        'copyright': {'photographer': photographer, 'editor': editor},
        'gps': manager.get_gps_location(),
    }
    for which in DirectoryId:
        names = _NAMES.get(which, TAG_NAMES)
        data['directories'][which.value] = [
            {
                'tag': tag_id,
                'name': tag_name(tag_id, names),
                'type': value.kind.name,
                'count': value.count,
                'value': value.preview(),
            }
            for tag_id, value in sorted(document.directory(which).items())
        ]
    return data


@click.group()
@click.version_option(version=jpegexif.__version__, prog_name='jpegexif')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='JSON file with codec settings.')
@click.option('--no-color', is_flag=True, help='Disable coloured output.')
@click.option('--verbose', '-v', is_flag=True, help='Log parser and layout details.')
@click.pass_context
def main(ctx, config_path, no_color, verbose):
    """jpegexif -- read and rewrite EXIF metadata in JPEG files."""
    if no_color:
        set_color_enabled(False)
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    config = CodecConfig.default()
    if config_path:
        try:
            config = CodecConfig.from_json(config_path)
        except (ValueError, TypeError) as e:
            _fail(f'Invalid config {config_path}: {e}')
    ctx.obj = {'config': config}


@main.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--json-out', type=click.Path(), help='Write the tag listing as JSON to file.')
@click.pass_context
def info(ctx, path, json_out):
    """List every tag of every EXIF directory in PATH."""
    document = _open(ctx, path)
    data = _describe(document)

    click.echo(cli_header(f'File: {Path(path).name}'))
    click.echo(f'Byte order: {data["byte_order"]}  '
               + cli_segment(data["segment"]["offset"], data["segment"]["size"]))

    for which in DirectoryId:
        entries = data['directories'][which.value]
        if not entries:
            continue
        click.echo(cli_separator())
        click.echo(cli_bold(f'{which.name} ({len(entries)} tag(s))'))
        for e in entries:
            tag_hex = cli_tag(e["tag"])
            click.echo(f'  {tag_hex} {e["name"]:<28} '
                       f'{e["type"]:<10} {e["value"]}')

    click.echo(cli_separator())
    if data['thumbnail_length']:
        click.echo(cli_info(f'Thumbnail: {data["thumbnail_length"]} bytes'))
    else:
        click.echo(cli_dim('Thumbnail: none'))

    if json_out:
        with open(json_out, 'w') as f:
            json.dump(data, f, indent=2)
        click.echo(f'Results written to {json_out}')


@main.command(name='set')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False), required=True,
              help='Output file (must differ from PATH).')
@click.option('--artist', help='Artist (IFD0).')
@click.option('--copyright', 'copyright_', nargs=2, metavar='PHOTOGRAPHER EDITOR',
              help='Photographer and editor copyright; pass "" to leave one empty.')
@click.option('--gps', nargs=3, type=float, metavar='LAT LON ALT',
              help='Position in decimal degrees and metres.')
@click.option('--direction', type=float, help='Image direction in degrees (magnetic).')
@click.option('--description', help='Image description (IFD0).')
@click.option('--software', help='Software (IFD0).')
@click.option('--comment', help='User comment (Exif IFD).')
@click.option('--no-verify', is_flag=True, help='Skip re-reading the output.')
@click.option('--decode-check', is_flag=True,
              help='Also decode the output with Pillow (needs jpegexif[verify]).')
@click.pass_context
def set_(ctx, path, output, artist, copyright_, gps, direction, description,
         software, comment, no_verify, decode_check):
    """Write selected tags and save the result to --output."""
    document = _open(ctx, path)
    manager = ExifManager(document)
    changes = []

    if artist is not None:
        manager.set_artist(artist)
        changes.append('artist')
    if copyright_:
        manager.set_copyright(*copyright_)
        changes.append('copyright')
    if gps:
        try:
            manager.set_gps_location(*gps)
        except ValueError as e:
            _fail(str(e))
        changes.append('gps')
    if direction is not None:
        try:
            manager.set_img_direction(direction)
        except ValueError as e:
            _fail(str(e))
        changes.append('direction')
    if description is not None:
        manager.set_image_description(description)
        changes.append('description')
    if software is not None:
        manager.set_software(software)
        changes.append('software')
    if comment is not None:
        manager.set_user_comment(comment)
        changes.append('comment')

    if changes:
        click.echo(f'Updating {", ".join(changes)}')
    else:
        click.echo(cli_warning('No tags given; rewriting metadata unchanged'))
    _save(document, Path(output), no_verify, decode_check)


@main.command(name='strip-gps')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False), required=True,
              help='Output file (must differ from PATH).')
@click.option('--no-verify', is_flag=True, help='Skip re-reading the output.')
@click.pass_context
def strip_gps(ctx, path, output, no_verify):
    """Remove the GPS directory from PATH and save to --output."""
    document = _open(ctx, path)
    removed = ExifManager(document).clear_gps()
    if removed:
        click.echo(f'Removed {removed} GPS tag(s)')
    else:
        click.echo(cli_dim('No GPS tags present'))
    _save(document, Path(output), no_verify, decode_check=False)


if __name__ == '__main__':
    main()
