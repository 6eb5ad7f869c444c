import argparse
import json
import logging
import sys
from pathlib import Path

from vidlink.bootstrap import create_container
from vidlink.core.config import load_settings
from vidlink.core.errors import VidlinkError

logger = logging.getLogger("vidlink")


def _serve(container, args):
    from vidlink.web.server import PreviewServer

    server = PreviewServer(container["media_service"], container["proxy"], container["settings"])
    if args.host:
        server.host = args.host
    if args.port:
        server.port = args.port
    server.run_server()
    return 0


def _resolve(container, args):
    result = container["media_service"].resolve(args.url)
    print(json.dumps(result.to_dict(), indent=2))
    return 0


def _download(container, args):
    proxied = container["proxy"].open(args.url)
    filename = proxied.filename

    out_dir = Path(args.output)
    out_dir.mkdir(parents=True, exist_ok=True)
    dest = out_dir / filename

    written = 0
    with open(dest, "wb") as f:
        for chunk in proxied.body:
            f.write(chunk)
            written += len(chunk)
    print(f"Saved {dest} ({written} bytes)")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="vidlink - video link preview and download proxy")
    parser.add_argument("--env-file", help="Load settings from this .env file", default=None)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address", default=None)
    serve_parser.add_argument("--port", type=int, help="Bind port", default=None)

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a URL and print the result as JSON")
    resolve_parser.add_argument("url", help="URL to resolve")

    download_parser = subparsers.add_parser("download", help="Download a media URL through the proxy pipeline")
    download_parser.add_argument("url", help="Media URL")
    download_parser.add_argument("-o", "--output", help="Destination folder", default=".")

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    settings = load_settings(args.env_file)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    container = create_container(settings)

    handlers = {"serve": _serve, "resolve": _resolve, "download": _download}
    try:
        return handlers[args.command](container, args)
    except VidlinkError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
