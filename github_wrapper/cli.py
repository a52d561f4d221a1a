"""CLI commands for ad-hoc GitHub API calls."""

import argparse


def main():
    parser = argparse.ArgumentParser(
        description="Call the GitHub REST API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--api-base",
        default=None,
        help="API base URL (default: GITHUB_API_BASE or https://api.github.com)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # api subcommand
    api_parser = subparsers.add_parser(
        "api",
        help="Make a GitHub API call",
    )
    api_parser.add_argument(
        "endpoint",
        help="API endpoint path (e.g., repos/owner/repo/contents/path)",
    )
    api_parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Request parameter (repeatable, e.g., --param per_page=100)",
    )
    api_parser.add_argument(
        "--method",
        default="GET",
        help="HTTP method (default: GET)",
    )
    api_parser.add_argument(
        "--raw",
        action="store_true",
        help="Request the raw media type and print the body as text",
    )
    api_parser.add_argument(
        "--all-pages",
        action="store_true",
        help="Follow pagination links and print every item (GET only)",
    )

    args = parser.parse_args()

    if args.command == "api":
        import asyncio
        import json
        import sys

        from .errors import RequestError

        params = {}
        for p in args.param:
            k, _, v = p.partition("=")
            params[k] = v

        try:
            data = asyncio.run(_call_api(args, params or None))
        except RequestError as e:
            sys.stderr.write(f"{e}\n")
            if e.response is not None and e.response.content:
                sys.stderr.write(f"{e.response.text}\n")
            sys.exit(1)

        if isinstance(data, str):
            sys.stdout.write(data)
        else:
            json.dump(data, sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        parser.print_help()


async def _call_api(args, params):
    from .client import GitHub
    from .settings import get_settings

    settings = get_settings()
    if args.api_base:
        settings = settings.model_copy(update={"github_api_base": args.api_base})

    async with GitHub.from_settings(settings) as github:
        if args.all_pages:
            path = args.endpoint
            if params:
                from urllib.parse import urlencode

                path = f"{path}?{urlencode(params, doseq=True)}"
            return await github.engine.request_all_pages(path)
        result = await github.engine.request(args.method, args.endpoint, params, raw=args.raw)
        return result.data


if __name__ == "__main__":
    main()
