"""gtasks-mcp-setup-auth — interactive OAuth setup that stores the token file.

Exit codes: 0 authenticated (or already was), 1 missing credentials or failed exchange.
"""

import argparse
import sys
from collections.abc import Callable

from gtasks_mcp.bootstrap import build_auth_manager
from gtasks_mcp.config import get_settings
from gtasks_mcp.core.errors import TasksMCPError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gtasks-mcp-setup-auth",
        description="Authorize Google Tasks access and save the OAuth token.",
    )
    parser.add_argument(
        "--code", help="authorization code from the redirect URL (skips the prompt)",
    )
    parser.add_argument(
        "--force", action="store_true",
        help="re-authenticate even when a valid token already exists",
    )
    return parser


def main(argv: list[str] | None = None, prompt: Callable[[str], str] = input) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    print("Google Tasks OAuth Setup\n")

    if not settings.google_client_id or not settings.google_client_secret:
        print("Missing credentials!", file=sys.stderr)
        print(
            "\nPlease create a .env file with:\n"
            "GOOGLE_CLIENT_ID=your-client-id\n"
            "GOOGLE_CLIENT_SECRET=your-client-secret\n"
            "GOOGLE_REDIRECT_URI=http://localhost",
            file=sys.stderr,
        )
        return 1

    auth = build_auth_manager(settings)
    if not args.force and auth.has_valid_token():
        print("You are already authenticated!")
        print(f"Token file: {settings.token_path}\n")
        print('Run "gtasks-mcp-test-auth" to test your connection.')
        return 0

    code = args.code
    if not code:
        print("Step 1: Visit this URL to authorize the application:\n")
        print(auth.get_auth_url())
        print(
            "\nStep 2: After authorization, you will be redirected to a URL like:\n"
            "        http://localhost/?code=XXXXX&scope=...\n"
            '\nStep 3: Copy the CODE from the URL (the part after "code=")\n'
            "        The page may show an error; just copy the code from the URL\n"
        )
        code = prompt("Paste the authorization code here: ")
    if not code.strip():
        print("No authorization code given.", file=sys.stderr)
        return 1

    print("\nExchanging code for tokens...")
    try:
        auth.authenticate(code)
    except TasksMCPError as exc:
        print(f"\n{exc.message}", file=sys.stderr)
        print("\nPlease try again by running: gtasks-mcp-setup-auth", file=sys.stderr)
        return 1
    print("Authentication successful!")
    print(f"Token saved to: {settings.token_path}\n")
    print('You can now run "gtasks-mcp-test-auth" to test your connection.')
    return 0


if __name__ == "__main__":
    sys.exit(main())
