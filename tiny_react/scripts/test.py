"""``test`` script: run the app's Jest suite with forwarded arguments.

Watch mode is added unless running on CI or collecting coverage.
"""

import asyncio
import os
import sys
from pathlib import Path

from tiny_react.utils import print_error, run_command

TEST_ENV = {"BABEL_ENV": "test", "NODE_ENV": "test", "PUBLIC_URL": ""}


def build_jest_args(argv: list[str], env: dict[str, str]) -> list[str]:
    args = list(argv)
    if (
        not env.get("CI")
        and "--coverage" not in args
        and "--watchAll" not in args
        and "--watch" not in args
    ):
        args.append("--watch")
    return args


async def run_tests(argv: list[str], cwd: str | Path) -> int:
    cmd = ["npx", "jest", *build_jest_args(argv, dict(os.environ))]
    try:
        returncode, _, _ = await run_command(
            cmd, cwd=cwd, timeout=None, capture=False, env=TEST_ENV
        )
    except OSError as exc:
        print_error(f"Could not run {' '.join(cmd)}: {exc}")
        return 1
    return 1 if returncode < 0 else returncode


def main() -> int:
    return asyncio.run(run_tests(sys.argv[1:], os.getcwd()))


if __name__ == "__main__":
    sys.exit(main())
