#!/usr/bin/env python3
import os
import sys

ROOT_DIR = os.path.dirname(os.path.abspath(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)


def main() -> int:
    from cli.find_posts import main as cli_main
    return cli_main()


if __name__ == "__main__":
    raise SystemExit(main())
