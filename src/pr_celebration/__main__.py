"""Entry point for `python -m pr_celebration`."""

import sys


def main():
    from pr_celebration.app import run
    sys.exit(run())


if __name__ == "__main__":
    main()
