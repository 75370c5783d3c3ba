"""
Installer CLI entry point.

Runs the install command. SIGTERM is turned into SystemExit so that
temporary downloads are cleaned up the same way as on Ctrl+C.
"""

import signal

from cli.install import install


def _exit_on_sigterm(signum, frame) -> None:
    """Unwind the stack on SIGTERM instead of dying in place."""
    raise SystemExit(128 + signum)


def main() -> None:
    """Main entry point for CLI."""
    signal.signal(signal.SIGTERM, _exit_on_sigterm)
    install()


if __name__ == "__main__":
    main()
