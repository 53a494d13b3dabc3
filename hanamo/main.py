"""Entry point for the hanamo-order Textual app."""

from __future__ import annotations

from hanamo.debug_log import configure_debug_log
from hanamo.order_app import HanamoOrderApp


def main() -> None:
    configure_debug_log()
    HanamoOrderApp().run()


if __name__ == "__main__":
    main()
