"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Configures logging, builds the dispatcher lazily,
and centralizes response emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from cmdsrv.output.formatters import OutputSettings, format_response

if TYPE_CHECKING:
    from cmdsrv.config.settings import CmdsrvSettings
    from cmdsrv.services.dispatcher import Dispatcher


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The dispatcher is created on first use so ``--help`` and ``send``
    never build one.
    """

    def __init__(self, settings: CmdsrvSettings) -> None:
        self.settings = settings
        self._dispatcher: Dispatcher | None = None

        from cmdsrv.config.logging import configure_logging

        configure_logging(
            debug=settings.debug,
            log_json=settings.log_json,
            log_file=settings.log_file,
        )

        if settings.debug:
            from cmdsrv.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def dispatcher(self) -> Dispatcher:
        """The dispatcher instance (created lazily on first access)."""
        if self._dispatcher is None:
            from cmdsrv.services.dispatcher import Dispatcher

            self._dispatcher = Dispatcher(max_batch_depth=self.settings.batch.max_depth)
        return self._dispatcher

    def emit(
        self, envelope: dict[str, Any], *, json_output: bool = False, quiet: bool = False
    ) -> None:
        """Print a response envelope with correct exit semantics.

        * ``status: ok``: writes to stdout, returns normally.
        * ``status: error``: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(json_output=json_output, quiet=quiet)
        output = format_response(envelope, settings=settings)
        if envelope.get("status") == "ok":
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
