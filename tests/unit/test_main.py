"""
Unit tests for the command-line entrypoint.

Startup, shutdown and the game service are patched out; these tests cover
argument parsing, command dispatch, printed summaries and exit codes.
"""

import asyncio
import signal

import pytest

from src import main as cli
from src.modules.game.service import DecaySweepReport
from src.modules.generation.service import GenerationCredit, GenerationMode
from src.modules.shared.exceptions import NotFoundError
from tests.helpers import NOW


@pytest.fixture
def lifecycle(mocker):
    startup = mocker.patch("src.main._startup", new_callable=mocker.AsyncMock)
    shutdown = mocker.patch("src.main._shutdown", new_callable=mocker.AsyncMock)
    mocker.patch("src.main.SqlGameStore")
    return startup, shutdown


@pytest.fixture
def game_service(mocker):
    service = mocker.MagicMock()
    mocker.patch("src.main.GameService", return_value=service)
    return service


@pytest.mark.unit
class TestParser:
    def test_sweep_tokens_flags(self):
        args = cli.build_parser().parse_args(["sweep-tokens", "--include-offline"])

        assert args.command == "sweep-tokens"
        assert args.include_offline is True
        assert args.database_url is None

    def test_database_url_override(self):
        args = cli.build_parser().parse_args(["--database-url", "sqlite+aiosqlite:///x.db", "init-db"])

        assert args.database_url == "sqlite+aiosqlite:///x.db"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])


@pytest.mark.unit
class TestMain:
    async def test_sweep_tokens_prints_summary(self, mocker, lifecycle, game_service, capsys):
        game_service.sweep_token_generation = mocker.AsyncMock(
            return_value=[
                GenerationCredit("player-1", 15, 1, GenerationMode.ACTIVE, NOW, ("c1",)),
                GenerationCredit("player-2", 10, 1, GenerationMode.OFFLINE, NOW, ("c2",)),
            ]
        )

        exit_code = await cli.main(["sweep-tokens", "--include-offline"])

        assert exit_code == 0
        game_service.sweep_token_generation.assert_awaited_once_with(include_offline=True)
        assert "Credited 2 players, 25 SPIDER total" in capsys.readouterr().out
        startup, shutdown = lifecycle
        startup.assert_awaited_once_with(None)
        shutdown.assert_awaited_once()

    async def test_sweep_decay_prints_summary(self, mocker, lifecycle, game_service, capsys):
        game_service.sweep_condition_decay = mocker.AsyncMock(
            return_value=DecaySweepReport(creatures_processed=4, creatures_died=1)
        )

        exit_code = await cli.main(["sweep-decay"])

        assert exit_code == 0
        assert "Processed 4 spiders, 1 died" in capsys.readouterr().out

    async def test_init_db_creates_tables(self, mocker, lifecycle):
        create_all = mocker.patch(
            "src.main.DatabaseService.create_all", new_callable=mocker.AsyncMock
        )

        assert await cli.main(["init-db"]) == 0
        create_all.assert_awaited_once()

    async def test_failure_returns_one_and_still_shuts_down(self, lifecycle):
        startup, shutdown = lifecycle
        startup.side_effect = RuntimeError("no database")

        assert await cli.main(["sweep-decay"]) == 1
        shutdown.assert_awaited_once()

    async def test_domain_rejection_logged_as_warning(self, mocker, lifecycle, game_service):
        game_service.sweep_condition_decay = mocker.AsyncMock(
            side_effect=NotFoundError("Player", "p1")
        )
        log = mocker.patch("src.main.logger")

        assert await cli.main(["sweep-decay"]) == 1
        log.warning.assert_called_once()
        log.critical.assert_not_called()

    async def test_unexpected_error_logged_as_critical(self, mocker, lifecycle):
        lifecycle[0].side_effect = RuntimeError("no database")
        log = mocker.patch("src.main.logger")

        assert await cli.main(["sweep-decay"]) == 1
        log.critical.assert_called_once()

    async def test_cancelled_command_still_shuts_down(self, mocker, lifecycle, game_service):
        started = asyncio.Event()

        async def _hang():
            started.set()
            await asyncio.Event().wait()

        game_service.sweep_condition_decay = mocker.AsyncMock(side_effect=_hang)

        task = asyncio.create_task(cli.main(["sweep-decay"]))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        lifecycle[1].assert_awaited_once()


@pytest.mark.unit
class TestSignalHandling:
    def test_sigterm_cancels_main_task(self, mocker):
        loop = mocker.Mock()
        task = mocker.Mock()

        cli._install_signal_handlers(loop, task)

        loop.add_signal_handler.assert_called_once_with(signal.SIGTERM, task.cancel)

    def test_unsupported_platform_is_tolerated(self, mocker):
        loop = mocker.Mock()
        loop.add_signal_handler.side_effect = NotImplementedError

        cli._install_signal_handlers(loop, mocker.Mock())
