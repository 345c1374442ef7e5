"""Tests for the ``snapshot`` command wiring (cli/app.py).

The peer adapter is patched at its defining module so the lazy import
inside the handler picks up the mock; questionary is patched at the
prompt module.

Coverage:
* Flags → InvocationOptions.
* Direct mode dispatch and stdout reporting.
* Every failure surfaces as ProcessError with the original message.
* Interactive mode, including clean cancellation.
* ``cli()`` exit codes.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from fabric_snapshot.cli import exit_codes
from fabric_snapshot.cli.app import cli, main
from fabric_snapshot.core.models import Operation, ServiceResult
from fabric_snapshot.exceptions import (
    MissingRequiredFieldError,
    ProcessError,
    ServiceError,
    UnknownOperationError,
)

_SERVICE = "fabric_snapshot.infra.peer_provider.PeerChannelService"


# ---------------------------------------------------------------------------
# Direct (flag) mode
# ---------------------------------------------------------------------------

class TestDirectMode:
    @patch(_SERVICE)
    def test_submit_flags(
        self, mock_service_cls: MagicMock, capsys: pytest.CaptureFixture[str],
    ) -> None:
        service = mock_service_cls.return_value
        service.submit_snapshot_request.return_value = ServiceResult(
            stdout="Snapshot request submitted successfully\r\n",
        )

        code = main(["snapshot", "-o", "submit", "-c", "c1", "-b", "42"])

        assert code == exit_codes.SUCCESS
        service.submit_snapshot_request.assert_called_once_with(
            channel_name="c1", block_number=42,
        )
        assert capsys.readouterr().out == "Snapshot request submitted successfully\n"

    @patch(_SERVICE)
    def test_long_flags(self, mock_service_cls: MagicMock) -> None:
        service = mock_service_cls.return_value
        service.join_by_snapshot.return_value = ServiceResult()

        main(["snapshot", "--operation", "join", "--snapshotPath", "/snap/c1/42"])
        service.join_by_snapshot.assert_called_once_with(snapshot_path="/snap/c1/42")

    @patch(_SERVICE)
    def test_missing_operation_is_process_error(self, mock_service_cls: MagicMock) -> None:
        with pytest.raises(ProcessError) as exc_info:
            main(["snapshot", "-c", "c1"])
        assert str(exc_info.value) == "[x] Process Error: Operation type is needed!"
        assert mock_service_cls.return_value.method_calls == []

    @patch(_SERVICE)
    def test_missing_field_is_process_error(self, mock_service_cls: MagicMock) -> None:
        with pytest.raises(ProcessError, match="Channel name is needed") as exc_info:
            main(["snapshot", "-o", "listPending"])
        assert isinstance(exc_info.value.__cause__, MissingRequiredFieldError)
        assert mock_service_cls.return_value.method_calls == []

    @patch(_SERVICE)
    def test_service_error_is_process_error(self, mock_service_cls: MagicMock) -> None:
        service = mock_service_cls.return_value
        service.cancel_snapshot_request.side_effect = ServiceError("no pending request")

        with pytest.raises(ProcessError) as exc_info:
            main(["snapshot", "-o", "cancel", "-c", "c1", "-b", "5"])
        assert str(exc_info.value) == "[x] Process Error: no pending request"

    def test_unknown_operation_rejected_by_parser(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["snapshot", "-o", "delete"])
        assert exc_info.value.code == 2

    def test_non_numeric_block_rejected_by_parser(self) -> None:
        with pytest.raises(SystemExit):
            main(["snapshot", "-o", "submit", "-c", "c1", "-b", "ten"])

    @patch(_SERVICE)
    def test_channel_choices_from_config(
        self, mock_service_cls: MagicMock, config_file: Path,
    ) -> None:
        config_file.write_text('channels = ["mychannel"]\n', encoding="utf-8")
        mock_service_cls.return_value.list_pending_snapshots.return_value = ServiceResult()

        with pytest.raises(SystemExit):
            main(["snapshot", "-o", "listPending", "-c", "unknown"])
        assert main(["snapshot", "-o", "listPending", "-c", "mychannel"]) == exit_codes.SUCCESS

    @patch(_SERVICE)
    def test_explicit_config_flag(self, mock_service_cls: MagicMock, tmp_path: Path) -> None:
        config_path = tmp_path / "alt.toml"
        config_path.write_text('channels = ["alt"]\n', encoding="utf-8")
        mock_service_cls.return_value.list_pending_snapshots.return_value = ServiceResult()

        code = main(["--config", str(config_path), "snapshot", "-o", "listPending", "-c", "alt"])
        assert code == exit_codes.SUCCESS
        assert mock_service_cls.call_args.args[0].channels == ("alt",)

    @patch(_SERVICE)
    def test_config_flag_after_subcommand(
        self, mock_service_cls: MagicMock, tmp_path: Path,
    ) -> None:
        config_path = tmp_path / "alt.toml"
        config_path.write_text('channels = ["alt"]\n', encoding="utf-8")
        mock_service_cls.return_value.list_pending_snapshots.return_value = ServiceResult()

        code = main(["snapshot", "-o", "listPending", "-c", "alt", "--config", str(config_path)])
        assert code == exit_codes.SUCCESS
        assert mock_service_cls.call_args.args[0].channels == ("alt",)

    @patch("fabric_snapshot.cli.app._configure_logging")
    @patch(_SERVICE)
    def test_verbose_after_subcommand(
        self, mock_service_cls: MagicMock, mock_logging: MagicMock,
    ) -> None:
        mock_service_cls.return_value.list_pending_snapshots.return_value = ServiceResult()

        assert main(["snapshot", "-o", "listPending", "-c", "x", "-v"]) == exit_codes.SUCCESS
        mock_logging.assert_called_once_with(True)

    @patch("fabric_snapshot.cli.app._configure_logging")
    @patch(_SERVICE)
    def test_verbose_before_subcommand_is_kept(
        self, mock_service_cls: MagicMock, mock_logging: MagicMock,
    ) -> None:
        mock_service_cls.return_value.list_pending_snapshots.return_value = ServiceResult()

        assert main(["-v", "snapshot", "-o", "listPending", "-c", "x"]) == exit_codes.SUCCESS
        mock_logging.assert_called_once_with(True)


class TestUnknownOperationWrapping:
    def test_handler_wraps_unknown_operation(self, channel_service: MagicMock) -> None:
        from fabric_snapshot.cli.app import _handle_snapshot
        from fabric_snapshot.config import SnapshotConfig
        from fabric_snapshot.core.models import InvocationOptions

        with patch(_SERVICE, return_value=channel_service):
            with pytest.raises(ProcessError, match="Unknown Operation Type") as exc_info:
                _handle_snapshot(InvocationOptions(operation="delete"), SnapshotConfig())
        assert isinstance(exc_info.value.__cause__, UnknownOperationError)
        assert channel_service.method_calls == []


# ---------------------------------------------------------------------------
# Interactive mode
# ---------------------------------------------------------------------------

def _questionary(operation: Operation | None, answers: list[str | None]) -> MagicMock:
    module = MagicMock()
    module.select.return_value.ask.return_value = operation
    module.text.return_value.ask.side_effect = answers
    return module


class TestInteractiveMode:
    @patch("fabric_snapshot.cli.snapshot_prompt._import_questionary")
    @patch(_SERVICE)
    def test_submit(
        self,
        mock_service_cls: MagicMock,
        mock_q: MagicMock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        service = mock_service_cls.return_value
        service.submit_snapshot_request.return_value = ServiceResult(stdout="a\r\nb\r\n")
        mock_q.return_value = _questionary(Operation.SUBMIT, ["c1", "42"])

        assert main(["snapshot", "-i"]) == exit_codes.SUCCESS
        service.submit_snapshot_request.assert_called_once_with(
            channel_name="c1", block_number=42,
        )
        assert capsys.readouterr().out == "ab\n"

    @patch("fabric_snapshot.cli.snapshot_prompt._import_questionary")
    @patch(_SERVICE)
    def test_interactive_ignores_other_flags(
        self, mock_service_cls: MagicMock, mock_q: MagicMock,
    ) -> None:
        service = mock_service_cls.return_value
        service.list_pending_snapshots.return_value = ServiceResult()
        mock_q.return_value = _questionary(Operation.LIST_PENDING, ["c7"])

        main(["snapshot", "-i", "-o", "join", "-p", "/ignored"])
        service.list_pending_snapshots.assert_called_once_with(channel_name="c7")
        service.join_by_snapshot.assert_not_called()

    @patch("fabric_snapshot.cli.snapshot_prompt._import_questionary")
    @patch(_SERVICE)
    def test_cancel_at_operation_prompt_is_clean(
        self,
        mock_service_cls: MagicMock,
        mock_q: MagicMock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_q.return_value = _questionary(None, [])

        assert main(["snapshot", "--interactive"]) == exit_codes.SUCCESS
        assert mock_service_cls.return_value.method_calls == []
        assert capsys.readouterr().out == ""

    @patch("fabric_snapshot.cli.snapshot_prompt._import_questionary")
    @patch(_SERVICE)
    def test_service_error_in_interactive_mode(
        self, mock_service_cls: MagicMock, mock_q: MagicMock,
    ) -> None:
        mock_service_cls.return_value.list_pending_snapshots.side_effect = ServiceError("boom")
        mock_q.return_value = _questionary(Operation.LIST_PENDING, ["c1"])

        with pytest.raises(ProcessError, match=r"\[x\] Process Error: boom"):
            main(["snapshot", "-i"])


# ---------------------------------------------------------------------------
# cli() error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def test_process_error_exits_general_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr("sys.argv", ["fabric-snapshot", "snapshot"])
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "[x] Process Error: Operation type is needed!" in err
        assert "--interactive" in err

    @patch(_SERVICE)
    def test_peer_log_prefixes_are_printed_verbatim(
        self,
        mock_service_cls: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_service_cls.return_value.list_pending_snapshots.side_effect = ServiceError(
            "[channelCmd] no such channel",
        )
        monkeypatch.setattr(
            "sys.argv", ["fabric-snapshot", "snapshot", "-o", "listPending", "-c", "c9"],
        )
        with pytest.raises(SystemExit):
            cli()
        assert "[channelCmd] no such channel" in capsys.readouterr().err

    def test_success_exits_zero(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.argv", ["fabric-snapshot"])
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.SUCCESS

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _interrupt(argv: object = None) -> int:
            raise KeyboardInterrupt

        monkeypatch.setattr("fabric_snapshot.cli.app.main", _interrupt)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _explode(argv: object = None) -> int:
            raise RuntimeError("bug")

        monkeypatch.setattr("fabric_snapshot.cli.app.main", _explode)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.UNEXPECTED_ERROR
