import pytest

from daybook import cli
from daybook.data import CollaboratorsNotConfiguredError


@pytest.fixture
def quiet_cli(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda level=None: None)
    return monkeypatch


def test_missing_collaborators_exit_with_usage_error(quiet_cli):
    def unconfigured():
        raise CollaboratorsNotConfiguredError("No collaborators configured.")

    quiet_cli.setattr(cli.ServiceContext, "from_settings", staticmethod(unconfigured))

    assert cli.main(["refresh"]) == 2


def test_refresh_command_populates_snapshot(quiet_cli, context, task_reader):
    task_reader.tasks = [{"id": "t1", "title": "Call plumber"}]
    quiet_cli.setattr(cli.ServiceContext, "from_settings", staticmethod(lambda: context))

    assert cli.main(["refresh"]) == 0
    assert context.store.path.exists()
    assert [task.title for task in context.store.read().tasks] == ["Call plumber"]


def test_invalidate_command_reports_partial_failure(quiet_cli, context, task_reader):
    task_reader.error = ConnectionError("down")
    quiet_cli.setattr(cli.ServiceContext, "from_settings", staticmethod(lambda: context))

    assert cli.main(["invalidate", "tasks"]) == 1
    assert cli.main(["invalidate", "events"]) == 0


def test_unknown_invalidate_domain_is_rejected_by_the_parser(quiet_cli):
    with pytest.raises(SystemExit):
        cli.main(["invalidate", "email"])
