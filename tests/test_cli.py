from click.testing import CliRunner

from sitedeploy import __version__
from sitedeploy.cli import cli
from sitedeploy.pipeline import DeployResult, StageError


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_deploy_success(monkeypatch, tmp_path):
    runner = CliRunner()
    monkeypatch.chdir(tmp_path)

    def fake_run(self):
        return DeployResult(
            output_dir=self.project_root / "dist",
            destination=self.destination,
            stages=["Build", "Purge", "Sync", "Permissions"],
        )

    monkeypatch.setattr("sitedeploy.pipeline.DeployPipeline.run", fake_run)
    result = runner.invoke(cli, ["deploy"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "to tobi@websites:/var/www/tobiasmikula.com/htdocs" in result.output


def test_deploy_propagates_stage_exit_code(monkeypatch, tmp_path):
    runner = CliRunner()
    monkeypatch.chdir(tmp_path)

    def fake_run(self):
        raise StageError(
            "Sync",
            ["rsync", "-avzhP", "--rsync-path=sudo rsync", "./dist/", "tobi@websites:/srv"],
            23,
        )

    monkeypatch.setattr("sitedeploy.pipeline.DeployPipeline.run", fake_run)
    result = runner.invoke(cli, ["deploy"])
    assert result.exit_code == 23
    assert "Deploy failed:" in result.output
    assert "Stage: Sync" in result.output
    assert (
        "Command: rsync -avzhP '--rsync-path=sudo rsync' ./dist/ tobi@websites:/srv"
        in result.output
    )
    assert "Error: exited with status 23" in result.output


def test_deploy_build_failure_opens_no_ssh_session(monkeypatch, tmp_path):
    """A failing build exits with the build's status and never runs ssh."""
    runner = CliRunner()
    monkeypatch.chdir(tmp_path)
    programs = []

    def fake_runner_run(self, argv, cwd):
        programs.append(argv[0])
        return 1 if argv[0] == "npm" else 0

    monkeypatch.setattr("sitedeploy.runner.SubprocessRunner.run", fake_runner_run)
    result = runner.invoke(cli, ["deploy"])
    assert result.exit_code == 1
    assert programs == ["npm"]


def test_deploy_takes_no_options():
    result = CliRunner().invoke(cli, ["deploy", "--host", "elsewhere"])
    assert result.exit_code != 0
    assert "No such option" in result.output


def test_deploy_reports_config_error(monkeypatch, tmp_path):
    runner = CliRunner()
    monkeypatch.chdir(tmp_path)
    (tmp_path / "deploy.yaml").write_text("bogus: 1\n", encoding="utf-8")

    def fail_run(self):
        raise AssertionError("pipeline must not run")

    monkeypatch.setattr("sitedeploy.pipeline.DeployPipeline.run", fail_run)
    result = runner.invoke(cli, ["deploy"])
    assert result.exit_code == 1
    assert "Unknown setting(s): bogus" in result.output


def test_plan_lists_commands(monkeypatch, tmp_path):
    runner = CliRunner()
    monkeypatch.chdir(tmp_path)

    def fail_run(self, argv, cwd):
        raise AssertionError("plan must not execute commands")

    monkeypatch.setattr("sitedeploy.runner.SubprocessRunner.run", fail_run)
    result = runner.invoke(cli, ["plan"], catch_exceptions=False)
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "1. [local] Build: npm run build"
    assert lines[1] == (
        "2. [remote] Purge: ssh -t websites 'sudo rm -rf /var/www/tobiasmikula.com/htdocs/*'"
    )
    assert lines[2].startswith("3. [remote] Sync: rsync -avzhP '--rsync-path=sudo rsync' ./dist/")
    assert lines[3].startswith("4. [remote] Permissions: ssh -t websites 'sudo chown -R")


def test_module_main_entrypoint():
    from sitedeploy.__main__ import main

    assert callable(main)


def test_main_invokes_cli(monkeypatch):
    import sitedeploy.cli as cli_mod

    called = {}

    def fake_cli():
        called["ran"] = True

    original_cli = cli_mod.cli
    cli_mod.cli = fake_cli
    try:
        cli_mod.main()
    finally:
        cli_mod.cli = original_cli
    assert called["ran"]


def test_deploy_reports_signal_as_shell_status(monkeypatch, tmp_path):
    """A stage killed by SIGTERM exits 143, not a wrapped negative code."""
    import subprocess

    runner = CliRunner()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "sitedeploy.runner.find_executable", lambda name, root: f"/usr/bin/{name}"
    )
    monkeypatch.setattr(
        "sitedeploy.runner.subprocess.run",
        lambda cmd, cwd=None: subprocess.CompletedProcess(cmd, -15),
    )
    result = runner.invoke(cli, ["deploy"])
    assert result.exit_code == 143
    assert "exited with status 143" in result.output
