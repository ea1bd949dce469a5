"""End-to-end: test programs report once and exit with the right status."""

from __future__ import annotations

import os
import subprocess
import sys
import textwrap

import pytest


@pytest.fixture()
def run_script(tmp_path, project_root):
    """Write *source* to a script, run it, and return the completed process."""

    def run(source: str) -> subprocess.CompletedProcess:
        script = tmp_path / "check_script.py"
        script.write_text(textwrap.dedent(source))
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(
            p for p in (str(project_root), env.get("PYTHONPATH", "")) if p
        )
        env.pop("FORCE_COLOR", None)
        return subprocess.run(
            [sys.executable, str(script)],
            capture_output=True,
            text=True,
            timeout=60,
            env=env,
        )

    return run


class TestScopedCounter:
    def test_all_pass(self, run_script):
        result = run_script("""
            from softcheck import FailureCounter, check_equal, check_lt

            with FailureCounter():
                check_equal([1, 2, 3], [1, 2, 3])
                check_lt(1, 2)
        """)
        assert result.returncode == 0
        assert result.stdout == "OK\n"

    def test_no_checks_reports_ok(self, run_script):
        result = run_script("""
            from softcheck import FailureCounter

            with FailureCounter():
                pass
        """)
        assert result.returncode == 0
        assert result.stdout == "OK\n"

    def test_failures_exit_nonzero(self, run_script):
        result = run_script("""
            from softcheck import FailureCounter, check_equal, check_equal_thresh

            with FailureCounter() as failures:
                check_equal([1, 2, 3], [1, 2, 4])
                check_equal_thresh(5.0, 5.2, 0.1)
                check_equal(2, 2)
            print("not reached")
        """)
        assert result.returncode == 1
        assert result.stdout.count("FAILED:") == 2
        assert "{1,2,3}" in result.stdout
        assert "{1,2,4}" in result.stdout
        assert "diff was 0.2" in result.stdout
        assert result.stdout.endswith("ERRORS!\n")
        assert "not reached" not in result.stdout


class TestProcessWideCounter:
    def test_pass_reports_ok_at_exit(self, run_script):
        result = run_script("""
            from softcheck import check_equal

            check_equal(1, 1)
            print("done")
        """)
        assert result.returncode == 0
        assert result.stdout == "done\nOK\n"

    def test_failure_sets_exit_status(self, run_script):
        result = run_script("""
            import softcheck
            from softcheck import check_equal

            check_equal(1, 2)
            check_equal(3, 4)
            print("count", int(softcheck.unit_test_failures))
        """)
        assert result.returncode == 1
        assert "FAILED: 1 == 2" in result.stdout
        assert "count 2" in result.stdout
        assert result.stdout.endswith("ERRORS!\n")
        assert result.stdout.count("ERRORS!") == 1

    def test_exit_disabled_by_config(self, run_script):
        result = run_script("""
            from softcheck import check_equal, set_config

            set_config(exit_on_failure=False)
            check_equal(1, 2)
        """)
        assert result.returncode == 0
        assert result.stdout.endswith("ERRORS!\n")

    def test_import_only_reports_ok(self, run_script):
        result = run_script("""
            import softcheck
        """)
        assert result.returncode == 0
        assert result.stdout == "OK\n"

    def test_scoped_report_not_repeated_at_exit(self, run_script):
        result = run_script("""
            from softcheck import FailureCounter, check_equal

            with FailureCounter(exit_on_failure=False):
                check_equal(1, 2)
        """)
        assert result.returncode == 0
        assert result.stdout.count("ERRORS!") == 1
        assert "OK" not in result.stdout
