#!/usr/bin/env python3
"""
Run the huffman test suite and write a JSON report.

    python evaluation/evaluation.py [--output report.json]

The default report path is evaluation/YYYY-MM-DD/HH-MM-SS/report.json.
"""
import argparse
import json
import os
import platform
import subprocess
import sys
import uuid
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent

STATUS_WORDS = {
    " PASSED": "passed",
    " FAILED": "failed",
    " ERROR": "error",
    " SKIPPED": "skipped",
}


def parse_pytest_verbose_output(output):
    """Parse pytest verbose output to extract test results."""
    tests = []
    for line in output.split('\n'):
        line = line.strip()
        # tests/test_service.py::test_abracadabra_scenario PASSED
        if '::' not in line:
            continue
        for status_word, outcome in STATUS_WORDS.items():
            if status_word in line:
                nodeid = line.split(status_word)[0].strip()
                tests.append({"nodeid": nodeid, "name": nodeid.split("::")[-1], "outcome": outcome})
                break
    return tests


def summarize(tests):
    summary = {outcome: 0 for outcome in STATUS_WORDS.values()}
    for test in tests:
        summary[test["outcome"]] += 1
    summary["total"] = len(tests)
    return summary


def run_pytest(tests_dir, timeout=600):
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))
    try:
        result = subprocess.run(
            [sys.executable, "-m", "pytest", str(tests_dir), "-v", "--tb=short"],
            capture_output=True,
            text=True,
            cwd=str(PROJECT_ROOT),
            env=env,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return {"success": False, "exit_code": -1, "tests": [], "summary": {"error": "timed out"}}

    tests = parse_pytest_verbose_output(result.stdout)
    return {
        "success": result.returncode == 0,
        "exit_code": result.returncode,
        "tests": tests,
        "summary": summarize(tests),
        "stdout": result.stdout[-3000:],
        "stderr": result.stderr[-1000:],
    }


def generate_output_path(now=None):
    now = now or datetime.now()
    return PROJECT_ROOT / "evaluation" / now.strftime("%Y-%m-%d") / now.strftime("%H-%M-%S") / "report.json"


def build_report(run_id, started_at, finished_at, results):
    success = bool(results and results.get("success"))
    return {
        "run_id": run_id,
        "started_at": started_at.isoformat(),
        "finished_at": finished_at.isoformat(),
        "duration_seconds": round((finished_at - started_at).total_seconds(), 6),
        "success": success,
        "error": None if success else "tests failed",
        "environment": {
            "python_version": platform.python_version(),
            "platform": platform.platform(),
        },
        "results": results,
    }


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the huffman test suite and write a JSON report")
    parser.add_argument("--output", default=None, help="Output JSON file path")
    args = parser.parse_args(argv)

    started_at = datetime.now()
    results = run_pytest(PROJECT_ROOT / "tests")
    report = build_report(uuid.uuid4().hex[:8], started_at, datetime.now(), results)

    output_path = Path(args.output) if args.output else generate_output_path(started_at)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2)

    summary = results["summary"]
    print(f"{summary.get('passed', 0)}/{summary.get('total', 0)} passed; report saved to {output_path}")
    return 0 if report["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
