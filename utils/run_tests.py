#!/usr/bin/env python3
"""
Script to run tests for the distmap package.

This script provides a simple command-line interface for running tests
in the distmap package. It supports running tests for specific components
or all tests.

Examples:
    python utils/run_tests.py  # Run all tests
    python utils/run_tests.py core  # Run only core tests
    python utils/run_tests.py core/test_distance_transform.py  # Run a specific test module
"""

import sys
import unittest
import argparse
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]


def run_tests(test_path=None, verbosity=2):
    """Run tests from the specified path, relative to the tests directory."""
    tests_dir = REPO_ROOT / "tests"
    sys.path.insert(0, str(REPO_ROOT))

    loader = unittest.defaultTestLoader
    if test_path is None:
        test_suite = loader.discover(str(tests_dir), top_level_dir=str(REPO_ROOT))
    else:
        path = tests_dir / str(test_path).lstrip("./")
        if path.suffix == ".py":
            # For example, "core/test_grid.py" -> "tests.core.test_grid"
            module_name = ".".join(path.relative_to(REPO_ROOT).with_suffix("").parts)
            test_suite = loader.loadTestsFromName(module_name)
        else:
            test_suite = loader.discover(str(path), top_level_dir=str(REPO_ROOT))

    runner = unittest.TextTestRunner(verbosity=verbosity)
    return runner.run(test_suite)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run distmap tests")
    parser.add_argument("test_path", nargs="?", help="Path to specific test or directory")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only report failures")
    args = parser.parse_args()

    result = run_tests(args.test_path, verbosity=1 if args.quiet else 2)
    sys.exit(not result.wasSuccessful())
