# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-27
# Description: TestRunner
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from utility.logging_utils import get_class_logger

from health.ChatHealth import ChatHealth
from health.DatabaseHealth import DatabaseHealth
from health.EmbeddingHealth import EmbeddingHealth


class TestRunner:
    """
    Orchestrates all smoke tests and reports a consolidated result.

    Tests included:
      - DatabaseHealth  (PostgreSQL + pgvector)
      - EmbeddingHealth (OpenAI embeddings, dimension check)
      - ChatHealth      (OpenAI chat used for translation)
    """

    __test__ = False  # not a pytest class

    def __init__(
        self,
        *,
        database_health: DatabaseHealth,
        embedding_health: EmbeddingHealth,
        chat_health: ChatHealth,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or get_class_logger(self.__class__)
        self.checks: Dict[str, Callable[[], bool]] = {
            "database_health": database_health.run,
            "embedding_health": embedding_health.run,
            "chat_health": chat_health.run,
        }

    # -------------------------------------------------------------------------
    def run_all(self) -> Dict[str, bool]:
        """
        Run all configured smoke tests.

        :return: Dict mapping test names to True/False.
        """
        self.logger.info("Starting smoke test suite (%d checks)", len(self.checks))

        results: Dict[str, bool] = {}
        for name, check in self.checks.items():
            try:
                ok = bool(check())
            except Exception as e:
                self.logger.exception("%s raised an exception: %s", name, e)
                ok = False
            results[name] = ok
            self._log_result(name, ok)

        self._log_summary(results)
        return results

    # -------------------------------------------------------------------------
    def _log_result(self, name: str, ok: bool) -> None:
        if ok:
            self.logger.info("%s: PASS", name)
        else:
            self.logger.error("%s: FAIL", name)

    def _log_summary(self, results: Dict[str, bool]) -> None:
        failed = sorted(name for name, ok in results.items() if not ok)
        if failed:
            self.logger.error("Smoke tests: %d/%d failed (%s)", len(failed), len(results), ", ".join(failed))
        else:
            self.logger.info("Smoke tests: all %d passed", len(results))


if __name__ == "__main__":
    from AppContainer import get_app_container

    runner = get_app_container().test_runner
    results = runner.run_all()

    print("\n=== Smoke Test Results ===")
    for name, ok in results.items():
        print(f"{name}: {'PASS' if ok else 'FAIL'}")

    overall_ok = all(results.values())
    print(f"\nOverall smoke test result: {'PASS' if overall_ok else 'FAIL'}")
