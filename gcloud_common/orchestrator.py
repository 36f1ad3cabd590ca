# gcloud_common/orchestrator.py
# -*- coding: utf-8 -*-
"""
Sequential task runner shared by the provisioning steps.

Tasks run in the order they were added. Each one receives the shared
`context` dict and the run's settings as keyword arguments, and its return
value is stored in the context under "<name>_result". A failing fatal task
ends the process with exit status 1.
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional


@dataclass
class Task:
    name: str
    func: Callable[..., Any]
    args: List[Any] = field(default_factory=list)
    kwargs: Dict[str, Any] = field(default_factory=dict)
    fatal: bool = True


class Orchestrator:
    """Runs a list of named tasks against one shared context."""

    def __init__(
        self,
        settings: Any,
        orchestrator_logger: Optional[logging.Logger] = None,
    ):
        self.settings = settings
        self.logger = orchestrator_logger or logging.getLogger(__name__)
        self.tasks: List[Task] = []
        self.context: Dict[str, Any] = {}

    def add_task(
        self,
        name: str,
        func: Callable[..., Any],
        args: Optional[List[Any]] = None,
        kwargs: Optional[Dict[str, Any]] = None,
        fatal: bool = True,
    ) -> None:
        """
        Queues `func` under `name`. A non-fatal task that fails is logged and
        the remaining tasks still run.
        """
        self.tasks.append(Task(name, func, list(args or []), dict(kwargs or {}), fatal))
        self.logger.debug(f"Queued task '{name}'.")

    def run(self) -> bool:
        """
        Executes the queued tasks in order.

        Returns:
            True if every task succeeded, False if a non-fatal task failed.

        Raises:
            SystemExit: With status 1 when a fatal task fails.
        """
        total = len(self.tasks)
        failed: List[str] = []

        for position, task in enumerate(self.tasks, start=1):
            self.logger.info(f"➡️ [{position}/{total}] {task.name}")
            try:
                result = task.func(
                    *task.args,
                    **task.kwargs,
                    context=self.context,
                    settings=self.settings,
                )
            except Exception as e:
                self.logger.critical(
                    f"🔥 Task '{task.name}' failed: {e}", exc_info=True
                )
                if task.fatal:
                    self.logger.error(
                        "A fatal error occurred. Halting orchestration and exiting."
                    )
                    sys.exit(1)
                failed.append(task.name)
                self.logger.warning(
                    f"Task '{task.name}' is not fatal; continuing."
                )
                continue

            self.context[f"{task.name}_result"] = result
            self.logger.info(f"✅ {task.name} done.")

        if failed:
            self.logger.warning(f"Finished with failed tasks: {', '.join(failed)}")
        else:
            self.logger.info("✨ All tasks completed.")
        return not failed
