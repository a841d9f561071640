"""SoulScript Expression Evaluator

Evaluates expression nodes against a component's fields and a local scope.
Evaluation never raises for script-level problems: unknown identifiers are 0,
operators are total, and unknown functions are reported through the runtime
log. The evaluator only adds bookkeeping around the nodes' own ``evaluate``.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .ast_nodes import ExprNode
from .context import Frame, RuntimeContext


@dataclass
class EvaluationStats:
    """Statistics for expression evaluation"""
    total_evaluations: int = 0
    total_time: float = 0.0

    @property
    def avg_time_per_eval(self) -> float:
        """Average time per evaluation in milliseconds"""
        if self.total_evaluations == 0:
            return 0.0
        return (self.total_time / self.total_evaluations) * 1000.0


class ExpressionEvaluator:
    """Evaluator for SoulScript expressions"""

    def __init__(self, runtime: RuntimeContext):
        self.runtime = runtime
        self.stats = EvaluationStats()

    def evaluate(self, expr: ExprNode, component, scope: Optional[Dict[str, Any]] = None) -> Any:
        """Evaluate ``expr`` with ``component`` fields and ``scope`` locals visible"""
        return self.evaluate_in(expr, Frame(component, scope, self.runtime))

    def evaluate_in(self, expr: ExprNode, frame: Frame) -> Any:
        start_time = time.perf_counter()
        try:
            return expr.evaluate(frame)
        finally:
            self.stats.total_evaluations += 1
            self.stats.total_time += time.perf_counter() - start_time

    def reset_stats(self):
        self.stats = EvaluationStats()
