"""LangGraph StateGraph definition for the compliance evaluation pipeline."""

from __future__ import annotations

from langgraph.graph import END, StateGraph

from fair_maturity.pipeline.nodes.check_runner import run_automated_checks
from fair_maturity.pipeline.nodes.feedback import generate_feedback
from fair_maturity.pipeline.nodes.manual_answers import process_manual_answers
from fair_maturity.pipeline.nodes.report_builder import build_report
from fair_maturity.pipeline.nodes.scorer import score_results
from fair_maturity.pipeline.state import EvaluationState

STAGES = (
    "process_manual_answers",
    "run_automated_checks",
    "score_results",
    "generate_feedback",
    "build_report",
)


def build_graph() -> StateGraph:
    """Build and compile the evaluation graph.

    Graph topology (fixed, no branching):
        __start__ -> process_manual_answers -> run_automated_checks
          -> score_results -> generate_feedback -> build_report -> END

    Runtime collaborators are not part of the state; nodes read them from
    ``config["configurable"]``.
    """
    graph = StateGraph(EvaluationState)

    graph.add_node("process_manual_answers", process_manual_answers)
    graph.add_node("run_automated_checks", run_automated_checks)
    graph.add_node("score_results", score_results)
    graph.add_node("generate_feedback", generate_feedback)
    graph.add_node("build_report", build_report)

    graph.set_entry_point("process_manual_answers")
    for source, target in zip(STAGES, STAGES[1:]):
        graph.add_edge(source, target)
    graph.add_edge("build_report", END)

    return graph.compile()


_graph_instance: StateGraph | None = None


def get_graph() -> StateGraph:
    """Return a lazily compiled singleton of the evaluation graph.

    The compiled graph holds no per-run state, so one instance serves
    every evaluation.
    """
    global _graph_instance
    if _graph_instance is None:
        _graph_instance = build_graph()
    return _graph_instance
