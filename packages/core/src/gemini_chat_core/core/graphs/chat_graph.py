import logging
from functools import partial

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from gemini_chat_core.core.graphs.states import ChatTurnState
from gemini_chat_core.core.nodes.chat_nodes import (
    ChatNodeContext,
    build_request_node,
    check_function_calls_edge,
    commit_node,
    dispatch_functions_node,
    parse_response_node,
    send_request_node,
)

logger = logging.getLogger(__name__)

# build -> send -> parse -> dispatch per round, plus the final commit.
STEPS_PER_ROUND = 4


def recursion_limit_for(max_rounds: int) -> int:
    """Graph step budget large enough for `max_rounds` model calls."""
    return max_rounds * STEPS_PER_ROUND + STEPS_PER_ROUND


def create_chat_graph(ctx: ChatNodeContext) -> CompiledStateGraph:
    """
    创建聊天回合图

        build_request -> send_request -> parse_response
            -> dispatch_functions -> build_request ...   (function calls)
            -> commit -> END                             (pure text turn)

    Args:
        ctx: 节点上下文

    Returns:
        编译后的图

    """
    graph = StateGraph(ChatTurnState)

    graph.add_node("build_request", partial(build_request_node, ctx=ctx))
    graph.add_node("send_request", partial(send_request_node, ctx=ctx))
    graph.add_node("parse_response", partial(parse_response_node, ctx=ctx))
    graph.add_node(
        "dispatch_functions", partial(dispatch_functions_node, ctx=ctx)
    )
    graph.add_node("commit", partial(commit_node, ctx=ctx))

    graph.set_entry_point("build_request")
    graph.add_edge("build_request", "send_request")
    graph.add_edge("send_request", "parse_response")
    graph.add_conditional_edges(
        "parse_response",
        check_function_calls_edge,
        {
            "dispatch_functions": "dispatch_functions",
            "commit": "commit",
        },
    )
    graph.add_edge("dispatch_functions", "build_request")
    graph.add_edge("commit", END)

    return graph.compile()
