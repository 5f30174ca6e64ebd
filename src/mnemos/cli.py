"""Command-line interface for inspecting memory and agent plugins."""

import argparse
import asyncio
import json
import sys

from groq import GroqError

from .agent import Agent, AgentConstructionRequest, AgentReply, Collaborators, Turn
from .agent.conversation import AGENT_TYPE as CONVERSATION_AGENT
from .agent.document import AGENT_TYPE as DOCUMENT_AGENT
from .config import MemoryConfig, load_config
from .llm import GroqLLMClient
from .memory import FactStoreClient, MemoryManager, fuse_context
from .plugins import default_registry
from .storage import ProfileStore


def _get_client(config: MemoryConfig) -> FactStoreClient:
    """Create a FactStoreClient from config."""
    return FactStoreClient(config.base_url, api_key=config.api_key, timeout=config.timeout)


def _get_manager(args: argparse.Namespace) -> MemoryManager:
    """Create a MemoryManager, applying command-line overrides."""
    config = load_config()
    max_facts = args.max_facts if args.max_facts is not None else config.max_facts
    min_rating = args.min_rating if args.min_rating is not None else config.min_rating
    return MemoryManager(_get_client(config), max_facts=max_facts, min_rating=min_rating)


def _get_store(config: MemoryConfig) -> ProfileStore:
    """Open the profile store named in config."""
    store = ProfileStore(config.profiles_db)
    store.init_db()
    return store


def _get_llm(config: MemoryConfig) -> GroqLLMClient:
    return GroqLLMClient.from_settings(model=config.model)


def _get_collaborators(config: MemoryConfig, agent_type: str) -> Collaborators:
    """Build the collaborators an agent type needs from config."""
    if agent_type == DOCUMENT_AGENT:
        return Collaborators(persistence=_get_store(config))

    memory = MemoryManager(
        _get_client(config), max_facts=config.max_facts, min_rating=config.min_rating
    )
    return Collaborators(llm=_get_llm(config), memory=memory)


async def _run_turn(agent: Agent, turn: Turn) -> AgentReply:
    try:
        return await agent.process_turn(turn)
    finally:
        await agent.cleanup()


def _format_rating(rating: float | None) -> str:
    return "  -  " if rating is None else f"{rating:.2f}"


def cmd_check(args: argparse.Namespace) -> int:
    """Check that the knowledge service is reachable."""
    config = load_config()
    client = _get_client(config)
    available = asyncio.run(client.check_connection())

    if available:
        print(f"Knowledge service at {client.base_url} is available.")
        return 0

    print(f"Knowledge service at {client.base_url} is unavailable.")
    return 1


def cmd_facts(args: argparse.Namespace) -> int:
    """Print the ranked facts for a session."""
    manager = _get_manager(args)
    facts = asyncio.run(manager.load_facts(args.session_id))

    if not facts:
        print("No facts found.")
        return 1

    print(f"\n{'Rating':<8} Fact")
    print("-" * 60)
    for fact in facts:
        print(f"{_format_rating(fact.rating):<8} {fact.text}")

    print(f"\nTotal: {len(facts)} fact(s)")
    return 0


def cmd_context(args: argparse.Namespace) -> int:
    """Print the fused context for a session."""
    manager = _get_manager(args)
    facts = asyncio.run(manager.load_facts(args.session_id))
    print(fuse_context(args.base, facts))
    return 0 if facts else 1


def cmd_summary(args: argparse.Namespace) -> int:
    """Print the conversation summary for a session."""
    client = _get_client(load_config())
    summary = asyncio.run(client.fetch_summary(args.session_id))

    if summary is None:
        print("No summary found.")
        return 1

    print(summary)
    return 0


def cmd_agents(args: argparse.Namespace) -> int:
    """List registered agent types."""
    registry = default_registry()
    if not args.builtin_only:
        registry.load_entry_points()

    for agent_type in sorted(registry.list_types()):
        print(agent_type)

    print(f"\nTotal: {len(registry)} agent type(s)")
    return 0


def cmd_ask(args: argparse.Namespace) -> int:
    """Send one turn to an agent and print its reply."""
    config = load_config()
    try:
        collaborators = _get_collaborators(config, args.agent)
    except GroqError as e:
        print(f"Cannot create LLM client: {e}")
        return 1

    try:
        agent = default_registry().create_agent(
            args.agent,
            AgentConstructionRequest(flow_id=args.flow_id, collaborators=collaborators),
        )
        if agent is None:
            print(f"Could not create a {args.agent} agent.")
            return 1

        turn = Turn(session_id=args.session_id, user_id=args.user, message=args.message)
        reply = asyncio.run(_run_turn(agent, turn))
    finally:
        if collaborators.persistence is not None:
            collaborators.persistence.close()

    if not reply.success:
        print(f"Error: {reply.error}")
        return 1

    print(reply.response)
    return 0


def cmd_profile(args: argparse.Namespace) -> int:
    """Show or delete a stored document profile."""
    store = _get_store(load_config())
    try:
        if args.delete:
            deleted = store.delete_profile(args.user_id)
            print("Profile deleted." if deleted else "No profile found.")
            return 0 if deleted else 1
        profile = store.get_profile(args.user_id)
    finally:
        store.close()

    if profile is None:
        print("No profile found.")
        return 1

    print(json.dumps(profile, indent=2, ensure_ascii=False))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mnemos",
        description="Inspect conversation memory and agent plugins",
    )

    ranking = argparse.ArgumentParser(add_help=False)
    ranking.add_argument("--max-facts", type=int, default=None, help="Maximum facts to keep")
    ranking.add_argument("--min-rating", type=float, default=None, help="Minimum rating (exclusive)")

    subparsers = parser.add_subparsers(dest="command", help="Sub-command help")

    subparsers.add_parser("check", help="Check the knowledge service connection")

    facts_parser = subparsers.add_parser("facts", parents=[ranking], help="Show ranked facts")
    facts_parser.add_argument("session_id", help="Session identifier")

    context_parser = subparsers.add_parser(
        "context", parents=[ranking], help="Show the fused context"
    )
    context_parser.add_argument("session_id", help="Session identifier")
    context_parser.add_argument("--base", default="", help="Base context to fuse facts into")

    summary_parser = subparsers.add_parser("summary", help="Show the session summary")
    summary_parser.add_argument("session_id", help="Session identifier")

    agents_parser = subparsers.add_parser("agents", help="List agent types")
    agents_parser.add_argument(
        "--builtin-only",
        action="store_true",
        help="Skip plugins published by installed packages",
    )

    ask_parser = subparsers.add_parser("ask", help="Send one turn to an agent")
    ask_parser.add_argument("session_id", help="Session identifier")
    ask_parser.add_argument("message", help="User message")
    ask_parser.add_argument(
        "--agent",
        choices=[CONVERSATION_AGENT, DOCUMENT_AGENT],
        default=CONVERSATION_AGENT,
        help="Agent type to answer with",
    )
    ask_parser.add_argument("--user", default="cli", help="User identifier")
    ask_parser.add_argument("--flow-id", default="cli", help="Flow identifier")

    profile_parser = subparsers.add_parser("profile", help="Show a stored document profile")
    profile_parser.add_argument("user_id", help="User identifier")
    profile_parser.add_argument("--delete", action="store_true", help="Delete the profile")

    return parser


def run_cli(argv: list[str] | None = None) -> int:
    """Run the CLI with given arguments.

    Args:
        argv: Command-line arguments. Uses sys.argv[1:] if None.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "check": cmd_check,
        "facts": cmd_facts,
        "context": cmd_context,
        "summary": cmd_summary,
        "agents": cmd_agents,
        "ask": cmd_ask,
        "profile": cmd_profile,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)


if __name__ == "__main__":
    sys.exit(run_cli())
