"""CRE Research Agent

Simple CLI for running research queries.
"""

import argparse
import asyncio
import sys
import uuid

from app.agents.orchestrator import ResearchOrchestrator
from app.agents.synthesis import SynthesisPipeline
from app.errors import ResearchError
from app.llm_client import get_provider
from app.services.session_store import InMemorySessionStore


async def run_research(query: str, session_id: str | None = None, provider: str | None = None) -> int:
    """Run research on the given query, printing progress as it arrives."""
    session_id = session_id or str(uuid.uuid4())
    print(f"Research query: {query}")
    print(f"Session: {session_id}")
    print("-" * 50)

    store = InMemorySessionStore(ttl_seconds=0)
    try:
        synthesis = SynthesisPipeline(provider=get_provider(provider), session_store=store)
    except ResearchError as e:
        print(f"[!] Error: {e}")
        return 1
    orchestrator = ResearchOrchestrator(session_store=store, synthesis=synthesis)

    task = asyncio.create_task(orchestrator.run_research(query, session_id))
    printed = 0
    while True:
        progress = store.get(session_id)
        for event in progress.events[printed:]:
            source = f" ({event.source})" if event.source else ""
            print(f"  [~] {event.step}{source}")
        printed = len(progress.events)
        if task.done():
            break
        await asyncio.sleep(0.2)

    try:
        result = task.result()
    except ResearchError as e:
        print(f"\n[!] Error: {e}")
        return 1

    print(f"\n[*] Research Complete! Sources: {len(result.citations)}")
    print(f"\n{'='*50}")
    print("REPORT:")
    print(f"{'='*50}")
    print(result.response)
    return 0


def main():
    parser = argparse.ArgumentParser(description="CRE Research Agent")
    parser.add_argument("--query", "-q", required=True, help="Research query")
    parser.add_argument("--session", "-s", help="Session id (default: random UUID)")
    parser.add_argument("--provider", "-p", help="AI provider: openai, anthropic or local (default: from config)")

    args = parser.parse_args()

    sys.exit(asyncio.run(run_research(args.query, args.session, args.provider)))


if __name__ == "__main__":
    main()
