"""agentiny examples.

Run: python examples/simple.py
Set OPENAI_API_KEY to use OpenAI instead of the mock provider.
"""

import asyncio
import os

from agentiny import (
    Agent,
    MockProvider,
    create_llm_action,
    create_openai_action,
    with_retry,
    with_timeout,
)

API_KEY = os.environ.get("OPENAI_API_KEY", "")


async def counter():
    """Example 1: A cascade that runs until state stops changing."""
    print("\n" + "=" * 50)
    print("EXAMPLE 1: COUNTER")
    print("=" * 50)

    agent = Agent(initial_state={"count": 1})
    agent.when(
        lambda s: 0 < s["count"] < 3,
        [lambda s: s.update(count=s["count"] + 1)],
    )

    await agent.start()
    await agent.settle()
    await agent.stop()

    print(f"Final state: {agent.get_state()}")


async def document_pipeline():
    """Example 2: Summarize, then tag, driven by state."""
    print("\n" + "=" * 50)
    print("EXAMPLE 2: DOCUMENT PIPELINE")
    print("=" * 50)

    if API_KEY:
        summarize = create_openai_action(
            prompt=lambda s: f"Summarize in one sentence: {s['text']}",
            on_response=lambda text, s: s.update(summary=text),
            api_key=API_KEY,
        )
    else:
        summarize = create_llm_action(
            MockProvider(default_response="A short summary."),
            prompt=lambda s: s["text"],
            on_response=lambda text, s: s.update(summary=text),
        )

    agent = Agent(initial_state={"text": ""}, on_error=lambda e: print(f"Error: {e}"))
    agent.when(
        lambda s: s["text"] and "summary" not in s,
        [with_timeout(with_retry(summarize, attempts=3, delay=0.5), seconds=30.0)],
    )
    agent.when(
        lambda s: "summary" in s and "tags" not in s,
        [lambda s: s.update(tags=sorted(set(s["summary"].lower().split())))],
    )

    await agent.start()
    agent.set_state({"text": "agentiny runs rules when state changes."})
    await agent.settle(timeout=60.0)
    await agent.stop()

    print(f"Summary: {agent.get_state()['summary']}")
    print(f"Tags: {agent.get_state()['tags']}")


async def events():
    """Example 3: Event triggers."""
    print("\n" + "=" * 50)
    print("EXAMPLE 3: EVENTS")
    print("=" * 50)

    agent = Agent(initial_state={"saves": 0})
    agent.on("save", [lambda s: s.update(saves=s["saves"] + 1)])
    agent.on("save", [lambda s: print(f"  saved (#{s['saves']})")])

    await agent.start()
    for _ in range(3):
        agent.emit_event("save")
        await agent.settle()
    await agent.stop()

    print(f"Saves: {agent.get_state()['saves']}")


async def main():
    await counter()
    await document_pipeline()
    await events()


if __name__ == "__main__":
    asyncio.run(main())
