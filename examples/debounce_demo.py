"""
Debounced collection examples.

Shows a search-as-you-type widget whose keystrokes are coalesced into a
single collected item, with a hard deadline for users who never pause.
"""

import asyncio

from feedback_core import DebounceConfig, FeedbackCollector, MemoryHandler, debounce


async def example_search_box():
    """Demonstrate trailing-edge coalescing of keystrokes."""
    print("=== Search Box ===\n")

    memory = MemoryHandler()
    collector = FeedbackCollector(
        type="search",
        debounce=DebounceConfig(wait=200, max_wait=1000),
    ).use(memory)

    keystrokes = ["f", "fe", "fee", "feed", "feedb", "feedback"]
    tasks = []
    for text in keystrokes:
        tasks.append(asyncio.create_task(collector.collect({"query": text})))
        await asyncio.sleep(0.05)

    items = await asyncio.gather(*tasks)

    print(f"1. {len(keystrokes)} keystrokes produced {memory.count} item(s)")
    print(f"2. Collected query: {memory.last.data['query']!r}")
    print(f"3. Every caller got the same item: {len({item.id for item in items}) == 1}\n")
    print(f"   Stats: {collector.get_statistics()['debounce']}\n")


async def example_leading_edge():
    """Demonstrate leading-edge execution on a plain coroutine."""
    print("=== Leading Edge ===\n")

    async def save(value):
        print(f"   saving {value!r}")
        return value

    debounced = debounce(save, wait=100, leading=True)

    first = debounced("click-1")
    second = debounced("click-2")
    third = debounced("click-3")

    print(f"   leading result: {await first!r}")
    print(f"   trailing results: {await second!r}, {await third!r}\n")


async def example_flush_and_cancel():
    """Demonstrate flushing before shutdown and cancelling stale input."""
    print("=== Flush and Cancel ===\n")

    memory = MemoryHandler()
    collector = FeedbackCollector(type="draft", debounce={"wait": 5000}).use(memory)

    pending = asyncio.create_task(collector.collect({"text": "half-written"}))
    await asyncio.sleep(0)
    await collector.flush()
    print(f"1. Flushed: {(await pending).data}")

    stale = asyncio.create_task(collector.collect({"text": "discard me"}))
    await asyncio.sleep(0)
    collector.cancel()
    try:
        await stale
    except Exception as e:
        print(f"2. Cancelled: {e}\n")


async def main():
    await example_search_box()
    await example_leading_edge()
    await example_flush_and_cancel()


if __name__ == "__main__":
    asyncio.run(main())
