import asyncio
import unittest

from packages.mockdy_session.stream import ReplyStream


async def _words(words, fail_after=None, delay=0.0):
    for i, word in enumerate(words):
        if fail_after is not None and i == fail_after:
            raise ConnectionError("stream dropped")
        if delay:
            await asyncio.sleep(delay)
        yield word


class TestReplyStream(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.completions = []

    def _on_complete(self, text, error):
        self.completions.append((text, error))

    async def test_collects_all_deltas(self):
        stream = ReplyStream(_words(["Hel", "lo", "!"]), on_complete=self._on_complete)
        self.assertEqual(await stream.collect(), "Hello!")
        self.assertTrue(stream.finished)
        self.assertEqual(self.completions, [("Hello!", None)])

    async def test_source_error_ends_quietly(self):
        stream = ReplyStream(_words(["a", "b", "c"], fail_after=2), on_complete=self._on_complete)
        deltas = [d async for d in stream]
        self.assertEqual(deltas, ["a", "b"])
        self.assertIsInstance(stream.error, ConnectionError)
        self.assertEqual(len(self.completions), 1)
        self.assertEqual(self.completions[0][0], "ab")

    async def test_cancel_keeps_partial_text(self):
        stream = ReplyStream(_words(["one ", "two ", "three"]), on_complete=self._on_complete)
        first = await stream.__anext__()
        await stream.cancel()
        await stream.cancel()

        self.assertEqual(first, "one ")
        self.assertTrue(stream.cancelled)
        self.assertEqual(self.completions, [("one ", None)])
        self.assertEqual([d async for d in stream], [])

    async def test_task_cancellation_finishes_stream(self):
        stream = ReplyStream(_words(["x"] * 100, delay=0.01), on_complete=self._on_complete)

        async def consume():
            async for _ in stream:
                pass

        task = asyncio.create_task(consume())
        await asyncio.sleep(0.03)
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task

        self.assertTrue(stream.cancelled)
        self.assertTrue(stream.finished)
        self.assertEqual(len(self.completions), 1)


if __name__ == "__main__":
    unittest.main()
