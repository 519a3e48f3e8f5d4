import unittest

from fwchat.core.accumulator import ToolCallAccumulator, ToolCallFragment
from fwchat.core.messages import ToolCall


class TestToolCallAccumulator(unittest.TestCase):
    def test_arguments_concatenate_across_fragments(self):
        acc = ToolCallAccumulator()
        acc.feed(ToolCallFragment(index=0, call_id="call_1", name="web_search"))
        for piece in ['{"query":', '"rain in"', "}"]:
            acc.feed(ToolCallFragment(index=0, arguments_delta=piece))

        self.assertEqual(acc.finalize(), [ToolCall("call_1", "web_search", '{"query":"rain in"}')])

    def test_interleaved_indices(self):
        acc = ToolCallAccumulator()
        acc.feed(ToolCallFragment(index=0, call_id="c1", name="foo", arguments_delta='{"a":'))
        acc.feed(ToolCallFragment(index=1, call_id="c2", name="bar", arguments_delta='{"b":'))
        acc.feed(ToolCallFragment(index=0, arguments_delta=" 1}"))
        acc.feed(ToolCallFragment(index=1, arguments_delta=" 2}"))

        self.assertEqual(
            acc.finalize(),
            [ToolCall("c1", "foo", '{"a": 1}'), ToolCall("c2", "bar", '{"b": 2}')],
        )

    def test_finalize_returns_index_order(self):
        acc = ToolCallAccumulator()
        acc.feed(ToolCallFragment(index=2, call_id="c3", name="c"))
        acc.feed(ToolCallFragment(index=0, call_id="c1", name="a"))
        acc.feed(ToolCallFragment(index=1, call_id="c2", name="b"))

        self.assertEqual([tc.name for tc in acc.finalize()], ["a", "b", "c"])

    def test_record_without_name_is_dropped(self):
        acc = ToolCallAccumulator()
        acc.feed(ToolCallFragment(index=0, call_id="c1", arguments_delta='{"query": "x"}'))
        acc.feed(ToolCallFragment(index=1, call_id="c2", name="web_search", arguments_delta="{}"))

        self.assertEqual(acc.finalize(), [ToolCall("c2", "web_search", "{}")])

    def test_record_without_id_is_dropped(self):
        acc = ToolCallAccumulator()
        acc.feed(ToolCallFragment(index=0, name="web_search", arguments_delta="{}"))
        self.assertEqual(acc.finalize(), [])

    def test_id_and_name_are_never_cleared(self):
        acc = ToolCallAccumulator()
        acc.feed(ToolCallFragment(index=0, call_id="c1", name="web_search"))
        acc.feed(ToolCallFragment(index=0, call_id="", name="", arguments_delta="{}"))
        acc.feed(ToolCallFragment(index=0, call_id=None, name=None))

        self.assertEqual(acc.finalize(), [ToolCall("c1", "web_search", "{}")])

    def test_empty_argument_delta_contributes_nothing(self):
        acc = ToolCallAccumulator()
        acc.feed(ToolCallFragment(index=0, call_id="c1", name="web_search", arguments_delta=""))
        acc.feed(ToolCallFragment(index=0, arguments_delta=None))

        self.assertEqual(acc.finalize(), [ToolCall("c1", "web_search", "")])

    def test_empty_accumulator(self):
        self.assertEqual(ToolCallAccumulator().finalize(), [])


class TestToolCallFragment(unittest.TestCase):
    def test_from_delta(self):
        fragment = ToolCallFragment.from_delta(
            {"index": 1, "id": "c9", "function": {"name": "web_search", "arguments": "{"}}
        )
        self.assertEqual(fragment, ToolCallFragment(1, "c9", "web_search", "{"))

    def test_from_delta_without_index(self):
        self.assertIsNone(ToolCallFragment.from_delta({"id": "c9", "function": {}}))

    def test_from_delta_ignores_non_string_fields(self):
        fragment = ToolCallFragment.from_delta({"index": 0, "id": None, "function": {"arguments": 5}})
        self.assertEqual(fragment, ToolCallFragment(0))


if __name__ == "__main__":
    unittest.main()
