import unittest

import httpx

from fwchat.core.conversation import TurnState
from fwchat.core.messages import Message, ToolCall

from .test_base import BaseChatCLITest, sse_body, text_event, text_stream, tool_event, tool_stream


class TestConversation(BaseChatCLITest):
    def test_plain_reply(self):
        conversation, _ = self.make_conversation(text_stream("Hi", " there"))

        reply = conversation.submit("hello")

        self.assertEqual(
            conversation.history,
            (Message(role="user", content="hello"), Message(role="assistant", content="Hi there")),
        )
        self.assertEqual(reply, conversation.history[-1])
        self.assertEqual(conversation.state, TurnState.IDLE)
        self.assertIn("Hi there", self.output.getvalue())

    def test_blank_input_is_ignored(self):
        conversation, endpoint = self.make_conversation()
        self.assertIsNone(conversation.submit("   "))
        self.assertEqual(conversation.history, ())
        self.assertEqual(endpoint.requests, [])

    def test_empty_reply_is_stored_as_absent_content(self):
        conversation, _ = self.make_conversation(sse_body())
        conversation.submit("hello")
        self.assertIsNone(conversation.history[-1].content)

    def test_tool_round_appends_call_then_result_then_answer(self):
        conversation, endpoint = self.make_conversation(
            tool_stream("call_1", "web_search", '{"query":', '"rain in"', "}"),
            text_stream("It will rain."),
        )

        conversation.submit("search for rain")

        history = conversation.history
        self.assertEqual([m.role for m in history], ["user", "assistant", "tool", "assistant"])
        self.assertEqual(history[1].tool_calls, (ToolCall("call_1", "web_search", '{"query":"rain in"}'),))
        self.assertIsNone(history[1].content)
        self.assertEqual(history[2].tool_call_id, "call_1")
        self.assertEqual(history[2].name, "web_search")
        self.assertEqual(history[2].content, "results for rain in")
        self.assertEqual(history[3].content, "It will rain.")
        self.assertEqual(self.search_queries, ["rain in"])

        # the follow-up request carries the tool call and its result
        roles = [m["role"] for m in endpoint.payload(1)["messages"]]
        self.assertEqual(roles, ["user", "assistant", "tool"])

    def test_text_before_tool_call_is_kept(self):
        conversation, _ = self.make_conversation(
            tool_stream("call_1", "web_search", '{"query": "x"}', text="Let me check."),
            text_stream("Done."),
        )
        conversation.submit("x?")
        self.assertEqual(conversation.history[1].content, "Let me check.")
        self.assertEqual(len(conversation.history[1].tool_calls), 1)

    def test_one_result_per_call_in_order(self):
        conversation, _ = self.make_conversation(
            sse_body(
                tool_event(0, call_id="a", name="web_search", arguments='{"query": "first"}'),
                tool_event(1, call_id="b", name="web_search", arguments='{"query": "second"}'),
            ),
            text_stream("Both done."),
        )

        conversation.submit("two searches")

        tool_messages = [m for m in conversation.history if m.role == "tool"]
        self.assertEqual([m.tool_call_id for m in tool_messages], ["a", "b"])
        self.assertEqual(self.search_queries, ["first", "second"])

    def test_malformed_arguments_fall_back_to_raw_text(self):
        conversation, _ = self.make_conversation(
            tool_stream("call_1", "web_search", "weather in Oslo"),
            text_stream("Sunny."),
        )
        conversation.submit("weather?")
        self.assertEqual(self.search_queries, ["weather in Oslo"])
        self.assertEqual(conversation.history[-1].content, "Sunny.")

    def test_unknown_tool_produces_result_text(self):
        conversation, _ = self.make_conversation(
            tool_stream("call_1", "calculator", '{"x": 1}'),
            text_stream("Sorry."),
        )
        conversation.submit("add")
        tool_message = conversation.history[2]
        self.assertEqual(tool_message.content, "Unknown tool: calculator")
        self.assertEqual(conversation.history[-1].content, "Sorry.")

    def test_multiple_tool_rounds(self):
        conversation, endpoint = self.make_conversation(
            tool_stream("c1", "web_search", '{"query": "one"}'),
            tool_stream("c2", "web_search", '{"query": "two"}'),
            text_stream("Finally."),
        )
        conversation.submit("dig deep")
        self.assertEqual(len(endpoint.requests), 3)
        self.assertEqual(
            [m.role for m in conversation.history],
            ["user", "assistant", "tool", "assistant", "tool", "assistant"],
        )

    def test_round_ceiling(self):
        conversation, _ = self.make_conversation(
            tool_stream("c1", "web_search", '{"query": "one"}'),
            tool_stream("c2", "web_search", '{"query": "two"}'),
            max_rounds=1,
        )
        self.assertIsNone(conversation.submit("loop"))
        self.assertEqual(conversation.history, ())

    def test_request_error_aborts_turn_and_keeps_history(self):
        conversation, _ = self.make_conversation(
            text_stream("Hi"),
            httpx.Response(500, text="rate limited"),
        )
        conversation.submit("hello")
        before = conversation.history

        self.assertIsNone(conversation.submit("again"))

        self.assertEqual(conversation.history, before)
        self.assertEqual(conversation.state, TurnState.IDLE)
        output = self.output.getvalue()
        self.assertIn("500", output)
        self.assertIn("rate limited", output)

    def test_failure_in_follow_up_round_rolls_back_whole_turn(self):
        conversation, _ = self.make_conversation(
            tool_stream("c1", "web_search", '{"query": "x"}'),
            httpx.Response(502, text="bad gateway"),
        )
        conversation.submit("x")
        self.assertEqual(conversation.history, ())

    def test_session_continues_after_failure(self):
        conversation, _ = self.make_conversation(
            httpx.Response(200, content=b""),
            text_stream("Recovered"),
        )
        conversation.submit("first")
        conversation.submit("second")
        self.assertEqual(
            [m.content for m in conversation.history], ["second", "Recovered"]
        )

    def test_unreadable_body_aborts_only_the_turn(self):
        conversation, _ = self.make_conversation(
            httpx.Response(200, stream=httpx.ByteStream(b"not gzip"), headers={"content-encoding": "gzip"}),
            text_stream("Recovered"),
        )

        self.assertIsNone(conversation.submit("hello"))
        self.assertEqual(conversation.history, ())
        self.assertEqual(conversation.state, TurnState.IDLE)
        self.assertIn("Error", self.output.getvalue())

        conversation.submit("again")
        self.assertEqual([m.content for m in conversation.history], ["again", "Recovered"])

    def test_reset(self):
        conversation, endpoint = self.make_conversation(text_stream("Hi"), text_stream("Fresh"))
        conversation.submit("hello")

        conversation.reset()
        self.assertEqual(len(conversation.history), 0)
        conversation.reset()
        self.assertEqual(len(conversation.history), 0)

        conversation.submit("again")
        self.assertEqual(endpoint.payload(1)["messages"], [{"role": "user", "content": "again"}])

    def test_history_is_a_snapshot(self):
        conversation, _ = self.make_conversation(text_stream("Hi"))
        snapshot = conversation.history
        conversation.submit("hello")
        self.assertEqual(snapshot, ())


class TestMessage(unittest.TestCase):
    def test_tool_calls_only_on_assistant(self):
        with self.assertRaises(ValueError):
            Message(role="user", content="x", tool_calls=(ToolCall("a", "b"),))

    def test_tool_reference_only_on_tool(self):
        with self.assertRaises(ValueError):
            Message(role="assistant", content="x", tool_call_id="a")
        with self.assertRaises(ValueError):
            Message(role="tool", content="x")

    def test_unknown_role(self):
        with self.assertRaises(ValueError):
            Message(role="robot", content="x")


if __name__ == "__main__":
    unittest.main()
