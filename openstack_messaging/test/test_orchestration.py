from .base import BaseOpenStackMockTest


BASE_URI = "/v1/da0d12be20394afb851716e10a49e4a7"

STACK = {
    "id": "3095aefc-09fb-4bc7-b1f0-f21a304e864c",
    "stack_name": "web",
    "stack_status": "CREATE_COMPLETE",
    "stack_status_reason": "Stack CREATE completed successfully",
    "links": [],
}


class OrchestrationTestCase(BaseOpenStackMockTest):

    def test_list_stacks(self):
        self.enqueue(200, {"stacks": [STACK]})
        stacks = list(self.connection.orchestration.stacks.all())
        self.assertEqual([stack.id for stack in stacks], [STACK["id"]])
        self.assertEqual(stacks[0].name, "web")
        self.assertEqual(stacks[0].status, "CREATE_COMPLETE")
        self.assert_request(self.take_request(), "GET", f"{BASE_URI}/stacks")

    def test_list_stacks_follows_next_link(self):
        self.enqueue(200, {
            "stacks": [STACK],
            "stacks_links": [
                {
                    "rel": "next",
                    "href": f"https://orchestration.example.com{BASE_URI}/stacks?marker=abc",
                },
            ],
        })
        self.enqueue(200, {"stacks": [dict(STACK, id = "second", stack_name = "db")]})
        stacks = list(self.connection.orchestration.stacks.all())
        self.assertEqual([stack.name for stack in stacks], ["web", "db"])
        self.take_request()
        self.assert_request(
            self.take_request(),
            "GET",
            f"{BASE_URI}/stacks",
            query = {"marker": "abc"}
        )

    def test_get_stack(self):
        self.enqueue(200, {"stack": STACK})
        stack = self.connection.orchestration.stacks.get(STACK["id"])
        self.assertEqual(stack.status_reason, "Stack CREATE completed successfully")
        self.assert_request(self.take_request(), "GET", f"{BASE_URI}/stacks/{STACK['id']}")
