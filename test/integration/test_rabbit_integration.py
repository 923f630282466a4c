import time
from uuid import uuid4

import pytest
import requests

from burrow import RabbitContainer

pytestmark = pytest.mark.integration


@pytest.fixture
def queue(rabbit: RabbitContainer) -> str:
    """A fresh queue, bound to the default exchange under its own name."""

    name = f"test-{uuid4()}"

    response = requests.put(
        f"{rabbit.admin.base_url}/queues/%2F/{name}",
        json={"durable": False, "auto_delete": False},
        auth=("guest", "guest"),
        timeout=10,
    )
    response.raise_for_status()

    return name


def test_publish_round_trip(rabbit: RabbitContainer, queue: str):
    assert rabbit.publish(queue, "hello").routed

    messages = rabbit.await_messages(queue, 1)

    assert [m["payload"] for m in messages] == ["hello"]


def test_await_three_messages(rabbit: RabbitContainer, queue: str):
    for body in ("a", "b", "c"):
        rabbit.publish(queue, body)

    start = time.monotonic()
    messages = rabbit.await_messages(queue, 3)

    assert sorted(m["payload"] for m in messages) == ["a", "b", "c"]
    assert time.monotonic() - start < rabbit.drainer.config.wait_for


def test_await_returns_short_result_on_timeout(rabbit: RabbitContainer, queue: str):
    rabbit.publish(queue, "only one")

    start = time.monotonic()
    messages = rabbit.await_messages(queue, 2)
    elapsed = time.monotonic() - start

    config = rabbit.drainer.config
    assert len(messages) == 1
    assert config.wait_for <= elapsed < config.wait_for + config.poll_interval + 5


def test_purge(rabbit: RabbitContainer, queue: str):
    for body in ("x", "y"):
        rabbit.publish(queue, body)

    rabbit.purge(queue)
    # Purging an empty queue is fine too.
    rabbit.purge(queue)

    assert rabbit.drain_all(queue) == []

    # Queue stats are refreshed periodically by the broker.
    deadline = time.monotonic() + 10
    while rabbit.get_queue(queue).messages_ready and time.monotonic() < deadline:
        time.sleep(0.5)

    assert rabbit.get_queue(queue).messages_ready == 0


def test_drain_all_in_batches(rabbit: RabbitContainer, queue: str):
    for i in range(150):
        rabbit.publish(queue, str(i))

    messages = rabbit.drain_all(queue)

    assert sorted(int(m["payload"]) for m in messages) == list(range(150))


def test_missing_queue_is_an_admin_error(rabbit: RabbitContainer):
    with pytest.raises(pytest.fail.Exception, match="Error 404"):
        rabbit.get_queue(f"missing-{uuid4()}")
