from burrow import PollingConfig
from burrow.testing.pytest_integration import (
    create_rabbit_fixture,
    create_redis_fixture,
)

rabbit = create_rabbit_fixture(polling=PollingConfig(wait_for=10, poll_interval=0.2))

redis = create_redis_fixture()
