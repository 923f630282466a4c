from pydantic import BaseModel


class RabbitContainerOptions(BaseModel):
    image: str = "rabbitmq:3-management"

    # Default user, created by the image on first boot.
    username: str = "guest"
    password: str = "guest"

    amqp_port: int = 5672
    management_port: int = 15672

    # How long to wait for the management API to answer after the
    # container started, and how often to check.
    startup_timeout: float = 60
    startup_poll_interval: float = 0.5


class RedisContainerOptions(BaseModel):
    image: str = "redis"

    port: int = 6379

    startup_timeout: float = 30
    startup_poll_interval: float = 0.5
