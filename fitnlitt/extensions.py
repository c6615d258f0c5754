import logging
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
import redis as _redis
from redis.exceptions import RedisError
from rq import Queue

logger = logging.getLogger(__name__)

IMAGE_QUEUE = "image-mirror"

db = SQLAlchemy()
migrate = Migrate()

# Set by init_redis(); both stay None/no-op when REDIS_URL is empty
redis_client = None
task_queue = None


class DummyQueue:
    """Stand-in for the RQ queue when Redis is not configured.

    Jobs are dropped with a warning; callers that need the work done
    (``import-store``) run it inline instead of passing
    ``--background-images``.
    """

    name = IMAGE_QUEUE

    def enqueue(self, func, *args, **kwargs):
        logger.warning(
            "No Redis queue, dropping %s job for %s",
            getattr(func, "__name__", func),
            args[:1],
        )
        return None


def init_redis(app):
    """Connect the image-mirror queue, falling back to DummyQueue."""
    global redis_client, task_queue
    redis_client = None
    task_queue = DummyQueue()

    redis_url = app.config.get("REDIS_URL", "")
    if not redis_url:
        logger.info("REDIS_URL not set, background image mirroring disabled")
        return

    try:
        client = _redis.from_url(redis_url, decode_responses=False)
        client.ping()
    except RedisError as e:
        logger.warning("Redis unavailable (%s), background image mirroring disabled", e)
        return

    redis_client = client
    task_queue = Queue(IMAGE_QUEUE, connection=client)


def get_task_queue():
    return task_queue if task_queue is not None else DummyQueue()
